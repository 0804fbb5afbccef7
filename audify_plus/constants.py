"""Named constants mirrored from the native RtAudio and Opus headers.

The integer values are part of the public contract: callers pass them
straight through to the native module, so they must never change.
"""

from __future__ import annotations

from enum import IntEnum, IntFlag


class OpusApplication(IntEnum):
    VOIP = 2048
    AUDIO = 2049
    RESTRICTED_LOWDELAY = 2051


class RtAudioApi(IntEnum):
    UNSPECIFIED = 0
    MACOSX_CORE = 1
    LINUX_ALSA = 2
    UNIX_JACK = 3
    LINUX_PULSE = 4
    LINUX_OSS = 5
    WINDOWS_ASIO = 6
    WINDOWS_WASAPI = 7
    WINDOWS_DS = 8
    DUMMY = 9


class RtAudioFormat(IntFlag):
    SINT8 = 0x1
    SINT16 = 0x2
    SINT24 = 0x4
    SINT32 = 0x8
    FLOAT32 = 0x10
    FLOAT64 = 0x20


class RtAudioStreamFlags(IntFlag):
    NONINTERLEAVED = 0x1
    MINIMIZE_LATENCY = 0x2
    HOG_DEVICE = 0x4
    SCHEDULE_REALTIME = 0x8
    ALSA_USE_DEFAULT = 0x10
    JACK_DONT_CONNECT = 0x20


class RtAudioErrorType(IntEnum):
    WARNING = 0
    DEBUG_WARNING = 1
    UNSPECIFIED = 2
    NO_DEVICES_FOUND = 3
    INVALID_DEVICE = 4
    MEMORY_ERROR = 5
    INVALID_PARAMETER = 6
    INVALID_USE = 7
    DRIVER_ERROR = 8
    SYSTEM_ERROR = 9
    THREAD_ERROR = 10


CONSTANT_TABLES = {
    "OpusApplication": OpusApplication,
    "RtAudioApi": RtAudioApi,
    "RtAudioFormat": RtAudioFormat,
    "RtAudioStreamFlags": RtAudioStreamFlags,
    "RtAudioErrorType": RtAudioErrorType,
}
