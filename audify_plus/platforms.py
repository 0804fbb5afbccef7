from __future__ import annotations

import platform
import re
import struct
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import UnsupportedPlatform

# Platform key -> prebuild directory name.
PLATFORM_MAP: dict[str, str] = {
    "win32-x64": "win32-x64",
    "win32-ia32": "win32-ia32",
    "win32-arm64": "win32-arm64",
    "darwin-x64": "darwin-x64",
    "darwin-arm64": "darwin-arm64",
    "linux-x64": "linux-x64",
    "linux-arm64": "linux-arm64",
    "linux-arm": "linux-arm",
}

ARTIFACT_SUBDIR = ("build", "Release")
DEFAULT_ARTIFACT_NAME = "audify.node"

# platform.machine() spellings -> prebuild architecture names
ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "ia32": "ia32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "armv8l": "arm",
    "arm": "arm",
}

OS_ALIASES: dict[str, str] = {
    "cygwin": "win32",
    "msys": "win32",
}


@dataclass(frozen=True, slots=True)
class HostPlatform:
    os_name: str
    arch: str

    @property
    def key(self) -> str:
        return f"{self.os_name}-{self.arch}"

    @property
    def is_windows(self) -> bool:
        return self.os_name == "win32"

    @classmethod
    def detect(cls) -> "HostPlatform":
        os_name = normalize_os(sys.platform)
        arch = normalize_arch(platform.machine())
        # A 32-bit interpreter on a 64-bit Windows host still needs the ia32 build.
        if os_name == "win32" and arch == "x64" and struct.calcsize("P") == 4:
            arch = "ia32"
        return cls(os_name=os_name, arch=arch)


def normalize_os(value: str) -> str:
    value = (value or "").strip().lower()
    if value.startswith("linux"):
        return "linux"
    if value == "win32" or value in OS_ALIASES:
        return OS_ALIASES.get(value, value)
    # BSD and Solaris builds carry the kernel major ("freebsd14", "sunos5")
    return re.sub(r"\d+$", "", value)


def normalize_arch(value: str) -> str:
    value = (value or "").strip().lower()
    return ARCH_ALIASES.get(value, value)


def resolve_platform_key(host: Optional[HostPlatform] = None) -> str:
    return (host or HostPlatform.detect()).key


def supported_platform_keys() -> list[str]:
    return list(PLATFORM_MAP)


def map_to_artifact_path(
    key: str,
    root: Path,
    artifact_name: str = DEFAULT_ARTIFACT_NAME,
) -> Path:
    """Return the prebuilt artifact path for ``key`` below ``root``.

    Raises :class:`UnsupportedPlatform` when the key has no prebuild directory.
    """
    folder = PLATFORM_MAP.get(key)
    if folder is None:
        raise UnsupportedPlatform(key, supported_platform_keys())
    return Path(root).joinpath("prebuilds", folder, *ARTIFACT_SUBDIR, artifact_name)
