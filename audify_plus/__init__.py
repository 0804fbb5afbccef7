"Prebuilt RtAudio/Opus binaries with a platform-aware loader."

from importlib import metadata

from .app import AudifyRuntime, init
from .constants import (
    OpusApplication,
    RtAudioApi,
    RtAudioErrorType,
    RtAudioFormat,
    RtAudioStreamFlags,
)
from .errors import (
    ArtifactNotFound,
    ArtifactUnreadable,
    AudifyError,
    LoadFailure,
    UnsupportedPlatform,
)
from .health import HealthReport, health_check
from .loader import load_artifact
from .platforms import HostPlatform, map_to_artifact_path, resolve_platform_key
from .surface import AudifySurface, build_public_surface
from .verify import verify_artifact

__all__ = [
    "__version__",
    "ArtifactNotFound",
    "ArtifactUnreadable",
    "AudifyError",
    "AudifyRuntime",
    "AudifySurface",
    "HealthReport",
    "HostPlatform",
    "LoadFailure",
    "OpusApplication",
    "RtAudioApi",
    "RtAudioErrorType",
    "RtAudioFormat",
    "RtAudioStreamFlags",
    "UnsupportedPlatform",
    "build_public_surface",
    "health_check",
    "init",
    "load_artifact",
    "map_to_artifact_path",
    "resolve_platform_key",
    "verify_artifact",
]


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return metadata.version("audify-plus")
        except metadata.PackageNotFoundError:  # pragma: no cover - during editable dev installs
            return "0.0.0"
    raise AttributeError(name)
