from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from .constants import (
    CONSTANT_TABLES,
    OpusApplication,
    RtAudioApi,
    RtAudioErrorType,
    RtAudioFormat,
    RtAudioStreamFlags,
)
from .health import HealthReport
from .loader import OPTIONAL_CAPABILITIES, REQUIRED_CAPABILITIES, NativeAudify

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    platform: str
    artifact_path: Path

    def to_dict(self) -> dict[str, str]:
        return {"platform": self.platform, "artifactPath": str(self.artifact_path)}


def logged_callable(name: str, target: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap ``target`` so failures are logged under ``name`` and re-raised."""

    @functools.wraps(target, updated=())
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return target(*args, **kwargs)
        except Exception as exc:
            logger.error("%s failed: %s", name, exc)
            raise

    return wrapper


class AudifySurface:
    OpusApplication = OpusApplication
    RtAudioApi = RtAudioApi
    RtAudioFormat = RtAudioFormat
    RtAudioStreamFlags = RtAudioStreamFlags
    RtAudioErrorType = RtAudioErrorType

    def __init__(
        self,
        native: NativeAudify,
        *,
        platform_info: PlatformInfo,
        health_probe: Callable[[], HealthReport],
    ) -> None:
        self.native = native
        self._platform_info = platform_info
        self._health_probe = health_probe
        self.capabilities: list[str] = []
        for name in REQUIRED_CAPABILITIES + OPTIONAL_CAPABILITIES:
            target = getattr(native, name, None)
            if not callable(target):
                continue
            setattr(self, name, logged_callable(name, target))
            self.capabilities.append(name)

    def get_platform_info(self) -> PlatformInfo:
        return self._platform_info

    def health_check(self) -> HealthReport:
        return self._health_probe()

    def exports(self) -> dict[str, Any]:
        names = [
            *self.capabilities,
            *CONSTANT_TABLES,
            "get_platform_info",
            "health_check",
        ]
        return {name: getattr(self, name) for name in names}

    def __repr__(self) -> str:
        return f"AudifySurface(platform={self._platform_info.platform!r})"


def build_public_surface(
    native: NativeAudify,
    *,
    platform_key: str,
    artifact_path: Path,
    health_probe: Callable[[], HealthReport],
) -> AudifySurface:
    return AudifySurface(
        native,
        platform_info=PlatformInfo(platform=platform_key, artifact_path=artifact_path),
        health_probe=health_probe,
    )
