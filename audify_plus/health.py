from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .config import LoaderSettings
from .errors import UnsupportedPlatform
from .fs_utils import FileSystem, LocalFileSystem
from .platforms import HostPlatform, map_to_artifact_path
from .verify import verify_artifact

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"
ERROR = "error"


@dataclass(frozen=True, slots=True)
class HealthReport:
    status: str
    platform: str
    artifact_path: str
    artifact_exists: bool
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == HEALTHY

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status,
            "platform": self.platform,
            "artifactPath": self.artifact_path,
            "artifactExists": self.artifact_exists,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


def health_check(
    settings: Optional[LoaderSettings] = None,
    host: Optional[HostPlatform] = None,
    fs: Optional[FileSystem] = None,
) -> HealthReport:
    settings = settings or LoaderSettings()
    host = host or HostPlatform.detect()
    fs = fs or LocalFileSystem()
    key = host.key
    try:
        path = map_to_artifact_path(key, settings.root, settings.artifact_name)
    except UnsupportedPlatform as exc:
        return HealthReport(
            status=ERROR,
            platform=key,
            artifact_path="",
            artifact_exists=False,
            error=str(exc),
        )

    try:
        verify_artifact(path, fs, windows=host.is_windows)
    except Exception as exc:
        logger.debug("Health check failed for %s: %s", path, exc)
        return HealthReport(
            status=UNHEALTHY,
            platform=key,
            artifact_path=str(path),
            artifact_exists=_safe_exists(fs, path),
            error=str(exc) or exc.__class__.__name__,
        )
    return HealthReport(
        status=HEALTHY,
        platform=key,
        artifact_path=str(path),
        artifact_exists=True,
    )


def _safe_exists(fs: FileSystem, path: Path) -> bool:
    try:
        return fs.exists(path)
    except OSError:
        return False
