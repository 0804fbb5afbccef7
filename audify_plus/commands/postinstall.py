from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import LoaderSettings
from ..errors import UnsupportedPlatform
from ..fs_utils import EXECUTABLE_MODE, FileSystem, LocalFileSystem
from ..health import HealthReport, health_check
from ..platforms import HostPlatform, map_to_artifact_path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PostinstallResult:
    platform: str
    artifact_path: Optional[Path]
    permissions_set: bool
    health: Optional[HealthReport]


def set_binary_permissions(
    path: Path,
    *,
    host: HostPlatform,
    fs: Optional[FileSystem] = None,
) -> bool:
    if host.is_windows:
        logger.info("Windows detected, skipping permission setup")
        return True
    fs = fs or LocalFileSystem()
    if not fs.exists(path):
        logger.warning("Binary not found at %s", path)
        return False
    try:
        fs.chmod(path, EXECUTABLE_MODE)
    except OSError as exc:
        logger.error("Failed to set permissions on %s: %s", path, exc)
        return False
    logger.info("Set executable permissions for %s", path)
    return True


def run(
    settings: LoaderSettings,
    *,
    host: Optional[HostPlatform] = None,
    fs: Optional[FileSystem] = None,
) -> PostinstallResult:
    host = host or HostPlatform.detect()
    fs = fs or LocalFileSystem()
    logger.info("Platform: %s", host.key)
    try:
        path = map_to_artifact_path(host.key, settings.root, settings.artifact_name)
    except UnsupportedPlatform as exc:
        logger.warning("No binary available for platform %s", host.key)
        logger.warning("The package may not work on this platform (%s)", exc)
        return PostinstallResult(
            platform=host.key, artifact_path=None, permissions_set=False, health=None
        )

    logger.info("Binary path: %s", path)
    permissions_set = set_binary_permissions(path, host=host, fs=fs)
    report = health_check(settings, host=host, fs=fs)
    if report.ok:
        logger.info("Installation successful")
    else:
        logger.warning("Installation completed with warnings: %s", report.error)
    return PostinstallResult(
        platform=host.key,
        artifact_path=path,
        permissions_set=permissions_set,
        health=report,
    )
