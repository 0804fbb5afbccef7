from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .config import Settings
from .fs_utils import FileSystem, LocalFileSystem
from .health import HealthReport, health_check
from .loader import NativeAudify, load_artifact
from .platforms import HostPlatform, map_to_artifact_path
from .surface import AudifySurface, build_public_surface
from .verify import ArtifactCheck, verify_artifact

logger = logging.getLogger(__name__)

Loader = Callable[[Path, str], NativeAudify]


@dataclass(frozen=True)
class AudifyRuntime:
    """Everything resolved while bringing up the native module.

    Built once by :meth:`create`; callers hold on to it instead of relying
    on module level state.
    """

    settings: Settings
    host: HostPlatform
    artifact_path: Path
    check: ArtifactCheck
    native: NativeAudify
    surface: AudifySurface

    @property
    def platform_key(self) -> str:
        return self.host.key

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        *,
        host: Optional[HostPlatform] = None,
        fs: Optional[FileSystem] = None,
        loader: Loader = load_artifact,
    ) -> "AudifyRuntime":
        settings = settings or Settings()
        host = host or HostPlatform.detect()
        fs = fs or LocalFileSystem()
        loader_settings = settings.loader

        logger.debug("Detecting platform: %s", host.key)
        path = map_to_artifact_path(host.key, loader_settings.root, loader_settings.artifact_name)
        check = verify_artifact(path, fs, windows=host.is_windows)
        native = loader(path, loader_settings.module_name)

        def probe() -> HealthReport:
            return health_check(loader_settings, host=host, fs=fs)

        surface = build_public_surface(
            native,
            platform_key=host.key,
            artifact_path=path,
            health_probe=probe,
        )
        logger.info("Loaded audify for %s from %s", host.key, path)
        return cls(
            settings=settings,
            host=host,
            artifact_path=path,
            check=check,
            native=native,
            surface=surface,
        )


def init(
    settings: Optional[Settings] = None,
    *,
    host: Optional[HostPlatform] = None,
    fs: Optional[FileSystem] = None,
    loader: Loader = load_artifact,
) -> AudifyRuntime:
    """Resolve, verify and load the prebuilt binary for this platform.

    Raises an :class:`~audify_plus.errors.AudifyError` subclass on any
    failure; use :func:`~audify_plus.health.health_check` to probe without
    raising.
    """
    return AudifyRuntime.create(settings, host=host, fs=fs, loader=loader)
