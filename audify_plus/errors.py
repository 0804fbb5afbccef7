from __future__ import annotations

from pathlib import Path
from typing import Iterable


class AudifyError(RuntimeError):
    """Base class for every loader failure raised during initialisation."""


class UnsupportedPlatform(AudifyError):
    def __init__(self, key: str, supported: Iterable[str]) -> None:
        self.key = key
        self.supported = list(supported)
        super().__init__(
            f"Unsupported platform: {key}. "
            f"Supported platforms: {', '.join(self.supported)}"
        )


class ArtifactNotFound(AudifyError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Binary not found: {path}")


class ArtifactUnreadable(AudifyError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Binary is not readable: {path}")


class LoadFailure(AudifyError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load native module {path}: {reason}")
