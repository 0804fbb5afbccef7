from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ArtifactNotFound, ArtifactUnreadable
from .fs_utils import FileSystem, LocalFileSystem, is_shared_library

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ArtifactCheck:
    path: Path
    sibling_count: int = 0
    shared_libraries: list[str] = field(default_factory=list)


def verify_artifact(
    path: Path,
    fs: Optional[FileSystem] = None,
    *,
    windows: bool = False,
) -> ArtifactCheck:
    """Check that the artifact exists and is readable.

    The sibling listing is informational; a missing shared library is only
    ever logged, never raised.
    """
    fs = fs or LocalFileSystem()
    try:
        exists = fs.exists(path)
        readable = exists and fs.is_readable(path)
    except OSError as exc:
        # EACCES on a parent directory, symlink loops
        raise ArtifactUnreadable(path) from exc
    if not exists:
        raise ArtifactNotFound(path)
    if not readable:
        raise ArtifactUnreadable(path)
    logger.debug("Binary verified: %s", path)

    check = ArtifactCheck(path=path)
    try:
        siblings = fs.list_dir(path.parent)
    except OSError as exc:
        logger.warning("Could not list %s: %s", path.parent, exc)
        return check
    check.sibling_count = len(siblings)
    check.shared_libraries = [
        name for name in siblings if name != path.name and is_shared_library(name)
    ]
    logger.debug("Found %d files in binary directory", check.sibling_count)
    if windows:
        dlls = [name for name in check.shared_libraries if name.lower().endswith(".dll")]
        if dlls:
            logger.debug("Found %d DLL files: %s", len(dlls), ", ".join(dlls))
        else:
            logger.warning(
                "No DLL files found next to %s, this may cause issues on Windows",
                path.name,
            )
    return check
