from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Optional, Protocol

EXECUTABLE_MODE = 0o755
SHARED_LIBRARY_SUFFIXES = (".dll", ".so", ".dylib")


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def is_readable(self, path: Path) -> bool: ...

    def list_dir(self, path: Path) -> list[str]: ...

    def chmod(self, path: Path, mode: int) -> None: ...


class LocalFileSystem:
    def exists(self, path: Path) -> bool:
        return bool(path_exists(path))

    def is_readable(self, path: Path) -> bool:
        return os.access(path, os.R_OK)

    def list_dir(self, path: Path) -> list[str]:
        return sorted(os.listdir(path))

    def chmod(self, path: Path, mode: int) -> None:
        os.chmod(path, mode)


def path_exists(path: Path) -> Optional[bool]:
    try:
        path.stat()
        return True
    except FileNotFoundError:
        return False
    except NotADirectoryError:
        return False
    except OSError as exc:
        if exc.errno != errno.ENAMETOOLONG:
            raise
        parent = path.parent
        try:
            with os.scandir(parent) as it:
                for entry in it:
                    if entry.name == path.name:
                        return True
        except FileNotFoundError:
            return None
        return False


def is_shared_library(name: str) -> bool:
    lowered = name.lower()
    if lowered.endswith(SHARED_LIBRARY_SUFFIXES):
        return True
    # versioned sonames such as libopus.so.0
    return ".so." in lowered
