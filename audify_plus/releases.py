from __future__ import annotations

import http.client
import logging
import shutil
import tarfile
import urllib.error
import urllib.request
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from .config import LoaderSettings, ReleaseSettings
from .errors import AudifyError
from .platforms import map_to_artifact_path

logger = logging.getLogger(__name__)

NATIVE_SUFFIX = ".node"
CHUNK_SIZE = 1 << 16

Opener = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class BinaryRelease:
    platform: str
    file: str
    url: str


@dataclass(slots=True)
class FetchOutcome:
    platform: str
    target: Optional[Path]
    ok: bool
    error: Optional[str] = None


class ReleaseError(AudifyError):
    pass


def release_entries(settings: ReleaseSettings) -> list[BinaryRelease]:
    entries: list[BinaryRelease] = []
    base = settings.base_url.rstrip("/")
    for platform in settings.platforms:
        name = f"audify-{settings.version}-napi-{settings.napi_version}-{platform}.tar.gz"
        entries.append(
            BinaryRelease(
                platform=platform,
                file=name,
                url=f"{base}/{settings.version}/{name}",
            )
        )
    return entries


def download_file(
    url: str,
    dest: Path,
    *,
    timeout: float = 60.0,
    opener: Opener = urllib.request.urlopen,
) -> None:
    """Stream ``url`` into ``dest``; redirects are followed by the opener."""
    partial = dest.with_name(dest.name + ".part")
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        with opener(url, timeout=timeout) as response, partial.open("wb") as fh:
            status = getattr(response, "status", 200)
            if status != 200:
                raise ReleaseError(f"HTTP {status} for {url}")
            shutil.copyfileobj(response, fh, CHUNK_SIZE)
    except urllib.error.HTTPError as exc:
        partial.unlink(missing_ok=True)
        raise ReleaseError(f"HTTP {exc.code}: {exc.reason}") from exc
    except urllib.error.URLError as exc:
        partial.unlink(missing_ok=True)
        raise ReleaseError(f"unable to reach {url}: {exc.reason}") from exc
    except http.client.HTTPException as exc:
        partial.unlink(missing_ok=True)
        raise ReleaseError(f"download of {url} failed: {exc!r}") from exc
    except BaseException:
        partial.unlink(missing_ok=True)
        raise
    partial.replace(dest)


def _check_members(archive: tarfile.TarFile, dest: Path) -> list[tarfile.TarInfo]:
    root = dest.resolve()
    members = archive.getmembers()
    for member in members:
        target = (root / member.name).resolve()
        if target != root and root not in target.parents:
            raise ReleaseError(f"archive member escapes extraction dir: {member.name}")
        if member.issym() or member.islnk():
            raise ReleaseError(f"archive links are not supported: {member.name}")
    return members


def extract_archive(archive_path: Path, dest: Path) -> None:
    dest.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive_path, "r:gz") as archive:
            members = _check_members(archive, dest)
            kwargs = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}
            archive.extractall(dest, members=members, **kwargs)
    except (tarfile.TarError, EOFError, zlib.error) as exc:
        raise ReleaseError(f"failed to extract {archive_path.name}: {exc}") from exc


def find_native_file(directory: Path, suffix: str = NATIVE_SUFFIX) -> Optional[Path]:
    for candidate in sorted(directory.rglob(f"*{suffix}")):
        if candidate.is_file():
            return candidate
    return None


def install_release(
    entry: BinaryRelease,
    settings: ReleaseSettings,
    loader: LoaderSettings,
    *,
    opener: Opener = urllib.request.urlopen,
) -> Path:
    target = map_to_artifact_path(entry.platform, loader.root, loader.artifact_name)
    downloads = settings.downloads_dir
    archive_path = downloads / entry.file
    if archive_path.exists():
        logger.info("Already downloaded: %s", entry.file)
    else:
        logger.info("Downloading: %s", entry.file)
        download_file(
            entry.url, archive_path, timeout=settings.timeout_seconds, opener=opener
        )

    scratch = downloads / f"extract-{entry.platform}"
    if scratch.exists():
        shutil.rmtree(scratch)
    try:
        extract_archive(archive_path, scratch)
        found = find_native_file(scratch)
        if found is None:
            raise ReleaseError(f"no {NATIVE_SUFFIX} file found in {entry.file}")
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(found, target)
        logger.info("Installed %s -> %s", found.name, target)
    finally:
        shutil.rmtree(scratch, ignore_errors=True)
    return target


def fetch_binaries(
    settings: ReleaseSettings,
    loader: LoaderSettings,
    *,
    opener: Opener = urllib.request.urlopen,
) -> list[FetchOutcome]:
    outcomes: list[FetchOutcome] = []
    for entry in release_entries(settings):
        try:
            target = install_release(entry, settings, loader, opener=opener)
        except (AudifyError, OSError) as exc:
            logger.error("Failed to process %s: %s", entry.platform, exc)
            outcomes.append(
                FetchOutcome(platform=entry.platform, target=None, ok=False, error=str(exc))
            )
            continue
        outcomes.append(FetchOutcome(platform=entry.platform, target=target, ok=True))
    return outcomes
