from __future__ import annotations

import platform as _platform
from typing import Optional

from ..config import LoaderSettings
from ..errors import AudifyError, UnsupportedPlatform
from ..fs_utils import FileSystem, LocalFileSystem
from ..platforms import HostPlatform, map_to_artifact_path
from ..verify import verify_artifact
from .output import CheckReport


def run(
    settings: LoaderSettings,
    *,
    host: Optional[HostPlatform] = None,
    fs: Optional[FileSystem] = None,
) -> CheckReport:
    host = host or HostPlatform.detect()
    fs = fs or LocalFileSystem()
    report = CheckReport()

    try:
        path = map_to_artifact_path(host.key, settings.root, settings.artifact_name)
    except UnsupportedPlatform as exc:
        report.fail("Platform", str(exc))
        return report
    report.passed("Platform", host.key)

    try:
        check = verify_artifact(path, fs, windows=host.is_windows)
    except AudifyError as exc:
        report.fail("Binary", str(exc))
        return report
    report.passed("Binary", str(path))

    if check.shared_libraries:
        report.passed(
            "Shared libraries",
            f"{len(check.shared_libraries)} found: {', '.join(check.shared_libraries)}",
        )
    elif host.is_windows:
        report.warn("Shared libraries", "no DLL files found, this may cause issues on Windows")
    else:
        report.skip("Shared libraries", f"{check.sibling_count} file(s) in binary directory")
    return report


def bug_report_lines(host: Optional[HostPlatform] = None) -> list[str]:
    host = host or HostPlatform.detect()
    return [
        f"   - Platform: {host.os_name}",
        f"   - Architecture: {host.arch}",
        f"   - Python: {_platform.python_version()}",
    ]
