from __future__ import annotations

import urllib.request

from ..config import Settings
from ..errors import UnsupportedPlatform
from ..platforms import map_to_artifact_path
from ..releases import FetchOutcome, Opener, fetch_binaries


def run(settings: Settings, *, opener: Opener = urllib.request.urlopen) -> list[FetchOutcome]:
    release = settings.release
    print(f"Fetching audify {release.version} (napi {release.napi_version}) binaries...")
    outcomes = fetch_binaries(release, settings.loader, opener=opener)

    print("\nSummary:")
    for platform in release.platforms:
        try:
            target = map_to_artifact_path(
                platform, settings.loader.root, settings.loader.artifact_name
            )
        except UnsupportedPlatform:
            print(f"  {platform}: Unsupported")
            continue
        status = "Ready" if target.exists() else "Missing"
        print(f"  {platform}: {status}")
    return outcomes
