from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .loader import DEFAULT_MODULE_NAME
from .platforms import DEFAULT_ARTIFACT_NAME

PACKAGE_ROOT = Path(__file__).resolve().parent


class LoaderSettings(BaseModel):
    root: Path = PACKAGE_ROOT
    artifact_name: str = DEFAULT_ARTIFACT_NAME
    # The artifact must be a CPython extension build exporting
    # PyInit_<module_name>; Node-API .node files from upstream will not import.
    module_name: str = DEFAULT_MODULE_NAME

    @field_validator("root", mode="before")
    @classmethod
    def _expand_root(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class ReleaseSettings(BaseModel):
    version: str = "v1.9.0"
    base_url: str = "https://github.com/almoghamdani/audify/releases/download"
    napi_version: str = "v8"
    platforms: List[str] = Field(
        default_factory=lambda: [
            "darwin-arm64",
            "darwin-x64",
            "linux-arm",
            "linux-arm64",
            "linux-x64",
            "win32-ia32",
            "win32-x64",
        ]
    )
    downloads_dir: Path = Path("./downloads")
    timeout_seconds: float = 60.0

    @field_validator("downloads_dir", mode="before")
    @classmethod
    def _expand_downloads(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class Settings(BaseModel):
    loader: LoaderSettings = LoaderSettings()
    release: ReleaseSettings = ReleaseSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
        return cls.model_validate(raw)

    @classmethod
    def from_config(cls, explicit_path: Optional[Path] = None) -> "Settings":
        path = find_config(explicit_path)
        if path is None:
            return cls()
        return cls.load(path)


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "audify.yaml", cwd / "audify.yml"):
        if candidate.exists():
            return candidate
    return None
