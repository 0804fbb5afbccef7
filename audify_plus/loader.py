from __future__ import annotations

import importlib.machinery
import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from .errors import LoadFailure

logger = logging.getLogger(__name__)

DEFAULT_MODULE_NAME = "audify"

REQUIRED_CAPABILITIES = ("RtAudio", "OpusEncoder", "OpusDecoder")
OPTIONAL_CAPABILITIES = ("getAvailableApis",)


class NativeAudify(Protocol):
    RtAudio: Any
    OpusEncoder: Any
    OpusDecoder: Any


def _load_extension(path: Path, module_name: str) -> ModuleType:
    loader = importlib.machinery.ExtensionFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, str(path), loader=loader)
    if spec is None:
        raise ImportError(f"no module spec for {path}")
    module = importlib.util.module_from_spec(spec)
    loader.exec_module(module)
    return module


def missing_capabilities(module: object) -> list[str]:
    return [name for name in REQUIRED_CAPABILITIES if not callable(getattr(module, name, None))]


def load_artifact(path: Path, module_name: str = DEFAULT_MODULE_NAME) -> NativeAudify:
    """Load the native extension at ``path`` and check its capability set."""
    try:
        module = _load_extension(path, module_name)
    except (ImportError, OSError) as exc:
        raise LoadFailure(path, str(exc)) from exc
    missing = missing_capabilities(module)
    if missing:
        raise LoadFailure(path, f"missing capabilities: {', '.join(missing)}")
    logger.debug("Loaded native module %s from %s", module_name, path)
    return module  # type: ignore[return-value]
