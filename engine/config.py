"""Lightweight loader for compressor configuration."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

_ENV_KEY = "VOXEL_COMPRESSOR_CONFIG"
_DEFAULT_PATH = Path(__file__).resolve().parent.parent / "config" / "compressor.json"
_CONFIG_DATA: Optional[Dict[str, Any]] = None


def config_path() -> Path:
    override = os.environ.get(_ENV_KEY, "").strip()
    return Path(override) if override else _DEFAULT_PATH


def _read(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must hold a JSON object")
    return data


def load(path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """Read ``path`` (or the default location) and make it the active configuration."""
    global _CONFIG_DATA
    _CONFIG_DATA = _read(Path(path) if path is not None else config_path())
    return _CONFIG_DATA


def reload() -> Dict[str, Any]:
    return load(None)


def _ensure_loaded() -> Dict[str, Any]:
    if _CONFIG_DATA is None:
        return load(None)
    return _CONFIG_DATA


def get(path: str, default: Any = None) -> Any:
    """Return a config value using dotted paths, or default when missing."""
    data = _ensure_loaded()
    if not path:
        return data

    current: Any = data
    for segment in path.split('.'):
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        else:
            return default
    return current


def get_int(path: str, default: int, *, minimum: Optional[int] = None) -> int:
    raw = get(path, default)
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise ValueError(f"config value '{path}' must be an integer, got {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"config value '{path}' must be an integer, got {raw!r}") from exc
    if minimum is not None and value < minimum:
        raise ValueError(f"config value '{path}' must be >= {minimum}, got {value}")
    return value
