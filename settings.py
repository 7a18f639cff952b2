"""Project settings loader.

Values come from, in order of precedence: real environment variables, a
``.env`` file, then an optional JSON settings file.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv

from config import DEFAULT_MAX_WORKERS, DEFAULT_REGION_KEYS, DEFAULT_STAKE, REGION_CONFIG

DEFAULT_SETTINGS_PATH = "settings.json"


def _settings_path() -> Path:
    raw = os.getenv("ARB_SETTINGS_PATH", "").strip() or DEFAULT_SETTINGS_PATH
    return Path(raw)


def load_settings_file() -> Dict[str, Any]:
    path = _settings_path()
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, ValueError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _as_env_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    if value is None:
        return ""
    return str(value)


def apply_settings() -> None:
    """Load ``.env`` and the JSON settings file into ``os.environ``."""
    load_dotenv()
    for key, value in load_settings_file().items():
        if not isinstance(key, str) or not key or key in os.environ:
            continue
        os.environ[key] = _as_env_value(value)


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def api_keys() -> List[str]:
    keys = _split_csv(os.getenv("ODDS_API_KEYS", ""))
    if keys:
        return keys
    single = os.getenv("ODDS_API_KEY", "").strip()
    return [single] if single else []


def regions() -> List[str]:
    valid = [
        region
        for region in _split_csv(os.getenv("ODDS_API_REGIONS", ""))
        if region in REGION_CONFIG
    ]
    return valid or list(DEFAULT_REGION_KEYS)


def stake() -> float:
    try:
        value = float(os.getenv("ARB_STAKE", "").strip() or DEFAULT_STAKE)
    except ValueError:
        return DEFAULT_STAKE
    return value if value > 0 else DEFAULT_STAKE


def max_workers() -> int:
    try:
        value = int(os.getenv("ARB_MAX_WORKERS", "").strip() or DEFAULT_MAX_WORKERS)
    except ValueError:
        return DEFAULT_MAX_WORKERS
    return max(1, value)


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
