"""Helpers for loading the user configuration file (~/.apkdisguise/config.json)."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from apkdisguise.models.pipeline import SigningConfig

HOME_ENV_VAR = "APKDISGUISE_HOME"
CONFIG_FILE_NAME = "config.json"


def get_config_dir() -> Path:
    """Directory holding config.json, overridable via APKDISGUISE_HOME."""

    if value := os.environ.get(HOME_ENV_VAR):
        return Path(value).expanduser()
    return Path.home() / ".apkdisguise"


@lru_cache(maxsize=1)
def load_config() -> dict[str, Any]:
    """Load configuration data from disk (cached)."""

    config_file = get_config_dir() / CONFIG_FILE_NAME
    if not config_file.exists():
        return {}

    try:
        raw = config_file.read_text(encoding="utf-8")
    except OSError:
        return {}

    try:
        data = json.loads(raw)
    except ValueError:
        return {}

    if isinstance(data, dict):
        return data

    return {}


def get_config_value(key: str, default: Any | None = None) -> Any | None:
    """Fetch a configuration value by key."""

    return load_config().get(key, default)


def get_config_str(key: str) -> str | None:
    """Fetch a configuration value, ignoring anything that is not a non-empty string."""

    value = get_config_value(key)
    if isinstance(value, str) and value:
        return value
    return None


def reload_config() -> None:
    """Force the cached configuration to be reloaded on next access."""

    load_config.cache_clear()


def get_signing_config() -> SigningConfig:
    """Keystore credentials, with config.json values over the defaults."""

    values = {
        key: value
        for key in ("key_alias", "keystore_pass", "key_pass")
        if (value := get_config_str(key)) is not None
    }
    return SigningConfig(**values)
