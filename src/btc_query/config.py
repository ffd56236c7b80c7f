"""Default settings for the command line.

Each setting is resolved from an environment variable first, then from
~/.btc-query/config.json (or the file named by BTC_QUERY_CONFIG), then
the built-in default. Command-line flags override all of these.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeVar

import structlog

from btc_query.classifier import NostrPolicy
from btc_query.projection import OutputShape

logger = structlog.get_logger(__name__)

_E = TypeVar("_E", bound=Enum)

_CONFIG_PATH = Path.home() / ".btc-query" / "config.json"


@dataclass(frozen=True)
class Settings:
    units: str = "sat"
    shape: OutputShape = OutputShape.FULL
    nostr_policy: NostrPolicy = NostrPolicy.ACCEPT


def _is_real_value(val: str | None) -> bool:
    """Check if an env var value is a real setting (not a placeholder)."""
    if not val:
        return False
    return not val.startswith("${")


def _config_path() -> Path:
    override = os.environ.get("BTC_QUERY_CONFIG", "")
    return Path(override).expanduser() if _is_real_value(override) else _CONFIG_PATH


def _load_config(path: Path) -> dict:
    """Load the JSON config file if it exists; unreadable files are ignored."""
    try:
        if path.exists():
            data = json.loads(path.read_text())
            if isinstance(data, dict):
                return data
            logger.warning("Config file is not a JSON object", path=str(path))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config file", path=str(path), error=str(e))
    return {}


def _resolve(env_var: str, config_key: str, config: dict) -> str:
    """Resolve a setting: env var first (skip placeholders), then config file."""
    val = os.environ.get(env_var, "")
    if _is_real_value(val):
        return val
    val = config.get(config_key, "")
    return val if isinstance(val, str) else ""


def _choice(enum_cls: type[_E], raw: str, default: _E, name: str) -> _E:
    if not raw:
        return default
    try:
        return enum_cls(raw.lower())
    except ValueError:
        logger.warning("Ignoring invalid setting", setting=name, value=raw)
        return default


def load_settings() -> Settings:
    """Resolve CLI defaults from the environment and the config file."""
    config = _load_config(_config_path())
    defaults = Settings()
    return Settings(
        units=_resolve("BTC_QUERY_UNITS", "units", config) or defaults.units,
        shape=_choice(
            OutputShape,
            _resolve("BTC_QUERY_SHAPE", "shape", config),
            defaults.shape,
            "shape",
        ),
        nostr_policy=_choice(
            NostrPolicy,
            _resolve("BTC_QUERY_NOSTR_POLICY", "nostrPolicy", config),
            defaults.nostr_policy,
            "nostr_policy",
        ),
    )
