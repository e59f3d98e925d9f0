# fitbit_tcx/config.py
"""
Application configuration.
Loads user preferences from persistent storage (~/.fitbit_tcx/config.json).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .utils.persistent_config import load_persistent_config

_PERSISTENT_CONFIG = load_persistent_config()

DEFAULT_SCOPES = ["activity", "heartrate", "location", "profile"]


def _get_config_value(key: str, default: Any) -> Any:
    """Get config value from persistent storage or use default."""
    return _PERSISTENT_CONFIG.get(key, default)


def _get_scopes() -> List[str]:
    """Scopes preference as a list; a "activity heartrate" string is split on spaces or '+'."""
    value = _get_config_value('SCOPES', DEFAULT_SCOPES)
    if isinstance(value, str):
        value = value.replace('+', ' ').split()
    if not isinstance(value, (list, tuple)) or not all(isinstance(s, str) and s for s in value):
        return list(DEFAULT_SCOPES)
    return list(value) or list(DEFAULT_SCOPES)


@dataclass
class Config:
    # --- Logging ---
    LOG_LEVEL: str = field(default_factory=lambda: _get_config_value('LOG_LEVEL', 'INFO'))

    # --- Paths ---
    CREDENTIALS_FILE: Path = field(
        default_factory=lambda: Path(_get_config_value('CREDENTIALS_FILE', 'credentials.json'))
    )
    OUTPUT_DIR: Path = field(default_factory=lambda: Path(_get_config_value('OUTPUT_DIR', '.')))

    # --- OAuth ---
    VERIFIER_LENGTH: int = field(default_factory=lambda: int(_get_config_value('VERIFIER_LENGTH', 43)))
    SCOPES: List[str] = field(default_factory=_get_scopes)

    # --- TCX export ---
    DEVICE_NAME: str = field(default_factory=lambda: _get_config_value('DEVICE_NAME', 'Fitbit'))


def reload_config(overrides: Dict[str, Any] = None) -> Config:
    """
    Re-read persistent preferences and return a fresh Config.

    Args:
        overrides: Values that take precedence over the user file
    """
    global _PERSISTENT_CONFIG
    _PERSISTENT_CONFIG = {**load_persistent_config(), **(overrides or {})}
    return Config()


DEFAULT_CONFIG = Config()
