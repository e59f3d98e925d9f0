# fitbit_tcx/utils/persistent_config.py
"""
Persistent user preferences.
Read once at startup; the exporter never writes credentials or tokens here.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Any

from .log import setup_logger

log = setup_logger("utils.persistent_config")

# Store config in user's home directory
USER_CONFIG_PATH = Path.home() / ".fitbit_tcx" / "config.json"

PATH_FIELDS = ("CREDENTIALS_FILE", "OUTPUT_DIR")


def load_persistent_config(path: Path = None) -> Dict[str, Any]:
    """Load persistent user configuration, or {} when absent or unreadable."""
    path = path or USER_CONFIG_PATH
    if not path.exists():
        return {}

    try:
        with path.open("r", encoding="utf-8") as f:
            config = json.load(f)
    except (OSError, ValueError) as e:
        log.warning(f"[persistent_config] Failed to load {path}: {e}")
        return {}

    if not isinstance(config, dict):
        log.warning(f"[persistent_config] Ignoring {path}: expected a JSON object")
        return {}

    for field in PATH_FIELDS:
        if field in config and config[field]:
            config[field] = Path(config[field]).expanduser()

    return config

