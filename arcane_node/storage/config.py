"""Global app configuration (LLM connection, detection settings)."""

import json
from pathlib import Path
from typing import Any

from arcane_node.detection import DEFAULT_LIST_STOP_WORDS

from .core import data_dir

_CONFIG_DEFAULTS: dict[str, Any] = {
    "llm_connection": {
        "provider_url": "",
        "api_key": "",
        "provider_format": "koboldcpp",
        "model": "",
        "max_tokens": 1024,
        "temperature": 0.8,
    },
    "detection": {
        "lookup_timeout": 5.0,
        "list_stop_words": list(DEFAULT_LIST_STOP_WORDS),
    },
}


def _config_path() -> Path:
    return data_dir() / "config.json"


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = json.loads(json.dumps(_CONFIG_DEFAULTS))
    path = _config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        for group in ("llm_connection", "detection"):
            if isinstance(stored.get(group), dict):
                config[group].update(stored[group])
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config.

    Each group is merged key-by-key; unknown groups are ignored.
    """
    config = get_config()
    for group in ("llm_connection", "detection"):
        if isinstance(fields.get(group), dict):
            config[group].update(fields[group])
    _config_path().write_text(json.dumps(config, indent=2))
    return config
