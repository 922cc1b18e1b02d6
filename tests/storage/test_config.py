"""Tests for config storage and per-group merging."""

import json

from arcane_node import storage
from arcane_node.detection import DEFAULT_LIST_STOP_WORDS


def test_get_config_defaults():
    """Returns defaults when no config file exists."""
    config = storage.get_config()
    assert config["llm_connection"] == {
        "provider_url": "",
        "api_key": "",
        "provider_format": "koboldcpp",
        "model": "",
        "max_tokens": 1024,
        "temperature": 0.8,
    }
    assert config["detection"]["lookup_timeout"] == 5.0
    assert config["detection"]["list_stop_words"] == list(DEFAULT_LIST_STOP_WORDS)


def test_update_config_persists():
    storage.update_config({"llm_connection": {"provider_url": "http://localhost:5001"}})

    reloaded = storage.get_config()
    assert reloaded["llm_connection"]["provider_url"] == "http://localhost:5001"
    assert reloaded["llm_connection"]["provider_format"] == "koboldcpp"

    on_disk = json.loads((storage.data_dir() / "config.json").read_text())
    assert on_disk["llm_connection"]["provider_url"] == "http://localhost:5001"


def test_update_config_groups_independent():
    """Partial group updates preserve other keys and groups."""
    storage.update_config({"llm_connection": {"model": "gpt-4o-mini"}})
    storage.update_config({"detection": {"lookup_timeout": 1.5}})

    config = storage.get_config()
    assert config["llm_connection"]["model"] == "gpt-4o-mini"
    assert config["detection"]["lookup_timeout"] == 1.5
    assert config["detection"]["list_stop_words"] == list(DEFAULT_LIST_STOP_WORDS)


def test_update_config_ignores_unknown_groups():
    result = storage.update_config({"theme": {"dark": True}})
    assert "theme" not in result


def test_defaults_not_mutated():
    storage.update_config({"detection": {"list_stop_words": ["Only"]}})
    storage.data_dir().joinpath("config.json").unlink()
    assert storage.get_config()["detection"]["list_stop_words"] == list(DEFAULT_LIST_STOP_WORDS)
