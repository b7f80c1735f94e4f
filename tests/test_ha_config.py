from __future__ import annotations

import pytest

from ha_skill.config.ha_config import HAConfig, parse_ha_config
from ha_skill.skill.errors import ConfigurationError


def test_defaults_applied():
    cfg = parse_ha_config({"access_token": "t"})
    assert cfg.base_url == "http://homeassistant.local:8123"
    assert cfg.device_id == "loqa-voice-assistant"
    assert cfg.device_name == "Loqa Voice Assistant"
    assert cfg.mqtt_enabled is False
    assert cfg.mqtt_topic == "homeassistant/voice"
    assert cfg.timeout_seconds == 30
    assert cfg.effective_timeout == 30.0


def test_missing_token_rejected():
    with pytest.raises(ConfigurationError, match="access_token is required"):
        parse_ha_config({"base_url": "http://hub:8123"})
    with pytest.raises(ConfigurationError):
        parse_ha_config({"access_token": "   "})
    with pytest.raises(ConfigurationError):
        parse_ha_config(None)


def test_trailing_slash_trimmed():
    cfg = parse_ha_config({"access_token": "t", "base_url": "http://hub:8123///"})
    assert cfg.base_url == "http://hub:8123"
    assert cfg.url("/api/voice/process") == "http://hub:8123/api/voice/process"
    assert cfg.url("api/") == "http://hub:8123/api/"


def test_json_float_timeout_accepted():
    cfg = parse_ha_config({"access_token": "t", "timeout_seconds": 12.0})
    assert cfg.timeout_seconds == 12
    assert cfg.effective_timeout == 12.0


@pytest.mark.parametrize("value", [0, -5])
def test_non_positive_timeout_falls_back(value):
    cfg = parse_ha_config({"access_token": "t", "timeout_seconds": value})
    assert cfg.effective_timeout == 30.0


@pytest.mark.parametrize(
    "key,value",
    [
        ("timeout_seconds", "10"),
        ("timeout_seconds", 2.5),
        ("mqtt_enabled", "yes"),
        ("base_url", 8123),
        ("access_token", 42),
    ],
)
def test_mistyped_values_rejected(key, value):
    raw = {"access_token": "t", key: value}
    with pytest.raises(ConfigurationError, match=key):
        parse_ha_config(raw)


def test_none_and_unknown_keys_ignored():
    cfg = parse_ha_config({"access_token": "t", "device_id": None, "color": "blue"})
    assert cfg.device_id == "loqa-voice-assistant"
    assert not hasattr(cfg, "color")


def test_config_is_frozen():
    cfg = HAConfig(access_token="t")
    with pytest.raises(Exception):
        cfg.device_id = "other"  # type: ignore[misc]


@pytest.mark.parametrize("token", ["tökén", "secret☃", "abc\ndef"])
def test_token_must_be_header_safe(token):
    with pytest.raises(ConfigurationError, match="access_token"):
        parse_ha_config({"access_token": token})
