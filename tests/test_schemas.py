from __future__ import annotations

from ha_skill.config.ha_config import HAConfig
from ha_skill.config.settings import HubSettings, Settings
from ha_skill.skill.schemas.ha_io import HAVoiceRequest, HAVoiceResponse
from ha_skill.skill.schemas.skill_types import SkillResponse, SkillState, SkillStatus


def test_voice_request_payload():
    req = HAVoiceRequest(text="lights on", language="en", device_id="sat")
    assert req.model_dump() == {"text": "lights on", "language": "en", "device_id": "sat"}


def test_voice_response_optional_fields():
    resp = HAVoiceResponse.model_validate_json('{"success": true, "text": "ok", "speech_text": "OK", "extra": 1}')
    assert resp.success
    assert resp.audio_url is None
    assert resp.error_message is None


def test_status_defaults_to_loading():
    status = SkillStatus()
    assert status.state == SkillState.LOADING
    assert not status.healthy
    assert status.usage_count == 0


def test_skill_response_defaults():
    resp = SkillResponse(success=True)
    assert resp.actions == []
    assert resp.error_code is None


def test_settings_to_skill_config():
    settings = Settings(log_level="debug", ha=HubSettings(access_token="t", timeout_seconds=7))
    assert settings.log_level == "DEBUG"
    cfg = settings.to_skill_config()
    assert cfg.skill_id == "com.loqalabs.homeassistant"
    assert cfg.config["access_token"] == "t"
    assert cfg.config["timeout_seconds"] == 7
    assert cfg.config["base_url"] == "http://homeassistant.local:8123"


def test_hub_settings_defaults_follow_ha_config():
    hub = HubSettings()
    for name, field in HAConfig.model_fields.items():
        if name == "access_token":
            continue
        assert getattr(hub, name) == field.default


def test_voice_response_nulls():
    resp = HAVoiceResponse.model_validate_json('{"success": null, "text": null, "speech_text": null}')
    assert resp.success is False
    assert resp.text == ""
    assert resp.speech_text == ""
