from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import FakeHub, refuse
from ha_skill.config.settings import HubSettings, Settings
from ha_skill.main import create_app
from ha_skill.skill.forwarder import create_skill


def _settings(**hub: object) -> Settings:
    values: dict[str, object] = {"base_url": "http://hub.test:8123", "access_token": "secret-token"}
    values.update(hub)
    return Settings(ha=HubSettings(**values))


@pytest.fixture
def client(hub: FakeHub):
    app = create_app(skill=create_skill(transport=hub.transport), settings=_settings())
    with TestClient(app) as c:
        yield c


def test_intent_roundtrip(client, hub):
    resp = client.post("/intent", json={"transcript": "lights on", "device_id": "sat-1"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["speech_text"] == "OK"
    assert body["actions"][0]["type"] == "home_assistant_command"
    assert len(hub.voice_requests()) == 1


def test_intent_bad_gateway_on_garbage(client, hub):
    hub.voice = lambda r: httpx.Response(200, text="nope")
    resp = client.post("/intent", json={"transcript": "lights on"})
    assert resp.status_code == 502


def test_intent_rejected_when_unhealthy(client, hub):
    hub.probe = refuse
    assert client.get("/healthz").status_code == 503
    resp = client.post("/intent", json={"transcript": "lights on"})
    assert resp.status_code == 409
    assert hub.voice_requests() == []


def test_status_and_manifest(client):
    status = client.get("/status").json()
    assert status["state"] == "ready"
    assert status["healthy"] is True
    assert status["usage_count"] == 0

    manifest = client.get("/manifest").json()
    assert manifest["id"] == "com.loqalabs.homeassistant"


def test_healthz_ok(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_update_config(client):
    cfg = {"skill_id": "com.loqalabs.homeassistant", "config": {"access_token": "new", "timeout_seconds": 5}}
    assert client.put("/config", json=cfg).status_code == 200

    cfg["config"] = {"base_url": "http://hub.test:8123"}
    resp = client.put("/config", json=cfg)
    assert resp.status_code == 422
    assert "access_token" in resp.json()["detail"]


def test_metrics_endpoint(client):
    client.post("/intent", json={"transcript": "lights on"})
    text = client.get("/metrics").text
    assert 'ha_intents_total{outcome="ok"} 1.0' in text


def test_startup_fails_without_token(hub):
    app = create_app(skill=create_skill(transport=hub.transport), settings=_settings(access_token=""))
    with pytest.raises(Exception):
        with TestClient(app):
            pass
