from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

import httpx
import pytest

from ha_skill.skill.schemas.skill_types import SkillConfig
from ha_skill.skill.services.metrics import metrics


Responder = Callable[[httpx.Request], httpx.Response]


@dataclass
class FakeHub:
    """Scriptable stand-in for the Home Assistant REST API."""

    probe: Responder = lambda request: httpx.Response(200, json={"message": "API running."})
    voice: Responder = lambda request: httpx.Response(
        200, json={"success": True, "text": "ok", "speech_text": "OK"}
    )
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET" and request.url.path == "/api/":
            return self.probe(request)
        if request.method == "POST" and request.url.path == "/api/voice/process":
            return self.voice(request)
        return httpx.Response(404, text="not found")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def voice_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/voice/process"]


def refuse(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


def skill_config(**overrides: object) -> SkillConfig:
    config: dict[str, object] = {
        "base_url": "http://hub.test:8123/",
        "access_token": "secret-token",
        "device_id": "kitchen-satellite",
    }
    config.update(overrides)
    return SkillConfig(skill_id="com.loqalabs.homeassistant", version="1.0.0", config=config)


@pytest.fixture
def hub() -> FakeHub:
    return FakeHub()


@pytest.fixture(autouse=True)
def _reset_metrics():
    metrics.reset()
    yield
    metrics.reset()
