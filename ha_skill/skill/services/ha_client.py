from __future__ import annotations

"""HTTP client for the Home Assistant REST API."""

from contextlib import asynccontextmanager
from time import perf_counter
from typing import AsyncIterator

import httpx
from pydantic import ValidationError

from ha_skill.config.ha_config import HAConfig
from ha_skill.skill.errors import HAProtocolError, HAStatusError, HATransportError
from ha_skill.skill.schemas.ha_io import HAVoiceRequest, HAVoiceResponse
from ha_skill.skill.services.logging import get_logger
from ha_skill.skill.services.metrics import metrics


PROBE_PATH = "/api/"
VOICE_PATH = "/api/voice/process"


class HAClient:
    """Talks to one hub. Every call opens a short-lived AsyncClient.

    `transport` is passed straight to httpx and lets callers swap the
    network layer (tests use httpx.MockTransport).
    """

    def __init__(self, config: HAConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.config.effective_timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.access_token}",
            "Content-Type": "application/json",
        }

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            yield client

    async def probe(self) -> None:
        """GET the API root. Raises HATransportError unless the hub answers 200."""

        url = self.config.url(PROBE_PATH)
        start = perf_counter()
        try:
            async with self._client() as client:
                resp = await client.get(url, headers=self._headers())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise HATransportError(f"failed to connect to HA: {exc}") from exc
        finally:
            metrics.record_request("probe", perf_counter() - start)

        if resp.status_code != httpx.codes.OK:
            raise HAStatusError(resp.status_code)

    async def process_voice(self, req: HAVoiceRequest) -> HAVoiceResponse:
        """POST a transcript to the voice endpoint.

        Non-200 replies come back as an unsuccessful HAVoiceResponse carrying
        the status and body. Raises HATransportError when the hub cannot be
        reached and HAProtocolError when a 200 body is not a voice reply.
        """

        url = self.config.url(VOICE_PATH)
        logger = get_logger().bind(device_id=req.device_id)
        start = perf_counter()
        try:
            async with self._client() as client:
                logger.debug("ha_request_start", url=url)
                resp = await client.post(url, json=req.model_dump(mode="json"), headers=self._headers())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise HATransportError(f"failed to send request: {exc}") from exc
        finally:
            metrics.record_request("voice", perf_counter() - start)

        if resp.status_code != httpx.codes.OK:
            logger.warning("ha_request_rejected", status=resp.status_code, preview=resp.text[:200])
            return HAVoiceResponse(
                success=False,
                error_message=f"HA API error: {resp.status_code} - {resp.text}",
            )

        try:
            reply = HAVoiceResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            logger.warning(
                "ha_bad_json",
                status=resp.status_code,
                content_type=resp.headers.get("content-type", ""),
                preview=resp.text[:200],
            )
            raise HAProtocolError(f"failed to unmarshal response: {exc}") from exc

        elapsed_ms = int((perf_counter() - start) * 1000)
        logger.info("ha_request_ok", status=resp.status_code, success=reply.success, elapsed_ms=elapsed_ms)
        return reply
