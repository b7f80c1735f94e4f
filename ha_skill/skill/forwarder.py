from __future__ import annotations

"""Home Assistant fallback skill: forward unhandled intents to the hub."""

from time import perf_counter
from typing import Optional

import httpx

from ha_skill.config.ha_config import HAConfig, parse_ha_config
from ha_skill.skill.errors import ConfigurationError, HAProtocolError, HATransportError, SkillNotReadyError
from ha_skill.skill.manifest import build_manifest
from ha_skill.skill.schemas.ha_io import HAVoiceRequest
from ha_skill.skill.schemas.skill_types import (
    SkillAction,
    SkillConfig,
    SkillManifest,
    SkillResponse,
    SkillState,
    SkillStatus,
    VoiceIntent,
)
from ha_skill.skill.services.ha_client import HAClient
from ha_skill.skill.services.logging import get_logger
from ha_skill.skill.services.metrics import metrics
from ha_skill.utils.time import utcnow


# The hub request carries a fixed language until intents expose one
REQUEST_LANGUAGE = "en"

CONNECTION_ERROR_CODE = "ha_connection_error"
PROCESSING_ERROR_CODE = "ha_processing_error"

CONNECTION_ERROR_MESSAGE = "Failed to process with Home Assistant"
CONNECTION_ERROR_SPEECH = "Sorry, I couldn't connect to Home Assistant to process that request."


logger = get_logger()


class HomeAssistantSkill:
    """Universal fallback skill backed by a Home Assistant hub.

    Lifecycle is driven by the host: initialize -> (can_handle/handle_intent,
    health_check, update_config)* -> teardown. The instance owns its parsed
    config and status; nothing else mutates them.
    """

    def __init__(self, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._transport = transport
        self._config: Optional[SkillConfig] = None
        self._ha_config: Optional[HAConfig] = None
        self._client: Optional[HAClient] = None
        self._status = SkillStatus(state=SkillState.LOADING, healthy=False)

    @property
    def ha_config(self) -> Optional[HAConfig]:
        return self._ha_config

    def _apply(self, config: SkillConfig) -> HAConfig:
        ha_config = parse_ha_config(config.config)
        self._config = config
        self._ha_config = ha_config
        self._client = HAClient(ha_config, transport=self._transport)
        return ha_config

    def _require_client(self) -> HAClient:
        if self._client is None:
            raise SkillNotReadyError(self._status.state.value)
        return self._client

    async def _test_connection(self) -> None:
        try:
            await self._require_client().probe()
        except HATransportError:
            metrics.record_probe_failure()
            raise

    async def initialize(self, config: SkillConfig) -> None:
        try:
            ha_config = self._apply(config)
        except ConfigurationError as exc:
            self._status.state = SkillState.ERROR
            self._status.last_error = f"Failed to parse HA config: {exc}"
            logger.error("ha_config_invalid", skill_id=config.skill_id, error=str(exc))
            raise

        try:
            await self._test_connection()
        except HATransportError as exc:
            # the hub may come up later; keep the skill loaded
            logger.warning("ha_connection_test_failed", error=str(exc))
            self._status.last_error = f"HA connection test failed: {exc}"

        self._status.state = SkillState.READY
        self._status.healthy = True

        logger.info(
            "ha_skill_initialized",
            skill_id=config.skill_id,
            version=config.version,
            ha_url=ha_config.base_url,
            device_id=ha_config.device_id,
            timeout_seconds=ha_config.effective_timeout,
        )

    async def teardown(self) -> None:
        self._status.state = SkillState.SHUTDOWN
        self._status.healthy = False
        logger.info("ha_skill_shutdown")

    def can_handle(self, intent: VoiceIntent) -> bool:
        # Fallback for everything; the host's priority routing decides order.
        return self._status.healthy

    async def handle_intent(self, intent: VoiceIntent) -> SkillResponse:
        """Forward the intent's transcript to the hub and map the reply.

        Hub outages and hub-side failures come back as unsuccessful
        responses. Only a 200 reply that cannot be parsed raises
        (HAProtocolError).
        """

        log = logger.bind(intent=intent.intent, device_id=intent.device_id)
        log.info("ha_intent_handling", transcript=intent.transcript)

        self._status.last_used = utcnow()
        self._status.usage_count += 1

        start = perf_counter()
        client = self._require_client()
        ha_config = client.config
        request = HAVoiceRequest(
            text=intent.transcript,
            language=REQUEST_LANGUAGE,
            device_id=ha_config.device_id,
        )

        try:
            reply = await client.process_voice(request)
        except HATransportError as exc:
            log.error("ha_request_failed", exc_info=True, error=str(exc))
            metrics.record_intent("connection_error")
            return SkillResponse(
                success=False,
                message=CONNECTION_ERROR_MESSAGE,
                speech_text=CONNECTION_ERROR_SPEECH,
                error=str(exc),
                error_code=CONNECTION_ERROR_CODE,
                response_time=perf_counter() - start,
            )
        except HAProtocolError:
            metrics.record_intent("protocol_error")
            raise

        response = SkillResponse(
            success=reply.success,
            message=reply.text,
            speech_text=reply.speech_text,
            audio_url=reply.audio_url,
            actions=[
                SkillAction(
                    type="home_assistant_command",
                    target="homeassistant",
                    parameters={
                        "text": intent.transcript,
                        "device_id": intent.device_id,
                    },
                    success=reply.success,
                )
            ],
            metadata={
                "ha_device_id": ha_config.device_id,
                "ha_base_url": ha_config.base_url,
            },
            response_time=perf_counter() - start,
        )

        if not reply.success:
            response.error = reply.error_message
            response.error_code = PROCESSING_ERROR_CODE
            if not response.message and reply.error_message:
                response.message = reply.error_message
            metrics.record_intent("processing_error")
            log.warning("ha_processing_failed", error=reply.error_message)
        else:
            metrics.record_intent("ok")

        return response

    def get_manifest(self) -> SkillManifest:
        return build_manifest()

    def get_status(self) -> SkillStatus:
        return self._status.model_copy()

    def get_config(self) -> Optional[SkillConfig]:
        return self._config

    async def update_config(self, config: SkillConfig) -> None:
        """Re-parse and re-probe.

        Unlike initialize, a failed probe leaves `healthy` as it was; only a
        successful probe marks the skill healthy again.
        """

        try:
            ha_config = self._apply(config)
        except ConfigurationError as exc:
            logger.error("ha_config_update_invalid", skill_id=config.skill_id, error=str(exc))
            raise ConfigurationError(f"failed to parse updated HA config: {exc}") from exc

        try:
            await self._test_connection()
        except HATransportError as exc:
            logger.warning("ha_connection_test_failed", error=str(exc), on="update_config")
            self._status.last_error = f"HA connection test failed: {exc}"
        else:
            self._status.last_error = ""
            self._status.healthy = True

        logger.info(
            "ha_skill_config_updated",
            skill_id=config.skill_id,
            version=config.version,
            ha_url=ha_config.base_url,
            timeout_seconds=ha_config.effective_timeout,
        )

    async def health_check(self) -> None:
        if self._status.state != SkillState.READY:
            raise SkillNotReadyError(self._status.state.value)

        try:
            await self._test_connection()
        except HATransportError as exc:
            self._status.healthy = False
            self._status.last_error = f"HA health check failed: {exc}"
            logger.warning("ha_health_check_failed", error=str(exc))
            raise

        self._status.healthy = True
        self._status.last_error = ""


def create_skill(*, transport: httpx.AsyncBaseTransport | None = None) -> HomeAssistantSkill:
    """Plugin entry point: each call returns an independent skill instance."""

    return HomeAssistantSkill(transport=transport)
