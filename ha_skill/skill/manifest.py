from __future__ import annotations

"""Static manifest the host reads once when loading the skill."""

from ha_skill.config.ha_config import DEFAULT_TIMEOUT_SECONDS, HAConfig
from ha_skill.config.settings import SKILL_ID, SKILL_VERSION
from ha_skill.skill.schemas.skill_types import (
    ConfigProperty,
    ConfigSchema,
    IntentPattern,
    Permission,
    PermissionType,
    SandboxMode,
    SkillManifest,
    TrustLevel,
)


def _config_schema() -> ConfigSchema:
    defaults = HAConfig.model_fields
    return ConfigSchema(
        properties={
            "base_url": ConfigProperty(
                type="string",
                description="Home Assistant base URL (e.g., http://homeassistant.local:8123)",
                default=defaults["base_url"].default,
                format="url",
            ),
            "access_token": ConfigProperty(
                type="string",
                description="Home Assistant long-lived access token",
                sensitive=True,
            ),
            "device_id": ConfigProperty(
                type="string",
                description="Device ID to use when communicating with HA",
                default=defaults["device_id"].default,
            ),
            "device_name": ConfigProperty(
                type="string",
                description="Device name displayed in Home Assistant",
                default=defaults["device_name"].default,
            ),
            "mqtt_enabled": ConfigProperty(
                type="boolean",
                description="Enable MQTT integration (future feature)",
                default=False,
            ),
            "mqtt_topic": ConfigProperty(
                type="string",
                description="MQTT topic for voice commands",
                default=defaults["mqtt_topic"].default,
            ),
            "timeout_seconds": ConfigProperty(
                type="integer",
                description="Request timeout in seconds",
                default=DEFAULT_TIMEOUT_SECONDS,
            ),
        },
        required=["base_url", "access_token"],
    )


def build_manifest() -> SkillManifest:
    return SkillManifest(
        id=SKILL_ID,
        name="Home Assistant Voice Integration",
        version=SKILL_VERSION,
        description="Integrates with Home Assistant Voice Preview Edition as a fallback skill",
        author="Loqa Labs",
        license="AGPL-3.0",
        intent_patterns=[
            # catch-all at very low confidence and priority so real skills win
            IntentPattern(
                name="ha_fallback",
                examples=["*"],
                confidence=0.1,
                priority=100,
                enabled=True,
                categories=["fallback"],
            )
        ],
        languages=["en"],
        categories=["smart_home", "fallback", "integration"],
        permissions=[
            Permission(
                type=PermissionType.NETWORK,
                resource="*",
                actions=["http_request"],
                description="Connect to Home Assistant API",
            ),
            Permission(
                type=PermissionType.DEVICE_CONTROL,
                resource="*",
                actions=["*"],
                description="Control devices via Home Assistant",
            ),
            Permission(
                type=PermissionType.SPEAKER,
                resource="*",
                actions=["play"],
                description="Play TTS responses from Home Assistant",
            ),
        ],
        config_schema=_config_schema(),
        load_on_startup=True,
        singleton=True,
        timeout=f"{DEFAULT_TIMEOUT_SECONDS}s",
        sandbox_mode=SandboxMode.NONE,
        trust_level=TrustLevel.SYSTEM,
        keywords=["homeassistant", "ha", "smart home", "fallback", "integration"],
        tags=["integration", "smart-home", "fallback"],
    )
