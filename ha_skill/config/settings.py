from __future__ import annotations

"""Settings for the standalone skill runner using Pydantic Settings.

Loads configuration from environment variables and optional .env file.
"""

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ha_skill.config.ha_config import HAConfig
from ha_skill.skill.schemas.skill_types import SkillConfig


SKILL_ID = "com.loqalabs.homeassistant"
SKILL_VERSION = "1.0.0"


_HA_DEFAULTS = HAConfig.model_fields


class HubSettings(BaseModel):
    """Hub section of the runner env; defaults follow HAConfig."""

    base_url: str = _HA_DEFAULTS["base_url"].default
    access_token: str = ""
    device_id: str = _HA_DEFAULTS["device_id"].default
    device_name: str = _HA_DEFAULTS["device_name"].default
    mqtt_enabled: bool = _HA_DEFAULTS["mqtt_enabled"].default
    mqtt_topic: str = _HA_DEFAULTS["mqtt_topic"].default
    timeout_seconds: int = _HA_DEFAULTS["timeout_seconds"].default


class Settings(BaseSettings):
    """Top-level runner configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8080

    # Logging
    log_level: str = "INFO"

    # Hub, e.g. HA__BASE_URL / HA__ACCESS_TOKEN
    ha: HubSettings = HubSettings()

    @field_validator("log_level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in levels:
            raise ValueError("Invalid LOG_LEVEL")
        return v.upper()

    def to_skill_config(self) -> SkillConfig:
        """Shape the hub settings the way the host hands them to a skill."""

        config: dict[str, Any] = self.ha.model_dump()
        return SkillConfig(
            skill_id=SKILL_ID,
            name="Home Assistant Voice Integration",
            version=SKILL_VERSION,
            config=config,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""

    return Settings()
