from __future__ import annotations

"""Typed Home Assistant configuration parsed from the host's config mapping."""

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ha_skill.skill.errors import ConfigurationError


DEFAULT_TIMEOUT_SECONDS = 30


def _is_ascii(value: str) -> bool:
    try:
        value.encode("ascii")
        return True
    except UnicodeEncodeError:
        return False


class HAConfig(BaseModel):
    """Hub connection settings. Validated once, immutable afterwards."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    base_url: str = "http://homeassistant.local:8123"
    access_token: str = ""
    device_id: str = "loqa-voice-assistant"
    device_name: str = "Loqa Voice Assistant"
    mqtt_enabled: bool = False  # reserved, not wired to anything yet
    mqtt_topic: str = "homeassistant/voice"
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    @field_validator("base_url")
    @classmethod
    def _trim_base_url(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("access_token")
    @classmethod
    def _header_safe_token(cls, v: str) -> str:
        # sent verbatim in the Authorization header
        if not _is_ascii(v) or not v.isprintable():
            raise ValueError("must contain only printable ASCII characters")
        return v

    @field_validator("timeout_seconds", mode="before")
    @classmethod
    def _integral_timeout(cls, v: Any) -> Any:
        # JSON-decoded host configs carry numbers as floats
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @model_validator(mode="after")
    def _require_token(self) -> "HAConfig":
        if not self.access_token.strip():
            raise ValueError("access_token is required for Home Assistant integration")
        return self

    @property
    def effective_timeout(self) -> float:
        """Request timeout in seconds; non-positive values fall back to the default."""

        if self.timeout_seconds > 0:
            return float(self.timeout_seconds)
        return float(DEFAULT_TIMEOUT_SECONDS)

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


def parse_ha_config(raw: Mapping[str, Any] | None) -> HAConfig:
    """Build HAConfig from a generic key/value mapping.

    Keys set to None are treated as absent so defaults apply. Raises
    ConfigurationError on a missing token or a value of the wrong type.
    """

    values = {k: v for k, v in (raw or {}).items() if v is not None}
    try:
        return HAConfig.model_validate(values)
    except ValidationError as exc:
        problems = "; ".join(_describe(err) for err in exc.errors())
        raise ConfigurationError(problems) from exc


def _describe(err: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    msg = str(err.get("msg", "invalid value"))
    # model-level errors have an empty loc
    if not loc:
        return msg.removeprefix("Value error, ")
    return f"{loc}: {msg}"
