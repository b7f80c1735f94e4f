from __future__ import annotations

"""Pydantic models for the Home Assistant voice I/O contract."""

from typing import Any, Optional

from pydantic import BaseModel, ValidationInfo, field_validator


class HAVoiceRequest(BaseModel):
    text: str
    language: str
    device_id: str


class HAVoiceResponse(BaseModel):
    success: bool = False
    text: str = ""
    speech_text: str = ""
    audio_url: Optional[str] = None
    error_message: Optional[str] = None

    model_config = {
        "extra": "allow",  # hub may add fields we do not map
    }

    @field_validator("success", "text", "speech_text", mode="before")
    @classmethod
    def _null_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        # hub sends explicit nulls for fields it has nothing to say about
        if v is None:
            return cls.model_fields[info.field_name].default
        return v
