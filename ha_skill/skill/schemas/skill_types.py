from __future__ import annotations

"""Pydantic models for the host skill contract.

These mirror the shapes the voice hub passes to and expects from a skill
plugin: intents in, responses/status/manifest out.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SkillState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"
    SHUTDOWN = "shutdown"


class PermissionType(str, Enum):
    NETWORK = "network"
    DEVICE_CONTROL = "device_control"
    SPEAKER = "speaker"
    MICROPHONE = "microphone"
    FILE_SYSTEM = "file_system"


class SandboxMode(str, Enum):
    NONE = "none"
    PROCESS = "process"
    WASM = "wasm"


class TrustLevel(str, Enum):
    SYSTEM = "system"
    VERIFIED = "verified"
    COMMUNITY = "community"
    UNKNOWN = "unknown"


class VoiceIntent(BaseModel):
    id: Optional[str] = None
    transcript: str
    intent: str = ""
    confidence: float = 0.0
    entities: dict[str, Any] = Field(default_factory=dict)
    device_id: str = ""
    user_id: Optional[str] = None
    timestamp: Optional[datetime] = None


class SkillAction(BaseModel):
    type: str
    target: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    success: bool = False
    error: Optional[str] = None


class SkillResponse(BaseModel):
    success: bool
    message: str = ""
    speech_text: str = ""
    audio_url: Optional[str] = None
    actions: list[SkillAction] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
    error_code: Optional[str] = None
    # seconds
    response_time: float = 0.0


class SkillStatus(BaseModel):
    state: SkillState = SkillState.LOADING
    healthy: bool = False
    last_error: str = ""
    last_used: Optional[datetime] = None
    usage_count: int = 0


class SkillConfig(BaseModel):
    skill_id: str
    name: str = ""
    version: str = ""
    enabled: bool = True
    config: dict[str, Any] = Field(default_factory=dict)
    permissions: list["Permission"] = Field(default_factory=list)


class IntentPattern(BaseModel):
    name: str
    examples: list[str] = Field(default_factory=list)
    confidence: float = 0.0
    priority: int = 0
    enabled: bool = True
    categories: list[str] = Field(default_factory=list)


class Permission(BaseModel):
    type: PermissionType
    resource: str = "*"
    actions: list[str] = Field(default_factory=list)
    description: str = ""


class ConfigProperty(BaseModel):
    type: str
    description: str = ""
    default: Any = None
    format: Optional[str] = None
    sensitive: bool = False


class ConfigSchema(BaseModel):
    properties: dict[str, ConfigProperty] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class SkillManifest(BaseModel):
    id: str
    name: str
    version: str
    description: str = ""
    author: str = ""
    license: str = ""
    intent_patterns: list[IntentPattern] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    permissions: list[Permission] = Field(default_factory=list)
    config_schema: Optional[ConfigSchema] = None
    load_on_startup: bool = False
    singleton: bool = False
    timeout: str = ""
    sandbox_mode: SandboxMode = SandboxMode.NONE
    trust_level: TrustLevel = TrustLevel.UNKNOWN
    keywords: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


SkillConfig.model_rebuild()
