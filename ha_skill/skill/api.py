from __future__ import annotations

"""HTTP routes exposing one hosted skill instance."""

from fastapi import APIRouter, HTTPException, Request, status

from ha_skill.skill.errors import ConfigurationError, HAProtocolError, SkillError
from ha_skill.skill.forwarder import HomeAssistantSkill
from ha_skill.skill.schemas.skill_types import (
    SkillConfig,
    SkillManifest,
    SkillResponse,
    SkillStatus,
    VoiceIntent,
)


router = APIRouter()


def _skill(request: Request) -> HomeAssistantSkill:
    return request.app.state.skill


@router.post("/intent", response_model=SkillResponse)
async def handle_intent(intent: VoiceIntent, request: Request) -> SkillResponse:
    skill = _skill(request)
    if not skill.can_handle(intent):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="skill is not healthy")
    try:
        return await skill.handle_intent(intent)
    except HAProtocolError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@router.get("/status", response_model=SkillStatus)
async def get_status(request: Request) -> SkillStatus:
    return _skill(request).get_status()


@router.get("/manifest", response_model=SkillManifest)
async def get_manifest(request: Request) -> SkillManifest:
    return _skill(request).get_manifest()


@router.put("/config", response_model=SkillStatus)
async def update_config(config: SkillConfig, request: Request) -> SkillStatus:
    skill = _skill(request)
    try:
        await skill.update_config(config)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return skill.get_status()


@router.get("/healthz")
async def healthz(request: Request) -> dict:
    try:
        await _skill(request).health_check()
    except SkillError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {"ok": True}
