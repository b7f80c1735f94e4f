from __future__ import annotations

"""FastAPI entry for running the skill standalone: intent, health, status, metrics."""

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
import structlog

from ha_skill.config.settings import Settings, get_settings
from ha_skill.skill.api import router as skill_router
from ha_skill.skill.forwarder import HomeAssistantSkill, create_skill
from ha_skill.skill.services.logging import configure_logging
from ha_skill.skill.services.metrics import metrics


logger = structlog.get_logger()


def create_app(skill: HomeAssistantSkill | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    skill = skill or create_skill()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await skill.initialize(settings.to_skill_config())
        app.state.skill = skill
        yield
        await skill.teardown()

    app = FastAPI(lifespan=lifespan)
    app.include_router(skill_router)

    @app.middleware("http")
    async def add_trace_id(request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id") or uuid.uuid4().hex
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()
        return response

    @app.get("/metrics", response_class=PlainTextResponse)
    async def metrics_endpoint() -> str:
        return metrics.to_prometheus()

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("startup", ha_url=settings.ha.base_url, device_id=settings.ha.device_id)
    uvicorn.run(create_app(settings=settings), host=settings.app_host, port=settings.app_port)


if __name__ == "__main__":
    run()
