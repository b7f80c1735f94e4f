from __future__ import annotations

"""Structured logging for the skill: structlog JSON lines via orjson.

Hub credentials must never reach the log stream, so a redaction processor
runs before rendering.
"""

import logging
import os
import sys
from typing import Any, MutableMapping

import orjson
import structlog


REDACTED = "***"
SECRET_KEYS = frozenset({"access_token", "authorization", "token"})


def _orjson_dumps(obj: Any, default: Any | None = None, **_: Any) -> str:
    # structlog passes extra kwargs to the serializer; orjson only takes `default`
    return orjson.dumps(
        obj,
        default=default,  # type: ignore[arg-type]
        option=orjson.OPT_SORT_KEYS | orjson.OPT_APPEND_NEWLINE,
    ).decode()


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential-looking fields, including inside nested dicts."""

    for key, value in list(event_dict.items()):
        if key.lower() in SECRET_KEYS and value:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = redact_secrets(_logger, _method, dict(value))
    return event_dict


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with JSON rendering on top of stdlib logging.

    LOG_LEVEL env var wins over `level`.
    """
    level = os.getenv("LOG_LEVEL") or level
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=numeric_level, handlers=[logging.StreamHandler(sys.stdout)])
    # httpx logs every request at INFO, including the full URL
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(serializer=_orjson_dumps),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger() -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger."""

    return structlog.get_logger()
