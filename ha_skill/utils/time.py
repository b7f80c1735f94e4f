from __future__ import annotations

"""Time utilities."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return current UTC datetime (timezone-aware)."""

    return datetime.now(timezone.utc)
