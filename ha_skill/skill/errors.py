from __future__ import annotations

"""Exceptions raised by the Home Assistant skill."""


class SkillError(Exception):
    """Base class for skill errors."""


class ConfigurationError(SkillError):
    """Hub configuration is missing or mistyped."""


class SkillNotReadyError(SkillError):
    def __init__(self, state: str) -> None:
        super().__init__(f"skill not ready, current state: {state}")
        self.state = state


class HATransportError(SkillError):
    """The hub could not be reached (connect, DNS, timeout, read)."""


class HAStatusError(HATransportError):
    """The probe endpoint answered with a non-200 status."""

    def __init__(self, status: int) -> None:
        super().__init__(f"HA API returned status {status}")
        self.status = status


class HAProtocolError(SkillError):
    """The hub answered 200 with a body that is not a valid voice reply."""
