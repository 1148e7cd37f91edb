"""Utility constants and helpers shared by the rate limiting policies."""

from pydantic import BaseModel


class Never(BaseModel):
    """Sentinel for a timestamp that has not happened yet."""

    def __repr__(self) -> str:
        return "NEVER"


NEVER = Never()


def elapsed_since(now: float, then: float | Never) -> float | None:
    """Seconds between ``then`` and ``now``, or None if ``then`` never happened."""
    if isinstance(then, Never):
        return None
    return now - then
