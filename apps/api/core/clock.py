"""
Injectable clock.

Routes that stamp records (alert creation, alert resolution, analysis
timestamps) take a Clock through FastAPI's dependency system instead of
calling datetime.now() directly, so tests can pin time.
"""
from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock, always timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given instant. Call advance() to move it."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs) -> datetime:
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant


_system_clock = SystemClock()


def get_clock() -> Clock:
    """FastAPI dependency returning the process-wide clock."""
    return _system_clock
