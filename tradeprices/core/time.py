"""
Trade Prices: Clock Utilities

This module implements a tiny clock abstraction so that time-dependent
components (the provider cache in particular) can be driven by an
injected clock instead of reading wall-clock time directly.

Key responsibilities:
- Define the :class:`Clock` protocol (``now() -> datetime``)
- Provide a wall-clock implementation and a manually advanced one

External dependencies:
- datetime: Standard library date arithmetic only

Thread safety: :class:`SystemClock` is stateless. :class:`FixedClock` is
intended for single-threaded tests.
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current UTC time."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC datetime."""


class SystemClock:
    """Clock backed by the system wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock that only moves when told to.

    Args:
        start: Initial time. Naive datetimes are interpreted as UTC.
    """

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward by ``delta`` and return the new time."""

        if delta < timedelta(0):
            raise ValueError("delta must be non-negative")
        self._now = self._now + delta
        return self._now

    def set(self, value: datetime) -> None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        self._now = value


__all__ = ["Clock", "SystemClock", "FixedClock"]
