"""Trade Prices – In-memory TTL cache for aggregated provider rows.

A single-slot cache: it holds the most recent aggregated row set and the
time it was stored. Time comes from an injected :class:`Clock` so tests
can move it forward deterministically.

The slot is guarded by a lock because the web service may call into it
from several worker threads.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from threading import Lock
from typing import List, Optional, Sequence

from tradeprices.core.logging import get_logger
from tradeprices.core.time import Clock, SystemClock
from tradeprices.dashboard.types import PriceRecord


logger = get_logger(__name__)


class TtlCache:
    """Holds one row set that goes stale ``ttl`` after it was stored.

    Args:
        ttl_seconds: Freshness window in seconds. Must be positive.
        clock: Time source; defaults to the system clock.
    """

    def __init__(self, ttl_seconds: float = 1800, clock: Clock | None = None) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")

        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock: Clock = clock or SystemClock()
        self._rows: List[PriceRecord] = []
        self._stored_at: Optional[datetime] = None
        self._lock = Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def stored_at(self) -> Optional[datetime]:
        with self._lock:
            return self._stored_at

    def now(self) -> datetime:
        return self._clock.now()

    def is_fresh(self, now: datetime | None = None) -> bool:
        """Return True if rows are present and younger than the TTL.

        An empty row set is never fresh, so an empty provider result is
        retried on the next request.
        """

        now = now or self._clock.now()
        with self._lock:
            if not self._rows or self._stored_at is None:
                return False
            return now - self._stored_at < self._ttl

    def get(self, now: datetime | None = None) -> Optional[List[PriceRecord]]:
        """Return a copy of the cached rows when fresh, else ``None``."""

        if not self.is_fresh(now):
            return None
        with self._lock:
            return list(self._rows)

    def put(self, rows: Sequence[PriceRecord], now: datetime | None = None) -> None:
        """Replace the cached rows and stamp them with ``now``."""

        stamp = now or self._clock.now()
        with self._lock:
            self._rows = list(rows)
            self._stored_at = stamp
        logger.debug("TtlCache.put: stored %d rows at %s", len(rows), stamp.isoformat())

    def clear(self) -> None:
        with self._lock:
            self._rows = []
            self._stored_at = None


__all__ = ["TtlCache"]
