"""Unit tests for the provider TTL cache and the injected clocks."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from tradeprices.core.time import FixedClock, SystemClock
from tradeprices.dashboard.types import PriceRecord
from tradeprices.data_ingestion.cache import TtlCache


START = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)


def _rows() -> list[PriceRecord]:
    return [PriceRecord(date="2025-09-01", product="Sugar", price=510)]


class TestClocks:
    def test_fixed_clock_advances_only_on_request(self) -> None:
        clock = FixedClock(datetime(2025, 9, 1))

        assert clock.now() == START.replace(hour=0)
        clock.advance(timedelta(minutes=5))
        assert clock.now() == START.replace(hour=0, minute=5)

    def test_fixed_clock_rejects_negative_delta(self) -> None:
        with pytest.raises(ValueError):
            FixedClock(START).advance(timedelta(seconds=-1))

    def test_fixed_clock_set_can_move_backwards(self) -> None:
        clock = FixedClock(START)

        clock.set(datetime(2025, 8, 1))

        assert clock.now() == datetime(2025, 8, 1, tzinfo=timezone.utc)

    def test_system_clock_is_timezone_aware(self) -> None:
        assert SystemClock().now().tzinfo is not None


class TestTtlCache:
    def test_empty_cache_is_stale(self) -> None:
        cache = TtlCache(ttl_seconds=60, clock=FixedClock(START))

        assert not cache.is_fresh()
        assert cache.get() is None
        assert cache.stored_at is None

    def test_rows_are_fresh_until_ttl_elapses(self) -> None:
        clock = FixedClock(START)
        cache = TtlCache(ttl_seconds=1800, clock=clock)

        cache.put(_rows())
        assert cache.stored_at == START

        clock.advance(timedelta(minutes=29, seconds=59))
        assert cache.is_fresh()
        assert cache.get() == _rows()

        clock.advance(timedelta(seconds=1))
        assert not cache.is_fresh()
        assert cache.get() is None

    def test_is_fresh_accepts_explicit_now(self) -> None:
        cache = TtlCache(ttl_seconds=60, clock=FixedClock(START))
        cache.put(_rows())

        assert cache.is_fresh(START + timedelta(seconds=59))
        assert not cache.is_fresh(START + timedelta(seconds=60))

    def test_empty_row_set_is_never_fresh(self) -> None:
        cache = TtlCache(ttl_seconds=60, clock=FixedClock(START))

        cache.put([])

        assert not cache.is_fresh()
        assert cache.stored_at == START

    def test_get_returns_a_copy(self) -> None:
        cache = TtlCache(ttl_seconds=60, clock=FixedClock(START))
        cache.put(_rows())

        first = cache.get()
        assert first is not None
        first.clear()

        assert cache.get() == _rows()

    def test_clear(self) -> None:
        cache = TtlCache(ttl_seconds=60, clock=FixedClock(START))
        cache.put(_rows())

        cache.clear()

        assert cache.get() is None

    def test_invalid_ttl(self) -> None:
        with pytest.raises(ValueError):
            TtlCache(ttl_seconds=0)
