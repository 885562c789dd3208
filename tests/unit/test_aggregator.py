"""Unit tests for PriceAggregator and provider wiring."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List
from unittest.mock import MagicMock

import pytest

from tradeprices.core.config import CacheConfig, ProviderConfig
from tradeprices.core.time import FixedClock
from tradeprices.dashboard.types import PriceRecord
from tradeprices.data_ingestion.aggregator import (
    PriceAggregator,
    build_aggregator,
    build_default_providers,
)
from tradeprices.data_ingestion.cache import TtlCache
from tradeprices.data_ingestion.demo import DEMO_SOURCE, demo_records
from tradeprices.data_ingestion.normalizers import (
    ComtradeNormalizer,
    CsvNormalizer,
    UsdaAmsNormalizer,
)
from tradeprices.data_ingestion.providers import ProviderError


START = datetime(2025, 9, 1, tzinfo=timezone.utc)


def _provider(records: List[PriceRecord]) -> MagicMock:
    provider = MagicMock()
    provider.name = "stub"
    provider.fetch_records.return_value = records
    return provider


def _record(price: float, source: str = "Stub") -> PriceRecord:
    return PriceRecord(date="2025-09-01", product="Sugar", price=price, source=source)


class TestPriceAggregator:
    def test_collects_from_all_providers_in_order(self) -> None:
        first = _provider([_record(1)])
        second = _provider([_record(2), _record(3)])
        aggregator = PriceAggregator([first, second], TtlCache(60, FixedClock(START)))

        rows = aggregator.get_rows()

        assert [r.price for r in rows] == [1, 2, 3]

    def test_serves_from_cache_while_fresh(self) -> None:
        clock = FixedClock(START)
        provider = _provider([_record(1)])
        aggregator = PriceAggregator([provider], TtlCache(1800, clock))

        aggregator.get_rows()
        clock.advance(timedelta(minutes=10))
        rows = aggregator.get_rows()

        assert [r.price for r in rows] == [1]
        assert provider.fetch_records.call_count == 1

    def test_refetches_after_ttl(self) -> None:
        clock = FixedClock(START)
        provider = _provider([_record(1)])
        aggregator = PriceAggregator([provider], TtlCache(1800, clock))

        aggregator.get_rows()
        provider.fetch_records.return_value = [_record(9)]
        clock.advance(timedelta(minutes=30))
        rows = aggregator.get_rows()

        assert [r.price for r in rows] == [9]
        assert provider.fetch_records.call_count == 2
        assert aggregator.cache.stored_at == START + timedelta(minutes=30)

    def test_demo_fallback_when_no_rows(self) -> None:
        aggregator = PriceAggregator([], TtlCache(60, FixedClock(START)))

        rows = aggregator.get_rows()

        assert rows == demo_records()
        assert {r.source for r in rows} == {DEMO_SOURCE}

    def test_no_fallback_returns_empty_and_retries(self) -> None:
        provider = _provider([])
        aggregator = PriceAggregator([provider], TtlCache(60, FixedClock(START)), demo_fallback=False)

        assert aggregator.get_rows() == []
        assert aggregator.get_rows() == []
        # Empty results are never cached.
        assert provider.fetch_records.call_count == 2

    def test_provider_failure_propagates_and_keeps_cache(self) -> None:
        clock = FixedClock(START)
        provider = _provider([_record(1)])
        aggregator = PriceAggregator([provider], TtlCache(60, clock))
        aggregator.get_rows()

        clock.advance(timedelta(minutes=5))
        provider.fetch_records.side_effect = ProviderError("Comtrade 500")

        with pytest.raises(ProviderError):
            aggregator.get_rows()
        assert aggregator.cache.stored_at == START


class TestBuildDefaultProviders:
    def test_nothing_configured(self) -> None:
        assert build_default_providers(ProviderConfig()) == []

    def test_each_configured_source_gets_a_provider(self) -> None:
        config = ProviderConfig(
            comtrade_token="c",
            usda_token="u",
            usda_commodity="corn",
            csv_url="https://sheet.test/p.csv",
        )

        providers = build_default_providers(config)

        assert [p.name for p in providers] == ["comtrade", "usda_ams", "csv"]
        assert isinstance(providers[0].normalizer, ComtradeNormalizer)
        assert isinstance(providers[1].normalizer, UsdaAmsNormalizer)
        assert providers[1].normalizer.commodity == "corn"
        assert isinstance(providers[2].normalizer, CsvNormalizer)

    def test_build_aggregator_uses_cache_config(self) -> None:
        aggregator = build_aggregator(
            ProviderConfig(),
            CacheConfig(ttl_seconds=120, demo_fallback_enabled=False),
            clock=FixedClock(START),
        )

        assert aggregator.providers == []
        assert aggregator.cache.ttl == timedelta(seconds=120)
        assert aggregator.get_rows() == []
