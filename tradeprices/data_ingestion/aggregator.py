"""Trade Prices – Provider aggregation behind a TTL cache.

:class:`PriceAggregator` answers "what are the current price rows?" for
the ``/api/prices`` route:

1. Serve from the :class:`TtlCache` while it is fresh.
2. Otherwise collect rows from every configured provider, in order.
3. If nothing was collected and the demo fallback is on, use the demo rows.
4. Store the result in the cache and return it.

Provider failures are not swallowed: the route reports them as a 500,
and the cache keeps its previous contents.
"""

from __future__ import annotations

from functools import partial
from typing import List, Sequence

from tradeprices.core.config import CacheConfig, ProviderConfig
from tradeprices.core.logging import get_logger
from tradeprices.core.time import Clock
from tradeprices.dashboard.types import PriceRecord
from tradeprices.data_ingestion.cache import TtlCache
from tradeprices.data_ingestion.demo import demo_records
from tradeprices.data_ingestion.normalizers import (
    ComtradeNormalizer,
    CsvNormalizer,
    UsdaAmsNormalizer,
)
from tradeprices.data_ingestion.providers import (
    ComtradeClient,
    CsvSheetClient,
    PriceProvider,
    UsdaAmsClient,
)


logger = get_logger(__name__)


class PriceAggregator:
    """Collects rows from providers, caching the combined result.

    Args:
        providers: Providers queried on a cache miss, in order.
        cache: Cache holding the last combined row set.
        demo_fallback: Serve demo rows when providers return nothing.
    """

    def __init__(
        self,
        providers: Sequence[PriceProvider],
        cache: TtlCache,
        demo_fallback: bool = True,
    ) -> None:
        self._providers = list(providers)
        self._cache = cache
        self._demo_fallback = demo_fallback

    @property
    def providers(self) -> List[PriceProvider]:
        return list(self._providers)

    @property
    def cache(self) -> TtlCache:
        return self._cache

    def get_rows(self) -> List[PriceRecord]:
        """Return the current rows, querying providers on a cache miss."""

        now = self._cache.now()
        cached = self._cache.get(now)
        if cached is not None:
            logger.debug("PriceAggregator.get_rows: cache hit (%d rows)", len(cached))
            return cached

        # The cache lock only guards the slot. Concurrent misses each query
        # every provider and the last put wins.
        results: List[PriceRecord] = []
        for provider in self._providers:
            results.extend(provider.fetch_records())

        if not results and self._demo_fallback:
            logger.info("PriceAggregator.get_rows: no provider rows; using demo data")
            results = demo_records()

        self._cache.put(results, now)
        logger.info(
            "PriceAggregator.get_rows: collected %d rows from %d providers",
            len(results),
            len(self._providers),
        )
        return list(results)


def build_default_providers(config: ProviderConfig) -> List[PriceProvider]:
    """Build a provider for every data source that has credentials set."""

    providers: List[PriceProvider] = []

    if config.comtrade_token:
        comtrade = ComtradeClient(config.comtrade_token, timeout_seconds=config.timeout_seconds)
        providers.append(
            PriceProvider(
                name="comtrade",
                fetch_payload=partial(
                    comtrade.get_hs,
                    config.comtrade_reporter,
                    config.comtrade_partner,
                    config.comtrade_hs_code,
                    config.comtrade_period,
                ),
                normalizer=ComtradeNormalizer(),
            )
        )

    if config.usda_token:
        usda = UsdaAmsClient(config.usda_token, timeout_seconds=config.timeout_seconds)
        providers.append(
            PriceProvider(
                name="usda_ams",
                fetch_payload=partial(usda.get_commodity, config.usda_commodity),
                normalizer=UsdaAmsNormalizer(config.usda_commodity),
            )
        )

    if config.csv_url:
        sheet = CsvSheetClient(config.csv_url, timeout_seconds=config.timeout_seconds)
        providers.append(
            PriceProvider(name="csv", fetch_payload=sheet.get_text, normalizer=CsvNormalizer())
        )

    logger.info(
        "build_default_providers: enabled=%s",
        [p.name for p in providers] or "none",
    )
    return providers


def build_aggregator(
    providers_config: ProviderConfig,
    cache_config: CacheConfig,
    clock: Clock | None = None,
) -> PriceAggregator:
    return PriceAggregator(
        providers=build_default_providers(providers_config),
        cache=TtlCache(ttl_seconds=cache_config.ttl_seconds, clock=clock),
        demo_fallback=cache_config.demo_fallback_enabled,
    )


__all__ = ["PriceAggregator", "build_default_providers", "build_aggregator"]
