"""Trade Prices – Price series derivation.

This module turns a flat list of :class:`PriceRecord` rows plus the
current :class:`FilterState` into everything the dashboard shows:

- The filtered rows, sorted by calendar date.
- Option lists for the filter controls (from the *unfiltered* rows).
- KPI statistics (last, month-over-month change, average, range).
- A date-indexed, product-wide table for the trend chart.
- A per-region average for the latest observed date.

All functions are pure: inputs are treated as immutable snapshots and
every call recomputes from scratch. No function raises on empty input.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Sequence, Tuple

import numpy as np

from tradeprices.core.logging import get_logger
from tradeprices.core.types import SeriesRow
from tradeprices.dashboard.types import (
    ALL,
    FILTER_FIELDS,
    DerivedView,
    FilterState,
    KpiSummary,
    OptionLists,
    PriceRecord,
    RegionalBar,
)


logger = get_logger(__name__)


# ============================================================================
# Helpers
# ============================================================================


def distinct_values(values: Iterable[str]) -> List[str]:
    """Return distinct non-empty values in first-occurrence order."""

    seen: Dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


# ============================================================================
# Pipeline stages
# ============================================================================


def filter_and_sort(
    records: Sequence[PriceRecord],
    filters: FilterState,
) -> List[PriceRecord]:
    """Apply every active selector, then sort ascending by calendar date.

    The sort is stable, so rows sharing a date keep their input order.
    """

    selected = [r for r in records if filters.matches(r)]
    return sorted(selected, key=lambda r: r.as_date())


def extract_options(records: Sequence[PriceRecord]) -> OptionLists:
    """Build the option list of every filter control.

    Options always come from the full row set so that choosing one filter
    never hides the choices of another.
    """

    return OptionLists(
        **{
            name: (ALL, *distinct_values(getattr(r, name) for r in records))
            for name in FILTER_FIELDS
        }
    )


def compute_kpis(filtered: Sequence[PriceRecord]) -> KpiSummary:
    """Summarise the filtered, date-sorted rows.

    ``mom_change`` compares the last two rows in sort order rather than
    calendar months, and is 0 whenever either price is 0.
    """

    if not filtered:
        return KpiSummary()

    last = filtered[-1].price
    previous = filtered[-2].price if len(filtered) >= 2 else last
    mom_change = (last - previous) / previous * 100 if last and previous else 0.0

    prices = np.array([r.price for r in filtered], dtype=float)

    return KpiSummary(
        last=last,
        previous=previous,
        mom_change=float(mom_change),
        average=float(prices.mean()),
        min=float(prices.min()),
        max=float(prices.max()),
    )


def pivot_series(filtered: Sequence[PriceRecord]) -> List[SeriesRow]:
    """Pivot rows into one ``{date, <product>: price}`` row per date.

    Cells exist only where a row exists; nothing is interpolated. When a
    (date, product) pair repeats, the later row overwrites the earlier.
    """

    by_date: Dict[str, SeriesRow] = {}
    for record in filtered:
        row = by_date.setdefault(record.date, {"date": record.date})
        row[record.product] = record.price

    return sorted(by_date.values(), key=lambda row: date.fromisoformat(row["date"]))


def series_products(filtered: Sequence[PriceRecord]) -> List[str]:
    """Return the products that get a line on the trend chart."""

    return distinct_values(r.product for r in filtered)


def regional_snapshot(filtered: Sequence[PriceRecord]) -> List[RegionalBar]:
    """Average price per region on the most recent date of ``filtered``."""

    if not filtered:
        return []

    latest_date = filtered[-1].date
    totals: Dict[str, Tuple[float, int]] = {}
    for record in filtered:
        if record.date != latest_date:
            continue
        total, count = totals.get(record.region, (0.0, 0))
        totals[record.region] = (total + record.price, count + 1)

    return [RegionalBar(region=region, price=total / count) for region, (total, count) in totals.items()]


# ============================================================================
# Deriver
# ============================================================================


class PriceSeriesDeriver:
    """Runs the full derivation pipeline for one (rows, filters) snapshot.

    The deriver keeps no state between calls; it exists so callers can
    pass a single object around and so the pipeline can be swapped in
    tests.
    """

    def derive(
        self,
        records: Sequence[PriceRecord],
        filters: FilterState | None = None,
    ) -> DerivedView:
        """Return the :class:`DerivedView` for ``records`` under ``filters``."""

        filters = filters or FilterState()
        filtered = filter_and_sort(records, filters)

        view = DerivedView(
            filters=filters,
            records=tuple(filtered),
            options=extract_options(records),
            kpis=compute_kpis(filtered),
            series=tuple(pivot_series(filtered)),
            series_products=tuple(series_products(filtered)),
            regional=tuple(regional_snapshot(filtered)),
            metadata={"total_rows": len(records), "filtered_rows": len(filtered)},
        )

        logger.debug(
            "PriceSeriesDeriver.derive: filters=%s rows=%d filtered=%d series=%d regions=%d",
            filters.active(),
            len(records),
            len(filtered),
            len(view.series),
            len(view.regional),
        )
        return view


__all__ = [
    "distinct_values",
    "filter_and_sort",
    "extract_options",
    "compute_kpis",
    "pivot_series",
    "series_products",
    "regional_snapshot",
    "PriceSeriesDeriver",
]
