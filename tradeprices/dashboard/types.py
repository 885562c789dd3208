"""Trade Prices – Dashboard Types.

This module defines the value objects flowing through the dashboard
derivation pipeline.

Key responsibilities:
- Define the canonical :class:`PriceRecord` row shape shared by the
  record source, the provider normalizers, and the deriver.
- Define the filter selection (:class:`FilterState`) and the derived
  outputs (:class:`KpiSummary`, :class:`RegionalBar`,
  :class:`OptionLists`, :class:`DerivedView`).

External dependencies:
- pydantic: Parsing and validation of incoming price rows.

Thread safety: All types are immutable value objects; this module is
stateless.
"""

from __future__ import annotations

# ============================================================================
# Imports
# ============================================================================

import datetime as dt
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from tradeprices.core.types import OptionMap, SeriesRow, ViewDict

# ============================================================================
# Constants
# ============================================================================

# Sentinel meaning "no filter" for a selector and first entry of every
# option list.
ALL = "All"

# Fields that can be filtered on, in the order the controls are shown.
FILTER_FIELDS: Tuple[str, ...] = ("product", "region", "country", "incoterm")

# Table columns in display order.
RECORD_COLUMNS: Tuple[str, ...] = (
    "date",
    "product",
    "unit",
    "price",
    "currency",
    "incoterm",
    "region",
    "country",
    "source",
)

# ============================================================================
# Price rows
# ============================================================================


class PriceRecord(BaseModel):
    """A single observed price, as returned by ``/api/prices``.

    Attributes:
        date: ISO ``YYYY-MM-DD`` date string (day granularity). Longer ISO
            timestamps are truncated to the date part and ``YYYYMMDD`` is
            rewritten as ``YYYY-MM-DD``, so equal days compare equal.
        product: Product label, e.g. ``"Sugar ICUMSA-45"``.
        unit: Pricing unit, e.g. ``"USD/MT"``.
        price: Non-negative price. Missing or non-numeric values parse as 0.
        currency: ISO currency code, e.g. ``"USD"``.
        incoterm: Delivery term, e.g. ``"FOB Lagos"``.
        region: Region label, e.g. ``"Asia"``.
        country: Country label, e.g. ``"India"``.
        source: Label of the provider the row came from.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    date: str
    product: str = ""
    unit: str = ""
    price: float = 0.0
    currency: str = ""
    incoterm: str = ""
    region: str = ""
    country: str = ""
    source: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def _normalise_date(cls, value: Any) -> str:
        text = str(value).strip()
        # ISO basic format (YYYYMMDD) is rewritten to the extended form.
        if len(text) == 8 and text.isdigit():
            text = f"{text[:4]}-{text[4:6]}-{text[6:]}"
        # Raises ValueError (surfaced as a ValidationError) on malformed input.
        return dt.date.fromisoformat(text[:10]).isoformat()

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> float:
        try:
            price = float(value)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(price):
            return 0.0
        return price

    @field_validator(
        "product", "unit", "currency", "incoterm", "region", "country", "source",
        mode="before",
    )
    @classmethod
    def _coerce_label(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def as_date(self) -> dt.date:
        """Return :attr:`date` as a calendar date."""

        return dt.date.fromisoformat(self.date)

    def to_dict(self) -> Dict[str, Any]:
        """Return the row in wire order (see :data:`RECORD_COLUMNS`)."""

        return {column: getattr(self, column) for column in RECORD_COLUMNS}


# ============================================================================
# Filters
# ============================================================================


@dataclass(frozen=True)
class FilterState:
    """Current selection of the dashboard controls.

    Each selector is either :data:`ALL` (no constraint) or an exact,
    case-sensitive value. ``currency`` only drives display formatting and
    never filters rows.
    """

    product: str = ALL
    region: str = ALL
    country: str = ALL
    incoterm: str = ALL
    currency: str = "USD"

    def active(self) -> Dict[str, str]:
        """Return ``{field: value}`` for every selector that is set."""

        return {
            name: getattr(self, name)
            for name in FILTER_FIELDS
            if getattr(self, name) != ALL
        }

    def matches(self, record: PriceRecord) -> bool:
        return all(getattr(record, name) == value for name, value in self.active().items())

    def with_changes(self, **changes: str) -> "FilterState":
        """Return a copy with the given selectors replaced."""

        return replace(self, **changes)


# ============================================================================
# Derived outputs
# ============================================================================


@dataclass(frozen=True)
class KpiSummary:
    """Summary statistics over the filtered rows.

    Attributes:
        last: Price of the most recent row.
        previous: Price of the row before it (``last`` when there is none).
        mom_change: Percentage change from ``previous`` to ``last``.
        average: Mean price.
        min: Lowest price.
        max: Highest price.
    """

    last: float = 0.0
    previous: float = 0.0
    mom_change: float = 0.0
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "last": self.last,
            "mom_change": self.mom_change,
            "average": self.average,
            "min": self.min,
            "max": self.max,
        }


@dataclass(frozen=True)
class RegionalBar:
    """Average price of one region on the latest observed date."""

    region: str
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return {"region": self.region, "price": self.price}


@dataclass(frozen=True)
class OptionLists:
    """Choices for each filter control, each starting with :data:`ALL`."""

    product: Tuple[str, ...] = (ALL,)
    region: Tuple[str, ...] = (ALL,)
    country: Tuple[str, ...] = (ALL,)
    incoterm: Tuple[str, ...] = (ALL,)

    def for_field(self, name: str) -> Tuple[str, ...]:
        if name not in FILTER_FIELDS:
            raise KeyError(name)
        return getattr(self, name)

    def to_dict(self) -> OptionMap:
        return {name: list(getattr(self, name)) for name in FILTER_FIELDS}


@dataclass(frozen=True)
class DerivedView:
    """Everything the presentation layer needs for one (rows, filters) pair."""

    filters: FilterState
    records: Tuple[PriceRecord, ...]
    options: OptionLists
    kpis: KpiSummary
    series: Tuple[SeriesRow, ...]
    series_products: Tuple[str, ...]
    regional: Tuple[RegionalBar, ...]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> ViewDict:
        """Return a JSON-ready representation."""

        return {
            "filters": {
                "product": self.filters.product,
                "region": self.filters.region,
                "country": self.filters.country,
                "incoterm": self.filters.incoterm,
                "currency": self.filters.currency,
            },
            "records": [r.to_dict() for r in self.records],
            "options": self.options.to_dict(),
            "kpis": self.kpis.to_dict(),
            "series": [dict(row) for row in self.series],
            "series_products": list(self.series_products),
            "regional": [bar.to_dict() for bar in self.regional],
        }


def parse_records(rows: List[Dict[str, Any]]) -> List[PriceRecord]:
    """Parse a list of raw mappings into :class:`PriceRecord` objects.

    Raises:
        pydantic.ValidationError: If any row has a missing or malformed date.
    """

    return [PriceRecord.model_validate(row) for row in rows]


__all__ = [
    "ALL",
    "FILTER_FIELDS",
    "RECORD_COLUMNS",
    "PriceRecord",
    "FilterState",
    "KpiSummary",
    "RegionalBar",
    "OptionLists",
    "DerivedView",
    "parse_records",
]
