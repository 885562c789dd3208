"""Trade Prices – Display formatting.

Turns derived numbers into the strings shown on KPI cards and in the
price table. Nothing here feeds back into the derivation.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

from tradeprices.dashboard.types import RECORD_COLUMNS, KpiSummary, PriceRecord


DEFAULT_CURRENCY = "USD"

CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "CN¥",
    "INR": "₹",
    "NGN": "₦",
    "CAD": "CA$",
    "AUD": "A$",
}


def _as_number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def format_currency(value: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """Render ``value`` as a money string with two fraction digits.

    Non-numeric values render as zero. Currencies without a known symbol
    are prefixed with their code, e.g. ``"AED 12.00"``.
    """

    amount = _as_number(value)
    code = (currency or DEFAULT_CURRENCY).upper()
    sign = "-" if amount < 0 else ""
    body = f"{abs(amount):,.2f}"

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is not None:
        return f"{sign}{symbol}{body}"
    return f"{sign}{code} {body}"


def format_percent(value: Any) -> str:
    return f"{_as_number(value):.2f}%"


def format_range(low: Any, high: Any, currency: str = DEFAULT_CURRENCY) -> str:
    return f"{format_currency(low, currency)} – {format_currency(high, currency)}"


def kpi_cards(kpis: KpiSummary, currency: str = DEFAULT_CURRENCY) -> List[Dict[str, str]]:
    """Return the four KPI cards as ``{"title", "value"}`` pairs."""

    return [
        {"title": "Last Price", "value": format_currency(kpis.last, currency)},
        {"title": "MoM Change", "value": format_percent(kpis.mom_change)},
        {"title": "Avg Price", "value": format_currency(kpis.average, currency)},
        {"title": "Range", "value": format_range(kpis.min, kpis.max, currency)},
    ]


def table_rows(records: Sequence[PriceRecord]) -> List[Dict[str, str]]:
    """Return table rows keyed by :data:`RECORD_COLUMNS`.

    Each row's price is formatted in that row's own currency.
    """

    rows: List[Dict[str, str]] = []
    for record in records:
        row = {column: str(getattr(record, column)) for column in RECORD_COLUMNS}
        row["price"] = format_currency(record.price, record.currency)
        rows.append(row)
    return rows


__all__ = [
    "CURRENCY_SYMBOLS",
    "format_currency",
    "format_percent",
    "format_range",
    "kpi_cards",
    "table_rows",
]
