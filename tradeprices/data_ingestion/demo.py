"""Trade Prices – demo rows served when no provider is configured."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from tradeprices.dashboard.types import PriceRecord


DEMO_SOURCE = "Demo"

# (date, product, price, incoterm, region, country)
_DEMO_ROWS: Tuple[Tuple[str, str, float, str, str, str], ...] = (
    ("2025-07-01", "Cassia Tora (Split)", 220, "FOB Lagos", "Asia", "India"),
    ("2025-08-01", "Cassia Tora (Split)", 255, "FOB Lagos", "Asia", "India"),
    ("2025-09-01", "Cassia Tora (Split)", 275, "FOB Lagos", "Asia", "India"),
    ("2025-09-01", "Sugar ICUMSA-45", 510, "CIF Dubai", "Middle East", "UAE"),
    ("2025-09-01", "Yellow Corn Powder", 260, "FOB Nigeria", "Africa", "Nigeria"),
    ("2025-09-01", "Beef 10ppm", 3960, "CIF KSA", "Middle East", "Saudi Arabia"),
)


def demo_rows() -> List[Dict[str, Any]]:
    """Return the demo rows as plain mappings."""

    return [
        {
            "date": day,
            "product": product,
            "unit": "USD/MT",
            "price": price,
            "currency": "USD",
            "incoterm": incoterm,
            "region": region,
            "country": country,
            "source": DEMO_SOURCE,
        }
        for day, product, price, incoterm, region, country in _DEMO_ROWS
    ]


def demo_records() -> List[PriceRecord]:
    return [PriceRecord.model_validate(row) for row in demo_rows()]
