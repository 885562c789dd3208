"""Unit tests for dashboard display formatting."""

from __future__ import annotations

from tradeprices.dashboard.formatting import (
    format_currency,
    format_percent,
    format_range,
    kpi_cards,
    table_rows,
)
from tradeprices.dashboard.types import RECORD_COLUMNS, KpiSummary, PriceRecord


class TestFormatCurrency:
    def test_known_symbol_with_grouping(self) -> None:
        assert format_currency(1234.5, "USD") == "$1,234.50"
        assert format_currency(510, "EUR") == "€510.00"

    def test_rounds_to_two_digits(self) -> None:
        assert format_currency(3960.456, "USD") == "$3,960.46"

    def test_unknown_code_is_prefixed(self) -> None:
        assert format_currency(12, "AED") == "AED 12.00"

    def test_lowercase_and_empty_codes(self) -> None:
        assert format_currency(1, "usd") == "$1.00"
        assert format_currency(1, "") == "$1.00"

    def test_non_numeric_renders_as_zero(self) -> None:
        assert format_currency(None) == "$0.00"
        assert format_currency("n/a") == "$0.00"
        assert format_currency(float("nan")) == "$0.00"

    def test_negative_values(self) -> None:
        assert format_currency(-5, "GBP") == "-£5.00"


class TestKpiCards:
    def test_percent_and_range(self) -> None:
        assert format_percent(7.843137) == "7.84%"
        assert format_range(220, 275) == "$220.00 – $275.00"

    def test_cards_follow_dashboard_order(self) -> None:
        kpis = KpiSummary(last=275, previous=255, mom_change=7.843, average=250, min=220, max=275)

        cards = kpi_cards(kpis, "USD")

        assert cards == [
            {"title": "Last Price", "value": "$275.00"},
            {"title": "MoM Change", "value": "7.84%"},
            {"title": "Avg Price", "value": "$250.00"},
            {"title": "Range", "value": "$220.00 – $275.00"},
        ]


class TestTableRows:
    def test_rows_use_their_own_currency(self) -> None:
        records = [
            PriceRecord(date="2025-09-01", product="Sugar", price=510, currency="EUR", region="EU"),
        ]

        rows = table_rows(records)

        assert list(rows[0]) == list(RECORD_COLUMNS)
        assert rows[0]["price"] == "€510.00"
        assert rows[0]["currency"] == "EUR"
        assert rows[0]["date"] == "2025-09-01"
