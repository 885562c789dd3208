"""Unit tests for the price row and filter types."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from tradeprices.dashboard.types import ALL, FilterState, PriceRecord, parse_records


class TestPriceRecord:
    def test_parses_canonical_row_and_ignores_extra_fields(self) -> None:
        record = PriceRecord.model_validate(
            {
                "date": "2025-09-01",
                "product": "Sugar ICUMSA-45",
                "unit": "USD/MT",
                "price": "510",
                "currency": "USD",
                "incoterm": "CIF Dubai",
                "region": "Middle East",
                "country": "UAE",
                "source": "Demo",
                "dateObj": "ignored",
            }
        )

        assert record.price == 510.0
        assert record.as_date() == date(2025, 9, 1)
        assert not hasattr(record, "dateObj")

    def test_missing_or_bad_price_is_zero(self) -> None:
        assert PriceRecord.model_validate({"date": "2025-01-01"}).price == 0.0
        assert PriceRecord.model_validate({"date": "2025-01-01", "price": "abc"}).price == 0.0
        assert PriceRecord.model_validate({"date": "2025-01-01", "price": None}).price == 0.0

    def test_missing_labels_default_to_empty(self) -> None:
        record = PriceRecord.model_validate({"date": "2025-01-01", "region": None})
        assert record.region == ""
        assert record.product == ""

    def test_timestamp_is_truncated_to_date(self) -> None:
        record = PriceRecord(date="2025-03-04T10:00:00Z", price=1)
        assert record.date == "2025-03-04"

    @pytest.mark.parametrize("raw", ["20250901", " 2025-09-01 ", "2025-09-01 08:30:00"])
    def test_date_is_stored_in_extended_form(self, raw: str) -> None:
        assert PriceRecord(date=raw, price=1).date == "2025-09-01"

    @pytest.mark.parametrize("bad", ["", "not-a-date", "2025-13-01", "20251301"])
    def test_malformed_date_is_rejected(self, bad: str) -> None:
        with pytest.raises(ValidationError):
            PriceRecord(date=bad, price=1)

    def test_records_are_immutable(self) -> None:
        record = PriceRecord(date="2025-01-01", price=1)
        with pytest.raises(ValidationError):
            record.price = 2  # type: ignore[misc]

    def test_parse_records(self) -> None:
        records = parse_records([{"date": "2025-01-01", "price": 1}, {"date": "2025-01-02"}])
        assert [r.date for r in records] == ["2025-01-01", "2025-01-02"]


class TestFilterState:
    def test_defaults_are_unset(self) -> None:
        filters = FilterState()
        assert filters.active() == {}
        assert filters.currency == "USD"

    def test_active_and_matches(self) -> None:
        filters = FilterState(product="Sugar", incoterm="CIF Dubai")
        record = PriceRecord(date="2025-01-01", product="Sugar", incoterm="CIF Dubai")
        other = PriceRecord(date="2025-01-01", product="Sugar", incoterm="FOB")

        assert filters.active() == {"product": "Sugar", "incoterm": "CIF Dubai"}
        assert filters.matches(record)
        assert not filters.matches(other)

    def test_with_changes_returns_copy(self) -> None:
        filters = FilterState()
        changed = filters.with_changes(region="Asia")

        assert changed.region == "Asia"
        assert filters.region == ALL
