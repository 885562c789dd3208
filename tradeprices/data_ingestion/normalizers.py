"""Trade Prices – Provider payload normalizers.

Each external trade-data provider returns its own payload layout. A
:class:`RecordNormalizer` maps one provider's decoded payload onto the
canonical :class:`PriceRecord` shape. Adding a provider means adding a
subclass; existing normalizers stay untouched.

Concrete implementations:

* :class:`ComtradeNormalizer` – UN Comtrade ``getHS`` responses.
* :class:`UsdaAmsNormalizer` – USDA AMS market commodity responses.
* :class:`CsvNormalizer` – published spreadsheets (header + rows) whose
  columns already follow the canonical names.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

import pandas as pd
from pydantic import ValidationError

from tradeprices.core.logging import get_logger
from tradeprices.core.types import ProviderPayload
from tradeprices.dashboard.types import PriceRecord


logger = get_logger(__name__)


def _number_or_zero(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def comtrade_period_to_date(period: Any) -> str:
    """Turn a Comtrade period (``YYYYMM``, ``YYYY-MM`` or ``YYYY``) into a date.

    The first day of the period is used.
    """

    text = str(period).strip()
    if len(text) == 6 and text.isdigit():
        return f"{text[:4]}-{text[4:]}-01"
    if len(text) == 4 and text.isdigit():
        return f"{text}-01-01"
    return f"{text}-01"


class RecordNormalizer(ABC):
    """Maps one provider's payload onto :class:`PriceRecord` rows."""

    #: Value written into :attr:`PriceRecord.source`.
    source_label: str = ""

    @abstractmethod
    def to_rows(self, payload: ProviderPayload) -> Iterable[Dict[str, Any]]:
        """Yield canonical row mappings for ``payload``."""

    def normalize(self, payload: ProviderPayload) -> List[PriceRecord]:
        """Return validated records; rows without a usable date are dropped."""

        records: List[PriceRecord] = []
        for index, row in enumerate(self.to_rows(payload)):
            try:
                records.append(PriceRecord.model_validate(row))
            except ValidationError as exc:
                logger.warning(
                    "%s: dropping row %d (%s)",
                    type(self).__name__,
                    index,
                    exc.errors()[0].get("msg"),
                )
        logger.info("%s.normalize: %d rows", type(self).__name__, len(records))
        return records


class ComtradeNormalizer(RecordNormalizer):
    """UN Comtrade ``dataset`` rows.

    ``primaryValue`` is a trade value, not a unit price; dividing by
    quantity is left to whoever configures the HS codes.
    """

    source_label = "UN Comtrade"

    def to_rows(self, payload: ProviderPayload) -> Iterable[Dict[str, Any]]:
        dataset = payload.get("dataset") if isinstance(payload, dict) else None
        for item in dataset or []:
            partner = item.get("ptTitle") or "Global"
            yield {
                "date": comtrade_period_to_date(item.get("period")),
                "product": item.get("cmdDescE") or "Commodity",
                "unit": "USD/MT",
                "price": _number_or_zero(item.get("primaryValue")),
                "currency": "USD",
                "incoterm": "FOB",
                "region": partner,
                "country": partner,
                "source": self.source_label,
            }


class UsdaAmsNormalizer(RecordNormalizer):
    """USDA AMS ``results`` rows for one commodity."""

    source_label = "USDA AMS"

    def __init__(self, commodity: str) -> None:
        self.commodity = commodity

    def to_rows(self, payload: ProviderPayload) -> Iterable[Dict[str, Any]]:
        results = payload.get("results") if isinstance(payload, dict) else None
        for item in results or []:
            report_date = item.get("report_date")
            yield {
                "date": str(report_date)[:10] if report_date else "2025-01-01",
                "product": item.get("commodity") or self.commodity,
                "unit": item.get("unit") or "USD/MT",
                "price": _number_or_zero(item.get("price")),
                "currency": "USD",
                "incoterm": "CIF/FOB",
                "region": item.get("region") or "US",
                "country": item.get("country") or "US",
                "source": self.source_label,
            }


class CsvNormalizer(RecordNormalizer):
    """Comma-separated text with a header row of canonical column names.

    Fields are mapped to header names by position. Lines with more fields
    than the header (e.g. a trailing comma) are cut to the header width;
    shorter lines are padded with empty strings. Headers and cells are
    trimmed and ``price`` is coerced to a number. An empty body yields no
    rows.
    """

    source_label = "CSV"

    def to_rows(self, payload: ProviderPayload) -> Iterable[Dict[str, Any]]:
        text = str(payload or "").strip()
        if not text:
            return []

        width = len(pd.read_csv(io.StringIO(text), nrows=0, engine="python").columns)
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            index_col=False,
            engine="python",
            on_bad_lines=lambda fields: fields[:width],
        )
        frame.columns = [str(c).strip() for c in frame.columns]
        for column in frame.columns:
            frame[column] = frame[column].fillna("").astype(str).str.strip()
        if "price" in frame.columns:
            frame["price"] = pd.to_numeric(frame["price"], errors="coerce").fillna(0.0)

        return frame.to_dict(orient="records")


__all__ = [
    "RecordNormalizer",
    "ComtradeNormalizer",
    "UsdaAmsNormalizer",
    "CsvNormalizer",
    "comtrade_period_to_date",
]
