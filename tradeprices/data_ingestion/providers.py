"""Trade Prices – External provider HTTP clients.

This module provides minimal clients for the trade-data providers the
aggregator can pull from:

- UN Comtrade (``getHS`` export statistics).
- USDA AMS (market commodity reports).
- A published CSV sheet (Google Sheets, Airtable export, ...).

Clients only fetch and decode; mapping onto :class:`PriceRecord` is done
by the matching normalizer in :mod:`tradeprices.data_ingestion.normalizers`.
A :class:`PriceProvider` pairs the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List
from urllib.parse import quote

import requests

from tradeprices.core.logging import get_logger
from tradeprices.core.types import ProviderPayload
from tradeprices.dashboard.types import PriceRecord
from tradeprices.data_ingestion.normalizers import RecordNormalizer


logger = get_logger(__name__)


class ProviderError(Exception):
    """Raised when a provider call fails."""


class _HttpProviderClient:
    """Shared request/decoding logic for provider clients.

    Parameters
    ----------
    label:
        Provider label used in log lines and error messages.
    timeout_seconds:
        Request timeout in seconds.
    session:
        Optional pre-built :class:`requests.Session`.
    """

    def __init__(
        self,
        label: str,
        timeout_seconds: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self._label = label
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    def _get(self, url: str, params: Dict[str, str] | None = None) -> requests.Response:
        logger.info("%s: GET %s", self._label, url)

        try:
            response = self._session.get(url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            logger.error("%s request failed: %s", self._label, exc)
            raise ProviderError(f"{self._label} request failed") from exc

        if response.status_code != 200:
            # Truncate body in logs to avoid huge messages / leaking secrets.
            body_preview = response.text[:500]
            logger.error(
                "%s request failed: status=%s body=%s",
                self._label,
                response.status_code,
                body_preview,
            )
            raise ProviderError(f"{self._label} {response.status_code}")

        return response

    def _get_json(self, url: str, params: Dict[str, str] | None = None) -> Any:
        response = self._get(url, params)
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Failed to decode %s JSON: %s", self._label, exc)
            raise ProviderError(f"Invalid JSON in {self._label} response") from exc

    def close(self) -> None:
        self._session.close()


class ComtradeClient(_HttpProviderClient):
    """Client for the UN Comtrade ``getHS`` endpoint."""

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://comtradeplus.un.org/api/v1",
        timeout_seconds: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        if not api_token:
            raise ProviderError("COMTRADE_TOKEN is not set; cannot initialise ComtradeClient")
        super().__init__("Comtrade", timeout_seconds, session)
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")

    def get_hs(self, reporter: str, partner: str, hs_code: str, period: str) -> ProviderPayload:
        """Fetch export statistics for one HS code and period."""

        params = {
            "reporter": reporter,
            "partner": partner,
            "period": period,
            "cmdCode": hs_code,
            "flow": "Export",
            "token": self._api_token,
        }
        return self._get_json(f"{self._base_url}/getHS", params)


class UsdaAmsClient(_HttpProviderClient):
    """Client for USDA AMS market commodity reports."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.ams.usda.gov/services/v1",
        timeout_seconds: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ProviderError("USDA_TOKEN is not set; cannot initialise UsdaAmsClient")
        super().__init__("USDA AMS", timeout_seconds, session)
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def get_commodity(self, commodity: str) -> ProviderPayload:
        url = f"{self._base_url}/markets/commodity/{quote(commodity, safe='')}"
        return self._get_json(url, {"api_key": self._api_key})


class CsvSheetClient(_HttpProviderClient):
    """Downloads a published CSV sheet as text."""

    def __init__(
        self,
        csv_url: str,
        timeout_seconds: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        if not csv_url:
            raise ProviderError("PRICES_CSV_URL is not set; cannot initialise CsvSheetClient")
        super().__init__("CSV", timeout_seconds, session)
        self._csv_url = csv_url

    def get_text(self) -> str:
        return self._get(self._csv_url).text


@dataclass
class PriceProvider:
    """A payload fetcher paired with the normalizer for its layout.

    Attributes:
        name: Provider label used in logs.
        fetch_payload: Zero-argument callable returning the decoded payload.
        normalizer: Normalizer mapping that payload onto price rows.
    """

    name: str
    fetch_payload: Callable[[], ProviderPayload]
    normalizer: RecordNormalizer

    def fetch_records(self) -> List[PriceRecord]:
        payload = self.fetch_payload()
        records = self.normalizer.normalize(payload)
        logger.info("PriceProvider.fetch_records: %s returned %d rows", self.name, len(records))
        return records


__all__ = [
    "ProviderError",
    "ComtradeClient",
    "UsdaAmsClient",
    "CsvSheetClient",
    "PriceProvider",
]
