"""Trade Prices – HTTP record source.

The dashboard reads its rows from a single REST endpoint that returns a
JSON array of price rows (see :mod:`tradeprices.service.prices_api`).
This module wraps that call in a small client so that the dashboard
session only ever sees "a list of records" or a
:class:`RecordSourceError`.

Polling cadence is the caller's concern; :meth:`RecordSource.fetch`
performs exactly one request.
"""

from __future__ import annotations

from typing import Any, List, Protocol

import requests
from pydantic import ValidationError

from tradeprices.core.config import RecordSourceConfig
from tradeprices.core.logging import get_logger
from tradeprices.dashboard.types import PriceRecord


logger = get_logger(__name__)


class RecordSourceError(Exception):
    """Raised when the price rows cannot be fetched."""


class SupportsFetch(Protocol):
    """Anything that can hand back the current complete row set."""

    def fetch(self) -> List[PriceRecord]:
        """Return all current rows or raise :class:`RecordSourceError`."""


class RecordSource:
    """Thin HTTP client for the prices endpoint.

    Parameters
    ----------
    url:
        Full URL of the prices endpoint, e.g.
        ``"http://localhost:8000/api/prices"``.
    timeout_seconds:
        Request timeout in seconds.
    session:
        Optional pre-built :class:`requests.Session`.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        if not url:
            raise RecordSourceError("Record source URL is empty")

        self._url = url
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: RecordSourceConfig) -> "RecordSource":
        return cls(url=config.url, timeout_seconds=config.timeout_seconds)

    @property
    def url(self) -> str:
        return self._url

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(self) -> List[PriceRecord]:
        """Fetch the complete current row set.

        A JSON body that is not a list is treated as "no rows". Individual
        rows with a missing or malformed date are skipped and logged.

        Raises
        ------
        RecordSourceError:
            On transport failure, non-200 status, or an undecodable body.
        """

        logger.info("RecordSource.fetch: GET %s", self._url)

        try:
            response = self._session.get(self._url, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            logger.error("Price request failed for %s: %s", self._url, exc)
            raise RecordSourceError(f"Request to {self._url!r} failed: {exc}") from exc

        if response.status_code != 200:
            body_preview = response.text[:500]
            logger.error(
                "Price request failed: status=%s url=%s body=%s",
                response.status_code,
                self._url,
                body_preview,
            )
            raise RecordSourceError(f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("Failed to decode prices JSON from %s: %s", self._url, exc)
            raise RecordSourceError("Invalid JSON in prices response") from exc

        records = parse_rows(payload)
        logger.info("RecordSource.fetch: fetched %d rows from %s", len(records), self._url)
        return records

    def close(self) -> None:
        """Close the underlying HTTP session."""

        self._session.close()


def parse_rows(payload: Any) -> List[PriceRecord]:
    """Parse a decoded JSON payload into records, skipping bad rows."""

    if not isinstance(payload, list):
        logger.warning("Prices payload is %s, not a list; treating as empty", type(payload).__name__)
        return []

    records: List[PriceRecord] = []
    for index, row in enumerate(payload):
        if not isinstance(row, dict):
            logger.warning("Skipping price row %d: not an object", index)
            continue
        try:
            records.append(PriceRecord.model_validate(row))
        except ValidationError as exc:
            logger.warning("Skipping price row %d: %s", index, exc.errors()[0].get("msg"))
    return records


__all__ = ["RecordSource", "RecordSourceError", "SupportsFetch", "parse_rows"]
