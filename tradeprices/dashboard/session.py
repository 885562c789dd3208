"""Trade Prices – Dashboard session state.

:class:`DashboardSession` owns the two inputs of the derivation (the
current row set and the filter selection) plus the fetch status, and
recomputes the :class:`DerivedView` whenever either input changes.

Rows are only ever replaced wholesale by :meth:`DashboardSession.refresh`
or :meth:`DashboardSession.set_records`. A failed refresh keeps the
previous rows and records the error, so the view stays usable while the
source is down.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from tradeprices.core.logging import get_logger
from tradeprices.core.time import Clock, SystemClock
from tradeprices.dashboard.deriver import PriceSeriesDeriver
from tradeprices.dashboard.types import DerivedView, FilterState, PriceRecord
from tradeprices.data_ingestion.record_source import RecordSourceError, SupportsFetch


logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchStatus:
    """Outcome of the most recent refresh.

    Attributes:
        loading: True while a refresh is in progress.
        error: Error message of the last failed refresh, else ``None``.
        last_success: Time of the last successful refresh.
    """

    loading: bool = False
    error: Optional[str] = None
    last_success: Optional[datetime] = None

    @property
    def available(self) -> bool:
        return self.error is None


class DashboardSession:
    """Holds rows and filters and serves the derived view.

    Args:
        source: Where :meth:`refresh` gets rows from.
        deriver: Derivation pipeline; a fresh :class:`PriceSeriesDeriver`
            by default.
        filters: Initial filter selection.
        clock: Time source for :attr:`FetchStatus.last_success`.
    """

    def __init__(
        self,
        source: SupportsFetch,
        deriver: PriceSeriesDeriver | None = None,
        filters: FilterState | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._source = source
        self._deriver = deriver or PriceSeriesDeriver()
        self._clock: Clock = clock or SystemClock()
        self._records: List[PriceRecord] = []
        self._filters = filters or FilterState()
        self._status = FetchStatus()
        self._view: DerivedView = self._deriver.derive(self._records, self._filters)

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def records(self) -> List[PriceRecord]:
        return list(self._records)

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def status(self) -> FetchStatus:
        return self._status

    @property
    def view(self) -> DerivedView:
        return self._view

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def refresh(self) -> FetchStatus:
        """Fetch a new row set from the source and recompute.

        Never raises for source failures; check :attr:`status` instead.
        """

        self._status = FetchStatus(loading=True, last_success=self._status.last_success)
        try:
            records = self._source.fetch()
        except RecordSourceError as exc:
            message = str(exc) or "Failed to load"
            logger.error("DashboardSession.refresh: data unavailable: %s", message)
            self._status = FetchStatus(error=message, last_success=self._status.last_success)
            return self._status

        self._status = FetchStatus(last_success=self._clock.now())
        self.set_records(records)
        return self._status

    def set_records(self, records: Sequence[PriceRecord]) -> DerivedView:
        """Replace the whole row set and recompute the view."""

        self._records = list(records)
        return self._recompute()

    def set_filters(self, filters: FilterState) -> DerivedView:
        self._filters = filters
        return self._recompute()

    def select(self, **changes: str) -> DerivedView:
        """Change individual selectors, e.g. ``select(region="Asia")``."""

        return self.set_filters(self._filters.with_changes(**changes))

    def _recompute(self) -> DerivedView:
        self._view = self._deriver.derive(self._records, self._filters)
        return self._view


__all__ = ["DashboardSession", "FetchStatus"]
