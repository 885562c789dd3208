"""Trade Prices – Dashboard API.

Serves the derived dashboard view (filtered rows, option lists, KPIs,
trend series, regional snapshot) for the current aggregated rows and a
filter selection passed as query parameters. Display strings for the KPI
cards and table are included so thin clients need no formatting logic.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tradeprices.core.logging import get_logger
from tradeprices.dashboard.deriver import PriceSeriesDeriver
from tradeprices.dashboard.formatting import kpi_cards, table_rows
from tradeprices.dashboard.types import ALL, FilterState
from tradeprices.data_ingestion.aggregator import PriceAggregator
from tradeprices.service.prices_api import get_aggregator


router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])
logger = get_logger(__name__)

_deriver = PriceSeriesDeriver()


# ============================================================================
# Response Models
# ============================================================================


class DashboardResponse(BaseModel):
    """Derived dashboard view plus display strings."""

    filters: Dict[str, str]
    records: List[Dict[str, Any]] = Field(default_factory=list)
    options: Dict[str, List[str]] = Field(default_factory=dict)
    kpis: Dict[str, float] = Field(default_factory=dict)
    series: List[Dict[str, Any]] = Field(default_factory=list)
    series_products: List[str] = Field(default_factory=list)
    regional: List[Dict[str, Any]] = Field(default_factory=list)
    kpi_cards: List[Dict[str, str]] = Field(default_factory=list)
    table: List[Dict[str, str]] = Field(default_factory=list)


class OptionsResponse(BaseModel):
    """Option lists for every filter control."""

    product: List[str]
    region: List[str]
    country: List[str]
    incoterm: List[str]


# ============================================================================
# Endpoints
# ============================================================================


@router.get("", response_model=None)
def get_dashboard(
    product: str = Query(ALL),
    region: str = Query(ALL),
    country: str = Query(ALL),
    incoterm: str = Query(ALL),
    currency: str = Query("USD"),
    aggregator: PriceAggregator = Depends(get_aggregator),
) -> DashboardResponse | JSONResponse:
    """Return the derived view for the given filter selection."""

    filters = FilterState(
        product=product,
        region=region,
        country=country,
        incoterm=incoterm,
        currency=currency,
    )

    try:
        rows = aggregator.get_rows()
    except Exception as exc:
        logger.exception("GET /api/dashboard: data unavailable")
        return JSONResponse(status_code=503, content={"error": str(exc) or "Failed to load"})

    view = _deriver.derive(rows, filters)
    payload = view.to_dict()

    return DashboardResponse(
        **payload,
        kpi_cards=kpi_cards(view.kpis, filters.currency),
        table=table_rows(view.records),
    )


@router.get("/options", response_model=None)
def get_options(
    aggregator: PriceAggregator = Depends(get_aggregator),
) -> OptionsResponse | JSONResponse:
    """Return option lists computed over all rows."""

    try:
        rows = aggregator.get_rows()
    except Exception as exc:
        logger.exception("GET /api/dashboard/options: data unavailable")
        return JSONResponse(status_code=503, content={"error": str(exc) or "Failed to load"})

    return OptionsResponse(**_deriver.derive(rows).options.to_dict())
