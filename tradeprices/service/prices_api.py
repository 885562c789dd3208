"""Trade Prices – Prices API.

``GET /api/prices`` returns the aggregated price rows (the dashboard's
record source). Rows come from the configured providers via
:class:`PriceAggregator`, which caches them for the configured TTL and
falls back to demo rows when no provider is set up.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from tradeprices.core.config import get_config
from tradeprices.core.logging import get_logger
from tradeprices.data_ingestion.aggregator import PriceAggregator, build_aggregator


router = APIRouter(prefix="/api", tags=["prices"])
logger = get_logger(__name__)

CACHE_CONTROL = "s-maxage=1800, stale-while-revalidate=300"

_aggregator: Optional[PriceAggregator] = None


def get_aggregator() -> PriceAggregator:
    """Return the process-wide aggregator, building it on first use."""

    global _aggregator
    if _aggregator is None:
        config = get_config()
        _aggregator = build_aggregator(config.providers, config.cache)
    return _aggregator


@router.get("/prices", response_model=None)
def list_prices(
    response: Response,
    aggregator: PriceAggregator = Depends(get_aggregator),
) -> List[Dict[str, Any]] | JSONResponse:
    """Return all current price rows."""

    try:
        rows = aggregator.get_rows()
    except Exception as exc:
        logger.exception("GET /api/prices failed")
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal error"})

    response.headers["Cache-Control"] = CACHE_CONTROL
    return [row.to_dict() for row in rows]
