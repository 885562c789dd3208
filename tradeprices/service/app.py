"""Trade Prices – Backend Application.

FastAPI application serving the price rows consumed by the dashboard and
the derived dashboard view.

Run with:
    uvicorn tradeprices.service.app:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tradeprices.core.logging import get_logger
from tradeprices.service.dashboard_api import router as dashboard_router
from tradeprices.service.prices_api import router as prices_router


logger = get_logger(__name__)


# ============================================================================
# Application Setup
# ============================================================================


app = FastAPI(
    title="Global Trade Price Dashboard",
    description="Aggregated import/export prices and derived dashboard views",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)


# ============================================================================
# CORS Configuration
# ============================================================================

# The dashboard front end is served from a different origin in development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


# ============================================================================
# Router Registration
# ============================================================================

# Raw aggregated rows (the dashboard's record source)
app.include_router(prices_router)

# Derived dashboard view
app.include_router(dashboard_router)


# ============================================================================
# Health Check
# ============================================================================


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic service info."""
    return {
        "service": "Global Trade Price Dashboard",
        "version": "0.1.0",
        "status": "operational",
        "docs": "/api/docs",
    }


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


# ============================================================================
# Startup/Shutdown Events
# ============================================================================


@app.on_event("startup")
async def startup_event() -> None:
    logger.info("Trade price backend starting up; API docs at /api/docs")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    logger.info("Trade price backend shutting down")
