"""Trade Prices – top-level package exports.

This module re-exports the dashboard derivation types for convenience.
"""

# Dashboard derivation
from tradeprices.dashboard.types import ALL, DerivedView, FilterState, KpiSummary, PriceRecord, RegionalBar
from tradeprices.dashboard.deriver import PriceSeriesDeriver
