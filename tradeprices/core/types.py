"""
Trade Prices: Core Type Definitions

Common type aliases shared across the package. They live here to keep
signatures readable and to avoid circular imports between the dashboard
and ingestion layers.

External dependencies:
- typing: Standard library typing primitives only

Thread safety: Thread-safe (no mutable global state)
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

from typing import Any, Dict, List, TypeAlias

# ============================================================================
# Type Aliases
# ============================================================================


# Provider payload decoded from JSON before normalisation
ProviderPayload: TypeAlias = Any

# One row of the pivoted trend chart: {"date": ..., "<product>": price, ...}
SeriesRow: TypeAlias = Dict[str, Any]

# JSON-ready representation of a derived view
ViewDict: TypeAlias = Dict[str, Any]

# Option lists keyed by filter field
OptionMap: TypeAlias = Dict[str, List[str]]
