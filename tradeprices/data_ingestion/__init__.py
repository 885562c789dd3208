"""Trade Prices – External data ingestion package.

This package contains modules responsible for fetching price rows:
the HTTP record source the dashboard polls, and the provider clients,
normalizers and TTL cache behind the ``/api/prices`` route, all
producing the canonical :class:`~tradeprices.dashboard.types.PriceRecord`
shape.
"""
