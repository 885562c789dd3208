"""Trade Prices – Dashboard package.

This package contains the price row and filter types, the pure
derivation pipeline behind the dashboard (filters, KPIs, chart series,
regional snapshot), display formatting, and the session object that
owns the dashboard's state.
"""
