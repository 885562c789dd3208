"""Trade Prices – Dashboard inspection CLI.

This script fetches the price rows from the configured prices endpoint,
applies the given filters and prints the derived dashboard: KPI cards,
latest-by-region averages, the trend series, and the filtered table as
CSV. It is intended for checking what the dashboard would show without
a browser.

Example
-------

    python -m tradeprices.scripts.show_dashboard \
        --url http://localhost:8000/api/prices \
        --region "Middle East" --currency USD

    # Re-fetch every PRICES_POLL_INTERVAL_SECONDS until interrupted
    python -m tradeprices.scripts.show_dashboard --watch
"""

from __future__ import annotations

import argparse
import time
from typing import Optional, Sequence

from tradeprices.core.config import get_config
from tradeprices.core.logging import get_logger
from tradeprices.dashboard.formatting import format_currency, kpi_cards, table_rows
from tradeprices.dashboard.session import DashboardSession
from tradeprices.dashboard.types import ALL, RECORD_COLUMNS, FilterState
from tradeprices.data_ingestion.record_source import RecordSource


logger = get_logger(__name__)


def _print_session(session: DashboardSession) -> None:
    status = session.status
    if status.error is not None:
        print(f"Error: {status.error}")

    view = session.view
    currency = view.filters.currency

    for card in kpi_cards(view.kpis, currency):
        print(f"{card['title']}: {card['value']}")

    print()
    print("Latest by region")
    if not view.regional:
        print("  (no rows)")
    for bar in view.regional:
        print(f"  {bar.region}: {format_currency(bar.price, currency)}")

    print()
    print("Price trend (by product)")
    print("date," + ",".join(view.series_products))
    for row in view.series:
        cells = [str(row.get(product, "")) for product in view.series_products]
        print(f"{row['date']}," + ",".join(cells))

    print()
    print(f"Price records ({len(view.records)} rows)")
    print(",".join(RECORD_COLUMNS))
    for row in table_rows(view.records):
        print(",".join(row[column] for column in RECORD_COLUMNS))


def main(argv: Optional[Sequence[str]] = None) -> None:
    config = get_config()

    parser = argparse.ArgumentParser(description="Show the derived trade price dashboard")

    parser.add_argument(
        "--url",
        type=str,
        default=config.record_source.url,
        help=f"Prices endpoint (default: {config.record_source.url})",
    )
    for name in ("product", "region", "country", "incoterm"):
        parser.add_argument(
            f"--{name}",
            type=str,
            default=ALL,
            help=f"Exact {name} to filter on (default: {ALL})",
        )
    parser.add_argument(
        "--currency",
        type=str,
        default="USD",
        help="Currency used to format KPI values (default: USD)",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Keep polling every PRICES_POLL_INTERVAL_SECONDS until interrupted",
    )

    args = parser.parse_args(argv)

    filters = FilterState(
        product=args.product,
        region=args.region,
        country=args.country,
        incoterm=args.incoterm,
        currency=args.currency,
    )
    source = RecordSource(url=args.url, timeout_seconds=config.record_source.timeout_seconds)
    session = DashboardSession(source=source, filters=filters)

    interval = config.record_source.poll_interval_seconds
    try:
        while True:
            session.refresh()
            _print_session(session)
            if not args.watch:
                break
            logger.info("Next refresh in %d seconds", interval)
            time.sleep(interval)
    except KeyboardInterrupt:  # pragma: no cover - manual CLI exit
        pass
    finally:
        source.close()


if __name__ == "__main__":  # pragma: no cover - manual CLI entry
    main()
