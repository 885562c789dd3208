"""Trade Prices – run the backend with uvicorn.

Example
-------

    python -m tradeprices.scripts.serve --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

import uvicorn

from tradeprices.core.config import get_config


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run the trade price backend")
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args(argv)
    config = get_config()

    uvicorn.run(
        "tradeprices.service.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":  # pragma: no cover - manual CLI entry
    main()
