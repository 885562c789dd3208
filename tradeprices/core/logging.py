"""Trade Prices – Logging setup.

All modules log through :func:`get_logger`, which hands out loggers under
the ``tradeprices`` namespace and makes sure handlers are attached on
first use. Handlers go on the root logger so that uvicorn and library
records share the same format and destinations.

Destinations:
- stdout, always.
- ``LOG_FILE``, unless it is set to an empty string.

HTTP client libraries (urllib3, httpx) are held at WARNING unless the
configured level is DEBUG; their per-request INFO lines would otherwise
drown out the provider logs.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from tradeprices.core.config import TradePricesConfig, get_config


NAMESPACE = "tradeprices"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LIBRARIES = ("urllib3", "httpx", "httpcore")


def setup_logging(config: Optional[TradePricesConfig] = None) -> None:
    """Attach console (and optionally file) handlers to the root logger.

    Does nothing if the root logger already has handlers, so repeated
    calls and calls after another framework configured logging are safe.

    Args:
        config: Configuration to read ``log_level``/``log_file`` from;
            the global configuration when omitted.
    """

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    config = config or get_config()
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    root_logger.setLevel(level)
    logging.getLogger(NAMESPACE).setLevel(level)

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Return the ``tradeprices.<name>`` logger.

    ``name`` is usually the module's ``__name__``; a name that already
    starts with the namespace is used as is.
    """

    setup_logging()
    if name == NAMESPACE or name.startswith(NAMESPACE + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{NAMESPACE}.{name}")


__all__ = ["setup_logging", "get_logger", "LOG_FORMAT"]
