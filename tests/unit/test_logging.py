"""
Trade Prices: Tests for Logging Setup

Test suite for ``tradeprices.core.logging``. Covers:
- File and console handlers
- Idempotent setup
- Namespaced logger retrieval
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

import pytest

from tradeprices.core.config import TradePricesConfig
from tradeprices.core.logging import LOG_FORMAT, get_logger, setup_logging


@contextmanager
def bare_root_logger() -> Iterator[logging.Logger]:
    """Detach the current root handlers (pytest's capture handlers
    included) for the duration of the block, then restore them.

    Must be entered inside the test body: pytest attaches its capture
    handlers after fixtures have run.
    """

    root_logger = logging.getLogger()
    saved_handlers: List[logging.Handler] = list(root_logger.handlers)
    saved_level = root_logger.level
    for handler in saved_handlers:
        root_logger.removeHandler(handler)

    try:
        yield root_logger
    finally:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)
        for name in ("urllib3", "httpx", "httpcore"):
            logging.getLogger(name).setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_writes_to_log_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        log_file = tmp_path / "prices.log"
        monkeypatch.setenv("LOG_FILE", str(log_file))
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        config = TradePricesConfig()

        with bare_root_logger() as root_logger:
            setup_logging(config)
            get_logger("test.logging").info("Comtrade returned 3 rows")
            for handler in root_logger.handlers:
                handler.flush()

            assert len(root_logger.handlers) == 2
            assert all(h.formatter._fmt == LOG_FORMAT for h in root_logger.handlers)

        assert "tradeprices.test.logging - INFO - Comtrade returned 3 rows" in log_file.read_text()

    def test_empty_log_file_means_console_only(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FILE", "")
        config = TradePricesConfig()

        with bare_root_logger() as root_logger:
            setup_logging(config)

            assert len(root_logger.handlers) == 1
            assert not isinstance(root_logger.handlers[0], logging.FileHandler)

    def test_http_libraries_held_at_warning(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FILE", "")
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        config = TradePricesConfig()

        with bare_root_logger():
            setup_logging(config)

            assert logging.getLogger("urllib3").level == logging.WARNING
            assert logging.getLogger("httpx").level == logging.WARNING

    def test_debug_level_lets_http_libraries_through(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FILE", "")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        config = TradePricesConfig()

        with bare_root_logger():
            setup_logging(config)

            assert logging.getLogger("urllib3").level == logging.DEBUG

    def test_existing_handlers_are_left_alone(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_FILE", "")
        config = TradePricesConfig()
        existing = logging.NullHandler()

        with bare_root_logger() as root_logger:
            root_logger.addHandler(existing)
            setup_logging(config)

            assert root_logger.handlers == [existing]

    def test_is_idempotent(self) -> None:
        setup_logging()
        count = len(logging.getLogger().handlers)
        setup_logging()
        assert len(logging.getLogger().handlers) == count


class TestGetLogger:
    def test_prefixes_namespace(self) -> None:
        assert get_logger("core.test").name == "tradeprices.core.test"

    def test_module_name_is_not_prefixed_twice(self) -> None:
        logger = get_logger("tradeprices.dashboard.deriver")
        assert logger.name == "tradeprices.dashboard.deriver"
