"""
Unit tests for queue-based logging.
"""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

import pytest

from cyclearb.telemetry.logger import AsyncLogger, MicrosecondFormatter, setup_logging


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Put back root handlers and levels touched by setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    package_level = logging.getLogger("cyclearb").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("cyclearb").setLevel(package_level)


class TestAsyncLogger:
    """Tests for AsyncLogger and setup_logging."""

    def test_file_receives_debug_records(self, tmp_path: Path, restore_logging: None) -> None:
        log_file = tmp_path / "logs" / "cyclearb.log"

        async_logger = setup_logging(level="WARNING", log_file=log_file)
        logging.getLogger("cyclearb.strategy.graph").debug("Skipping malformed pair x/y@0")
        async_logger.stop()

        content = log_file.read_text(encoding="utf-8")
        assert "DEBUG" in content
        assert "cyclearb.strategy.graph" in content
        assert "Skipping malformed pair x/y@0" in content

    def test_stop_detaches_handler(self, restore_logging: None) -> None:
        package_logger = logging.getLogger("cyclearb")
        before = list(package_logger.handlers)

        async_logger = AsyncLogger("cyclearb", level=logging.INFO)
        async_logger.start()
        async_logger.start()
        assert len(package_logger.handlers) == len(before) + 1

        async_logger.stop()
        async_logger.stop()
        assert package_logger.handlers == before

    def test_quiet_third_party_loggers(self, restore_logging: None) -> None:
        async_logger = setup_logging(level="DEBUG")
        async_logger.stop()

        assert logging.getLogger("aiohttp").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_microsecond_timestamp(self) -> None:
        formatter = MicrosecondFormatter("%(asctime)s")
        record = logging.LogRecord("cyclearb", logging.INFO, __file__, 1, "msg", None, None)

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{6}", formatter.format(record))
