"""Tests for logging setup."""

import json
import logging
from pathlib import Path

from scraper.utils.config import LoggingConfig
from scraper.utils.logger import JSONFormatter, get_scraper_logger, setup_logging


def test_setup_logging_writes_log_file(tmp_path: Path, restore_logging) -> None:
    log_file = tmp_path / "logs" / "scraper.log"
    setup_logging(LoggingConfig(level="DEBUG", file=str(log_file)))

    logging.getLogger("scraper.test").info("hello file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello file" in log_file.read_text()
    assert logging.getLogger("aiohttp").level == logging.WARNING


def test_setup_logging_without_file(restore_logging) -> None:
    root = setup_logging(LoggingConfig(level="WARNING"))

    assert root.level == logging.WARNING
    assert len(root.handlers) == 1


def test_json_formatter_includes_url_fields() -> None:
    adapter = get_scraper_logger("scraper.test", component="loader")
    records = []

    class ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    handler = ListHandler()
    adapter.logger.addHandler(handler)
    adapter.logger.setLevel(logging.DEBUG)
    try:
        adapter.log_url_event(logging.INFO, "https://x/y", "Cache hit")
    finally:
        adapter.logger.removeHandler(handler)

    payload = json.loads(JSONFormatter().format(records[0]))
    assert payload["message"] == "Cache hit"
    assert payload["url"] == "https://x/y"
    assert payload["event_type"] == "url_event"
    assert records[0].component == "loader"
