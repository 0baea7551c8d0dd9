"""
Logging setup for the scraper.
"""

import logging
import logging.handlers
import json
import sys
from pathlib import Path
from typing import Dict, Any, Optional
from datetime import datetime, timezone

from .config import LoggingConfig


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # Add exception info if present
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        for key in ('url', 'event_type'):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, ensure_ascii=False)


class ScraperLogAdapter(logging.LoggerAdapter):
    """Logger adapter that adds scraper-specific context."""

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Merge adapter context into each record's extra fields."""
        kwargs['extra'] = {**self.extra, **kwargs.get('extra', {})}
        return msg, kwargs

    def log_url_event(self, level: int, url: str, message: str, **kwargs):
        """Log URL-specific events."""
        extra = kwargs.get('extra', {})
        extra['url'] = url
        extra['event_type'] = 'url_event'
        kwargs['extra'] = extra
        self.log(level, message, **kwargs)


def setup_logging(config: LoggingConfig, enable_json: bool = False) -> logging.Logger:
    """
    Configure the root logger.

    Records go to stderr and, when ``config.file`` is set, to a rotating
    log file. Stdout is left for the scraped records.

    Args:
        config: Logging configuration
        enable_json: Enable JSON formatted logging

    Returns:
        Configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    # Clear existing handlers
    root_logger.handlers.clear()

    if enable_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Configure third-party loggers
    for logger_name in ('aiohttp', 'asyncio', 'urllib3'):
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.debug(f"Log level: {config.level}, file: {config.file}, JSON: {enable_json}")

    return root_logger


def get_scraper_logger(name: str, **extra_context) -> ScraperLogAdapter:
    """
    Get a scraper-specific logger with additional context.

    Args:
        name: Logger name
        **extra_context: Additional context fields to include in all log messages

    Returns:
        ScraperLogAdapter instance
    """
    logger = logging.getLogger(name)
    return ScraperLogAdapter(logger, extra_context)
