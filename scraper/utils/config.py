"""
Configuration management for the scraper.
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


MISSING_VALUE = "N/A"

DEFAULT_REWRITE_RULES: Dict[str, str] = {
    '://en.m.wikipedia.org': '://en.wikipedia.org',
    'http://en.wikipedia.org': 'https://en.wikipedia.org',
}


@dataclass
class ScraperConfig:
    """Configuration for page retrieval and extraction."""
    index_url: str = "https://en.wikipedia.org/wiki/States_of_Germany"
    user_agent: str = "state-scraper/1.0"
    request_timeout: Optional[float] = None
    max_concurrent_requests: Optional[int] = None
    link_selector: str = ".wikitable tr > td:nth-child(3) > a"
    heading_selector: str = "h1"
    label_selector: str = "table.infobox th.infobox-label"
    field_keyword: str = "Capital"
    missing_value: str = MISSING_VALUE


@dataclass
class RewriteConfig:
    """Ordered URL rewrite rules."""
    rules: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_REWRITE_RULES))


@dataclass
class CacheConfig:
    """Configuration for the raw page cache."""
    base_dir: str = "."


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class MonitoringConfig:
    """Configuration for monitoring."""
    prometheus_port: Optional[int] = None


@dataclass
class Config:
    """Main configuration class."""
    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    rewrite: RewriteConfig = field(default_factory=RewriteConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """
        Load configuration from a YAML file.

        A missing file yields the built-in defaults. Sections and keys
        that are absent from the file keep their defaults.
        """
        config_data: Dict[str, Any] = {}
        if self.config_path.exists():
            with open(self.config_path, 'r') as file:
                config_data = yaml.safe_load(file) or {}
        else:
            logging.info(f"Configuration file not found, using defaults: {self.config_path}")

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration root must be a mapping: {self.config_path}")

        self._config = Config(
            scraper=ScraperConfig(**(config_data.get('scraper') or {})),
            rewrite=RewriteConfig(**(config_data.get('rewrite') or {})),
            cache=CacheConfig(**(config_data.get('cache') or {})),
            logging=LoggingConfig(**(config_data.get('logging') or {})),
            monitoring=MonitoringConfig(**(config_data.get('monitoring') or {}))
        )

        self._validate_config()
        return self._config

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ValueError("Configuration not loaded")

        scraper = self._config.scraper

        if not scraper.index_url:
            raise ValueError("index_url must be provided")

        if scraper.request_timeout is not None and scraper.request_timeout <= 0:
            raise ValueError("request_timeout must be positive or null")

        if scraper.max_concurrent_requests is not None and scraper.max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1 or null")

        if not isinstance(self._config.rewrite.rules, dict):
            raise ValueError("rewrite.rules must be a mapping")

        if '' in self._config.rewrite.rules:
            raise ValueError("rewrite rule keys must be non-empty")

        if not isinstance(getattr(logging, self._config.logging.level.upper(), None), int):
            raise ValueError(f"Unknown log level: {self._config.logging.level}")

        logging.debug("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ValueError("Configuration not loaded. Call load_config() first.")
        return self._config


def load_config(config_path: str = "config.yaml") -> Config:
    """Load configuration from file."""
    return ConfigManager(config_path).load_config()
