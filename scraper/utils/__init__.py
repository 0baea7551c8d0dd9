"""
Utility modules for the scraper.
"""

from .config import Config, ConfigManager, load_config
from .logger import setup_logging, get_scraper_logger
from .monitoring import Measure, MetricsCollector

__all__ = [
    'Config', 'ConfigManager', 'load_config',
    'setup_logging', 'get_scraper_logger',
    'Measure', 'MetricsCollector'
]
