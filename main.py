#!/usr/bin/env python3
"""
Main entry point for the state scraper.
"""

import asyncio
import argparse
import logging
import sys
import yaml
from typing import List, Optional

from scraper import __version__
from scraper.crawler.extractor import StateRecord
from scraper.crawler.scheduler import ScrapeScheduler
from scraper.utils.config import load_config, Config
from scraper.utils.logger import setup_logging
from scraper.utils.monitoring import MetricsCollector


class ScraperApp:
    """Main application class for the state scraper."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    async def run(self, config: Config) -> List[StateRecord]:
        """Run one scrape and return its records."""
        metrics = MetricsCollector(config.monitoring.prometheus_port)
        metrics.start_prometheus_server()

        self.logger.info(f"Index page: {config.scraper.index_url}")
        self.logger.info(f"Cache directory: {config.cache.base_dir}")
        self.logger.info(f"Max concurrent requests: {config.scraper.max_concurrent_requests or 'unbounded'}")

        async with ScrapeScheduler.from_config(config, metrics=metrics) as scheduler:
            records = await scheduler.run(config.scraper.index_url)
            self.logger.info(f"Run stats: {scheduler.get_stats()}")

        self.logger.info(f"Timings: {metrics.get_summary()}")
        return records


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Apply command line overrides to a loaded configuration."""
    if args.index_url:
        config.scraper.index_url = args.index_url
    if args.cache_dir:
        config.cache.base_dir = args.cache_dir
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="State Scraper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                               # Run with config.yaml or defaults
  python main.py --config my_config.yaml      # Run with custom config
  python main.py --cache-dir /tmp/scrape      # Cache pages under /tmp/scrape/cache
  python main.py --json-logs                  # Structured logs on stderr
        """
    )

    parser.add_argument(
        '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )

    parser.add_argument(
        '--index-url',
        help='URL of the listing page to scrape'
    )

    parser.add_argument(
        '--cache-dir',
        help='Base directory for the page cache'
    )

    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit logs as JSON'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'State Scraper {__version__}'
    )

    args = parser.parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
    except (ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error: invalid configuration '{args.config}': {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging, enable_json=args.json_logs)
    logger = logging.getLogger(__name__)

    app = ScraperApp()
    try:
        records = asyncio.run(app.run(config))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    for record in records:
        print(record.to_line())
    print("Process complete")

    return 0


if __name__ == '__main__':
    sys.exit(main())
