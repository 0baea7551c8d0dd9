"""
Timing instrumentation and metrics collection for the scraper.
"""

import time
import logging
from typing import Dict, Optional, Any, List
from dataclasses import dataclass, field

from prometheus_client import CollectorRegistry, Histogram, start_http_server


@dataclass
class Metric:
    """Recorded durations for one operation."""
    name: str
    observations: List[float] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.observations)

    @property
    def total(self) -> float:
        return sum(self.observations)


class MetricsCollector:
    """Collects operation timings and mirrors them to Prometheus."""

    def __init__(self, prometheus_port: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.metrics: Dict[str, Metric] = {}
        self.prometheus_port = prometheus_port

        self.prometheus_registry = CollectorRegistry()
        self.operation_seconds = Histogram(
            'scraper_operation_seconds',
            'Duration of measured scraper operations',
            ['operation'],
            registry=self.prometheus_registry
        )

    def start_prometheus_server(self):
        """Expose metrics over HTTP when a port is configured."""
        if self.prometheus_port is None:
            return

        start_http_server(self.prometheus_port, registry=self.prometheus_registry)
        self.logger.info(f"Prometheus metrics server started on port {self.prometheus_port}")

    def observe(self, name: str, seconds: float):
        """Record one duration for an operation."""
        if name not in self.metrics:
            self.metrics[name] = Metric(name=name)
        self.metrics[name].observations.append(seconds)
        self.operation_seconds.labels(operation=name).observe(seconds)

    def get_metric(self, name: str) -> Optional[Metric]:
        """Get a metric by name."""
        return self.metrics.get(name)

    def get_summary(self) -> Dict[str, Any]:
        """Count and total seconds per operation."""
        return {
            name: {'count': metric.count, 'total_seconds': metric.total}
            for name, metric in self.metrics.items()
        }


class Measure:
    """
    Context manager that times a block.

    On exit, whether normal or by exception, it logs
    ``"<message> -<elapsed>ms"`` and records the duration with the collector,
    if one is given. The block's exception is never suppressed.
    """

    def __init__(self, message: str, logger: Optional[logging.Logger] = None,
                 collector: Optional[MetricsCollector] = None,
                 operation: Optional[str] = None):
        self.message = message
        self.logger = logger or logging.getLogger(__name__)
        self.collector = collector
        self.operation = operation or message
        self.start_time: Optional[float] = None
        self.elapsed: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.perf_counter() - self.start_time
        elapsed_ms = int(self.elapsed * 1000)

        if exc_type is None:
            self.logger.info(f"{self.message} -{elapsed_ms}ms")
        else:
            self.logger.info(f"{self.message} -{elapsed_ms}ms (failed: {exc_type.__name__})")

        if self.collector is not None:
            self.collector.observe(self.operation, self.elapsed)

        return False
