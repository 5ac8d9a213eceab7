"""Prometheus metrics for SimpleDB."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all SimpleDB metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Statement metrics
        self.statements_total = Counter(
            "simpledb_statements_total",
            "Total number of statements executed",
            ["statement_type", "status"],  # status: success, error
            registry=self._registry,
        )

        self.statement_latency_seconds = Histogram(
            "simpledb_statement_latency_seconds",
            "Statement latency in seconds",
            ["statement_type"],  # create, insert, select
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self._registry,
        )

        self.rows_inserted_total = Counter(
            "simpledb_rows_inserted_total",
            "Total rows inserted",
            registry=self._registry,
        )

        # Storage metrics
        self.tables_loaded = Gauge(
            "simpledb_tables_loaded",
            "Number of tables currently registered",
            registry=self._registry,
        )

        self.table_persists_total = Counter(
            "simpledb_table_persists_total",
            "Total table file rewrites",
            ["status"],  # success, error
            registry=self._registry,
        )

        self.table_load_failures_total = Counter(
            "simpledb_table_load_failures_total",
            "Total table files that failed to load",
            registry=self._registry,
        )

        self.info = Info(
            "simpledb",
            "SimpleDB information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from simpledb import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
