"""Infrastructure layer - cross-cutting concerns."""

from simpledb.infrastructure.config import Config, get_config
from simpledb.infrastructure.logging import bind_context, clear_context, get_logger, setup_logging
from simpledb.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from simpledb.infrastructure.tracing import get_tracer, setup_tracing, statement_span, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
    "statement_span",
]
