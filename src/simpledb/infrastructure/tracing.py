"""OpenTelemetry tracing for statement execution.

Without setup_tracing() the global no-op provider is used, so spans cost
nothing in embedded use.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

TRACER_NAME = "simpledb"

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "simpledb",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider exporting statement spans.

    Args:
        service_name: Service name reported with every span
        otlp_endpoint: OTLP gRPC collector endpoint (e.g. "http://localhost:4317")
        console_export: Also print finished spans to stdout

    Returns:
        The tracer used for statement spans
    """
    global _tracer

    from simpledb import __version__

    provider = TracerProvider(
        resource=Resource.create(
            {"service.name": service_name, "service.version": __version__}
        )
    )
    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the tracer for statement spans."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Run a block inside a span.

    Exceptions escaping the block are recorded on the span and re-raised.

    Args:
        name: Span name
        attributes: Attributes set when the span starts
    """
    with get_tracer().start_as_current_span(name, attributes=attributes or {}) as span:
        yield span


@contextmanager
def statement_span(
    statement_type: str,
    table_name: str,
) -> Generator[trace.Span, None, None]:
    """
    Span around one executed statement.

    Uses the OpenTelemetry database attribute names so collectors group
    spans by operation and table.
    """
    attributes = {
        "db.system": "simpledb",
        "db.operation": statement_type,
        "db.sql.table": table_name,
    }
    with trace_span("simpledb.execute", attributes) as span:
        yield span
