"""
Scoped tracer provider for the instrumented subjects.

The provider is handed to every executor explicitly and is never installed
as the global OpenTelemetry provider.

Modes:
- none: API no-op provider; spans are created but never recorded
- sdk: SDK provider without exporter; spans are recorded, then dropped
- console: SDK provider exporting batches to stdout
"""

from contextlib import contextmanager
from typing import Iterator

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from otelsql_bench.config import TRACING_MODES

logger = structlog.get_logger()

SERVICE = "otelsql-bench"


@contextmanager
def tracer_provider(mode: str = "none") -> Iterator[trace.TracerProvider]:
    """
    Acquire a tracer provider for the duration of the benchmark.

    SDK providers are shut down on exit, flushing any pending batch.

    Raises:
        ValueError: If mode is not one of TRACING_MODES
    """
    if mode not in TRACING_MODES:
        raise ValueError(f"Invalid tracing mode: {mode} (valid: {list(TRACING_MODES)})")

    if mode == "none":
        yield trace.NoOpTracerProvider()
        return

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: SERVICE}))
    if mode == "console":
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    logger.info("Tracer provider started", mode=mode)
    try:
        yield provider
    finally:
        provider.shutdown()
        logger.info("Tracer provider shut down", mode=mode)
