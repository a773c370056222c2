"""Logging and tracing for blob-inventory runs.

Log events are JSON lines on stderr, one per event, carrying keyword context
such as ``account``, ``container`` and ``attempt``. Tracing is off unless
``BLOB_INVENTORY_OTEL_ENABLED`` is set; each container listing then emits a
``list_container`` span.
"""

import logging
import sys
from typing import Any

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import settings


def setup_tracing() -> None:
    """Install a tracer provider exporting listing spans to stderr."""
    if not settings.otel_enabled:
        return

    provider = TracerProvider(
        resource=Resource.create({"service.name": settings.otel_service_name})
    )
    provider.add_span_processor(
        BatchSpanProcessor(ConsoleSpanExporter(out=sys.stderr))
    )
    trace.set_tracer_provider(provider)


def setup_logging() -> None:
    """Route structlog events through stdlib logging as JSON on stderr.

    stdout is reserved for the per-container summary printed by the CLI.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a module logger."""
    return structlog.get_logger(name)


def get_tracer(name: str) -> trace.Tracer:
    """Get a module tracer; spans are dropped while tracing is disabled."""
    return trace.get_tracer(name)


setup_logging()
setup_tracing()
