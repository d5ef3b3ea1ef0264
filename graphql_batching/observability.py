"""Observability for the GraphQL batching gateway.

This module provides:
- Logging: human-readable console output, or JSON lines when structured
  logging is requested
- Tracing: OpenTelemetry spans around every executed operation, exported to
  the console

Tracing can be switched off with ``GRAPHQL_BATCH_OBSERVABILITY_ENABLED=false``.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from opentelemetry.sdk.trace.export import SpanExportResult

from .logger_config import StructuredLogFormatter

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

OBSERVABILITY_ENABLED = os.environ.get("GRAPHQL_BATCH_OBSERVABILITY_ENABLED", "true").lower() == "true"
STRUCTURED_LOGGING = os.environ.get("GRAPHQL_BATCH_STRUCTURED_LOGGING", "false").lower() == "true"

# Global instances (initialized lazily)
_tracer: Tracer | None = None
_logger: logging.Logger | None = None
_tracer_provider: TracerProvider | None = None
_shutdown_registered = False
_shutting_down = False


class SafeConsoleSpanExporter:
    """Wrapper for ConsoleSpanExporter that handles I/O errors during shutdown."""

    def __init__(self):
        self._exporter = ConsoleSpanExporter()

    def export(self, spans):
        if _shutting_down:
            return SpanExportResult.SUCCESS
        try:
            return self._exporter.export(spans)
        except (ValueError, OSError):
            # stdout may already be closed at interpreter exit
            return SpanExportResult.SUCCESS

    def shutdown(self):
        try:
            self._exporter.shutdown()
        except (ValueError, OSError):
            pass

    def force_flush(self, timeout_millis=30000):
        try:
            return self._exporter.force_flush(timeout_millis)
        except (ValueError, OSError):
            return True


def setup_logging(level: str | None = None, structured: bool | None = None) -> logging.Logger:
    """Configure the ``graphql_batching`` logger once and return it."""
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("graphql_batching")
    logger.setLevel((level or os.environ.get("GRAPHQL_BATCH_LOG_LEVEL", "INFO")).upper())
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if STRUCTURED_LOGGING if structured is None else structured:
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    logger.addHandler(handler)
    _logger = logger
    return logger


def _shutdown_tracing() -> None:
    """Flush and shut down the tracer provider at process exit."""
    global _tracer_provider, _shutting_down

    if _shutting_down:
        return
    _shutting_down = True

    if _tracer_provider is not None:
        try:
            _tracer_provider.force_flush()
            _tracer_provider.shutdown()
        except (ValueError, OSError):
            pass
        _tracer_provider = None


def setup_tracing() -> Tracer | None:
    """Configure OpenTelemetry tracing."""
    global _tracer, _tracer_provider, _shutdown_registered

    if _tracer is not None:
        return _tracer

    if not OBSERVABILITY_ENABLED:
        return None

    resource = Resource.create(
        {
            SERVICE_NAME: "graphql-batching",
            "service.version": os.environ.get("GRAPHQL_BATCH_VERSION", "local"),
        }
    )
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(SafeConsoleSpanExporter()))
    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    if not _shutdown_registered:
        atexit.register(_shutdown_tracing)
        _shutdown_registered = True

    _tracer = trace.get_tracer("graphql_batching")
    return _tracer


@contextmanager
def trace_operation(name: str, **attributes: Any):
    """Trace and log one unit of gateway work.

    Exceptions raised inside the block are recorded on the span and re-raised.

    Usage:
        with trace_operation("execute", schema_key="default"):
            ...
    """
    tracer = setup_tracing()
    logger = setup_logging()

    start_time = time.perf_counter()
    status = "success"
    error_type = None

    if tracer:
        with tracer.start_as_current_span(f"graphql.{name}") as span:
            for key, value in attributes.items():
                span.set_attribute(f"graphql.{key}", str(value))
            try:
                yield span
            except Exception as e:
                status = "error"
                error_type = type(e).__name__
                span.set_attribute("graphql.error_type", error_type)
                span.record_exception(e)
                raise
            finally:
                duration = time.perf_counter() - start_time
                span.set_attribute("graphql.duration_seconds", duration)
                span.set_attribute("graphql.status", status)
                _log_execution(logger, name, duration, status, error_type)
    else:
        try:
            yield None
        except Exception as e:
            status = "error"
            error_type = type(e).__name__
            raise
        finally:
            duration = time.perf_counter() - start_time
            _log_execution(logger, name, duration, status, error_type)


def _log_execution(
    logger: logging.Logger,
    name: str,
    duration: float,
    status: str,
    error_type: str | None,
) -> None:
    extra_fields = {"span": name, "duration_seconds": round(duration, 3), "status": status}
    if error_type:
        extra_fields["error_type"] = error_type

    message = f"graphql {name} ({status}, {duration:.3f}s)"
    if status == "error":
        logger.warning(message, extra={"extra_fields": extra_fields})
    else:
        logger.debug(message, extra={"extra_fields": extra_fields})


def get_logger() -> logging.Logger:
    """Get the configured logger instance."""
    return setup_logging()


def get_observability_status() -> dict[str, Any]:
    """Get current observability status for debugging."""
    return {
        "enabled": OBSERVABILITY_ENABLED,
        "tracing": _tracer is not None,
        "logging": _logger is not None,
        "structured_logging": STRUCTURED_LOGGING,
    }
