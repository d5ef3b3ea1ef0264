"""Metrics for the GraphQL batching gateway.

Local metrics collection using OpenTelemetry with a Prometheus reader, served
by the ``/metrics`` endpoint.
"""
from __future__ import annotations

import os
import socket

from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST
from prometheus_client import generate_latest

from .observability import get_logger

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "graphql-batching")
SERVICE_VERSION = os.getenv("OTEL_SERVICE_VERSION", "0.1.0")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "local")


def is_test_environment() -> bool:
    """Detect if running in test environment."""
    return "PYTEST_CURRENT_TEST" in os.environ or "CI" in os.environ or "GITHUB_ACTIONS" in os.environ


# Disable metrics in test/CI environments by default
default_metrics_enabled = "false" if is_test_environment() else "true"
METRICS_ENABLED = os.getenv("GRAPHQL_BATCH_METRICS_ENABLED", default_metrics_enabled).lower() == "true"

# Metrics instances
meter = None
requests_counter = None
operations_counter = None
batch_size_histogram = None
prometheus_reader = None

_metrics_initialized = False


def get_resource() -> Resource:
    """Create OpenTelemetry resource with service information."""
    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": SERVICE_VERSION,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
            "host.name": socket.gethostname(),
        }
    )


def initialize_metrics():
    """Initialize metrics collection with a Prometheus reader."""
    global meter, requests_counter, operations_counter, batch_size_histogram, prometheus_reader

    if not METRICS_ENABLED:
        return

    try:
        prometheus_reader = PrometheusMetricReader()
        meter_provider = MeterProvider(resource=get_resource(), metric_readers=[prometheus_reader])
        metrics.set_meter_provider(meter_provider)
        meter = metrics.get_meter(__name__)

        requests_counter = meter.create_counter(
            name="graphql_batch_requests_total",
            description="Total number of gateway requests by outcome",
            unit="1",
        )
        operations_counter = meter.create_counter(
            name="graphql_operations_total",
            description="Total number of executed operations by kind and status",
            unit="1",
        )
        batch_size_histogram = meter.create_histogram(
            name="graphql_batch_size",
            description="Number of operations per request",
            unit="1",
        )
    except Exception as e:
        get_logger().warning(f"Failed to initialize metrics: {e}")
        meter = None


def is_metrics_enabled() -> bool:
    """Check if metrics collection is enabled."""
    return METRICS_ENABLED and meter is not None


def record_batch(size: int, outcome: str) -> None:
    """Record one handled request and how many operations it carried."""
    if not is_metrics_enabled():
        return

    labels = {"outcome": outcome, "environment": DEPLOYMENT_ENVIRONMENT}
    if requests_counter:
        requests_counter.add(1, labels)
    if batch_size_histogram and size:
        batch_size_histogram.record(size, {"environment": DEPLOYMENT_ENVIRONMENT})


def record_operation(kind: str, status: str) -> None:
    """Record one executed operation."""
    if not is_metrics_enabled():
        return

    if operations_counter:
        operations_counter.add(
            1, {"kind": kind, "status": status, "environment": DEPLOYMENT_ENVIRONMENT}
        )


def get_metrics_export() -> tuple[str, str]:
    """Export metrics in Prometheus format."""
    if not is_metrics_enabled() or not prometheus_reader:
        return "# Metrics not available\n", "text/plain"

    metrics_data = generate_latest()
    return metrics_data.decode("utf-8"), CONTENT_TYPE_LATEST


def ensure_metrics_initialized(enabled: bool = True):
    """Initialize metrics when the server starts."""
    global _metrics_initialized
    if _metrics_initialized:
        return

    if enabled and METRICS_ENABLED and not is_test_environment():
        initialize_metrics()
    _metrics_initialized = True


def shutdown_metrics():
    """Shutdown metrics collection."""
    global meter, prometheus_reader, _metrics_initialized
    if prometheus_reader:
        prometheus_reader.shutdown()
    meter = None
    prometheus_reader = None
    _metrics_initialized = False
