"""OTLP/HTTP export of relay spans and metrics.

Until ``init_otel`` runs, the OpenTelemetry API hands out no-op tracers and
meters, so instrumented code works unchanged in tests and local runs.
"""

from __future__ import annotations

import os
import socket
import logging

from opentelemetry import trace, metrics
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter

from .. import __version__
from ..config.telemetry import (
    OTLP_API_TOKEN,
    OTLP_ENVIRONMENT,
    OTEL_SERVICE_NAME,
    OTLP_TRACES_ENDPOINT,
    OTLP_METRICS_ENDPOINT,
    OTEL_TRACES_BATCH_SIZE,
    OTEL_TRACES_EXPORT_INTERVAL_MS,
    OTEL_METRICS_EXPORT_INTERVAL_MS,
)

logger = logging.getLogger(__name__)

_providers: tuple[TracerProvider, MeterProvider] | None = None


def _relay_resource() -> Resource:
    hostname = socket.gethostname()
    return Resource.create({
        "service.name": OTEL_SERVICE_NAME,
        "service.version": __version__,
        "deployment.environment": OTLP_ENVIRONMENT,
        "host.name": hostname,
        "service.instance.id": f"{hostname}-{os.getpid()}",
    })


def _tracer_provider(resource: Resource, headers: dict[str, str]) -> TracerProvider:
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(endpoint=OTLP_TRACES_ENDPOINT, headers=headers),
            max_export_batch_size=OTEL_TRACES_BATCH_SIZE,
            schedule_delay_millis=OTEL_TRACES_EXPORT_INTERVAL_MS,
        )
    )
    return provider


def _meter_provider(resource: Resource, headers: dict[str, str]) -> MeterProvider:
    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=OTLP_METRICS_ENDPOINT, headers=headers),
        export_interval_millis=OTEL_METRICS_EXPORT_INTERVAL_MS,
    )
    return MeterProvider(resource=resource, metric_readers=[reader])


def init_otel() -> None:
    """Install global tracer and meter providers. Idempotent."""
    global _providers  # noqa: PLW0603
    if _providers is not None:
        return

    resource = _relay_resource()
    headers = {"Authorization": f"Bearer {OTLP_API_TOKEN}"}
    tracer_provider = _tracer_provider(resource, headers)
    meter_provider = _meter_provider(resource, headers)
    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(meter_provider)
    _providers = (tracer_provider, meter_provider)

    logger.info("OTel export enabled: traces=%s metrics=%s", OTLP_TRACES_ENDPOINT, OTLP_METRICS_ENDPOINT)


def shutdown_otel() -> None:
    """Flush pending spans and metrics, then stop exporting. Idempotent."""
    global _providers  # noqa: PLW0603
    if _providers is None:
        return
    providers, _providers = _providers, None
    for provider in providers:
        provider.force_flush()
        provider.shutdown()


__all__ = ["init_otel", "shutdown_otel"]
