"""MetricInstruments registry: typed accessors for all OTel instruments."""

from __future__ import annotations

from opentelemetry import metrics
from ..config.telemetry import (
    OTEL_SERVICE_NAME,
    METRIC_ERRORS_TOTAL,
    METRIC_DELIVERIES_TOTAL,
    METRIC_ACTIVE_CONNECTIONS,
    METRIC_CONNECTION_DURATION,
    METRIC_SUPERSESSIONS_TOTAL,
    METRIC_MESSAGES_PUBLISHED_TOTAL,
    METRIC_CONNECTIONS_REJECTED_TOTAL,
)


def _histogram(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.Histogram:
    name, unit, desc = spec
    return meter.create_histogram(name, unit=unit, description=desc)


def _counter(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.Counter:
    name, unit, desc = spec
    return meter.create_counter(name, unit=unit, description=desc)


def _updown(meter: metrics.Meter, spec: tuple[str, str, str]) -> metrics.UpDownCounter:
    name, unit, desc = spec
    return meter.create_up_down_counter(name, unit=unit, description=desc)


class MetricInstruments:
    """Holds all OTel metric instruments created from config specs."""

    __slots__ = (
        "connection_duration",
        "connections_rejected_total",
        "supersessions_total",
        "messages_published_total",
        "deliveries_total",
        "errors_total",
        "active_connections",
    )

    def __init__(self, meter: metrics.Meter) -> None:
        # Histograms
        self.connection_duration = _histogram(meter, METRIC_CONNECTION_DURATION)
        # Counters
        self.connections_rejected_total = _counter(meter, METRIC_CONNECTIONS_REJECTED_TOTAL)
        self.supersessions_total = _counter(meter, METRIC_SUPERSESSIONS_TOTAL)
        self.messages_published_total = _counter(meter, METRIC_MESSAGES_PUBLISHED_TOTAL)
        self.deliveries_total = _counter(meter, METRIC_DELIVERIES_TOTAL)
        self.errors_total = _counter(meter, METRIC_ERRORS_TOTAL)
        # UpDown counters
        self.active_connections = _updown(meter, METRIC_ACTIVE_CONNECTIONS)


_metrics: MetricInstruments | None = None


def get_metrics() -> MetricInstruments:
    """Return the global MetricInstruments (no-op meter if OTel not initialized)."""
    global _metrics  # noqa: PLW0603
    if _metrics is None:
        meter = metrics.get_meter(OTEL_SERVICE_NAME)
        _metrics = MetricInstruments(meter)
    return _metrics


__all__ = ["MetricInstruments", "get_metrics"]
