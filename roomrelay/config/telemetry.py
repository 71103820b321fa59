"""Telemetry configuration: env vars, metric specs, span names, Sentry constants."""

import os

# ---------------------------------------------------------------------------
# Sentry
# ---------------------------------------------------------------------------
SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
SENTRY_ENVIRONMENT: str = os.getenv("SENTRY_ENVIRONMENT", "production")
SENTRY_RELEASE: str = os.getenv("SENTRY_RELEASE", "")
SENTRY_SAMPLE_RATE: float = float(os.getenv("SENTRY_SAMPLE_RATE", "1.0"))

# ---------------------------------------------------------------------------
# OTLP export
# ---------------------------------------------------------------------------
OTLP_API_TOKEN: str = os.getenv("OTLP_API_TOKEN", "")
OTLP_ENVIRONMENT: str = os.getenv("OTLP_ENVIRONMENT", "production")
OTLP_TRACES_ENDPOINT: str = os.getenv("OTLP_TRACES_ENDPOINT", "http://localhost:4318/v1/traces")
OTLP_METRICS_ENDPOINT: str = os.getenv("OTLP_METRICS_ENDPOINT", "http://localhost:4318/v1/metrics")

# ---------------------------------------------------------------------------
# OTel tuning
# ---------------------------------------------------------------------------
OTEL_SERVICE_NAME: str = os.getenv("OTEL_SERVICE_NAME", "roomrelay")
OTEL_TRACES_EXPORT_INTERVAL_MS: int = int(os.getenv("OTEL_TRACES_EXPORT_INTERVAL_MS", "5000"))
OTEL_METRICS_EXPORT_INTERVAL_MS: int = int(os.getenv("OTEL_METRICS_EXPORT_INTERVAL_MS", "15000"))
OTEL_TRACES_BATCH_SIZE: int = int(os.getenv("OTEL_TRACES_BATCH_SIZE", "512"))

# ---------------------------------------------------------------------------
# Metric spec tuples: (name, unit, description)
# ---------------------------------------------------------------------------

# Histograms
METRIC_CONNECTION_DURATION = ("relay.connection_duration", "s", "WebSocket session duration")

# Counters
METRIC_CONNECTIONS_REJECTED_TOTAL = (
    "relay.connections_rejected_total",
    "{connection}",
    "Handshakes rejected before acceptance",
)
METRIC_SUPERSESSIONS_TOTAL = (
    "relay.supersessions_total",
    "{connection}",
    "Connections closed because the same identity reconnected",
)
METRIC_MESSAGES_PUBLISHED_TOTAL = ("relay.messages_published_total", "{message}", "Events fanned out")
METRIC_DELIVERIES_TOTAL = ("relay.deliveries_total", "{delivery}", "Per-recipient sends")
METRIC_ERRORS_TOTAL = ("relay.errors_total", "{error}", "Connection-terminating errors")

# UpDown counters
METRIC_ACTIVE_CONNECTIONS = ("relay.active_connections", "{connection}", "Current subscribed connections")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------
SPAN_SESSION = "relay.session"
SPAN_PUBLISH = "relay.publish"

# ---------------------------------------------------------------------------
# Sentry constants
# ---------------------------------------------------------------------------
SENTRY_RATE_LIMIT_S: float = 10.0
SENTRY_TAG_ROOM = "room"
SENTRY_TAG_IDENTITY = "identity"
SENTRY_TAG_CONNECTION_ID = "connection_id"


__all__ = [
    "SENTRY_DSN",
    "SENTRY_ENVIRONMENT",
    "SENTRY_RELEASE",
    "SENTRY_SAMPLE_RATE",
    "OTLP_API_TOKEN",
    "OTLP_ENVIRONMENT",
    "OTLP_TRACES_ENDPOINT",
    "OTLP_METRICS_ENDPOINT",
    "OTEL_SERVICE_NAME",
    "OTEL_TRACES_EXPORT_INTERVAL_MS",
    "OTEL_METRICS_EXPORT_INTERVAL_MS",
    "OTEL_TRACES_BATCH_SIZE",
    "METRIC_CONNECTION_DURATION",
    "METRIC_CONNECTIONS_REJECTED_TOTAL",
    "METRIC_SUPERSESSIONS_TOTAL",
    "METRIC_MESSAGES_PUBLISHED_TOTAL",
    "METRIC_DELIVERIES_TOTAL",
    "METRIC_ERRORS_TOTAL",
    "METRIC_ACTIVE_CONNECTIONS",
    "SPAN_SESSION",
    "SPAN_PUBLISH",
    "SENTRY_RATE_LIMIT_S",
    "SENTRY_TAG_ROOM",
    "SENTRY_TAG_IDENTITY",
    "SENTRY_TAG_CONNECTION_ID",
]
