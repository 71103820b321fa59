"""Public telemetry API: re-exports for convenience."""

from .sentry import capture_error
from .setup import init_telemetry, shutdown_telemetry
from .instruments import get_metrics
from .traces import publish_span, session_span

__all__ = [
    "init_telemetry",
    "shutdown_telemetry",
    "capture_error",
    "get_metrics",
    "session_span",
    "publish_span",
]
