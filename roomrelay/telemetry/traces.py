"""Span context managers for connection sessions and room fanout."""

from __future__ import annotations

from opentelemetry import trace
from collections.abc import Iterator
from contextlib import contextmanager
from ..config.telemetry import SPAN_PUBLISH, SPAN_SESSION, OTEL_SERVICE_NAME


def _tracer() -> trace.Tracer:
    return trace.get_tracer(OTEL_SERVICE_NAME)


@contextmanager
def session_span(*, room: str, identity: str, connection_id: str) -> Iterator[trace.Span]:
    """Outermost span wrapping the entire WebSocket connection."""
    with _tracer().start_as_current_span(
        SPAN_SESSION,
        attributes={"room": room, "identity": identity, "connection.id": connection_id},
    ) as span:
        yield span


@contextmanager
def publish_span(*, room: str, event_type: str, recipients: int) -> Iterator[trace.Span]:
    """One fanout of an event to a room."""
    with _tracer().start_as_current_span(
        SPAN_PUBLISH,
        attributes={"room": room, "event.type": event_type, "recipients": recipients},
    ) as span:
        yield span


__all__ = ["session_span", "publish_span"]
