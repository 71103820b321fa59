"""Map exceptions to telemetry error-type labels."""

from __future__ import annotations

from .lifecycle import InvalidTransition
from .registry import InvalidName, NotRegistered
from .messages import MessageTooLarge, InvalidMessageFormat
from .handshake import Unauthorized, MalformedHandshake

ERROR_TYPE_LABELS: tuple[tuple[type[BaseException], str], ...] = (
    (MalformedHandshake, "malformed_handshake"),
    (Unauthorized, "unauthorized"),
    (MessageTooLarge, "message_too_large"),
    (InvalidMessageFormat, "invalid_message"),
    (NotRegistered, "not_registered"),
    (InvalidName, "invalid_name"),
    (InvalidTransition, "invalid_transition"),
    (TimeoutError, "timeout"),
    (ConnectionError, "connection"),
)


def classify_error(exc: BaseException) -> str:
    """Return the telemetry error type label for an exception."""

    for exception_type, label in ERROR_TYPE_LABELS:
        if isinstance(exc, exception_type):
            return label
    return "unknown"


__all__ = ["classify_error"]
