"""Per-message protocol violations.

Every violation terminates the connection. The exception carries the close
code and reason so the handler has a single failure path.
"""

from ..config.websocket import (
    WS_CLOSE_TOO_LARGE_CODE,
    WS_CLOSE_TOO_LARGE_REASON,
    WS_CLOSE_INVALID_MESSAGE_CODE,
    WS_CLOSE_INVALID_MESSAGE_REASON,
)


class MessageError(Exception):
    """Base class for inbound message violations.

    Attributes:
        close_code: WebSocket close code to send.
        close_reason: Short reason string sent with the close frame.
    """

    close_code = WS_CLOSE_INVALID_MESSAGE_CODE
    close_reason = WS_CLOSE_INVALID_MESSAGE_REASON


class MessageTooLarge(MessageError):
    """Raised when a frame exceeds the configured byte ceiling."""

    close_code = WS_CLOSE_TOO_LARGE_CODE
    close_reason = WS_CLOSE_TOO_LARGE_REASON

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Message of {size} bytes exceeds the {limit} byte limit.")
        self.size = size
        self.limit = limit


class InvalidMessageFormat(MessageError):
    """Raised for binary frames, bad JSON, unknown types or invalid fields."""


__all__ = ["MessageError", "MessageTooLarge", "InvalidMessageFormat"]
