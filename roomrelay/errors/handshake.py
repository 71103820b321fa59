"""Handshake-phase rejections.

Both errors are raised before the WebSocket is accepted. They carry the HTTP
status used to deny the upgrade and the close code used when the ASGI server
cannot send a denial response.
"""

from ..config.websocket import (
    WS_CLOSE_MALFORMED_CODE,
    WS_DENY_MALFORMED_STATUS,
    WS_CLOSE_UNAUTHORIZED_CODE,
    WS_DENY_UNAUTHORIZED_STATUS,
)


class HandshakeError(Exception):
    """Base class for connection admission failures.

    Attributes:
        reason_code: Machine-readable rejection label.
        status_code: HTTP status for a denial response.
        close_code: WebSocket close code for servers without denial support.
    """

    reason_code = "handshake_failed"
    status_code = WS_DENY_MALFORMED_STATUS
    close_code = WS_CLOSE_MALFORMED_CODE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedHandshake(HandshakeError):
    """The sub-protocol header is missing or does not decode to a token."""

    reason_code = "malformed_handshake"


class Unauthorized(HandshakeError):
    """The token decoded but its signature does not verify."""

    reason_code = "unauthorized"
    status_code = WS_DENY_UNAUTHORIZED_STATUS
    close_code = WS_CLOSE_UNAUTHORIZED_CODE


__all__ = ["HandshakeError", "MalformedHandshake", "Unauthorized"]
