"""WebSocket-specific runtime configuration values.

Limits:
    WS_MAX_MESSAGE_BYTES: Largest inbound text frame (UTF-8 bytes) accepted.
        Anything bigger closes the connection, so one client cannot make a
        room amplify unbounded payloads to every subscriber.

Timeouts:
    WS_SEND_TIMEOUT_S: Upper bound for a single fanout send. A recipient
        that cannot take a frame within this window counts as failed.
    WS_CLOSE_TIMEOUT_S: Upper bound for sending a close frame.

Close Codes (RFC 6455):
    1000: Normal closure
    1003: Unsupported data (invalid message format, binary frames)
    1009: Message too big
    1011: Internal error (registry invariant violated)
    4000+: Application-defined (supersession, handshake rejection)

Sub-protocol:
    WS_SUBPROTOCOL is the fixed literal a client lists after its token entry.
    It is echoed back as the negotiated sub-protocol.
"""

from __future__ import annotations

import os

# ============================================================================
# Limits and Timeouts
# ============================================================================

WS_MAX_MESSAGE_BYTES = int(os.getenv("WS_MAX_MESSAGE_BYTES", str(1024 * 10)))  # 10 KiB
WS_SEND_TIMEOUT_S = float(os.getenv("WS_SEND_TIMEOUT_S", "2.0"))
WS_CLOSE_TIMEOUT_S = float(os.getenv("WS_CLOSE_TIMEOUT_S", "1.0"))

# ============================================================================
# WebSocket Close Codes
# ============================================================================

WS_CLOSE_NORMAL_CODE = int(os.getenv("WS_CLOSE_NORMAL_CODE", "1000"))
WS_CLOSE_INVALID_MESSAGE_CODE = int(os.getenv("WS_CLOSE_INVALID_MESSAGE_CODE", "1003"))
WS_CLOSE_TOO_LARGE_CODE = int(os.getenv("WS_CLOSE_TOO_LARGE_CODE", "1009"))
WS_CLOSE_INTERNAL_ERROR_CODE = int(os.getenv("WS_CLOSE_INTERNAL_ERROR_CODE", "1011"))
WS_CLOSE_SUPERSEDED_CODE = int(os.getenv("WS_CLOSE_SUPERSEDED_CODE", "4000"))
WS_CLOSE_UNAUTHORIZED_CODE = int(os.getenv("WS_CLOSE_UNAUTHORIZED_CODE", "4001"))
WS_CLOSE_MALFORMED_CODE = int(os.getenv("WS_CLOSE_MALFORMED_CODE", "4400"))

WS_CLOSE_NORMAL_REASON = "Connection closed"
WS_CLOSE_INVALID_MESSAGE_REASON = "Invalid message format"
WS_CLOSE_TOO_LARGE_REASON = "Message too large"
WS_CLOSE_INTERNAL_ERROR_REASON = "Internal error"
WS_CLOSE_SUPERSEDED_REASON = "Another connection opened"

# HTTP statuses used when the server can deny the upgrade outright
WS_DENY_MALFORMED_STATUS = 400
WS_DENY_UNAUTHORIZED_STATUS = 401

# ============================================================================
# Sub-protocol Negotiation
# ============================================================================

WS_PROTOCOL_HEADER = "sec-websocket-protocol"
WS_SUBPROTOCOL = os.getenv("WS_SUBPROTOCOL", "chat")

__all__ = [
    "WS_MAX_MESSAGE_BYTES",
    "WS_SEND_TIMEOUT_S",
    "WS_CLOSE_TIMEOUT_S",
    "WS_CLOSE_NORMAL_CODE",
    "WS_CLOSE_INVALID_MESSAGE_CODE",
    "WS_CLOSE_TOO_LARGE_CODE",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_SUPERSEDED_CODE",
    "WS_CLOSE_UNAUTHORIZED_CODE",
    "WS_CLOSE_MALFORMED_CODE",
    "WS_CLOSE_NORMAL_REASON",
    "WS_CLOSE_INVALID_MESSAGE_REASON",
    "WS_CLOSE_TOO_LARGE_REASON",
    "WS_CLOSE_INTERNAL_ERROR_REASON",
    "WS_CLOSE_SUPERSEDED_REASON",
    "WS_DENY_MALFORMED_STATUS",
    "WS_DENY_UNAUTHORIZED_STATUS",
    "WS_PROTOCOL_HEADER",
    "WS_SUBPROTOCOL",
]
