"""Handshake rejection helpers.

A rejected handshake never completes: when the ASGI server supports the
WebSocket Denial Response extension the upgrade is answered with a plain
HTTP error (400 malformed, 401 unauthorized). Otherwise the connection is
closed before acceptance with an application close code (4400 / 4001),
which ASGI servers also turn into a refused upgrade.
"""

from __future__ import annotations

import logging

from fastapi import WebSocket
from fastapi.responses import PlainTextResponse

from ...errors import HandshakeError

logger = logging.getLogger(__name__)

_DENIAL_EXTENSION = "websocket.http.response"


def supports_denial_response(ws: WebSocket) -> bool:
    extensions = ws.scope.get("extensions") or {}
    return _DENIAL_EXTENSION in extensions


async def reject_handshake(ws: WebSocket, exc: HandshakeError) -> None:
    """Refuse the upgrade without ever accepting the connection."""
    if supports_denial_response(ws):
        await ws.send_denial_response(
            PlainTextResponse(exc.message, status_code=exc.status_code)
        )
        return
    logger.debug("denial response unsupported; closing with %s", exc.close_code)
    await ws.close(code=exc.close_code, reason=exc.reason_code)


__all__ = ["reject_handshake", "supports_denial_response"]
