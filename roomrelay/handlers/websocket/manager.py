"""Primary WebSocket connection handler orchestration.

Each connection runs as one sequential task driving its lifecycle:

1. Handshake (PENDING_AUTH):
   - Decode and verify the token carried in Sec-WebSocket-Protocol
   - Reject the upgrade (never accept) on failure

2. Admission (-> SUBSCRIBED):
   - Lease the room's registry from the room store
   - Accept, echoing the negotiated sub-protocol
   - Register with the room, superseding any earlier session of the identity

3. Message loop (SUBSCRIBED):
   - Text frames only, size-checked, parsed as chat or name messages
   - chat: publish a chat event enriched with the display name
   - name: update the display name, then publish a name event
   - Any violation closes the connection; there is no per-message recovery

4. Teardown (CLOSING -> CLOSED):
   - Runs on every exit path, including closes the handler initiated
   - Deregisters exactly once and drops connection-local state
"""

from __future__ import annotations

import logging
import contextlib

from fastapi import WebSocket, WebSocketDisconnect

from ...logging import log_context
from ...auth.handshake import AuthToken, authenticate_handshake, negotiate_subprotocol
from ...errors import (
    MessageError,
    RegistryError,
    HandshakeError,
    InvalidMessageFormat,
    classify_error,
)
from ...rooms import ConnectionHandle, ConnectionMetadata, RoomRegistry
from ...runtime.dependencies import RuntimeDeps
from ...telemetry import capture_error, get_metrics, session_span
from ...config.websocket import (
    WS_PROTOCOL_HEADER,
    WS_CLOSE_INTERNAL_ERROR_CODE,
    WS_CLOSE_INTERNAL_ERROR_REASON,
)
from .errors import reject_handshake
from .events import build_chat_event, build_name_event
from .parser import ChatMessage, NameMessage, check_message_size, parse_client_message
from .lifecycle import ConnectionLifecycle
from .disconnects import is_expected_disconnect

logger = logging.getLogger(__name__)


async def receive_text_frame(ws: WebSocket) -> str:
    """Wait for the next text frame.

    Raises:
        WebSocketDisconnect: The peer went away.
        InvalidMessageFormat: A binary frame arrived.
    """
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
    text = message.get("text")
    if text is None:
        raise InvalidMessageFormat("Binary frames are not supported.")
    return text


async def _handle_frame(
    raw: str,
    *,
    handle: ConnectionHandle,
    registry: RoomRegistry,
    metadata: ConnectionMetadata,
    token: AuthToken,
) -> None:
    check_message_size(raw)
    message = parse_client_message(raw)

    if isinstance(message, ChatMessage):
        event = build_chat_event(metadata, token, message.text)
        report = await registry.publish(event, exclude_self=False, source=handle)
        logger.debug("WS chat delivered=%s failed=%s", report.delivered, report.failed)
        return

    if isinstance(message, NameMessage):
        await registry.set_display_name(handle, message.name)
        report = await registry.publish(build_name_event(metadata, token), exclude_self=False, source=handle)
        logger.info("WS name updated; delivered=%s failed=%s", report.delivered, report.failed)


async def _run_message_loop(
    ws: WebSocket,
    *,
    handle: ConnectionHandle,
    registry: RoomRegistry,
    metadata: ConnectionMetadata,
    token: AuthToken,
    lifecycle: ConnectionLifecycle,
) -> None:
    """Receive and dispatch frames until the peer leaves or a violation occurs."""
    while lifecycle.is_subscribed:
        try:
            raw = await receive_text_frame(ws)
            if handle.closed:
                return
            await _handle_frame(raw, handle=handle, registry=registry, metadata=metadata, token=token)
        except MessageError as exc:
            logger.warning("WS protocol violation (%s): %s", classify_error(exc), exc)
            get_metrics().errors_total.add(1, {"type": classify_error(exc)})
            await handle.close(exc.close_code, exc.close_reason)
            return
        except RegistryError as exc:
            logger.error("WS registry invariant violated: %s", exc)
            get_metrics().errors_total.add(1, {"type": classify_error(exc)})
            await handle.close(WS_CLOSE_INTERNAL_ERROR_CODE, WS_CLOSE_INTERNAL_ERROR_REASON)
            return


async def _teardown(
    registry: RoomRegistry,
    handle: ConnectionHandle,
    lifecycle: ConnectionLifecycle,
) -> None:
    """Deregister once and move the lifecycle to CLOSED."""
    if lifecycle.begin_close():
        handle.mark_closed()
        await registry.deregister(handle)
    lifecycle.finish()


async def _reject(ws: WebSocket, lifecycle: ConnectionLifecycle, exc: HandshakeError) -> None:
    lifecycle.begin_close()
    get_metrics().connections_rejected_total.add(1, {"reason": exc.reason_code})
    logger.warning("WebSocket handshake rejected (%s): %s", exc.reason_code, exc.message)
    try:
        await reject_handshake(ws, exc)
    except Exception as err:  # noqa: BLE001
        if not is_expected_disconnect(err):
            raise
    finally:
        lifecycle.finish()


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    """Drive one WebSocket connection from handshake to teardown.

    Args:
        ws: The incoming WebSocket connection from FastAPI.
        runtime_deps: Process-wide services (room store, secret).
    """
    lifecycle = ConnectionLifecycle()
    header = ws.headers.get(WS_PROTOCOL_HEADER)

    try:
        token = authenticate_handshake(header, runtime_deps.secret)
    except HandshakeError as exc:
        with log_context(connection_id=lifecycle.connection_id):
            await _reject(ws, lifecycle, exc)
        return

    metrics = get_metrics()
    with log_context(room=token.room, identity=token.identity, connection_id=lifecycle.connection_id):
        async with runtime_deps.room_store.lease(token.room) as registry:
            handle = ConnectionHandle(ws, connection_id=lifecycle.connection_id)
            subscribed = False
            try:
                with session_span(
                    room=token.room,
                    identity=token.identity,
                    connection_id=lifecycle.connection_id,
                ):
                    await ws.accept(subprotocol=negotiate_subprotocol(header))
                    metadata = await registry.register(handle, token.identity)
                    lifecycle.subscribe()
                    subscribed = True
                    metrics.active_connections.add(1)
                    logger.info("WebSocket subscribed. Room connections: %s", registry.count())
                    await _run_message_loop(
                        ws,
                        handle=handle,
                        registry=registry,
                        metadata=metadata,
                        token=token,
                        lifecycle=lifecycle,
                    )
            except Exception as exc:  # noqa: BLE001
                if is_expected_disconnect(exc):
                    logger.info("WebSocket peer disconnected")
                else:
                    logger.exception("WebSocket error")
                    metrics.errors_total.add(1, {"type": classify_error(exc)})
                    capture_error(exc)
                    with contextlib.suppress(Exception):
                        await handle.close(WS_CLOSE_INTERNAL_ERROR_CODE, WS_CLOSE_INTERNAL_ERROR_REASON)
            finally:
                await _teardown(registry, handle, lifecycle)
                if subscribed:
                    metrics.active_connections.add(-1)
                    metrics.connection_duration.record(lifecycle.duration())
                logger.info("WebSocket connection closed. Room connections: %s", registry.count())


__all__ = ["handle_websocket_connection", "receive_text_frame"]
