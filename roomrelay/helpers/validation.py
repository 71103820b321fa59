"""Environment validation helpers."""

from __future__ import annotations

from ..config.secrets import RELAY_WEBSOCKET_SECRET
from ..config.rooms import ROOM_IDLE_TIMEOUT_S, ROOM_REAPER_TICK_S
from ..config.websocket import (
    WS_SUBPROTOCOL,
    WS_SEND_TIMEOUT_S,
    WS_CLOSE_TIMEOUT_S,
    WS_MAX_MESSAGE_BYTES,
)


def validate_env() -> None:
    """Validate required configuration once during startup."""
    errors: list[str] = []

    # Required secrets
    if not RELAY_WEBSOCKET_SECRET:
        errors.append("RELAY_WEBSOCKET_SECRET environment variable is required")

    # Frame limits and timeouts
    if WS_MAX_MESSAGE_BYTES <= 0:
        errors.append(f"WS_MAX_MESSAGE_BYTES must be positive, got: {WS_MAX_MESSAGE_BYTES}")
    if WS_SEND_TIMEOUT_S <= 0:
        errors.append(f"WS_SEND_TIMEOUT_S must be positive, got: {WS_SEND_TIMEOUT_S}")
    if WS_CLOSE_TIMEOUT_S <= 0:
        errors.append(f"WS_CLOSE_TIMEOUT_S must be positive, got: {WS_CLOSE_TIMEOUT_S}")
    if not WS_SUBPROTOCOL or "," in WS_SUBPROTOCOL:
        errors.append(f"WS_SUBPROTOCOL must be a single non-empty token, got: {WS_SUBPROTOCOL!r}")

    # Room eviction
    if ROOM_IDLE_TIMEOUT_S < 0:
        errors.append(f"ROOM_IDLE_TIMEOUT_S must not be negative, got: {ROOM_IDLE_TIMEOUT_S}")
    if ROOM_REAPER_TICK_S < 0:
        errors.append(f"ROOM_REAPER_TICK_S must not be negative, got: {ROOM_REAPER_TICK_S}")

    if errors:
        raise RuntimeError("; ".join(errors))


__all__ = ["validate_env"]
