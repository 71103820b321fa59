"""Aggregator of configuration modules.

This module re-exports the config API from smaller modules:
- secrets: the handshake HMAC secret
- websocket: frame limits, send timeouts, close codes, sub-protocol
- rooms: room key format and idle eviction
- logging: log level and format
"""

from .secrets import RELAY_WEBSOCKET_SECRET
from .rooms import (
    ROOM_IDLE_TIMEOUT_S,
    ROOM_REAPER_TICK_S,
    ROOM_KEY_SEPARATOR,
)
from .websocket import (
    WS_MAX_MESSAGE_BYTES,
    WS_SEND_TIMEOUT_S,
    WS_CLOSE_TIMEOUT_S,
    WS_SUBPROTOCOL,
)
from .logging import APP_LOG_LEVEL, APP_LOG_FORMAT, APP_LOG_DATEFMT

__all__ = [
    "RELAY_WEBSOCKET_SECRET",
    "ROOM_IDLE_TIMEOUT_S",
    "ROOM_REAPER_TICK_S",
    "ROOM_KEY_SEPARATOR",
    "WS_MAX_MESSAGE_BYTES",
    "WS_SEND_TIMEOUT_S",
    "WS_CLOSE_TIMEOUT_S",
    "WS_SUBPROTOCOL",
    "APP_LOG_LEVEL",
    "APP_LOG_FORMAT",
    "APP_LOG_DATEFMT",
]
