"""WebSocket handler exports."""

from .manager import handle_websocket_connection
from .lifecycle import ConnectionLifecycle, ConnectionState

__all__ = [
    "handle_websocket_connection",
    "ConnectionLifecycle",
    "ConnectionState",
]
