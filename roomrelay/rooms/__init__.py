"""Room registries: per-room connection tracking and fanout.

handle.py:
    ConnectionHandle, the opaque registry key wrapping one transport.

metadata.py:
    ConnectionMetadata (identity, display name) and DeliveryReport.

registry.py:
    RoomRegistry, the serialized per-room registry and publish engine.

store.py:
    RoomStore, the room-keyed owner of registries with idle eviction.
"""

from .handle import ConnectionHandle
from .metadata import DeliveryReport, ConnectionMetadata
from .registry import RoomRegistry
from .store import RoomStore

__all__ = [
    "ConnectionHandle",
    "ConnectionMetadata",
    "DeliveryReport",
    "RoomRegistry",
    "RoomStore",
]
