"""Authenticated room-scoped WebSocket chat relay."""

__version__ = "0.1.0"
