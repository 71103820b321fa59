"""Secrets and authentication related configuration."""

import os


# Shared HMAC key used to verify handshake tokens (validated at startup)
RELAY_WEBSOCKET_SECRET = os.getenv("RELAY_WEBSOCKET_SECRET")


__all__ = ["RELAY_WEBSOCKET_SECRET"]
