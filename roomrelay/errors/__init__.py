"""Centralized exception classes for the relay.

Organization:
    - handshake.py: admission failures (malformed token, bad signature)
    - registry.py: room registry contract violations
    - messages.py: per-message protocol violations with close codes
    - lifecycle.py: connection state machine misuse
    - classify.py: exception-to-telemetry label mapping
"""

from .classify import classify_error
from .lifecycle import InvalidTransition
from .registry import InvalidName, NotRegistered, RegistryError
from .messages import MessageError, MessageTooLarge, InvalidMessageFormat
from .handshake import Unauthorized, HandshakeError, MalformedHandshake

__all__ = [
    # Handshake
    "HandshakeError",
    "MalformedHandshake",
    "Unauthorized",
    # Registry
    "RegistryError",
    "NotRegistered",
    "InvalidName",
    # Messages
    "MessageError",
    "MessageTooLarge",
    "InvalidMessageFormat",
    # Lifecycle
    "InvalidTransition",
    # Classification
    "classify_error",
]
