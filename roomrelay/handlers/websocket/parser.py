"""Client payload parsing for the WebSocket handler.

Exactly two inbound shapes are recognised:

    {"type": "chat", "text": "<non-empty after trim>"}
    {"type": "name", "name": "<non-empty after trim>"}

Anything else raises ``InvalidMessageFormat``; frames over the byte ceiling
raise ``MessageTooLarge``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from ...errors import MessageTooLarge, InvalidMessageFormat
from ...config.websocket import WS_MAX_MESSAGE_BYTES


@dataclass(frozen=True, slots=True)
class ChatMessage:
    text: str


@dataclass(frozen=True, slots=True)
class NameMessage:
    name: str


ClientMessage = ChatMessage | NameMessage


def check_message_size(raw: str, limit: int = WS_MAX_MESSAGE_BYTES) -> int:
    """Return the UTF-8 size of ``raw`` or raise if it exceeds ``limit``."""
    size = len(raw.encode("utf-8"))
    if size > limit:
        raise MessageTooLarge(size, limit)
    return size


def _require_text(data: dict, field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str):
        raise InvalidMessageFormat(f"'{field}' must be a string.")
    if not value.strip():
        raise InvalidMessageFormat(f"'{field}' must not be empty.")
    return value


def parse_client_message(raw: str) -> ClientMessage:
    """Parse one inbound text frame into a chat or name message."""
    try:
        data = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as exc:
        raise InvalidMessageFormat("Message must be valid JSON.") from exc

    if not isinstance(data, dict):
        raise InvalidMessageFormat("Message must be a JSON object.")

    msg_type = data.get("type")
    if msg_type == "chat":
        return ChatMessage(text=_require_text(data, "text"))
    if msg_type == "name":
        return NameMessage(name=_require_text(data, "name").strip())
    raise InvalidMessageFormat(f"Message type {msg_type!r} is not supported.")


__all__ = [
    "ChatMessage",
    "ClientMessage",
    "NameMessage",
    "check_message_size",
    "parse_client_message",
]
