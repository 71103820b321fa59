"""Unit tests for inbound frame parsing and size limits."""

from __future__ import annotations

import json

import pytest

from roomrelay.errors import MessageTooLarge, InvalidMessageFormat
from roomrelay.handlers.websocket.parser import (
    ChatMessage,
    NameMessage,
    check_message_size,
    parse_client_message,
)


def _frame_of_size(size: int) -> str:
    envelope = json.dumps({"type": "chat", "text": ""})
    return json.dumps({"type": "chat", "text": "x" * (size - len(envelope))})


def test_frame_at_limit_is_accepted() -> None:
    raw = _frame_of_size(10240)
    assert check_message_size(raw, limit=10240) == 10240
    assert isinstance(parse_client_message(raw), ChatMessage)


def test_frame_over_limit_is_too_large() -> None:
    raw = _frame_of_size(10241)
    with pytest.raises(MessageTooLarge) as exc_info:
        check_message_size(raw, limit=10240)
    assert exc_info.value.size == 10241
    assert exc_info.value.close_code == 1009


def test_size_counts_utf8_bytes_not_characters() -> None:
    raw = "é" * 6
    assert check_message_size(raw, limit=12) == 12
    with pytest.raises(MessageTooLarge):
        check_message_size(raw, limit=11)


def test_chat_text_is_kept_verbatim() -> None:
    message = parse_client_message('{"type": "chat", "text": "  hello  "}')
    assert message == ChatMessage(text="  hello  ")


def test_name_is_trimmed() -> None:
    message = parse_client_message('{"type": "name", "name": "  Alice  "}')
    assert message == NameMessage(name="Alice")


def test_extra_fields_are_ignored() -> None:
    message = parse_client_message('{"type": "chat", "text": "hi", "decisionId": "other"}')
    assert message == ChatMessage(text="hi")


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        '"chat"',
        "{}",
        '{"type": "bogus"}',
        '{"type": "CHAT", "text": "hi"}',
        '{"type": "chat"}',
        '{"type": "chat", "text": "   "}',
        '{"type": "chat", "text": 5}',
        '{"type": "name", "name": ""}',
        '{"type": "name", "name": null}',
    ],
)
def test_invalid_messages_are_rejected(raw: str) -> None:
    with pytest.raises(InvalidMessageFormat) as exc_info:
        parse_client_message(raw)
    assert exc_info.value.close_code == 1003
