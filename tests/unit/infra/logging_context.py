"""Unit tests for context-aware log records."""

from __future__ import annotations

import logging

from roomrelay.logging import log_context, install_log_context, current_log_context


def test_log_context_sets_and_restores_fields() -> None:
    assert current_log_context()["room"] == "-"
    with log_context(room="dec__vert", identity="alice", connection_id="c1"):
        assert current_log_context() == {"room": "dec__vert", "identity": "alice", "connection_id": "c1"}
        with log_context(connection_id="c2"):
            assert current_log_context()["connection_id"] == "c2"
            assert current_log_context()["room"] == "dec__vert"
        assert current_log_context()["connection_id"] == "c1"
    assert current_log_context() == {"room": "-", "identity": "-", "connection_id": "-"}


def test_installed_factory_injects_fields_into_records() -> None:
    install_log_context()
    with log_context(room="dec__vert", connection_id="c1"):
        record = logging.getLogRecordFactory()("roomrelay", logging.INFO, __file__, 1, "msg", (), None)
    assert record.room == "dec__vert"
    assert record.connection_id == "c1"
    assert record.identity == "-"
