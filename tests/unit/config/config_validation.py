"""Unit tests for startup configuration validation."""

from __future__ import annotations

import asyncio

import pytest

import roomrelay.helpers.validation as validation_mod
from roomrelay.rooms import ConnectionHandle
from roomrelay.runtime import build_runtime_deps
from roomrelay.config.websocket import WS_CLOSE_NORMAL_CODE, WS_CLOSE_NORMAL_REASON
from tests.helpers.fakes import FakeTransport


def test_validate_env_passes_with_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(validation_mod, "RELAY_WEBSOCKET_SECRET", "secret")
    validation_mod.validate_env()


def test_validate_env_requires_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(validation_mod, "RELAY_WEBSOCKET_SECRET", "")
    with pytest.raises(RuntimeError, match="RELAY_WEBSOCKET_SECRET"):
        validation_mod.validate_env()


def test_validate_env_reports_every_problem(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(validation_mod, "RELAY_WEBSOCKET_SECRET", "")
    monkeypatch.setattr(validation_mod, "WS_MAX_MESSAGE_BYTES", 0)
    monkeypatch.setattr(validation_mod, "WS_SEND_TIMEOUT_S", -1.0)
    with pytest.raises(RuntimeError) as exc_info:
        validation_mod.validate_env()
    message = str(exc_info.value)
    assert "RELAY_WEBSOCKET_SECRET" in message
    assert "WS_MAX_MESSAGE_BYTES" in message
    assert "WS_SEND_TIMEOUT_S" in message


def test_build_runtime_deps_uses_explicit_secret() -> None:
    deps = build_runtime_deps(secret="explicit")
    assert deps.secret == "explicit"
    assert deps.room_store.room_count() == 0


def test_build_runtime_deps_rejects_empty_secret() -> None:
    with pytest.raises(RuntimeError):
        build_runtime_deps(secret="")


def test_runtime_shutdown_closes_connections_normally() -> None:
    async def _run() -> None:
        deps = build_runtime_deps(secret="explicit")
        transport = FakeTransport()
        async with deps.room_store.lease("a__b") as registry:
            await registry.register(ConnectionHandle(transport), "alice")
            await deps.shutdown()
        assert transport.close_calls == [(WS_CLOSE_NORMAL_CODE, WS_CLOSE_NORMAL_REASON)]

    asyncio.run(_run())
