"""Unit tests for per-room registration, supersession and fanout."""

from __future__ import annotations

import asyncio

import pytest

from roomrelay.errors import InvalidName, NotRegistered
from roomrelay.rooms import ConnectionHandle, RoomRegistry
from roomrelay.config.websocket import WS_CLOSE_SUPERSEDED_CODE, WS_CLOSE_SUPERSEDED_REASON
from tests.helpers.fakes import FakeClock, FakeTransport

ROOM = "dec__vert"


def _connect(identity: str, **transport_kwargs) -> tuple[ConnectionHandle, FakeTransport]:
    transport = FakeTransport(**transport_kwargs)
    return ConnectionHandle(transport, connection_id=f"conn-{identity}"), transport


def test_register_defaults_display_name_to_identity() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        handle, _ = _connect("alice")
        metadata = await registry.register(handle, "alice")

        assert metadata.identity == "alice"
        assert metadata.display_name == "alice"
        assert metadata.room == ROOM
        assert registry.count() == 1
        assert registry.metadata_for(handle) is metadata

    asyncio.run(_run())


def test_register_same_handle_twice_is_a_noop() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        handle, transport = _connect("alice")
        first = await registry.register(handle, "alice")
        second = await registry.register(handle, "alice")

        assert first is second
        assert registry.count() == 1
        assert transport.close_calls == []

    asyncio.run(_run())


def test_register_supersedes_previous_session_of_identity() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        old, old_transport = _connect("alice")
        await registry.register(old, "alice")
        new, new_transport = _connect("alice")
        await registry.register(new, "alice")

        assert registry.count() == 1
        assert registry.metadata_for(old) is None
        assert registry.metadata_for(new) is not None
        assert old_transport.close_calls == [(WS_CLOSE_SUPERSEDED_CODE, WS_CLOSE_SUPERSEDED_REASON)]
        assert old.closed
        assert new_transport.close_calls == []

    asyncio.run(_run())


def test_concurrent_registration_of_same_identity_leaves_one() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        pairs = [_connect("alice") for _ in range(5)]
        await asyncio.gather(*(registry.register(handle, "alice") for handle, _ in pairs))

        assert registry.count() == 1
        survivors = [t for _, t in pairs if not t.close_calls]
        superseded = [t for _, t in pairs if t.close_calls == [(WS_CLOSE_SUPERSEDED_CODE, WS_CLOSE_SUPERSEDED_REASON)]]
        assert len(survivors) == 1
        assert len(superseded) == 4

    asyncio.run(_run())


def test_distinct_identities_coexist() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        for identity in ("alice", "bob", "carol"):
            handle, _ = _connect(identity)
            await registry.register(handle, identity)
        assert registry.count() == 3

    asyncio.run(_run())


def test_publish_reaches_every_handle_including_source() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        pairs = [_connect(identity) for identity in ("alice", "bob", "carol")]
        for (handle, _), identity in zip(pairs, ("alice", "bob", "carol")):
            await registry.register(handle, identity)

        source = pairs[0][0]
        report = await registry.publish({"type": "chat", "text": "hi"}, source=source)

        assert report.delivered == 3
        assert report.failed == 0
        for _, transport in pairs:
            assert transport.events() == [{"type": "chat", "text": "hi"}]

    asyncio.run(_run())


def test_publish_exclude_self_skips_source() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        pairs = [_connect(identity) for identity in ("alice", "bob", "carol")]
        for (handle, _), identity in zip(pairs, ("alice", "bob", "carol")):
            await registry.register(handle, identity)

        source, source_transport = pairs[0]
        report = await registry.publish({"type": "chat"}, exclude_self=True, source=source)

        assert report.delivered == 2
        assert source_transport.sent == []
        assert all(t.sent for _, t in pairs[1:])

    asyncio.run(_run())


def test_publish_to_empty_room_is_noop() -> None:
    async def _run() -> None:
        report = await RoomRegistry(ROOM).publish({"type": "chat"})
        assert report.attempted == 0

    asyncio.run(_run())


def test_publish_isolates_failed_recipient() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        good, good_transport = _connect("alice")
        bad, bad_transport = _connect("bob", fail=True)
        await registry.register(good, "alice")
        await registry.register(bad, "bob")

        report = await registry.publish({"type": "chat", "text": "x"})
        await registry.drain()

        assert report.delivered == 1
        assert report.failed == 1
        assert good_transport.events() == [{"type": "chat", "text": "x"}]
        assert registry.metadata_for(bad) is None
        assert registry.count() == 1
        assert bad_transport.close_calls == [(1011, "Delivery failed")]

        follow_up = await registry.publish({"type": "chat", "text": "y"})
        assert follow_up.delivered == 1
        assert follow_up.failed == 0

    asyncio.run(_run())


def test_publish_bounds_stalled_recipient_by_send_timeout() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM, send_timeout=0.02)
        fast, fast_transport = _connect("alice")
        slow, _ = _connect("bob", delay=1.0)
        await registry.register(fast, "alice")
        await registry.register(slow, "bob")

        report = await asyncio.wait_for(registry.publish({"type": "chat"}), timeout=0.5)
        await registry.drain()

        assert report.delivered == 1
        assert report.failed == 1
        assert fast_transport.sent
        assert registry.count() == 1

    asyncio.run(_run())


def test_concurrent_publishes_arrive_in_the_same_order_everywhere() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        pairs = [_connect("alice"), _connect("bob", delay=0.01), _connect("carol")]
        for (handle, _), identity in zip(pairs, ("alice", "bob", "carol")):
            await registry.register(handle, identity)

        await asyncio.gather(*(registry.publish({"type": "chat", "n": n}) for n in range(5)))

        orders = [[event["n"] for event in transport.events()] for _, transport in pairs]
        assert orders[0] == orders[1] == orders[2]
        assert sorted(orders[0]) == list(range(5))

    asyncio.run(_run())


def test_deregister_is_idempotent() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        handle, _ = _connect("alice")
        await registry.register(handle, "alice")

        first = await registry.deregister(handle)
        second = await registry.deregister(handle)

        assert first is not None
        assert first.identity == "alice"
        assert second is None
        assert registry.count() == 0

    asyncio.run(_run())


def test_deregister_unknown_handle_returns_none() -> None:
    async def _run() -> None:
        handle, _ = _connect("ghost")
        assert await RoomRegistry(ROOM).deregister(handle) is None

    asyncio.run(_run())


def test_deregister_during_slow_publish_is_safe() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        alice, _ = _connect("alice", delay=0.05)
        bob, _ = _connect("bob", delay=0.05)
        await registry.register(alice, "alice")
        await registry.register(bob, "bob")

        report, removed = await asyncio.gather(
            registry.publish({"type": "chat"}),
            registry.deregister(bob),
        )

        assert report.failed == 0
        assert removed is not None
        assert registry.count() == 1

    asyncio.run(_run())


def test_set_display_name_trims() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        handle, _ = _connect("alice")
        await registry.register(handle, "alice")
        await registry.set_display_name(handle, "  Alice Smith  ")

        assert registry.metadata_for(handle).display_name == "Alice Smith"

    asyncio.run(_run())


def test_set_display_name_rejects_blank() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        handle, _ = _connect("alice")
        await registry.register(handle, "alice")

        with pytest.raises(InvalidName):
            await registry.set_display_name(handle, "   ")
        assert registry.metadata_for(handle).display_name == "alice"

    asyncio.run(_run())


def test_set_display_name_requires_registration() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        handle, _ = _connect("alice")

        with pytest.raises(NotRegistered):
            await registry.set_display_name(handle, "Alice")

    asyncio.run(_run())


def test_is_idle_requires_empty_room_and_elapsed_window() -> None:
    async def _run() -> None:
        clock = FakeClock()
        registry = RoomRegistry(ROOM, now_fn=clock)
        handle, _ = _connect("alice")
        await registry.register(handle, "alice")

        clock.advance(600)
        assert not registry.is_idle(300)

        await registry.deregister(handle)
        assert not registry.is_idle(300)
        clock.advance(301)
        assert registry.is_idle(300)

    asyncio.run(_run())


def test_deregister_before_publish_skips_removed_handle() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        alice, alice_transport = _connect("alice")
        bob, bob_transport = _connect("bob")
        await registry.register(alice, "alice")
        await registry.register(bob, "bob")

        removed, report = await asyncio.gather(
            registry.deregister(bob),
            registry.publish({"type": "chat"}),
        )

        assert removed is not None
        assert report.delivered == 1
        assert bob_transport.sent == []
        assert alice_transport.sent

    asyncio.run(_run())


def test_publish_skips_handle_whose_peer_already_left() -> None:
    async def _run() -> None:
        registry = RoomRegistry(ROOM)
        alice, alice_transport = _connect("alice")
        bob, bob_transport = _connect("bob")
        await registry.register(alice, "alice")
        await registry.register(bob, "bob")

        bob.mark_closed()
        report = await registry.publish({"type": "chat"})
        await registry.drain()

        assert report.delivered == 1
        assert report.failed == 0
        assert alice_transport.sent
        assert bob_transport.sent == []
        assert bob_transport.close_calls == []

    asyncio.run(_run())
