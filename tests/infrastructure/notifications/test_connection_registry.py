"""Tests for the process-local connection registry."""

from app.infrastructure.notifications import ConnectionRegistry


def test_register_creates_entry_and_is_idempotent():
    registry = ConnectionRegistry()
    handle = object()

    registry.register("alice", handle)
    registry.register("alice", handle)

    assert registry.connections_for("alice") == {handle}
    assert registry.is_connected("alice")
    assert registry.count_connected_users() == 1
    assert registry.count_connections() == 1


def test_register_then_unregister_restores_previous_state():
    registry = ConnectionRegistry()
    first, second = object(), object()
    registry.register("alice", first)
    before = registry.connections_for("alice")

    registry.register("alice", second)
    registry.unregister("alice", second)

    assert registry.connections_for("alice") == before


def test_unregister_last_handle_drops_user_entry():
    registry = ConnectionRegistry()
    handle = object()
    registry.register("alice", handle)

    registry.unregister("alice", handle)

    assert not registry.is_connected("alice")
    assert registry.connections_for("alice") == frozenset()
    assert registry.count_connected_users() == 0


def test_unregister_unknown_handle_is_a_noop():
    registry = ConnectionRegistry()
    known = object()
    registry.register("alice", known)

    registry.unregister("alice", object())
    registry.unregister("bob", object())

    assert registry.connections_for("alice") == {known}


def test_connections_for_returns_a_snapshot():
    registry = ConnectionRegistry()
    first, second = object(), object()
    registry.register("alice", first)

    snapshot = registry.connections_for("alice")
    registry.register("alice", second)

    assert snapshot == {first}
    assert registry.connections_for("alice") == {first, second}


def test_users_are_tracked_independently():
    registry = ConnectionRegistry()
    alice, bob_a, bob_b = object(), object(), object()
    registry.register("alice", alice)
    registry.register("bob", bob_a)
    registry.register("bob", bob_b)

    registry.unregister("alice", alice)

    assert registry.count_connected_users() == 1
    assert registry.count_connections() == 2
    assert set(registry.all_connections()) == {bob_a, bob_b}
