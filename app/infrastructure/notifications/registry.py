"""Process-local registry of open realtime connections grouped by user."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Dict, FrozenSet, Generic, Set, TypeVar

H = TypeVar("H", bound=Hashable)


class ConnectionRegistry(Generic[H]):
    """Track which users have open connections and through which handles.

    The registry is owned by a single gateway instance, which is the only
    caller of :meth:`register` and :meth:`unregister`. Every other component
    reads snapshots. All methods are synchronous, so on one event loop no two
    mutations ever interleave.
    """

    def __init__(self) -> None:
        self._connections: Dict[str, Set[H]] = {}

    def register(self, user_id: str, handle: H) -> None:
        """Add ``handle`` to the connections of ``user_id``."""

        self._connections.setdefault(user_id, set()).add(handle)

    def unregister(self, user_id: str, handle: H) -> None:
        """Remove ``handle`` and drop the user entry once it is empty."""

        connections = self._connections.get(user_id)
        if connections is None:
            return
        connections.discard(handle)
        if not connections:
            self._connections.pop(user_id, None)

    def connections_for(self, user_id: str) -> FrozenSet[H]:
        """Return a snapshot of the handles currently open for ``user_id``."""

        return frozenset(self._connections.get(user_id, ()))

    def is_connected(self, user_id: str) -> bool:
        return user_id in self._connections

    def count_connected_users(self) -> int:
        return len(self._connections)

    def count_connections(self) -> int:
        return sum(len(connections) for connections in self._connections.values())

    def all_connections(self) -> list[H]:
        """Return a snapshot of every open handle across all users."""

        return [handle for connections in self._connections.values() for handle in connections]


__all__ = ["ConnectionRegistry"]
