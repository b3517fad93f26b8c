"""Per-endpoint runtime state for the scenario engine."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager


class StateStore(ABC):
    """Keyed storage for FSM state names and call counters.

    Implementations must make :meth:`increment_call_count` atomic and
    :meth:`lock` mutually exclusive per endpoint, so that an engine holding
    ``lock(endpoint_id)`` sees no interleaved writes for that endpoint.
    """

    @abstractmethod
    def get_state(self, endpoint_id: str) -> str | None:
        """Return the current state name, or None if never set."""

    @abstractmethod
    def set_state(self, endpoint_id: str, state: str) -> None:
        """Record *state* as the current state of *endpoint_id*."""

    @abstractmethod
    def get_call_count(self, endpoint_id: str) -> int:
        """Return the number of sequence calls recorded (0 if none)."""

    @abstractmethod
    def increment_call_count(self, endpoint_id: str) -> int:
        """Atomically add one to the call counter and return the new value."""

    @abstractmethod
    def reset(self, endpoint_id: str) -> None:
        """Forget the state and call count of *endpoint_id*."""

    @abstractmethod
    def reset_all(self) -> None:
        """Forget every endpoint."""

    @abstractmethod
    def lock(self, endpoint_id: str) -> AbstractContextManager[None]:
        """Context manager serialising work on *endpoint_id*."""


class InMemoryStateStore(StateStore):
    """Process-local :class:`StateStore` backed by dictionaries.

    One short-lived lock guards the maps themselves; a re-entrant lock per
    endpoint serialises engine steps, so different endpoints never wait on
    each other.
    """

    def __init__(self) -> None:
        self._states: dict[str, str] = {}
        self._call_counts: dict[str, int] = {}
        self._endpoint_locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def get_state(self, endpoint_id: str) -> str | None:
        with self._guard:
            return self._states.get(endpoint_id)

    def set_state(self, endpoint_id: str, state: str) -> None:
        with self._guard:
            self._states[endpoint_id] = state

    def get_call_count(self, endpoint_id: str) -> int:
        with self._guard:
            return self._call_counts.get(endpoint_id, 0)

    def increment_call_count(self, endpoint_id: str) -> int:
        with self._guard:
            count = self._call_counts.get(endpoint_id, 0) + 1
            self._call_counts[endpoint_id] = count
            return count

    def reset(self, endpoint_id: str) -> None:
        with self._guard:
            self._states.pop(endpoint_id, None)
            self._call_counts.pop(endpoint_id, None)

    def reset_all(self) -> None:
        with self._guard:
            self._states.clear()
            self._call_counts.clear()

    @contextmanager
    def lock(self, endpoint_id: str) -> Iterator[None]:
        with self._guard:
            endpoint_lock = self._endpoint_locks.get(endpoint_id)
            if endpoint_lock is None:
                endpoint_lock = self._endpoint_locks[endpoint_id] = threading.RLock()
        with endpoint_lock:
            yield


__all__ = ["InMemoryStateStore", "StateStore"]
