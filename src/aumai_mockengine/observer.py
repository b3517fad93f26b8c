"""Decision trace for mocked calls."""

from __future__ import annotations

import threading
from datetime import UTC, datetime

from aumai_mockengine.models import ObservationPoint


class MockObserver:
    """Collect timestamped decisions made while serving mock calls.

    Every mutation and snapshot read happens under one lock, so a single
    observer may be shared by concurrent requests.
    """

    def __init__(self, max_points: int | None = None) -> None:
        self._observations: list[ObservationPoint] = []
        self._lock: threading.Lock = threading.Lock()
        self._max_points = max_points

    def observe(
        self,
        endpoint_id: str,
        event: str,
        details: dict[str, object] | None = None,
    ) -> None:
        """Record a single decision.

        Args:
            endpoint_id: The endpoint the decision was made for.
            event:       A short event label (e.g. ``"sequence_matched"``).
            details:     Optional free-form detail dict.
        """
        point = ObservationPoint(
            timestamp=datetime.now(tz=UTC),
            endpoint_id=endpoint_id,
            event=event,
            details=details or {},
        )
        with self._lock:
            self._observations.append(point)
            if self._max_points is not None and len(self._observations) > self._max_points:
                del self._observations[: len(self._observations) - self._max_points]

    def get_observations(self, endpoint_id: str | None = None) -> list[ObservationPoint]:
        """Return a copy of the recorded points, optionally for one endpoint."""
        with self._lock:
            if endpoint_id is None:
                return list(self._observations)
            return [p for p in self._observations if p.endpoint_id == endpoint_id]

    def events(self, endpoint_id: str | None = None) -> list[str]:
        """Event labels in recording order."""
        return [p.event for p in self.get_observations(endpoint_id)]

    def clear(self) -> None:
        """Discard all recorded observations."""
        with self._lock:
            self._observations.clear()


__all__ = ["MockObserver"]
