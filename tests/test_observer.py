"""Tests for aumai_mockengine.observer: MockObserver."""

from __future__ import annotations

import threading

from aumai_mockengine.models import ObservationPoint
from aumai_mockengine.observer import MockObserver

# ---------------------------------------------------------------------------
# Basic observe / get_observations / clear
# ---------------------------------------------------------------------------


class TestObserve:
    def test_observe_adds_entry(self, observer: MockObserver) -> None:
        observer.observe("ep", "default_response")
        assert len(observer.get_observations()) == 1

    def test_observation_fields_correct(self, observer: MockObserver) -> None:
        observer.observe("ep", "sequence_matched", {"call_number": 2})
        point = observer.get_observations()[0]
        assert point.endpoint_id == "ep"
        assert point.event == "sequence_matched"
        assert point.details["call_number"] == 2

    def test_timestamp_is_utc_aware(self, observer: MockObserver) -> None:
        observer.observe("ep", "network_timeout")
        assert observer.get_observations()[0].timestamp.tzinfo is not None

    def test_details_none_becomes_empty_dict(self, observer: MockObserver) -> None:
        observer.observe("ep", "x", None)
        assert observer.get_observations()[0].details == {}

    def test_events_in_order(self, observer: MockObserver) -> None:
        for i in range(5):
            observer.observe("ep", f"event_{i}")
        assert observer.events() == [f"event_{i}" for i in range(5)]


class TestGetObservations:
    def test_returns_observation_points(self, observer: MockObserver) -> None:
        observer.observe("a", "b")
        assert isinstance(observer.get_observations()[0], ObservationPoint)

    def test_mutating_result_does_not_affect_observer(
        self, observer: MockObserver
    ) -> None:
        observer.observe("a", "b")
        snapshot = observer.get_observations()
        snapshot.clear()
        assert len(observer.get_observations()) == 1

    def test_filter_by_endpoint(self, observer: MockObserver) -> None:
        observer.observe("a", "one")
        observer.observe("b", "two")
        observer.observe("a", "three")
        assert observer.events("a") == ["one", "three"]
        assert observer.events("b") == ["two"]
        assert observer.events("c") == []

    def test_clear(self, observer: MockObserver) -> None:
        observer.observe("a", "b")
        observer.clear()
        assert observer.get_observations() == []


class TestBoundedObserver:
    def test_oldest_points_dropped(self) -> None:
        observer = MockObserver(max_points=3)
        for i in range(5):
            observer.observe("ep", f"e{i}")
        assert observer.events() == ["e2", "e3", "e4"]

    def test_unbounded_by_default(self, observer: MockObserver) -> None:
        for i in range(1000):
            observer.observe("ep", str(i))
        assert len(observer.get_observations()) == 1000


class TestThreadSafety:
    def test_concurrent_observe(self, observer: MockObserver) -> None:
        def worker(n: int) -> None:
            for i in range(100):
                observer.observe(f"ep-{n}", f"event_{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(observer.get_observations()) == 800
        assert len(observer.get_observations("ep-3")) == 100
