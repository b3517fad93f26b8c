"""Exceptions and the network condition simulator for aumai-mockengine."""

from __future__ import annotations

import asyncio
import random
import time
from enum import Enum

import structlog
from pydantic import BaseModel

from aumai_mockengine.models import NetworkConditions, NetworkErrorKind

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Custom exceptions
# ---------------------------------------------------------------------------


class MockEngineError(Exception):
    """Base class for application errors raised by aumai-mockengine."""


class ScenarioConfigError(MockEngineError, ValueError):
    """A scenario configuration references something that does not exist."""


class MockDisabledError(MockEngineError):
    """Mocking is switched off for the requested endpoint."""

    def __init__(self, endpoint_id: str) -> None:
        super().__init__(f"Mocking is disabled for endpoint '{endpoint_id}'.")
        self.endpoint_id = endpoint_id


class MockTimeoutError(TimeoutError):
    """Simulated client-observed timeout; no response should be sent."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Simulated timeout after {timeout_ms} ms.")
        self.timeout_ms = timeout_ms
        self.error_kind = NetworkErrorKind.GATEWAY_TIMEOUT


class MockNetworkError(ConnectionError):
    """Simulated transport failure; the connection never completes."""

    def __init__(self, error_kind: NetworkErrorKind) -> None:
        super().__init__(f"[{error_kind.value}] Simulated network error.")
        self.error_kind = error_kind


# ---------------------------------------------------------------------------
# NetworkSimulator
# ---------------------------------------------------------------------------


class OutcomeKind(str, Enum):
    ok = "ok"
    timeout = "timeout"
    network_error = "network_error"


class NetworkOutcome(BaseModel):
    """What the simulator decided for one request."""

    kind: OutcomeKind
    delay_ms: int = 0
    error_kind: NetworkErrorKind | None = None

    def raise_for_failure(self) -> None:
        """Raise the matching simulated transport exception, if any."""
        if self.kind == OutcomeKind.timeout:
            raise MockTimeoutError(self.delay_ms)
        if self.kind == OutcomeKind.network_error:
            if self.error_kind is None:
                raise ValueError("A network_error outcome requires error_kind")
            raise MockNetworkError(self.error_kind)


class NetworkSimulator:
    """Decide and apply latency, timeouts and transport errors.

    :meth:`plan` is the pure decision.  :meth:`simulate` blocks the calling
    thread and :meth:`simulate_async` suspends only the awaiting task; both
    raise :class:`MockTimeoutError` or :class:`MockNetworkError` after the
    planned wait when the request should fail below the HTTP layer.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()  # noqa: S311

    def compute_delay(self, conditions: NetworkConditions) -> int:
        """Return the artificial delay in milliseconds for one request."""
        if not conditions.use_random_delay:
            return conditions.delay_ms
        low = conditions.delay_random_min
        high = conditions.delay_random_max
        if low > high:
            low, high = high, low
        return self._rng.randint(low, high)

    def should_fail(self, probability: float) -> bool:
        """Return True with *probability* using this simulator's RNG."""
        return self._rng.random() < probability

    def plan(self, conditions: NetworkConditions) -> NetworkOutcome:
        """Decide the outcome for one request without waiting.

        A network error is tried first because the connection never
        completes; a configured timeout wins over any delay.
        """
        if conditions.simulate_network_error and self.should_fail(
            conditions.network_error_probability
        ):
            return NetworkOutcome(
                kind=OutcomeKind.network_error,
                error_kind=conditions.network_error_type,
            )
        if conditions.simulate_timeout:
            return NetworkOutcome(
                kind=OutcomeKind.timeout, delay_ms=conditions.timeout_ms
            )
        return NetworkOutcome(
            kind=OutcomeKind.ok, delay_ms=self.compute_delay(conditions)
        )

    def apply(self, outcome: NetworkOutcome) -> NetworkOutcome:
        """Wait out *outcome* by blocking the current thread, then raise on failure."""
        if outcome.delay_ms > 0:
            time.sleep(outcome.delay_ms / 1000.0)
        self._log(outcome)
        outcome.raise_for_failure()
        return outcome

    async def apply_async(self, outcome: NetworkOutcome) -> NetworkOutcome:
        """Wait out *outcome* without blocking the event loop, then raise on failure."""
        if outcome.delay_ms > 0:
            await asyncio.sleep(outcome.delay_ms / 1000.0)
        self._log(outcome)
        outcome.raise_for_failure()
        return outcome

    def simulate(self, conditions: NetworkConditions) -> NetworkOutcome:
        """Plan and apply in one step, blocking the current thread."""
        return self.apply(self.plan(conditions))

    async def simulate_async(self, conditions: NetworkConditions) -> NetworkOutcome:
        """Plan and apply in one step, suspending only the awaiting task."""
        return await self.apply_async(self.plan(conditions))

    @staticmethod
    def _log(outcome: NetworkOutcome) -> None:
        if outcome.kind == OutcomeKind.ok:
            if outcome.delay_ms:
                logger.debug("network_delay_applied", delay_ms=outcome.delay_ms)
            return
        logger.info(
            "network_failure_simulated",
            kind=outcome.kind.value,
            delay_ms=outcome.delay_ms,
            error_kind=outcome.error_kind.value if outcome.error_kind else None,
        )


# ---------------------------------------------------------------------------
# Preset latency profiles
# ---------------------------------------------------------------------------

LATENCY_PROFILES: dict[str, NetworkConditions] = {
    "fast": NetworkConditions(
        use_random_delay=True, delay_random_min=10, delay_random_max=50
    ),
    "normal": NetworkConditions(
        use_random_delay=True, delay_random_min=50, delay_random_max=200
    ),
    "slow": NetworkConditions(
        use_random_delay=True, delay_random_min=200, delay_random_max=1000
    ),
    "3g": NetworkConditions(
        use_random_delay=True,
        delay_random_min=500,
        delay_random_max=3000,
        simulate_network_error=True,
        network_error_type=NetworkErrorKind.GATEWAY_TIMEOUT,
        network_error_probability=0.05,
    ),
    "offline": NetworkConditions(
        simulate_network_error=True,
        network_error_type=NetworkErrorKind.CONNECTION_REFUSED,
        network_error_probability=1.0,
    ),
}


def latency_profile(name: str) -> NetworkConditions:
    """Return a copy of the preset network conditions called *name*.

    Raises:
        KeyError: if *name* is not one of :data:`LATENCY_PROFILES`.
    """
    return LATENCY_PROFILES[name].model_copy()


__all__ = [
    "LATENCY_PROFILES",
    "MockDisabledError",
    "MockEngineError",
    "MockNetworkError",
    "MockTimeoutError",
    "NetworkOutcome",
    "NetworkSimulator",
    "OutcomeKind",
    "ScenarioConfigError",
    "latency_profile",
]
