"""Stateful response selection for mocked endpoints."""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Any

import structlog

from aumai_mockengine.conditions import evaluate_condition
from aumai_mockengine.core import ScenarioConfigError
from aumai_mockengine.errors import resolve_error_scenario
from aumai_mockengine.models import (
    ConditionalRule,
    ErrorScenario,
    MockResponse,
    ScenarioConfig,
    SequenceResponse,
    StateTransition,
    TriggerKind,
)
from aumai_mockengine.store import InMemoryStateStore, StateStore

logger = structlog.get_logger(__name__)


def transition_fires(
    transition: StateTransition, request_body: Any | None
) -> bool:
    """Return whether *transition*'s trigger holds for this call.

    ``auto`` and ``on_call`` always hold.  ``condition`` holds only when a
    request body is present and the attached condition evaluates true.
    """
    if transition.trigger == TriggerKind.auto:
        return True
    if transition.trigger == TriggerKind.on_call:
        return True
    if transition.trigger == TriggerKind.condition:
        if transition.condition is None or request_body is None:
            return False
        return evaluate_condition(transition.condition, request_body)
    return False


class ScenarioEngine:
    """Pick responses using scenario state machines, call sequences,
    conditional rules and probabilistic error scenarios.

    The engine is the only stateful piece of the library.  Its per-endpoint
    state lives in an injectable :class:`~aumai_mockengine.store.StateStore`;
    each engine gets a private in-memory store unless one is supplied.
    """

    def __init__(
        self,
        store: StateStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store if store is not None else InMemoryStateStore()
        self._rng = rng or random.Random()  # noqa: S311

    @property
    def store(self) -> StateStore:
        return self._store

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def process_scenario(
        self,
        endpoint_id: str,
        config: ScenarioConfig,
        request_body: Any | None = None,
    ) -> MockResponse:
        """Return the current state's response, then advance the state.

        The response always belongs to the state the endpoint was in
        *before* this call; a matching transition only affects the next
        call.

        Raises:
            ScenarioConfigError: if the current state is not declared in
                *config*.
        """
        with self._store.lock(endpoint_id):
            current_name = self._store.get_state(endpoint_id) or config.initial_state
            current = config.find_state(current_name)
            if current is None:
                raise ScenarioConfigError(
                    f"State '{current_name}' not found in scenario config "
                    f"for endpoint '{endpoint_id}'."
                )

            next_name = current_name
            for transition in config.transitions:
                if transition.from_state != current_name:
                    continue
                if transition_fires(transition, request_body):
                    next_name = transition.to_state
                    break

            self._store.set_state(endpoint_id, next_name)

        if next_name != current_name:
            logger.info(
                "scenario_transition",
                endpoint_id=endpoint_id,
                from_state=current_name,
                to_state=next_name,
            )
        return current.response.model_copy(deep=True)

    def process_sequence(
        self,
        endpoint_id: str,
        sequences: Iterable[SequenceResponse],
        default_response: MockResponse,
    ) -> MockResponse:
        """Count this call and return the sequence entry for that number.

        Call numbers are 1-indexed; the first entry whose ``call_number``
        equals the new count wins, otherwise *default_response* is returned.
        """
        count = self._store.increment_call_count(endpoint_id)
        for entry in sequences:
            if entry.call_number == count:
                logger.debug(
                    "sequence_matched", endpoint_id=endpoint_id, call_number=count
                )
                return entry.as_response().model_copy(deep=True)
        return default_response

    def process_conditional_rules(
        self,
        rules: Iterable[ConditionalRule],
        request_body: Any,
        default_response: MockResponse,
    ) -> MockResponse:
        """Return the response of the first rule whose condition holds."""
        for index, rule in enumerate(rules):
            if evaluate_condition(rule.condition, request_body):
                logger.debug("conditional_rule_matched", rule_index=index)
                return rule.response.model_copy(deep=True)
        return default_response

    def process_error_scenario(
        self, errors: Iterable[ErrorScenario]
    ) -> MockResponse | None:
        """Run one independent trial per entry, in order.

        Returns the first entry that fires, with its override merged over
        the catalog response, or None when none fires.
        """
        for scenario in errors:
            if self._rng.random() < scenario.probability:
                logger.info(
                    "error_scenario_fired",
                    error_kind=scenario.type.value,
                    probability=scenario.probability,
                )
                return resolve_error_scenario(scenario)
        return None

    # ------------------------------------------------------------------
    # Introspection and reset
    # ------------------------------------------------------------------

    def get_call_count(self, endpoint_id: str) -> int:
        return self._store.get_call_count(endpoint_id)

    def get_current_state(self, endpoint_id: str) -> str | None:
        return self._store.get_state(endpoint_id)

    def reset_endpoint(self, endpoint_id: str) -> None:
        """Forget state and call count; the next call starts from scratch."""
        with self._store.lock(endpoint_id):
            self._store.reset(endpoint_id)
        logger.info("endpoint_state_reset", endpoint_id=endpoint_id)

    def reset_all(self) -> None:
        self._store.reset_all()
        logger.info("all_endpoint_state_reset")


default_engine = ScenarioEngine()


__all__ = ["ScenarioEngine", "default_engine", "transition_fires"]
