"""Compose the network simulator and the scenario engine into one call."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog

from aumai_mockengine.core import (
    MockDisabledError,
    NetworkOutcome,
    NetworkSimulator,
    OutcomeKind,
)
from aumai_mockengine.engine import ScenarioEngine, default_engine
from aumai_mockengine.generator import MockDataGenerator
from aumai_mockengine.models import (
    ApiModel,
    GeneratorOptions,
    MockConfig,
    MockResponse,
)
from aumai_mockengine.observer import MockObserver

logger = structlog.get_logger(__name__)

# Cap on points kept by the observer a responder creates for itself.
DEFAULT_OBSERVATION_LIMIT = 1000


class MockResponder:
    """Serve one mocked call from a :class:`MockConfig`.

    Stages run in a fixed order and each is skipped unless its flag is set:

    1. network simulation (timeout or transport error short-circuits),
    2. error scenarios,
    3. scenario state machine,
    4. call sequence,
    5. conditional rules,
    6. the static or dynamically generated default response.

    Engine state (call counts, FSM transitions) is updated before any
    simulated delay is waited out, so cancelling the wait does not undo it.
    """

    def __init__(
        self,
        engine: ScenarioEngine | None = None,
        simulator: NetworkSimulator | None = None,
        generator: MockDataGenerator | None = None,
        observer: MockObserver | None = None,
        models: Iterable[ApiModel] = (),
        generator_options: GeneratorOptions | None = None,
    ) -> None:
        self.engine = engine if engine is not None else default_engine
        self.simulator = simulator or NetworkSimulator()
        self.generator = generator or MockDataGenerator()
        self.observer = (
            observer
            if observer is not None
            else MockObserver(max_points=DEFAULT_OBSERVATION_LIMIT)
        )
        self.models: list[ApiModel] = list(models)
        self._generator_options = generator_options

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def respond(self, config: MockConfig, request_body: Any | None = None) -> MockResponse:
        """Return the response for one call, blocking for any simulated delay.

        Raises:
            MockDisabledError: if *config* is disabled.
            MockTimeoutError: after ``timeout_ms`` when a timeout is simulated.
            MockNetworkError: when a transport error is simulated.
            ScenarioConfigError: if the scenario references an unknown state.
        """
        outcome = self._plan(config)
        if outcome.kind != OutcomeKind.ok:
            self.simulator.apply(outcome)
        response = self.select_response(config, request_body)
        self.simulator.apply(outcome)
        return response

    async def respond_async(
        self, config: MockConfig, request_body: Any | None = None
    ) -> MockResponse:
        """Asyncio variant of :meth:`respond`; only the awaiting task waits."""
        outcome = self._plan(config)
        if outcome.kind != OutcomeKind.ok:
            await self.simulator.apply_async(outcome)
        response = self.select_response(config, request_body)
        await self.simulator.apply_async(outcome)
        return response

    def select_response(
        self, config: MockConfig, request_body: Any | None = None
    ) -> MockResponse:
        """Run every response-selection stage after network simulation."""
        endpoint_id = config.endpoint_id
        log = logger.bind(endpoint_id=endpoint_id)

        if config.error_scenarios_enabled and config.error_scenarios:
            injected = self.engine.process_error_scenario(config.error_scenarios)
            if injected is not None:
                self.observer.observe(
                    endpoint_id,
                    "error_scenario_fired",
                    {"status_code": injected.status_code},
                )
                return injected

        if config.scenario_enabled and config.scenario_config is not None:
            response = self.engine.process_scenario(
                endpoint_id, config.scenario_config, request_body
            )
            self.observer.observe(
                endpoint_id,
                "scenario_response",
                {
                    "status_code": response.status_code,
                    "next_state": self.engine.get_current_state(endpoint_id),
                },
            )
            return response

        fallback, fallback_event = self._fallback(config, request_body)

        if config.sequence_enabled:
            response = self.engine.process_sequence(
                endpoint_id, config.sequence_responses, fallback
            )
            if response is not fallback:
                self.observer.observe(
                    endpoint_id,
                    "sequence_matched",
                    {"call_number": self.engine.get_call_count(endpoint_id)},
                )
                return response

        self.observer.observe(
            endpoint_id, fallback_event, {"status_code": fallback.status_code}
        )
        log.debug(fallback_event, status_code=fallback.status_code)
        return fallback

    def default_response(self, config: MockConfig) -> MockResponse:
        """The static template, or generated data overlaid with the template."""
        if config.use_dynamic_generation and config.response_model:
            model = self._find_model(config.response_model)
            if model is not None:
                body = self.generator.generate_from_template(
                    config.response_template or {},
                    model,
                    self.models,
                    self._options(),
                )
                return MockResponse(status_code=config.status_code, body=body)
            logger.warning(
                "response_model_not_found",
                endpoint_id=config.endpoint_id,
                model=config.response_model,
            )
        return config.static_response()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _plan(self, config: MockConfig) -> NetworkOutcome:
        if not config.enabled:
            raise MockDisabledError(config.endpoint_id)
        outcome = self.simulator.plan(config)
        if outcome.kind != OutcomeKind.ok:
            self.observer.observe(
                config.endpoint_id,
                f"network_{outcome.kind.value}",
                {
                    "delay_ms": outcome.delay_ms,
                    "error_kind": outcome.error_kind.value
                    if outcome.error_kind
                    else None,
                },
            )
        return outcome

    def _fallback(
        self, config: MockConfig, request_body: Any | None
    ) -> tuple[MockResponse, str]:
        default = self.default_response(config)
        if config.conditional_enabled and request_body is not None:
            response = self.engine.process_conditional_rules(
                config.conditional_rules, request_body, default
            )
            if response is not default:
                return response, "conditional_rule_matched"
        return default, "default_response"

    def _find_model(self, name: str) -> ApiModel | None:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def _options(self) -> GeneratorOptions | None:
        if self._generator_options is None:
            return None
        return self._generator_options.model_copy()


__all__ = ["DEFAULT_OBSERVATION_LIMIT", "MockResponder"]
