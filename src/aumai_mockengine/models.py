"""Pydantic models for aumai-mockengine."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for JSON shapes exchanged with the configuration store.

    Attributes are snake_case in Python and camelCase on the wire; both
    spellings are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys, dropping unset optional values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Closed enumerations
# ---------------------------------------------------------------------------


class ConditionOperator(str, Enum):
    """Operators understood by the condition evaluator."""

    eq = "eq"
    neq = "neq"
    gt = "gt"
    lt = "lt"
    contains = "contains"
    exists = "exists"
    matches = "matches"


class TriggerKind(str, Enum):
    """What makes a scenario state transition fire."""

    auto = "auto"
    on_call = "on_call"
    condition = "condition"


class ErrorKind(str, Enum):
    """Canned HTTP error responses available to error scenarios."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    RATE_LIMITED = "RATE_LIMITED"


class NetworkErrorKind(str, Enum):
    """Transport-level failures the network simulator can produce."""

    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    CONNECTION_RESET = "CONNECTION_RESET"
    DNS_RESOLUTION = "DNS_RESOLUTION"
    SSL_HANDSHAKE = "SSL_HANDSHAKE"
    GATEWAY_TIMEOUT = "GATEWAY_TIMEOUT"


# ---------------------------------------------------------------------------
# Responses and response-selection blocks
# ---------------------------------------------------------------------------


class MockResponse(WireModel):
    """A concrete HTTP response chosen for a mocked endpoint."""

    status_code: int = Field(ge=100, le=599)
    body: Any = Field(default_factory=dict)
    headers: dict[str, str] | None = None


class MockResponsePatch(WireModel):
    """Partial response used to override catalog defaults."""

    status_code: int | None = Field(default=None, ge=100, le=599)
    body: Any = None
    headers: dict[str, str] | None = None


class Condition(WireModel):
    """A typed predicate over one field of the request body."""

    field: str
    operator: ConditionOperator
    value: Any = None


class ScenarioState(WireModel):
    """A named state and the response served while the machine is in it."""

    name: str
    response: MockResponse


class StateTransition(WireModel):
    """An edge between two states, fired by its trigger after a response."""

    from_state: str = Field(alias="from")
    to_state: str = Field(alias="to")
    trigger: TriggerKind
    condition: Condition | None = None


class ScenarioConfig(WireModel):
    """A finite state machine scripting a multi-step mock conversation."""

    states: list[ScenarioState] = Field(default_factory=list)
    transitions: list[StateTransition] = Field(default_factory=list)
    initial_state: str

    def find_state(self, name: str) -> ScenarioState | None:
        """Return the first declared state called *name*, or None."""
        for state in self.states:
            if state.name == name:
                return state
        return None

    def undefined_state_names(self) -> list[str]:
        """Names referenced by the initial state or transitions but never declared."""
        declared = {state.name for state in self.states}
        referenced = [self.initial_state]
        for transition in self.transitions:
            referenced.extend((transition.from_state, transition.to_state))
        missing: list[str] = []
        for name in referenced:
            if name not in declared and name not in missing:
                missing.append(name)
        return missing


class SequenceResponse(MockResponse):
    """A response returned on a specific (1-indexed) call number."""

    call_number: int = Field(ge=1)

    def as_response(self) -> MockResponse:
        return MockResponse(
            status_code=self.status_code, body=self.body, headers=self.headers
        )


class ConditionalRule(WireModel):
    """A response served when its condition holds for the request body."""

    condition: Condition
    response: MockResponse


class ErrorScenario(WireModel):
    """A canned error injected with an independent Bernoulli trial."""

    type: ErrorKind
    probability: float = Field(ge=0.0, le=1.0)
    response: MockResponsePatch | None = None


# ---------------------------------------------------------------------------
# Endpoint configuration
# ---------------------------------------------------------------------------


class NetworkConditions(WireModel):
    """Latency, timeout and transport-error settings for one endpoint."""

    delay_ms: int = Field(default=0, ge=0)
    delay_random_min: int = Field(default=0, ge=0)
    delay_random_max: int = Field(default=0, ge=0)
    use_random_delay: bool = False
    simulate_timeout: bool = False
    timeout_ms: int = Field(default=30000, ge=0)
    simulate_network_error: bool = False
    network_error_type: NetworkErrorKind = NetworkErrorKind.CONNECTION_REFUSED
    network_error_probability: float = Field(default=0.5, ge=0.0, le=1.0)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class MockConfig(NetworkConditions):
    """Everything needed to compute responses for one mocked endpoint."""

    endpoint_id: str
    project_id: str = ""
    name: str = "Default"
    enabled: bool = True

    status_code: int = Field(default=200, ge=100, le=599)
    response_template: dict[str, Any] | None = None
    use_dynamic_generation: bool = True
    response_model: str | None = None

    scenario_enabled: bool = False
    scenario_config: ScenarioConfig | None = None
    sequence_enabled: bool = False
    sequence_responses: list[SequenceResponse] = Field(default_factory=list)
    conditional_enabled: bool = False
    conditional_rules: list[ConditionalRule] = Field(default_factory=list)
    error_scenarios_enabled: bool = False
    error_scenarios: list[ErrorScenario] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    def static_response(self) -> MockResponse:
        """The configured status code with the literal response template."""
        body = dict(self.response_template) if self.response_template else {}
        return MockResponse(status_code=self.status_code, body=body)


# ---------------------------------------------------------------------------
# Schema directory consumed by the fake data generator
# ---------------------------------------------------------------------------


class ApiField(WireModel):
    """One field of an API model; complex fields name another model as type."""

    name: str
    type: str = "string"
    is_required: bool = True
    is_complex: bool = False
    ref_fields: list[ApiField] | None = None


ApiField.model_rebuild()


class ApiModel(WireModel):
    """A named schema the generator can fill with fake data."""

    name: str
    fields: list[ApiField] = Field(default_factory=list)


def _default_seed() -> int:
    return time.time_ns() // 1_000_000


class GeneratorOptions(WireModel):
    """Knobs for :class:`~aumai_mockengine.generator.MockDataGenerator`."""

    locale: str = "en"
    seed: int = Field(default_factory=_default_seed)
    include_optional: bool = True
    max_depth: int = Field(default=3, ge=0)
    array_length: int = Field(default=3, ge=0)
    reference_date: datetime | None = None


# ---------------------------------------------------------------------------
# Decision trace
# ---------------------------------------------------------------------------


class ObservationPoint(BaseModel):
    """A single timestamped decision recorded while serving a mock call."""

    timestamp: datetime
    endpoint_id: str
    event: str
    details: dict[str, object] = Field(default_factory=dict)


__all__ = [
    "ApiField",
    "ApiModel",
    "Condition",
    "ConditionOperator",
    "ConditionalRule",
    "ErrorKind",
    "ErrorScenario",
    "GeneratorOptions",
    "MockConfig",
    "MockResponse",
    "MockResponsePatch",
    "NetworkConditions",
    "NetworkErrorKind",
    "ObservationPoint",
    "ScenarioConfig",
    "ScenarioState",
    "SequenceResponse",
    "StateTransition",
    "TriggerKind",
    "WireModel",
]
