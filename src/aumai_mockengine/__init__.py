"""aumai-mockengine: Scenario-driven mock API responses with fake data generation."""

import structlog

from aumai_mockengine.conditions import evaluate_condition
from aumai_mockengine.core import (
    LATENCY_PROFILES,
    MockDisabledError,
    MockEngineError,
    MockNetworkError,
    MockTimeoutError,
    NetworkOutcome,
    NetworkSimulator,
    OutcomeKind,
    ScenarioConfigError,
    latency_profile,
)
from aumai_mockengine.engine import ScenarioEngine, default_engine
from aumai_mockengine.errors import (
    error_response_for,
    network_error_response_for,
)
from aumai_mockengine.generator import (
    MockDataGenerator,
    generate_mock_data,
    generate_mock_data_from_template,
    generate_multiple_mock_data,
)
from aumai_mockengine.logging_utils import configure_library_defaults, configure_logging
from aumai_mockengine.models import (
    ApiField,
    ApiModel,
    Condition,
    ConditionalRule,
    ConditionOperator,
    ErrorKind,
    ErrorScenario,
    GeneratorOptions,
    MockConfig,
    MockResponse,
    MockResponsePatch,
    NetworkConditions,
    NetworkErrorKind,
    ObservationPoint,
    ScenarioConfig,
    ScenarioState,
    SequenceResponse,
    StateTransition,
    TriggerKind,
)
from aumai_mockengine.observer import MockObserver
from aumai_mockengine.registry import MockConfigNotFoundError, MockConfigRegistry
from aumai_mockengine.responder import MockResponder
from aumai_mockengine.store import InMemoryStateStore, StateStore

__version__ = "0.1.0"

if not structlog.is_configured():
    configure_library_defaults()

__all__ = [
    "LATENCY_PROFILES",
    "ApiField",
    "ApiModel",
    "Condition",
    "ConditionOperator",
    "ConditionalRule",
    "ErrorKind",
    "ErrorScenario",
    "GeneratorOptions",
    "InMemoryStateStore",
    "MockConfig",
    "MockConfigNotFoundError",
    "MockConfigRegistry",
    "MockDataGenerator",
    "MockDisabledError",
    "MockEngineError",
    "MockNetworkError",
    "MockObserver",
    "MockResponder",
    "MockResponse",
    "MockResponsePatch",
    "MockTimeoutError",
    "NetworkConditions",
    "NetworkErrorKind",
    "NetworkOutcome",
    "NetworkSimulator",
    "ObservationPoint",
    "OutcomeKind",
    "ScenarioConfig",
    "ScenarioConfigError",
    "ScenarioEngine",
    "ScenarioState",
    "SequenceResponse",
    "StateStore",
    "StateTransition",
    "TriggerKind",
    "configure_library_defaults",
    "configure_logging",
    "default_engine",
    "error_response_for",
    "evaluate_condition",
    "generate_mock_data",
    "generate_mock_data_from_template",
    "generate_multiple_mock_data",
    "latency_profile",
    "network_error_response_for",
]
