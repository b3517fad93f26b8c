"""Shared pytest fixtures for aumai-mockengine test suite."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator
from datetime import UTC, datetime

import pytest
import structlog

from aumai_mockengine.core import NetworkSimulator
from aumai_mockengine.engine import ScenarioEngine, default_engine
from aumai_mockengine.generator import MockDataGenerator
from aumai_mockengine.logging_utils import configure_library_defaults
from aumai_mockengine.models import (
    ApiField,
    ApiModel,
    GeneratorOptions,
    MockConfig,
    MockResponse,
    ScenarioConfig,
)
from aumai_mockengine.observer import MockObserver
from aumai_mockengine.registry import MockConfigRegistry
from aumai_mockengine.responder import MockResponder

REFERENCE_DATE = datetime(2024, 6, 1, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Core object fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine() -> ScenarioEngine:
    """A fresh ScenarioEngine with its own in-memory store."""
    return ScenarioEngine(rng=random.Random(1234))


@pytest.fixture()
def simulator() -> NetworkSimulator:
    """A NetworkSimulator with a seeded RNG."""
    return NetworkSimulator(rng=random.Random(1234))


@pytest.fixture()
def observer() -> MockObserver:
    return MockObserver()


@pytest.fixture()
def generator() -> MockDataGenerator:
    return MockDataGenerator()


@pytest.fixture()
def registry(engine: ScenarioEngine) -> MockConfigRegistry:
    return MockConfigRegistry(engine=engine)


@pytest.fixture()
def responder(
    engine: ScenarioEngine,
    simulator: NetworkSimulator,
    observer: MockObserver,
    user_models: list[ApiModel],
) -> MockResponder:
    """A responder wired to the seeded engine, simulator and user models."""
    return MockResponder(
        engine=engine,
        simulator=simulator,
        observer=observer,
        models=user_models,
        generator_options=GeneratorOptions(seed=7, reference_date=REFERENCE_DATE),
    )


# ---------------------------------------------------------------------------
# Response and scenario fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def default_response() -> MockResponse:
    return MockResponse(status_code=200, body={"ok": True})


@pytest.fixture()
def approval_scenario() -> ScenarioConfig:
    """pending --(auto)--> approved --(condition: action == reset)--> pending."""
    return ScenarioConfig.model_validate(
        {
            "initialState": "pending",
            "states": [
                {"name": "pending", "response": {"statusCode": 202, "body": {"status": "PENDING"}}},
                {"name": "approved", "response": {"statusCode": 200, "body": {"status": "APPROVED"}}},
            ],
            "transitions": [
                {"from": "pending", "to": "approved", "trigger": "auto"},
                {
                    "from": "approved",
                    "to": "pending",
                    "trigger": "condition",
                    "condition": {"field": "action", "operator": "eq", "value": "reset"},
                },
            ],
        }
    )


@pytest.fixture()
def static_config() -> MockConfig:
    """An enabled config with a static template and every feature disabled."""
    return MockConfig(
        endpoint_id="ep-static",
        project_id="proj-1",
        status_code=200,
        response_template={"message": "hello"},
        use_dynamic_generation=False,
    )


# ---------------------------------------------------------------------------
# Model directory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def address_model() -> ApiModel:
    return ApiModel(
        name="Address",
        fields=[
            ApiField(name="street", type="String"),
            ApiField(name="city", type="String"),
            ApiField(name="zipCode", type="String", is_required=False),
        ],
    )


@pytest.fixture()
def user_model() -> ApiModel:
    return ApiModel(
        name="User",
        fields=[
            ApiField(name="id", type="UUID"),
            ApiField(name="email", type="String"),
            ApiField(name="age", type="Integer"),
            ApiField(name="nickname", type="String", is_required=False),
            ApiField(name="active", type="boolean", is_required=False),
            ApiField(name="address", type="Address", is_complex=True),
            ApiField(name="tags", type="List<String>"),
            ApiField(name="createdAt", type="LocalDateTime"),
        ],
    )


@pytest.fixture()
def user_models(user_model: ApiModel, address_model: ApiModel) -> list[ApiModel]:
    return [user_model, address_model]


@pytest.fixture()
def seeded_options() -> GeneratorOptions:
    """Options with a fixed seed and reference date for reproducible output."""
    return GeneratorOptions(seed=42, reference_date=REFERENCE_DATE)


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() calls made by a test (directly or via the CLI)."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    structlog.reset_defaults()
    configure_library_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _reset_default_engine() -> Iterator[None]:
    """Registries and responders built without an engine share default_engine."""
    yield
    default_engine.reset_all()
