"""In-process store of mock configurations, keyed by endpoint."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from aumai_mockengine.core import ScenarioConfigError
from aumai_mockengine.engine import ScenarioEngine, default_engine
from aumai_mockengine.models import MockConfig

logger = structlog.get_logger(__name__)

_IMMUTABLE_FIELDS = frozenset({"endpoint_id", "project_id", "created_at", "updated_at"})

# Changing any of these invalidates the stored FSM state and call count.
_STATEFUL_FIELDS = frozenset(
    {"scenario_config", "scenario_enabled", "sequence_responses", "sequence_enabled"}
)


class MockConfigNotFoundError(KeyError):
    """Raised when no configuration exists for an endpoint_id."""


def validate_scenario(config: MockConfig) -> None:
    """Reject a scenario whose initial state or transitions name undeclared states.

    Raises:
        ScenarioConfigError: listing every undeclared state name.
    """
    if config.scenario_config is None:
        return
    missing = config.scenario_config.undefined_state_names()
    if missing:
        raise ScenarioConfigError(
            f"Scenario for endpoint '{config.endpoint_id}' references "
            f"undeclared states: {', '.join(missing)}"
        )


class MockConfigRegistry:
    """Create, read, patch and delete :class:`MockConfig` objects.

    Updates accept any subset of fields.  Scenario graphs are validated on
    every write so that a broken configuration is rejected when it is saved
    rather than when it is first served.
    """

    def __init__(self, engine: ScenarioEngine | None = None) -> None:
        self._configs: dict[str, MockConfig] = {}
        self._lock = threading.Lock()
        self._engine = engine if engine is not None else default_engine

    @property
    def engine(self) -> ScenarioEngine:
        return self._engine

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, project_id: str, endpoint_id: str, **fields: Any) -> MockConfig:
        """Store a new configuration for *endpoint_id*, replacing any existing one."""
        config = MockConfig.model_validate(
            {**fields, "project_id": project_id, "endpoint_id": endpoint_id}
        )
        validate_scenario(config)
        with self._lock:
            self._configs[endpoint_id] = config
        logger.info("mock_config_created", endpoint_id=endpoint_id, project_id=project_id)
        return config

    def add(self, config: MockConfig) -> MockConfig:
        """Store an already-built configuration."""
        validate_scenario(config)
        with self._lock:
            self._configs[config.endpoint_id] = config
        return config

    def get(self, endpoint_id: str) -> MockConfig | None:
        with self._lock:
            return self._configs.get(endpoint_id)

    def get_or_raise(self, endpoint_id: str) -> MockConfig:
        """Return the configuration for *endpoint_id*.

        Raises:
            MockConfigNotFoundError: if *endpoint_id* has no configuration.
        """
        config = self.get(endpoint_id)
        if config is None:
            raise MockConfigNotFoundError(endpoint_id)
        return config

    def list_by_project(self, project_id: str) -> list[MockConfig]:
        """All configurations of *project_id*, newest first."""
        with self._lock:
            configs = [c for c in self._configs.values() if c.project_id == project_id]
        return sorted(configs, key=lambda c: c.created_at, reverse=True)

    def update(self, endpoint_id: str, patch: Mapping[str, Any]) -> MockConfig:
        """Apply a partial update; keys absent from *patch* are left unchanged.

        Keys may use either attribute or wire (camelCase) names.  Identity
        fields and timestamps cannot be patched.

        Patching the scenario or the sequence resets the endpoint's runtime
        state, so the next call starts from the new initial state and call 1.

        Raises:
            MockConfigNotFoundError: if *endpoint_id* has no configuration.
            pydantic.ValidationError: if the patched configuration is invalid.
            ScenarioConfigError: if the patched scenario graph is broken.
        """
        with self._lock:
            current = self._configs.get(endpoint_id)
            if current is None:
                raise MockConfigNotFoundError(endpoint_id)
            changes = self._normalise_patch(patch)
            # Shallow copy keeps nested models as they are, unset fields included.
            data = dict(current)
            data.update(changes)
            data["updated_at"] = datetime.now(tz=UTC)
            updated = MockConfig.model_validate(data)
            validate_scenario(updated)
            self._configs[endpoint_id] = updated
        if _STATEFUL_FIELDS.intersection(changes):
            self._engine.reset_endpoint(endpoint_id)
        logger.info(
            "mock_config_updated", endpoint_id=endpoint_id, fields=sorted(patch)
        )
        return updated

    def toggle(self, endpoint_id: str, enabled: bool) -> MockConfig:
        return self.update(endpoint_id, {"enabled": enabled})

    def delete(self, endpoint_id: str) -> None:
        """Remove the configuration and its runtime state.

        Raises:
            MockConfigNotFoundError: if *endpoint_id* has no configuration.
        """
        with self._lock:
            if endpoint_id not in self._configs:
                raise MockConfigNotFoundError(endpoint_id)
            del self._configs[endpoint_id]
        self._engine.reset_endpoint(endpoint_id)
        logger.info("mock_config_deleted", endpoint_id=endpoint_id)

    def reset_state(self, endpoint_id: str) -> None:
        """Restart the scenario and call sequence of *endpoint_id*."""
        self._engine.reset_endpoint(endpoint_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _normalise_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
        by_alias = {
            field.alias: name
            for name, field in MockConfig.model_fields.items()
            if field.alias
        }
        normalised: dict[str, Any] = {}
        for key, value in patch.items():
            name = by_alias.get(key, key)
            if name not in MockConfig.model_fields:
                raise ValueError(f"Unknown mock config field: {key!r}")
            if name in _IMMUTABLE_FIELDS:
                raise ValueError(f"Mock config field {key!r} cannot be updated")
            if value is None and MockConfig.model_fields[name].default_factory is list:
                value = []
            normalised[name] = value
        return normalised


__all__ = ["MockConfigNotFoundError", "MockConfigRegistry", "validate_scenario"]
