"""Environment-driven settings for aumai-mockengine."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from aumai_mockengine.models import GeneratorOptions

LogFormat = Literal["json", "console", "plain"]

ENV_PREFIX = "MOCKENGINE_"


class EngineSettings(BaseSettings):
    """Process-wide defaults; CLI options take precedence over these."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        extra="ignore",
    )

    log_level: str = "WARNING"
    log_format: LogFormat = "console"
    default_seed: int | None = None
    max_depth: int = Field(default=3, ge=0)
    array_length: int = Field(default=3, ge=0)

    @field_validator("log_format", mode="before")
    @classmethod
    def _lowercase_format(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    def generator_options(self, **overrides: object) -> GeneratorOptions:
        """Build :class:`GeneratorOptions` from these settings plus *overrides*."""
        data: dict[str, object] = {
            "max_depth": self.max_depth,
            "array_length": self.array_length,
        }
        if self.default_seed is not None:
            data["seed"] = self.default_seed
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GeneratorOptions.model_validate(data)


def load_settings(environ: Mapping[str, str] | None = None) -> EngineSettings:
    """Read ``MOCKENGINE_*`` variables from the process environment.

    An explicit *environ* mapping is read instead of ``os.environ``; it is
    validated directly, so the process environment plays no part.

    Raises:
        pydantic.ValidationError: if a variable holds an invalid value.
    """
    if environ is None:
        return EngineSettings()
    data = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.upper().startswith(ENV_PREFIX) and value != ""
    }
    return EngineSettings.model_validate(data)


__all__ = ["ENV_PREFIX", "EngineSettings", "LogFormat", "load_settings"]
