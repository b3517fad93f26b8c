"""CLI entry point for aumai-mockengine."""

from __future__ import annotations

import json
import random
import sys
from pathlib import Path
from typing import Any, NoReturn

import click
import yaml
from pydantic import ValidationError

from aumai_mockengine import __version__
from aumai_mockengine.config import EngineSettings, load_settings
from aumai_mockengine.core import (
    LATENCY_PROFILES,
    MockEngineError,
    MockNetworkError,
    MockTimeoutError,
    NetworkSimulator,
)
from aumai_mockengine.engine import ScenarioEngine
from aumai_mockengine.generator import MockDataGenerator
from aumai_mockengine.logging_utils import configure_logging
from aumai_mockengine.models import ApiModel, MockConfig
from aumai_mockengine.responder import MockResponder


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_document(path: str) -> Any:
    """Parse a YAML or JSON file."""
    file_path = Path(path)
    raw = file_path.read_text(encoding="utf-8")
    if file_path.suffix in (".yaml", ".yml"):
        return yaml.safe_load(raw)
    return json.loads(raw)


def _load_models(path: str) -> list[ApiModel]:
    """Load a model directory: a list of models or ``{"models": [...]}``."""
    data = _load_document(path)
    if isinstance(data, dict):
        data = data.get("models", [])
    return [ApiModel.model_validate(item) for item in data]


def _fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Log level (overrides MOCKENGINE_LOG_LEVEL).")
@click.option(
    "--log-format",
    type=click.Choice(["json", "console", "plain"], case_sensitive=False),
    default=None,
    help="Log renderer (overrides MOCKENGINE_LOG_FORMAT).",
)
@click.pass_context
def main(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """AumAI MockEngine: scenario-driven mock API responses."""
    try:
        settings = load_settings()
    except ValidationError as exc:
        _fail(f"Invalid MOCKENGINE_* environment: {exc}")
    configure_logging(
        log_level or settings.log_level,
        (log_format or settings.log_format).lower(),  # type: ignore[arg-type]
    )
    ctx.obj = settings


@main.command("generate")
@click.option("--models", "models_path", required=True, metavar="PATH", help="Model directory (YAML or JSON).")
@click.option("--model", "model_name", required=True, help="Name of the model to generate.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible output.")
@click.option("--count", type=click.IntRange(min=1), default=1, show_default=True, help="Number of objects.")
@click.option("--required-only", is_flag=True, help="Omit fields that are not required.")
@click.option("--max-depth", type=click.IntRange(min=0), default=None, help="Nesting limit for complex fields.")
@click.option("--array-length", type=click.IntRange(min=0), default=None, help="Elements per array field.")
@click.pass_obj
def generate_command(
    settings: EngineSettings,
    models_path: str,
    model_name: str,
    seed: int | None,
    count: int,
    required_only: bool,
    max_depth: int | None,
    array_length: int | None,
) -> None:
    """Print fake data for a model as JSON."""
    try:
        models = _load_models(models_path)
    except Exception as exc:
        _fail(f"Error loading models: {exc}")

    model = next((m for m in models if m.name == model_name), None)
    if model is None:
        _fail(f"Model '{model_name}' not found in {models_path}")

    options = settings.generator_options(
        seed=seed,
        include_optional=not required_only,
        max_depth=max_depth,
        array_length=array_length,
    )
    generator = MockDataGenerator()
    if count == 1:
        data: Any = generator.generate(model, models, options)
    else:
        data = generator.generate_many(model, models, count, options)
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@main.command("respond")
@click.option("--config", "config_path", required=True, metavar="PATH", help="Mock configuration (YAML or JSON).")
@click.option("--models", "models_path", default=None, metavar="PATH", help="Model directory for dynamic responses.")
@click.option("--body", "body_json", default=None, help="Request body as a JSON string.")
@click.option("--calls", type=click.IntRange(min=1), default=1, show_default=True, help="Number of calls to simulate.")
@click.option("--seed", type=int, default=None, help="Seed for error scenarios and network simulation.")
@click.option("--no-network", is_flag=True, help="Skip delay, timeout and network error simulation.")
@click.option("--json-output", is_flag=True, help="Emit results as JSON.")
@click.pass_obj
def respond_command(
    settings: EngineSettings,
    config_path: str,
    models_path: str | None,
    body_json: str | None,
    calls: int,
    seed: int | None,
    no_network: bool,
    json_output: bool,
) -> None:
    """Run CALLS requests against a mock configuration and print each response."""
    try:
        config = MockConfig.model_validate(_load_document(config_path))
        models = _load_models(models_path) if models_path else []
        body = json.loads(body_json) if body_json is not None else None
    except Exception as exc:
        _fail(f"Error loading input: {exc}")

    responder = MockResponder(
        engine=ScenarioEngine(rng=random.Random(seed)),  # noqa: S311
        simulator=NetworkSimulator(rng=random.Random(seed)),  # noqa: S311
        models=models,
        generator_options=settings.generator_options(seed=seed) if seed is not None else None,
    )

    records: list[dict[str, Any]] = []
    for call in range(1, calls + 1):
        try:
            if no_network:
                response = responder.select_response(config, body)
            else:
                response = responder.respond(config, body)
        except MockTimeoutError as exc:
            records.append({"call": call, "failure": "timeout", "detail": str(exc)})
            continue
        except MockNetworkError as exc:
            records.append(
                {"call": call, "failure": exc.error_kind.value, "detail": str(exc)}
            )
            continue
        except MockEngineError as exc:
            _fail(f"Call {call} failed: {exc}")
        records.append({"call": call, **response.to_wire()})

    if json_output:
        click.echo(json.dumps(records, indent=2, ensure_ascii=False))
        return

    for record in records:
        if "failure" in record:
            click.echo(f"Call {record['call']}: simulated {record['failure']} ({record['detail']})")
        else:
            click.echo(
                f"Call {record['call']}: {record['statusCode']} "
                f"{json.dumps(record.get('body'), ensure_ascii=False)}"
            )


@main.command("profiles")
def profiles_command() -> None:
    """List the preset latency profiles."""
    for name, conditions in LATENCY_PROFILES.items():
        delay = (
            f"{conditions.delay_random_min}-{conditions.delay_random_max} ms"
            if conditions.use_random_delay
            else f"{conditions.delay_ms} ms"
        )
        line = f"{name:<8} delay={delay}"
        if conditions.simulate_network_error:
            line += (
                f" error={conditions.network_error_type.value}"
                f"@{conditions.network_error_probability:.0%}"
            )
        click.echo(line)


if __name__ == "__main__":
    main()
