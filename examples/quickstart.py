"""aumai-mockengine quickstart: working demonstrations of the main features.

Run this file directly to verify your installation:

    python examples/quickstart.py

Each demo is self-contained.  Network delays are kept short so the whole
file runs in a couple of seconds.
"""

from __future__ import annotations

import asyncio
import json
import random
import time

from aumai_mockengine import (
    ApiField,
    ApiModel,
    GeneratorOptions,
    MockConfig,
    MockConfigRegistry,
    MockDataGenerator,
    MockNetworkError,
    MockObserver,
    MockResponder,
    NetworkSimulator,
    ScenarioEngine,
    latency_profile,
)

USER = ApiModel(
    name="User",
    fields=[
        ApiField(name="id", type="UUID"),
        ApiField(name="email", type="String"),
        ApiField(name="age", type="Integer"),
        ApiField(name="address", type="Address", is_complex=True),
        ApiField(name="tags", type="List<String>"),
        ApiField(name="createdAt", type="LocalDateTime"),
        ApiField(name="nickname", type="String", is_required=False),
    ],
)
ADDRESS = ApiModel(
    name="Address",
    fields=[ApiField(name="city", type="String"), ApiField(name="zipCode", type="String")],
)


# ---------------------------------------------------------------------------
# Demo 1: Seeded fake data
# ---------------------------------------------------------------------------

def demo_fake_data() -> None:
    """Generate the same object twice from one seed."""

    print("\n=== Demo 1: Seeded Fake Data ===")

    generator = MockDataGenerator()
    options = GeneratorOptions(seed=42, array_length=2)
    first = generator.generate(USER, [USER, ADDRESS], options)
    second = generator.generate(USER, [USER, ADDRESS], options)
    print(json.dumps(first, indent=2))
    assert first == second, "Same seed must give the same object"

    slim = generator.generate(
        USER, [USER, ADDRESS], options.model_copy(update={"include_optional": False})
    )
    assert "nickname" not in slim

    print("  Demo 1 passed.")


# ---------------------------------------------------------------------------
# Demo 2: Scenario state machine
# ---------------------------------------------------------------------------

def demo_scenario() -> None:
    """An order that is PENDING on the first call and SHIPPED afterwards."""

    print("\n=== Demo 2: Scenario State Machine ===")

    registry = MockConfigRegistry()
    config = registry.create(
        "shop",
        "get-order",
        useDynamicGeneration=False,
        scenarioEnabled=True,
        scenarioConfig={
            "initialState": "pending",
            "states": [
                {"name": "pending", "response": {"statusCode": 202, "body": {"status": "PENDING"}}},
                {"name": "shipped", "response": {"statusCode": 200, "body": {"status": "SHIPPED"}}},
            ],
            "transitions": [{"from": "pending", "to": "shipped", "trigger": "on_call"}],
        },
    )
    # Both fall back to default_engine, so the registry reset below reaches
    # the responder.
    responder = MockResponder()

    for call in range(1, 4):
        response = responder.respond(config)
        print(f"  Call {call}: {response.status_code} {response.body}")

    registry.reset_state("get-order")
    assert responder.respond(config).status_code == 202, "Reset restarts the scenario"

    print("  Demo 2 passed.")


# ---------------------------------------------------------------------------
# Demo 3: Sequences, conditional rules and injected errors
# ---------------------------------------------------------------------------

def demo_pipeline() -> None:
    """Show each selection stage and the decision trace it leaves behind."""

    print("\n=== Demo 3: Response Pipeline ===")

    observer = MockObserver()
    responder = MockResponder(
        engine=ScenarioEngine(rng=random.Random(7)),
        observer=observer,
        models=[USER, ADDRESS],
        generator_options=GeneratorOptions(seed=1),
    )
    config = MockConfig.model_validate(
        {
            "endpointId": "get-user",
            "responseModel": "User",
            "responseTemplate": {"email": "ada@example.com"},
            "sequenceEnabled": True,
            "sequenceResponses": [{"callNumber": 2, "statusCode": 429, "body": {}}],
            "conditionalEnabled": True,
            "conditionalRules": [
                {
                    "condition": {"field": "role", "operator": "eq", "value": "banned"},
                    "response": {"statusCode": 403, "body": {"error": "Forbidden"}},
                }
            ],
            "errorScenariosEnabled": True,
            "errorScenarios": [{"type": "SERVICE_UNAVAILABLE", "probability": 0.1}],
        }
    )

    for call, body in enumerate([{"role": "user"}, {"role": "user"}, {"role": "banned"}], 1):
        response = responder.respond(config, body)
        print(f"  Call {call}: {response.status_code}")

    print(f"  Decisions: {observer.events('get-user')}")
    print("  Demo 3 passed.")


# ---------------------------------------------------------------------------
# Demo 4: Network conditions
# ---------------------------------------------------------------------------

def demo_network() -> None:
    """Latency profiles, a certain transport error, and concurrent async waits."""

    print("\n=== Demo 4: Network Conditions ===")

    simulator = NetworkSimulator(rng=random.Random(3))

    try:
        simulator.simulate(latency_profile("offline"))
    except MockNetworkError as exc:
        print(f"  offline profile: {exc}")

    fast = latency_profile("fast")

    async def burst() -> None:
        await asyncio.gather(*(simulator.simulate_async(fast) for _ in range(20)))

    start = time.perf_counter()
    asyncio.run(burst())
    elapsed_ms = (time.perf_counter() - start) * 1000
    print(f"  20 concurrent 'fast' calls finished in {elapsed_ms:.0f}ms")
    assert elapsed_ms < 500, "Async delays must overlap"

    print("  Demo 4 passed.")


if __name__ == "__main__":
    demo_fake_data()
    demo_scenario()
    demo_pipeline()
    demo_network()
    print("\nAll demos passed.")
