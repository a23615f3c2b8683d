"""Tests for the FastAPI layer."""

from __future__ import annotations

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from war_odds.api.app import create_app
from war_odds.api.runtime import ApiState
from war_odds.config import Settings
from war_odds.domain.rules_config import OddsRules

SMALL = OddsRules(max_soldiers=20)


def _make_app(*, rules: OddsRules = SMALL, **settings_overrides):
    def factory() -> ApiState:
        settings = Settings(default_round_count=3, max_round_count=50, **settings_overrides)
        return ApiState(settings=settings, rules=rules)

    app = create_app(state_factory=factory)
    transport = ASGITransport(app=app)
    return app, transport


def _certain_attacker_kills() -> dict[str, object]:
    return {
        "base_chance": 100.0,
        "attacker_present": False,
        "attacker_blessed": False,
        "round_count": 1,
    }


@pytest.mark.asyncio
async def test_health_and_defaults():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/health")
        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["max_soldiers"] == 20
        assert payload["max_kills_per_phase"] == 22

        response = await client.get("/modifiers/defaults")
        assert response.status_code == 200
        payload = response.json()
        assert payload["modifiers"]["round_count"] == 3
        assert payload["modifiers"]["base_chance"] == 10.0
        assert payload["rates"]["attacker"] == pytest.approx(0.13)
        assert payload["rates"]["defender"] == pytest.approx(0.12)


@pytest.mark.asyncio
async def test_stateless_calculation():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post(
            "/calculate",
            json={
                "starting_attackers": 20,
                "starting_defenders": 12.8,
                "modifiers": {"round_count": 4, "defender_fortified": True},
            },
        )
        assert response.status_code == 200
        payload = response.json()
        assert payload["starting_attackers"] == 20
        assert payload["starting_defenders"] == 12
        assert payload["round_count"] == 4
        assert len(payload["attackers_winning"]) == 21
        assert len(payload["defenders_winning"]) == 21
        total = (
            sum(payload["attackers_winning"])
            + sum(payload["defenders_winning"])
            + payload["undecided"]
        )
        assert total == pytest.approx(1.0, abs=1e-9)
        assert payload["attacker_summary"]["side"] == "attacker"
        assert payload["defender_summary"]["side"] == "defender"
        assert payload["rates"]["attacker_in_range"] is True


@pytest.mark.asyncio
async def test_calculation_validation_errors():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post("/calculate", json={"modifiers": {"round_count": -1}})
        assert response.status_code == 422

        response = await client.post("/calculate", json={"modifiers": {"round_count": 51}})
        assert response.status_code == 422
        assert "exceeds the limit" in response.json()["detail"]

        response = await client.post("/calculate", json={"starting_attackers": "many"})
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_degenerate_distribution_is_rejected():
    app, transport = _make_app(rules=OddsRules(max_soldiers=20, max_kills_per_phase=2))

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post(
            "/calculate",
            json={
                "starting_attackers": 20,
                "starting_defenders": 20,
                "modifiers": _certain_attacker_kills(),
            },
        )
        assert response.status_code == 422
        assert "zero total mass" in response.json()["detail"]


@pytest.mark.asyncio
async def test_non_finite_distribution_is_rejected():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post(
            "/calculate",
            json={
                "starting_attackers": 20,
                "starting_defenders": 20,
                "modifiers": {"base_chance": -1e20, "round_count": 1},
            },
        )
        assert response.status_code == 422
        assert "non-finite" in response.json()["detail"]


@pytest.mark.asyncio
async def test_form_workflow_via_api():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/form")
        assert response.status_code == 200
        form = response.json()
        assert form["has_result"] is False
        assert form["starting_attackers"] == 100.0

        response = await client.put("/form/fields/base_chance", json={"value": "12"})
        assert response.status_code == 200
        payload = response.json()
        assert payload["accepted"] is True
        assert payload["form"]["modifiers"]["base_chance"] == 12.0

        response = await client.put("/form/fields/base_chance", json={"value": "12a"})
        assert response.status_code == 200
        payload = response.json()
        assert payload["accepted"] is False
        assert payload["form"]["modifiers"]["base_chance"] == 12.0

        response = await client.put("/form/fields/morale", json={"value": "1"})
        assert response.status_code == 404

        response = await client.post("/form/toggles/attacker_archers")
        assert response.status_code == 200
        assert response.json()["enabled"] is True

        response = await client.post("/form/toggles/attacker_elites")
        assert response.status_code == 200
        modifiers = response.json()["form"]["modifiers"]
        assert modifiers["attacker_elites"] is True
        assert modifiers["attacker_archers"] is False

        response = await client.post("/form/toggles/attacker_cavalry")
        assert response.status_code == 404

        for field, value in (
            ("starting_attackers", "15"),
            ("starting_defenders", "9"),
            ("round_count", "2"),
        ):
            response = await client.put(f"/form/fields/{field}", json={"value": value})
            assert response.json()["accepted"] is True

        response = await client.post("/form/calculate")
        assert response.status_code == 200
        result = response.json()
        assert result["starting_attackers"] == 15
        assert result["starting_defenders"] == 9
        assert result["round_count"] == 2
        # base 12 + commander 1 + blessing 2 + elites 1
        assert result["rates"]["attacker"] == pytest.approx(0.16)

        response = await client.get("/form")
        assert response.json()["has_result"] is True


@pytest.mark.asyncio
async def test_form_calculation_reports_the_inputs_it_ran_with():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        state = app.state.api_state
        for field, value in (
            ("starting_attackers", "10"),
            ("starting_defenders", "10"),
            ("round_count", "0"),
        ):
            await client.put(f"/form/fields/{field}", json={"value": value})

        async with state._form_lock:
            pending = asyncio.create_task(client.post("/form/calculate"))
            for _ in range(50):
                await asyncio.sleep(0)
            response = await client.put("/form/fields/round_count", json={"value": "3"})
            assert response.json()["accepted"] is True
        response = await pending

        assert response.status_code == 200
        result = response.json()
        assert result["round_count"] == 3

        stateless = await client.post(
            "/calculate",
            json={
                "starting_attackers": 10,
                "starting_defenders": 10,
                "modifiers": {"round_count": 3},
            },
        )
        assert result["undecided"] == stateless.json()["undecided"]
        assert result["attackers_winning"] == stateless.json()["attackers_winning"]

        await client.put("/form/fields/round_count", json={"value": "51"})
        response = await client.post("/form/calculate")
        assert response.status_code == 422
        assert "exceeds the limit" in response.json()["detail"]
