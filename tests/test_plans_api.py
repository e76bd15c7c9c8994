"""End-to-end tests for AI plan generation and saving."""
from __future__ import annotations

import json
from datetime import date

import pytest

from src.services.errors import CompletionUnavailable
from tests.conftest import QUESTIONNAIRE, make_plan, signup


async def _ready_user(client) -> dict:
    headers = await signup(client)
    resp = await client.put("/api/v1/me/questionnaire", json=QUESTIONNAIRE, headers=headers)
    assert resp.status_code == 200
    return headers


# ── Generate ──────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_generate_returns_plan_without_saving(client, fake_ai):
    headers = await _ready_user(client)
    fake_ai.queue("Here is your plan:\n```json\n" + json.dumps(make_plan()) + "\n```")

    resp = await client.post("/api/v1/plans/generate", headers=headers)
    assert resp.status_code == 200
    plan = resp.json()["plan"]
    assert [d["dayOffset"] for d in plan["days"]] == list(range(7))

    prompt, force_json = fake_ai.calls[0]
    assert "Goals: Lose 5 kg and build endurance" in prompt
    assert force_json is False

    logs = await client.get("/api/v1/logs/workouts", headers=headers)
    assert logs.json()["entries"] == []


@pytest.mark.asyncio
async def test_generate_without_questionnaire_is_400(client, fake_ai):
    headers = await signup(client)
    resp = await client.post("/api/v1/plans/generate", headers=headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Please complete the fitness questionnaire first."}
    assert fake_ai.calls == []


@pytest.mark.asyncio
async def test_generate_ai_unavailable_is_503(client, fake_ai):
    headers = await _ready_user(client)
    fake_ai.queue(CompletionUnavailable(detail="connection reset"))
    resp = await client.post("/api/v1/plans/generate", headers=headers)
    assert resp.status_code == 503
    assert "connection reset" not in resp.text


@pytest.mark.asyncio
async def test_generate_bad_json_is_502_without_raw_output(client, fake_ai):
    headers = await _ready_user(client)
    fake_ai.queue("Sorry, I cannot produce a plan today.")
    resp = await client.post("/api/v1/plans/generate", headers=headers)
    assert resp.status_code == 502
    assert resp.json() == {"error": "AI did not return valid JSON"}


@pytest.mark.asyncio
async def test_generate_bad_structure_is_502(client, fake_ai):
    headers = await _ready_user(client)
    fake_ai.queue('{"days": []}')
    resp = await client.post("/api/v1/plans/generate", headers=headers)
    assert resp.status_code == 502
    assert resp.json() == {"error": "AI returned an invalid plan structure"}


@pytest.mark.asyncio
async def test_generate_passes_short_plan_through(client, fake_ai):
    headers = await _ready_user(client)
    fake_ai.queue(json.dumps(make_plan(offsets=range(5))))
    resp = await client.post("/api/v1/plans/generate", headers=headers)
    assert resp.status_code == 200
    assert len(resp.json()["plan"]["days"]) == 5


@pytest.mark.asyncio
async def test_generate_requires_auth(client, fake_ai):
    resp = await client.post("/api/v1/plans/generate")
    assert resp.status_code == 401


# ── Save ──────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_save_writes_logs_for_each_day(client):
    headers = await signup(client)
    resp = await client.post("/api/v1/plans/save", json={"plan": make_plan()}, headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Plan saved: 7 workouts and 7 daily goals added to your logs"}

    today = date.today().isoformat()
    workouts = (await client.get("/api/v1/logs/workouts", params={"log_date": today}, headers=headers)).json()
    assert [e["workout_name"] for e in workouts["entries"]] == ["Barbell Squats"]
    foods = (await client.get("/api/v1/logs/food", params={"log_date": today}, headers=headers)).json()
    assert foods["entries"][0]["food_name"] == "Daily Goal"
    assert foods["entries"][0]["calorie_goal"] == 2200

    catalog = (await client.get("/api/v1/workouts", headers=headers)).json()["workouts"]
    assert catalog == [{
        "id": catalog[0]["id"], "name": "Barbell Squats", "body_part": "Legs",
        "equipment": "Barbell", "difficulty": "Medium",
    }]


@pytest.mark.asyncio
async def test_saving_twice_reuses_catalog(client):
    headers = await signup(client)
    await client.post("/api/v1/plans/save", json={"plan": make_plan()}, headers=headers)
    await client.post("/api/v1/plans/save", json={"plan": make_plan()}, headers=headers)

    catalog = (await client.get("/api/v1/workouts", headers=headers)).json()["workouts"]
    assert len(catalog) == 1
    logs = (await client.get("/api/v1/logs/workouts", headers=headers)).json()["entries"]
    assert len(logs) == 14


@pytest.mark.asyncio
async def test_save_rejects_partial_week(client):
    headers = await signup(client)
    resp = await client.post("/api/v1/plans/save", json={"plan": make_plan(offsets=range(5))}, headers=headers)
    assert resp.status_code == 422
    assert "7 days" in resp.json()["message"]

    logs = (await client.get("/api/v1/logs/food", headers=headers)).json()["entries"]
    assert logs == []


@pytest.mark.asyncio
async def test_save_rejects_malformed_plan(client):
    headers = await signup(client)
    resp = await client.post("/api/v1/plans/save", json={"plan": {"days": [{"label": "no offset"}]}}, headers=headers)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


@pytest.mark.asyncio
async def test_generate_then_save_round_trip(client, fake_ai):
    headers = await _ready_user(client)
    fake_ai.queue(json.dumps(make_plan(workouts=[{"name": "Plank", "time_block": "evening"}])))
    plan = (await client.post("/api/v1/plans/generate", headers=headers)).json()["plan"]

    resp = await client.post("/api/v1/plans/save", json={"plan": plan}, headers=headers)
    assert resp.status_code == 200

    dashboard = (await client.get(
        "/api/v1/dashboard/weekly", params={"start": date.today().isoformat()}, headers=headers
    )).json()
    assert dashboard["totals"]["goal"] == 7 * 2200
    assert dashboard["totals"]["eaten"] == 0
    assert dashboard["totals"]["burned"] == 0
