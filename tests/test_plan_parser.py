"""Tests for pulling a weekly plan out of raw model output."""
from __future__ import annotations

import json

import pytest

from src.models import Plan
from src.services.errors import PlanFormatError, PlanStructureError
from src.services.plan_parser import extract_json_object, parse_plan, validate_plan
from tests.conftest import make_plan


def test_extract_json_object_strips_prose():
    raw = 'Sure! Here is your plan: {"days": []} Let me know if you need changes.'
    assert extract_json_object(raw) == '{"days": []}'


def test_extract_json_object_without_braces():
    assert extract_json_object("no json here") is None
    assert extract_json_object("} backwards {") is None


def test_parse_plain_json():
    plan = parse_plan(json.dumps(make_plan()))
    assert isinstance(plan, Plan)
    assert [d.day_offset for d in plan.days] == list(range(7))
    assert plan.days[0].workouts[0].name == "Barbell Squats"
    assert plan.is_full_week()


def test_parse_markdown_fenced_json():
    raw = "```json\n" + json.dumps(make_plan()) + "\n```"
    plan = parse_plan(raw)
    assert len(plan.days) == 7


def test_parse_no_object_is_format_error():
    with pytest.raises(PlanFormatError) as exc:
        parse_plan("I'm sorry, I can't help with that.")
    assert exc.value.status_code == 502
    assert exc.value.message == "AI did not return valid JSON"
    # raw text kept for logs only
    assert exc.value.detail == "I'm sorry, I can't help with that."


def test_parse_truncated_json_is_format_error():
    raw = '{"days": [{"dayOffset": 0, "workouts": [}'
    with pytest.raises(PlanFormatError):
        parse_plan(raw)


def test_parse_empty_output_is_format_error():
    with pytest.raises(PlanFormatError):
        parse_plan("")


def test_missing_days_is_structure_error():
    with pytest.raises(PlanStructureError) as exc:
        parse_plan('{"weeks": []}')
    assert exc.value.message == "AI returned an invalid plan structure"


def test_empty_days_is_structure_error():
    with pytest.raises(PlanStructureError):
        parse_plan('{"days": []}')


def test_days_not_a_list_is_structure_error():
    with pytest.raises(PlanStructureError):
        parse_plan('{"days": "monday"}')


def test_day_without_offset_is_structure_error():
    with pytest.raises(PlanStructureError):
        parse_plan('{"days": [{"label": "Monday", "workouts": []}]}')


def test_short_plan_passes_through():
    """Five days is syntactically fine; the week shape is checked at save time."""
    plan = parse_plan(json.dumps(make_plan(offsets=range(5))))
    assert len(plan.days) == 5
    assert not plan.is_full_week()


def test_optional_day_fields_may_be_absent():
    plan = parse_plan('{"days": [{"dayOffset": 2, "workouts": [{"name": "Plank"}]}]}')
    day = plan.days[0]
    assert day.calorie_goal is None
    assert day.protein_goal_g is None
    assert day.workouts[0].approx_calories is None


def test_validate_plan_rejects_non_object():
    with pytest.raises(PlanStructureError):
        validate_plan(["days"])


def test_wire_format_uses_day_offset_alias():
    plan = parse_plan(json.dumps(make_plan(offsets=[3])))
    wire = plan.to_wire()
    assert wire["days"][0]["dayOffset"] == 3
    assert "day_offset" not in wire["days"][0]
    assert Plan.from_wire(wire) == plan


def test_duplicate_offsets_are_not_a_full_week():
    plan = Plan.from_wire(make_plan(offsets=[0, 1, 2, 3, 4, 5, 5]))
    assert not plan.is_full_week()


def test_rest_day_with_null_workouts_accepted():
    plan = parse_plan('{"days": [{"dayOffset": 0, "calorie_goal": 2000, "workouts": null}]}')
    assert plan.days[0].workouts == []
    assert plan.days[0].calorie_goal == 2000


def test_non_numeric_calorie_estimate_dropped():
    raw = json.dumps({"days": [{"dayOffset": 1, "workouts": [
        {"name": "Yoga Flow", "approx_calories": "about 150"},
        {"name": "Jump Rope", "approx_calories": "200"},
        {"name": "Plank", "approx_calories": {"low": 20}},
    ]}]})
    workouts = parse_plan(raw).days[0].workouts
    assert [w.approx_calories for w in workouts] == [None, 200.0, None]
