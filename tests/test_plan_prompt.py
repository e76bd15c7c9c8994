"""Tests for the weekly plan prompt."""
from __future__ import annotations

from datetime import date

import pytest

from src.models import Questionnaire, UserProfile
from src.services.errors import PreconditionMissing
from src.services.plan_prompt import build_plan_prompt
from tests.conftest import QUESTIONNAIRE


def _profile(**overrides) -> UserProfile:
    fields = dict(id="u1", username="alice", age=31, gender="female", weight_kg=68.5, height_cm=170)
    fields.update(overrides)
    return UserProfile(**fields)


def test_prompt_includes_profile_and_answers():
    prompt = build_plan_prompt(
        _profile(date_of_birth=date(1994, 5, 17)), Questionnaire(**QUESTIONNAIRE)
    )
    assert "Age: 31" in prompt
    assert "Weight (kg): 68.5" in prompt
    assert "Date of birth: 1994-05-17" in prompt
    assert "Goals: Lose 5 kg and build endurance" in prompt
    assert "Available equipment: dumbbells, resistance bands" in prompt
    assert "Minutes available per day: 45" in prompt


def test_prompt_states_output_rules():
    prompt = build_plan_prompt(_profile(), Questionnaire(**QUESTIONNAIRE))
    assert "exactly 7 days" in prompt
    assert "0, 1, 2, 3, 4, 5, 6" in prompt
    assert '"dayOffset": 0' in prompt
    assert "calorie_goal" in prompt and "protein_goal_g" in prompt
    assert "between 1 and 3 workouts" in prompt
    assert "Return ONLY valid JSON" in prompt


def test_missing_profile_values_render_unknown():
    prompt = build_plan_prompt(_profile(age=None, weight_kg=None), Questionnaire(**QUESTIONNAIRE))
    assert "Age: unknown" in prompt
    assert "Weight (kg): unknown" in prompt
    assert "Date of birth: unknown" in prompt
    assert "None" not in prompt


def test_missing_profile_is_tolerated():
    prompt = build_plan_prompt(None, Questionnaire(**QUESTIONNAIRE))
    assert "Gender: unknown" in prompt


def test_missing_questionnaire_is_precondition_failure():
    with pytest.raises(PreconditionMissing) as exc:
        build_plan_prompt(_profile(), None)
    assert exc.value.status_code == 400
    assert exc.value.message == "Please complete the fitness questionnaire first."
