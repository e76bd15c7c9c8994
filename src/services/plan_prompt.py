"""Prompt construction for the weekly AI plan."""
from __future__ import annotations

from typing import Optional

from src.models import Questionnaire, UserProfile
from src.services.errors import PreconditionMissing

UNKNOWN = "unknown"

PLAN_PROMPT = """You are a certified personal trainer and sports nutritionist for FitLog, a fitness tracking app.

Create a personalized 7-day workout and nutrition plan for this user.

User profile:
- Age: {age}
- Gender: {gender}
- Weight (kg): {weight}
- Height (cm): {height}
- Date of birth: {date_of_birth}

Questionnaire answers:
- Goals: {goals}
- Fitness level: {fitness_level}
- Diet preference: {diet_preference}
- Available equipment: {equipment}
- Minutes available per day: {minutes_per_day}

Return a JSON object with exactly this shape:
{{
  "days": [
    {{
      "dayOffset": 0,
      "label": "Monday - Lower body strength",
      "calorie_goal": 2200,
      "protein_goal_g": 150,
      "notes": "Short coaching note for the day.",
      "workouts": [
        {{"name": "Barbell Squats", "time_block": "morning", "approx_calories": 250}}
      ]
    }}
  ]
}}

Rules:
- Include exactly 7 days, with dayOffset values 0, 1, 2, 3, 4, 5, 6 (0 = today).
- Every day must include "calorie_goal" and "protein_goal_g" as numbers.
- Each day has between 1 and 3 workouts.
- Workout names must be realistic, commonly known exercises (e.g. "Dumbbell Bench Press", "Plank", "Jump Rope").
- "time_block" is one of "morning", "afternoon" or "evening".
- "approx_calories" is optional; include it when you can estimate calories burned.
- Fit each day's workouts within the user's available minutes and equipment.

Return ONLY valid JSON, no markdown."""


def _or_unknown(value) -> str:
    if value is None or value == "":
        return UNKNOWN
    return str(value)


def build_plan_prompt(profile: Optional[UserProfile], questionnaire: Optional[Questionnaire]) -> str:
    """Render the plan prompt. A missing questionnaire is a precondition failure."""
    if questionnaire is None:
        raise PreconditionMissing()

    return PLAN_PROMPT.format(
        age=_or_unknown(profile.age if profile else None),
        gender=_or_unknown(profile.gender if profile else None),
        weight=_or_unknown(profile.weight_kg if profile else None),
        height=_or_unknown(profile.height_cm if profile else None),
        date_of_birth=_or_unknown(
            profile.date_of_birth.isoformat() if profile and profile.date_of_birth else None
        ),
        goals=questionnaire.goals,
        fitness_level=questionnaire.fitness_level,
        diet_preference=questionnaire.diet_preference,
        equipment=questionnaire.equipment,
        minutes_per_day=questionnaire.minutes_per_day,
    )
