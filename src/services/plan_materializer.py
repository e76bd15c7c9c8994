"""Turn an accepted Plan into food/workout log rows for one user.

Each day lands on ``today + dayOffset``. Offsets outside 0..6 are written as
ordinary days; checking the week shape is the caller's job. An offset past
the calendar's range raises PersistenceError. Unseen workout names get
catalog rows with metadata inferred from the name, and a day's calorie
target is stored against the "Daily Goal" sentinel food.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from src.db.repository import FitnessRepository, Kind
from src.models import Plan
from src.services.errors import PersistenceError

logger = logging.getLogger(__name__)

DAILY_GOAL_FOOD = "Daily Goal"
DEFAULT_DIFFICULTY = "Medium"
DEFAULT_EQUIPMENT = "None"

# First match wins, checked in order.
BODY_PART_RULES: list[tuple[tuple[str, ...], str]] = [
    (("squat", "lunge", "deadlift"), "Legs"),
    (("push", "bench"), "Chest"),
    (("row", "pull"), "Back"),
    (("curl", "bicep"), "Arms"),
    (("tricep", "dip"), "Arms"),
    (("shoulder", "press"), "Shoulders"),
    (("plank", "crunch", "core"), "Core"),
    (("run", "cardio", "burpee", "jump"), "Cardio"),
]

EQUIPMENT_RULES: list[tuple[str, str]] = [
    ("dumbbell", "Dumbbells"),
    ("barbell", "Barbell"),
    ("machine", "Machine"),
    ("band", "Bands"),
]


def infer_body_part(name: str) -> Optional[str]:
    lowered = name.lower()
    for keywords, body_part in BODY_PART_RULES:
        if any(k in lowered for k in keywords):
            return body_part
    return None


def infer_equipment(name: str) -> str:
    lowered = name.lower()
    for keyword, equipment in EQUIPMENT_RULES:
        if keyword in lowered:
            return equipment
    return DEFAULT_EQUIPMENT


def inferred_workout_fields(name: str) -> dict:
    return {
        "body_part": infer_body_part(name),
        "equipment": infer_equipment(name),
        "difficulty": DEFAULT_DIFFICULTY,
    }


def daily_goal_fields(name: str) -> dict:
    return {"calories": 0, "protein": 0, "carbs": 0, "fat": 0}


@dataclass
class MaterializeResult:
    days: int = 0
    workouts_logged: int = 0
    goals_logged: int = 0


async def materialize_plan(
    repo: FitnessRepository,
    user_id: str,
    plan: Plan,
    today: Optional[date] = None,
) -> MaterializeResult:
    """Write log rows for every day of `plan`. Does not commit."""
    today = today or date.today()
    result = MaterializeResult()

    for day in plan.days:
        try:
            log_date = today + timedelta(days=day.day_offset)
        except OverflowError as e:
            raise PersistenceError(detail=f"dayOffset {day.day_offset} is outside the calendar") from e

        for workout in day.workouts:
            name = (workout.name or "").strip()
            if not name:
                continue
            catalog = await repo.find_or_create_catalog_entry(
                Kind.WORKOUT, name, inferred_workout_fields
            )
            await repo.insert_log_entry(Kind.WORKOUT, {
                "user_id": user_id,
                "workout_id": catalog.id,
                "workout_streak": 0,
                "calories_burned": workout.approx_calories or 0,
                "heart_rate": 0,
                "log_date": log_date,
                "completed": False,
            })
            result.workouts_logged += 1

        if day.calorie_goal:
            sentinel = await repo.find_or_create_catalog_entry(
                Kind.FOOD, DAILY_GOAL_FOOD, daily_goal_fields
            )
            await repo.insert_log_entry(Kind.FOOD, {
                "user_id": user_id,
                "food_id": sentinel.id,
                "calorie_goal": day.calorie_goal,
                "total_weight_lost": 0,
                "log_date": log_date,
                "completed": False,
            })
            result.goals_logged += 1

        result.days += 1

    logger.info(
        "Materialized plan for user %s: %d days, %d workouts, %d goals",
        user_id, result.days, result.workouts_logged, result.goals_logged,
    )
    return result
