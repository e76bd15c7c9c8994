"""Weekly calorie dashboard — eaten vs goal vs burned per day."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from src.db.repository import FitnessRepository
from src.db.tables import normalize_name
from src.services.plan_materializer import DAILY_GOAL_FOOD

_GOAL_KEY = normalize_name(DAILY_GOAL_FOOD)


@dataclass
class DayTotals:
    date: str
    eaten: float = 0.0
    goal: float = 0.0
    burned: float = 0.0


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def aggregate_week(
    start: date,
    food_rows: Iterable[tuple],
    workout_rows: Iterable[tuple],
) -> dict:
    """Bucket log rows into the 7 days beginning at `start`.

    food_rows: (log_date, food name, calorie_goal). "Daily Goal" rows count
    toward the goal only; every other food counts toward eaten only.
    workout_rows: (log_date, calories_burned).
    """
    buckets = {start + timedelta(days=i): DayTotals(date=(start + timedelta(days=i)).isoformat()) for i in range(7)}

    for log_date, name, calorie_goal in food_rows:
        bucket = buckets.get(log_date)
        if bucket is None:
            continue
        if normalize_name(name) == _GOAL_KEY:
            bucket.goal += calorie_goal or 0
        else:
            bucket.eaten += calorie_goal or 0

    for log_date, calories_burned in workout_rows:
        bucket = buckets.get(log_date)
        if bucket is None:
            continue
        bucket.burned += calories_burned or 0

    days = [asdict(buckets[d]) for d in sorted(buckets)]
    return {
        "start": start.isoformat(),
        "end": (start + timedelta(days=6)).isoformat(),
        "days": days,
        "totals": {
            "eaten": sum(d["eaten"] for d in days),
            "goal": sum(d["goal"] for d in days),
            "burned": sum(d["burned"] for d in days),
        },
    }


async def weekly_dashboard(repo: FitnessRepository, user_id: str, start: Optional[date] = None) -> dict:
    start = start or week_start(date.today())
    end = start + timedelta(days=6)
    food_rows = await repo.food_rows_between(user_id, start, end)
    workout_rows = await repo.workout_rows_between(user_id, start, end)
    return aggregate_week(start, food_rows, workout_rows)
