"""Weekly plan models — the validated shape of AI plan output.

A Plan is never stored as its own row; it lives between generation and an
explicit save, at which point the materializer turns it into log rows.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEEK_OFFSETS = list(range(7))


class PlanWorkout(BaseModel):
    name: Optional[str] = None
    time_block: Optional[str] = None  # "morning", "evening", ...
    approx_calories: Optional[float] = None

    @field_validator("approx_calories", mode="before")
    @classmethod
    def _calories_or_none(cls, value):
        """Estimates like "about 200" are dropped rather than failing the plan."""
        if value is None or isinstance(value, (int, float)):
            return value
        try:
            return float(value)
        except (TypeError, ValueError):
            return None


class PlanDay(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_offset: int = Field(alias="dayOffset")
    label: Optional[str] = None
    calorie_goal: Optional[float] = None
    protein_goal_g: Optional[float] = None
    notes: Optional[str] = None
    workouts: list[PlanWorkout] = []

    @field_validator("workouts", mode="before")
    @classmethod
    def _rest_day(cls, value):
        # rest days sometimes come back as "workouts": null
        return [] if value is None else value


class Plan(BaseModel):
    days: list[PlanDay]

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "days": [
                        {
                            "dayOffset": 0,
                            "label": "Monday - Lower body",
                            "calorie_goal": 2200,
                            "protein_goal_g": 150,
                            "notes": "Hydrate well.",
                            "workouts": [
                                {"name": "Barbell Squats", "time_block": "morning", "approx_calories": 250},
                            ],
                        }
                    ]
                }
            ]
        }
    )

    @classmethod
    def from_wire(cls, data: dict) -> "Plan":
        return cls.model_validate(data)

    def to_wire(self) -> dict:
        """Serialize with the wire field names (``dayOffset``)."""
        return self.model_dump(by_alias=True)

    def is_full_week(self) -> bool:
        """Exactly seven days with distinct offsets 0..6."""
        return sorted(d.day_offset for d in self.days) == WEEK_OFFSETS
