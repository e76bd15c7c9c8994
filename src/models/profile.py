"""Profile + questionnaire models read by the planning services."""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    id: str
    username: str
    role: str = "user"
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None


class Questionnaire(BaseModel):
    goals: str = Field(..., min_length=1, max_length=500)
    fitness_level: str = Field(..., min_length=1, max_length=50)  # beginner, intermediate, advanced
    diet_preference: str = Field(..., min_length=1, max_length=100)
    equipment: str = Field(..., min_length=1, max_length=300)
    minutes_per_day: int = Field(..., ge=5, le=600)
