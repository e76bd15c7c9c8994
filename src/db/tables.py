"""SQLAlchemy ORM models for the shared FitLog catalogs."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, DateTime
from sqlalchemy.orm import DeclarativeBase


def normalize_name(name: str) -> str:
    """Case-insensitive catalog key: trimmed and lower-cased."""
    return (name or "").strip().lower()


class Base(DeclarativeBase):
    pass


class FoodRow(Base):
    """Global food catalog — one row per case-insensitive name."""
    __tablename__ = "foods"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(300), nullable=False)
    name_key = Column(String(300), nullable=False, unique=True, index=True)

    calories = Column(Float, nullable=False, default=0)
    protein = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    fat = Column(Float, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class WorkoutRow(Base):
    """Global workout catalog. Metadata may be inferred from the name."""
    __tablename__ = "workouts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(300), nullable=False)
    name_key = Column(String(300), nullable=False, unique=True, index=True)

    body_part = Column(String(50), nullable=True)
    equipment = Column(String(50), nullable=False, default="None")
    difficulty = Column(String(20), nullable=False, default="Medium")

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
