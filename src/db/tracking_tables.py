"""Daily tracking tables — food and workout log rows per user per date."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Float, Date, DateTime, Boolean,
    ForeignKey, Index
)

from src.db.tables import Base


class FoodLogRow(Base):
    """One logged food (or the "Daily Goal" sentinel) for a user on a date."""
    __tablename__ = "food_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    food_id = Column(String(36), ForeignKey("foods.id", ondelete="CASCADE"), nullable=False)
    calorie_goal = Column(Float, nullable=False, default=0)
    total_weight_lost = Column(Float, nullable=False, default=0)
    log_date = Column(Date, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_food_logs_user_date", "user_id", "log_date"),
    )


class WorkoutLogRow(Base):
    """One logged workout for a user on a date."""
    __tablename__ = "workout_logs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workout_id = Column(String(36), ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    workout_streak = Column(Integer, nullable=False, default=0)
    calories_burned = Column(Float, nullable=False, default=0)
    heart_rate = Column(Integer, nullable=False, default=0)
    log_date = Column(Date, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_workout_logs_user_date", "user_id", "log_date"),
    )
