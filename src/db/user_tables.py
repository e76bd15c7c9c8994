"""User-related database tables: accounts, profiles, questionnaires."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Float, Date, DateTime, ForeignKey
)

from src.db.tables import Base

ROLE_USER = "user"
ROLE_MANAGER = "manager"


class UserRow(Base):
    """Account + body profile. `role` gates the manager endpoints."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), nullable=False, unique=True, index=True)
    password_hash = Column(String(256), nullable=False)  # PBKDF2-SHA256
    role = Column(String(20), nullable=False, default=ROLE_USER)

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    age = Column(Integer, nullable=True)
    weight_kg = Column(Float, nullable=True)
    height_cm = Column(Float, nullable=True)
    gender = Column(String(20), nullable=True)
    date_of_birth = Column(Date, nullable=True)

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    last_active_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))


class QuestionnaireRow(Base):
    """Fitness questionnaire — at most one per user."""
    __tablename__ = "questionnaires"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    goals = Column(String(500), nullable=False)
    fitness_level = Column(String(50), nullable=False)
    diet_preference = Column(String(100), nullable=False)
    equipment = Column(String(300), nullable=False)
    minutes_per_day = Column(Integer, nullable=False)

    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
