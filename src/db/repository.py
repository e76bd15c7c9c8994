"""Fitness repository — catalog, log, profile and questionnaire access.

Rows are converted to Pydantic models at this boundary for profiles and
questionnaires; catalog and log rows are returned as ORM rows because the
callers only read a few columns from them.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.tables import FoodRow, WorkoutRow, normalize_name
from src.db.tracking_tables import FoodLogRow, WorkoutLogRow
from src.db.user_tables import QuestionnaireRow, UserRow
from src.models import Questionnaire, UserProfile
from src.services.errors import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Kind(str, Enum):
    FOOD = "food"
    WORKOUT = "workout"


_CATALOG_ROWS = {Kind.FOOD: FoodRow, Kind.WORKOUT: WorkoutRow}
_LOG_ROWS = {Kind.FOOD: FoodLogRow, Kind.WORKOUT: WorkoutLogRow}


def _row_to_profile(row: UserRow) -> UserProfile:
    return UserProfile(
        id=row.id,
        username=row.username,
        role=row.role,
        first_name=row.first_name,
        last_name=row.last_name,
        age=row.age,
        weight_kg=row.weight_kg,
        height_cm=row.height_cm,
        gender=row.gender,
        date_of_birth=row.date_of_birth,
    )


def _row_to_questionnaire(row: QuestionnaireRow) -> Questionnaire:
    return Questionnaire(
        goals=row.goals,
        fitness_level=row.fitness_level,
        diet_preference=row.diet_preference,
        equipment=row.equipment,
        minutes_per_day=row.minutes_per_day,
    )


class FitnessRepository:
    """Async data access backed by SQLAlchemy. Never commits except in run_in_transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Users ────────────────────────────────────────────────────────────

    async def find_user_profile(self, user_id: str) -> Optional[UserProfile]:
        row = await self.session.get(UserRow, user_id)
        return _row_to_profile(row) if row else None

    # ── Questionnaire ────────────────────────────────────────────────────

    async def _questionnaire_row(self, user_id: str) -> Optional[QuestionnaireRow]:
        result = await self.session.execute(
            select(QuestionnaireRow).where(QuestionnaireRow.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def find_questionnaire(self, user_id: str) -> Optional[Questionnaire]:
        row = await self._questionnaire_row(user_id)
        return _row_to_questionnaire(row) if row else None

    async def upsert_questionnaire(self, user_id: str, answers: Questionnaire) -> Questionnaire:
        """Insert or update the user's questionnaire (one per user)."""
        row = await self._questionnaire_row(user_id)
        fields = answers.model_dump()
        if row:
            for key, value in fields.items():
                setattr(row, key, value)
            row.updated_at = datetime.now(timezone.utc)
        else:
            row = QuestionnaireRow(user_id=user_id, **fields)
            self.session.add(row)
        await self.session.flush()
        return _row_to_questionnaire(row)

    # ── Catalogs ─────────────────────────────────────────────────────────

    async def find_catalog_entry_by_name(self, kind: Kind, name: str):
        """Case-insensitive exact match on the catalog name."""
        model = _CATALOG_ROWS[kind]
        result = await self.session.execute(
            select(model).where(model.name_key == normalize_name(name))
        )
        return result.scalar_one_or_none()

    async def insert_catalog_entry(self, kind: Kind, fields: dict):
        model = _CATALOG_ROWS[kind]
        row = model(**fields)
        row.name = row.name.strip()
        row.name_key = normalize_name(row.name)
        self.session.add(row)
        await self.session.flush()
        return row

    async def find_or_create_catalog_entry(
        self, kind: Kind, name: str, factory: Callable[[str], dict]
    ):
        """Return the catalog row for `name`, creating it from `factory(name)` if unseen.

        The insert runs in a SAVEPOINT; losing a race against the unique
        name_key constraint rolls back only the savepoint and re-reads the
        winner's row.
        """
        existing = await self.find_catalog_entry_by_name(kind, name)
        if existing:
            return existing

        fields = {**factory(name), "name": name}
        try:
            async with self.session.begin_nested():
                return await self.insert_catalog_entry(kind, fields)
        except IntegrityError:
            logger.info("Catalog %s %r created concurrently, reusing it", kind.value, name)
            existing = await self.find_catalog_entry_by_name(kind, name)
            if existing is None:
                raise
            return existing

    async def list_catalog(self, kind: Kind) -> list:
        model = _CATALOG_ROWS[kind]
        result = await self.session.execute(select(model).order_by(model.name_key))
        return list(result.scalars().all())

    # ── Logs ─────────────────────────────────────────────────────────────

    async def insert_log_entry(self, kind: Kind, fields: dict):
        row = _LOG_ROWS[kind](**fields)
        self.session.add(row)
        await self.session.flush()
        return row

    async def list_log_entries(
        self, kind: Kind, user_id: str, log_date: Optional[date] = None
    ) -> list[tuple]:
        """(log row, catalog name) pairs for a user, newest date first."""
        log_model = _LOG_ROWS[kind]
        catalog_model = _CATALOG_ROWS[kind]
        fk = log_model.food_id if kind == Kind.FOOD else log_model.workout_id

        stmt = (
            select(log_model, catalog_model.name)
            .join(catalog_model, catalog_model.id == fk)
            .where(log_model.user_id == user_id)
        )
        if log_date is not None:
            stmt = stmt.where(log_model.log_date == log_date)
        stmt = stmt.order_by(log_model.log_date.desc(), log_model.created_at.desc())
        result = await self.session.execute(stmt)
        return [(row, name) for row, name in result.all()]

    async def set_log_completed(
        self, kind: Kind, user_id: str, entry_id: str, completed: bool
    ):
        log_model = _LOG_ROWS[kind]
        row = await self.session.get(log_model, entry_id)
        if row is None or row.user_id != user_id:
            return None
        row.completed = completed
        await self.session.flush()
        return row

    async def food_rows_between(self, user_id: str, start: date, end: date) -> list[tuple]:
        """(log_date, food name, calorie_goal) for food logs in [start, end]."""
        result = await self.session.execute(
            select(FoodLogRow.log_date, FoodRow.name, FoodLogRow.calorie_goal)
            .join(FoodRow, FoodRow.id == FoodLogRow.food_id)
            .where(
                FoodLogRow.user_id == user_id,
                FoodLogRow.log_date >= start,
                FoodLogRow.log_date <= end,
            )
        )
        return [tuple(r) for r in result.all()]

    async def workout_rows_between(self, user_id: str, start: date, end: date) -> list[tuple]:
        """(log_date, calories_burned) for workout logs in [start, end]."""
        result = await self.session.execute(
            select(WorkoutLogRow.log_date, WorkoutLogRow.calories_burned).where(
                WorkoutLogRow.user_id == user_id,
                WorkoutLogRow.log_date >= start,
                WorkoutLogRow.log_date <= end,
            )
        )
        return [tuple(r) for r in result.all()]

    # ── Transactions ─────────────────────────────────────────────────────

    async def run_in_transaction(self, fn: Callable[["FitnessRepository"], Awaitable[T]]) -> T:
        """Run `fn(self)` and commit; roll everything back if it fails."""
        try:
            result = await fn(self)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Transaction rolled back")
            raise PersistenceError(detail=str(exc)) from exc
        except Exception:
            await self.session.rollback()
            raise
        return result
