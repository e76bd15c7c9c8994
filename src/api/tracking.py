"""Catalog + log tracking API — /api/v1/foods, /api/v1/workouts, /api/v1/logs endpoints."""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import require_user
from src.db.engine import get_session
from src.db.repository import FitnessRepository, Kind
from src.db.tables import FoodRow, WorkoutRow
from src.db.tracking_tables import FoodLogRow, WorkoutLogRow
from src.db.user_tables import UserRow
from src.services.plan_materializer import inferred_workout_fields

router = APIRouter(prefix="/api/v1", tags=["tracking"])


# ── Schemas ───────────────────────────────────────────────────────────────────

class FoodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)


class WorkoutCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=300)
    body_part: Optional[str] = Field(None, max_length=50)
    equipment: Optional[str] = Field(None, max_length=50)
    difficulty: Optional[str] = Field(None, max_length=20)


class FoodLogRequest(BaseModel):
    food_id: str
    calorie_goal: float = Field(..., ge=0)
    total_weight_lost: float = 0
    log_date: Optional[date] = None


class WorkoutLogRequest(BaseModel):
    workout_id: str
    workout_streak: int = Field(0, ge=0)
    calories_burned: float = Field(0, ge=0)
    heart_rate: int = Field(0, ge=0, le=250)
    log_date: Optional[date] = None


class CompletedRequest(BaseModel):
    completed: bool


def _food_out(row: FoodRow) -> dict:
    return {
        "id": row.id, "name": row.name, "calories": row.calories,
        "protein": row.protein, "carbs": row.carbs, "fat": row.fat,
    }


def _workout_out(row: WorkoutRow) -> dict:
    return {
        "id": row.id, "name": row.name, "body_part": row.body_part,
        "equipment": row.equipment, "difficulty": row.difficulty,
    }


def _food_log_out(row: FoodLogRow, name: str) -> dict:
    return {
        "id": row.id, "food_id": row.food_id, "food_name": name,
        "calorie_goal": row.calorie_goal, "total_weight_lost": row.total_weight_lost,
        "log_date": row.log_date.isoformat(), "completed": row.completed,
    }


def _workout_log_out(row: WorkoutLogRow, name: str) -> dict:
    return {
        "id": row.id, "workout_id": row.workout_id, "workout_name": name,
        "workout_streak": row.workout_streak, "calories_burned": row.calories_burned,
        "heart_rate": row.heart_rate, "log_date": row.log_date.isoformat(),
        "completed": row.completed,
    }


# ── Catalogs ──────────────────────────────────────────────────────────────────

@router.get("/foods")
async def list_foods(user: UserRow = Depends(require_user), session: AsyncSession = Depends(get_session)):
    rows = await FitnessRepository(session).list_catalog(Kind.FOOD)
    return {"foods": [_food_out(r) for r in rows]}


@router.post("/foods", status_code=201)
async def create_food(
    body: FoodCreate,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Add a food to the shared catalog. An existing name (any case) is returned unchanged."""
    nutrition = body.model_dump(exclude={"name"})
    row = await FitnessRepository(session).find_or_create_catalog_entry(
        Kind.FOOD, body.name, lambda name: nutrition
    )
    await session.commit()
    return _food_out(row)


@router.get("/workouts")
async def list_workouts(user: UserRow = Depends(require_user), session: AsyncSession = Depends(get_session)):
    rows = await FitnessRepository(session).list_catalog(Kind.WORKOUT)
    return {"workouts": [_workout_out(r) for r in rows]}


@router.post("/workouts", status_code=201)
async def create_workout(
    body: WorkoutCreate,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Add a workout to the shared catalog, inferring any metadata not supplied."""

    def _fields(name: str) -> dict:
        fields = inferred_workout_fields(name)
        for key in ("body_part", "equipment", "difficulty"):
            value = getattr(body, key)
            if value:
                fields[key] = value
        return fields

    row = await FitnessRepository(session).find_or_create_catalog_entry(Kind.WORKOUT, body.name, _fields)
    await session.commit()
    return _workout_out(row)


# ── Logs ──────────────────────────────────────────────────────────────────────

@router.post("/logs/food", status_code=201)
async def log_food(
    body: FoodLogRequest,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    food = await session.get(FoodRow, body.food_id)
    if not food:
        raise HTTPException(404, "Food not found")
    row = await FitnessRepository(session).insert_log_entry(Kind.FOOD, {
        "user_id": user.id,
        "food_id": food.id,
        "calorie_goal": body.calorie_goal,
        "total_weight_lost": body.total_weight_lost,
        "log_date": body.log_date or date.today(),
    })
    await session.commit()
    return _food_log_out(row, food.name)


@router.post("/logs/workouts", status_code=201)
async def log_workout(
    body: WorkoutLogRequest,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    workout = await session.get(WorkoutRow, body.workout_id)
    if not workout:
        raise HTTPException(404, "Workout not found")
    row = await FitnessRepository(session).insert_log_entry(Kind.WORKOUT, {
        "user_id": user.id,
        "workout_id": workout.id,
        "workout_streak": body.workout_streak,
        "calories_burned": body.calories_burned,
        "heart_rate": body.heart_rate,
        "log_date": body.log_date or date.today(),
    })
    await session.commit()
    return _workout_log_out(row, workout.name)


@router.get("/logs/food")
async def list_food_logs(
    log_date: Optional[date] = Query(None),
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    pairs = await FitnessRepository(session).list_log_entries(Kind.FOOD, user.id, log_date)
    return {"entries": [_food_log_out(row, name) for row, name in pairs]}


@router.get("/logs/workouts")
async def list_workout_logs(
    log_date: Optional[date] = Query(None),
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    pairs = await FitnessRepository(session).list_log_entries(Kind.WORKOUT, user.id, log_date)
    return {"entries": [_workout_log_out(row, name) for row, name in pairs]}


@router.patch("/logs/{kind}/{entry_id}")
async def set_completed(
    kind: str,
    entry_id: str,
    body: CompletedRequest,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Mark a food or workout log entry (un)completed."""
    kinds = {"food": Kind.FOOD, "workouts": Kind.WORKOUT}
    if kind not in kinds:
        raise HTTPException(404, "Unknown log type")
    row = await FitnessRepository(session).set_log_completed(kinds[kind], user.id, entry_id, body.completed)
    if row is None:
        raise HTTPException(404, "Log entry not found")
    await session.commit()
    return {"id": row.id, "completed": row.completed}
