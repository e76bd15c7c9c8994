"""AI Plan API — /api/v1/plans and /api/v1/food/info endpoints.

Domain errors (missing questionnaire, AI unavailable, unparseable output,
failed saves) are raised as FitLogError subclasses and rendered as
``{"error": message}`` by the app-level handler.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import require_user
from src.db.engine import get_session
from src.db.repository import FitnessRepository
from src.db.user_tables import UserRow
from src.models import Plan
from src.services.completion import CompletionClient, get_completion_client
from src.services.food_info import lookup_food_info
from src.services.planner import generate_plan, save_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["plans"])


class SavePlanRequest(BaseModel):
    plan: Plan


class FoodInfoRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=500)

    model_config = {"json_schema_extra": {
        "examples": [
            {"query": "two scrambled eggs and a slice of whole wheat toast"},
        ]
    }}


@router.post("/plans/generate")
async def generate(
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
    client: CompletionClient = Depends(get_completion_client),
):
    """Generate a 7-day workout + nutrition plan from the user's profile and questionnaire.

    The plan is returned, not stored. POST it back to /plans/save to log it.
    """
    plan = await generate_plan(FitnessRepository(session), client, user.id)
    return {"plan": plan.to_wire()}


@router.post("/plans/save")
async def save(
    body: SavePlanRequest,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Write an accepted plan into the user's food and workout logs (all or nothing)."""
    if not body.plan.is_full_week():
        raise HTTPException(422, "Plan must contain exactly 7 days with dayOffset 0 through 6")

    result = await save_plan(FitnessRepository(session), user.id, body.plan)
    return {
        "message": f"Plan saved: {result.workouts_logged} workouts and {result.goals_logged} daily goals added to your logs",
    }


@router.post("/food/info")
async def food_info(
    body: FoodInfoRequest,
    user: UserRow = Depends(require_user),
    client: CompletionClient = Depends(get_completion_client),
):
    """Estimate calories and macros for a free-text food description."""
    return await lookup_food_info(client, body.query)
