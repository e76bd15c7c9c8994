"""Dashboard API — /api/v1/dashboard endpoints."""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import require_user
from src.db.engine import get_session
from src.db.repository import FitnessRepository
from src.db.user_tables import UserRow
from src.services.dashboard import weekly_dashboard

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/weekly")
async def weekly(
    start: Optional[date] = Query(None, description="First day of the week (default: this Monday)"),
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Calories eaten, goal and burned for each of 7 days starting at `start`."""
    return await weekly_dashboard(FitnessRepository(session), user.id, start)
