"""Auth, profile and questionnaire API — /api/v1/auth and /api/v1/me endpoints."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import (
    LoginRequest, RefreshRequest, SignUpRequest, create_tokens, hash_password,
    require_user, user_summary, verify_password, verify_token,
)
from src.db.engine import get_session
from src.db.repository import FitnessRepository
from src.db.user_tables import UserRow
from src.models import Questionnaire

router = APIRouter(prefix="/api/v1", tags=["users"])


# ── Schemas ───────────────────────────────────────────────────────────────────

class ProfileUpdate(BaseModel):
    """Partial profile update — omitted fields are left unchanged."""
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=10, le=120)
    weight_kg: Optional[float] = Field(None, gt=0, le=500)
    height_cm: Optional[float] = Field(None, gt=0, le=300)
    gender: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date] = None


# ── Auth ──────────────────────────────────────────────────────────────────────

@router.post("/auth/signup")
async def signup(req: SignUpRequest, session: AsyncSession = Depends(get_session)):
    """Create a new user account."""
    existing = await session.execute(select(UserRow).where(UserRow.username == req.username))
    if existing.scalar_one_or_none():
        raise HTTPException(409, "Username already taken")
    user = UserRow(
        username=req.username,
        password_hash=hash_password(req.password),
        first_name=req.first_name,
        last_name=req.last_name,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return {"user": user_summary(user), **create_tokens(user.id)}


@router.post("/auth/login")
async def login(req: LoginRequest, session: AsyncSession = Depends(get_session)):
    """Log in with username + password, returns JWT tokens."""
    result = await session.execute(select(UserRow).where(UserRow.username == req.username))
    user = result.scalar_one_or_none()
    if not user or not verify_password(req.password, user.password_hash):
        raise HTTPException(401, "Invalid username or password")
    user.last_active_at = datetime.now(timezone.utc)
    await session.commit()
    return {"user": user_summary(user), **create_tokens(user.id)}


@router.post("/auth/refresh")
async def refresh(req: RefreshRequest, session: AsyncSession = Depends(get_session)):
    """Exchange a valid refresh token for new access + refresh tokens."""
    payload = verify_token(req.refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(401, "Invalid or expired refresh token")
    user = await session.get(UserRow, payload.get("sub"))
    if not user:
        raise HTTPException(401, "User not found")
    return {"user": user_summary(user), **create_tokens(user.id)}


# ── Profile ───────────────────────────────────────────────────────────────────

@router.get("/me/profile")
async def get_profile(
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    profile = await FitnessRepository(session).find_user_profile(user.id)
    return profile.model_dump(mode="json")


@router.put("/me/profile")
async def update_profile(
    body: ProfileUpdate,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Update body stats and names. Partial updates supported."""
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    await session.commit()
    profile = await FitnessRepository(session).find_user_profile(user.id)
    return profile.model_dump(mode="json")


# ── Questionnaire ─────────────────────────────────────────────────────────────

@router.get("/me/questionnaire")
async def get_questionnaire(
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    answers = await FitnessRepository(session).find_questionnaire(user.id)
    if answers is None:
        raise HTTPException(404, "Questionnaire not filled in yet")
    return answers.model_dump()


@router.put("/me/questionnaire")
async def put_questionnaire(
    body: Questionnaire,
    user: UserRow = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    """Create or replace the user's fitness questionnaire."""
    answers = await FitnessRepository(session).upsert_questionnaire(user.id, body)
    await session.commit()
    return answers.model_dump()
