"""Manager API — user account administration, manager role only."""
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth import hash_password, require_manager, user_summary
from src.db.engine import get_session
from src.db.user_tables import UserRow

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

Role = Literal["user", "manager"]


class AdminUserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=200)
    role: Role = "user"
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class AdminUserUpdate(BaseModel):
    password: Optional[str] = Field(None, min_length=6, max_length=200)
    role: Optional[Role] = None
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


@router.get("/users")
async def list_users(
    manager: UserRow = Depends(require_manager),
    session: AsyncSession = Depends(get_session),
):
    result = await session.execute(select(UserRow).order_by(UserRow.username))
    return {"users": [user_summary(u) for u in result.scalars().all()]}


@router.post("/users", status_code=201)
async def create_user(
    body: AdminUserCreate,
    manager: UserRow = Depends(require_manager),
    session: AsyncSession = Depends(get_session),
):
    existing = await session.execute(select(UserRow).where(UserRow.username == body.username))
    if existing.scalar_one_or_none():
        raise HTTPException(409, "Username already taken")
    user = UserRow(
        username=body.username,
        password_hash=hash_password(body.password),
        role=body.role,
        first_name=body.first_name,
        last_name=body.last_name,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user_summary(user)


@router.patch("/users/{user_id}")
async def update_user(
    user_id: str,
    body: AdminUserUpdate,
    manager: UserRow = Depends(require_manager),
    session: AsyncSession = Depends(get_session),
):
    user = await session.get(UserRow, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    changes = body.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    if password is not None:
        user.password_hash = hash_password(password)
    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value)
    await session.commit()
    return user_summary(user)


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    manager: UserRow = Depends(require_manager),
    session: AsyncSession = Depends(get_session),
):
    if user_id == manager.id:
        raise HTTPException(400, "Managers cannot delete their own account")
    user = await session.get(UserRow, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    await session.delete(user)
    await session.commit()
