"""Shared test fixtures — single test DB for all test modules."""
from __future__ import annotations

from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from src.db.tables import Base
from src.db.engine import configure_sqlite, get_session

# Use a shared in-memory DB with check_same_thread=False and StaticPool
# This ensures all connections see the same in-memory database.
from sqlalchemy.pool import StaticPool

TEST_DB_URL = "sqlite+aiosqlite:///file:test?mode=memory&cache=shared&uri=true"

test_engine = create_async_engine(
    TEST_DB_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
configure_sqlite(test_engine)
TestSession = async_sessionmaker(test_engine, expire_on_commit=False, class_=AsyncSession)


async def override_get_session():
    async with TestSession() as session:
        yield session


# Import app and override BEFORE any test module imports app
from src.api.main import app  # noqa: E402
from src.services.completion import get_completion_client  # noqa: E402
from src.services.errors import CompletionUnavailable  # noqa: E402

app.dependency_overrides[get_session] = override_get_session

# Patch the module-level session factory and engine to use our test engine
import src.db.engine as _engine_mod  # noqa: E402
_engine_mod.async_session = TestSession
_engine_mod.engine = test_engine


@asynccontextmanager
async def get_test_session():
    """Context manager for seeding data in tests."""
    async with TestSession() as session:
        yield session


class FakeCompletionClient:
    """Scripted stand-in for CompletionClient: returns (or raises) queued replies in order."""

    def __init__(self):
        self.replies: list = []
        self.calls: list[tuple[str, bool]] = []

    def queue(self, *replies):
        self.replies.extend(replies)

    async def complete(self, prompt: str, force_json: bool = False) -> str:
        self.calls.append((prompt, force_json))
        if not self.replies:
            raise CompletionUnavailable(detail="no scripted reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create tables before each test, drop after."""
    import src.db.user_tables  # noqa: F401
    import src.db.tracking_tables  # noqa: F401

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def fake_ai():
    fake = FakeCompletionClient()
    app.dependency_overrides[get_completion_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_completion_client, None)


@pytest_asyncio.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def signup(client, username="alice", password="Secret123!", **extra) -> dict:
    """Sign up and return Authorization headers for the new user."""
    resp = await client.post("/api/v1/auth/signup", json={"username": username, "password": password, **extra})
    assert resp.status_code == 200, f"Signup failed: {resp.text}"
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def create_manager(client, username="boss", password="Secret123!") -> dict:
    """Seed a manager account directly and log in as it."""
    from src.auth import hash_password
    from src.db.user_tables import ROLE_MANAGER, UserRow

    async with TestSession() as session:
        session.add(UserRow(username=username, password_hash=hash_password(password), role=ROLE_MANAGER))
        await session.commit()

    resp = await client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


QUESTIONNAIRE = {
    "goals": "Lose 5 kg and build endurance",
    "fitness_level": "intermediate",
    "diet_preference": "high protein",
    "equipment": "dumbbells, resistance bands",
    "minutes_per_day": 45,
}


def make_plan(offsets=range(7), calorie_goal=2200, workouts=None) -> dict:
    """Wire-format plan with one day per offset."""
    if workouts is None:
        workouts = [{"name": "Barbell Squats", "time_block": "morning", "approx_calories": 250}]
    return {
        "days": [
            {
                "dayOffset": offset,
                "label": f"Day {offset + 1}",
                "calorie_goal": calorie_goal,
                "protein_goal_g": 140,
                "notes": "Stay hydrated.",
                "workouts": workouts,
            }
            for offset in offsets
        ]
    }
