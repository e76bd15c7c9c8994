"""App settings — loaded from environment (and a local .env, if present)."""
from __future__ import annotations

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = "fitlog-dev-secret-change-in-prod"


def _csv(name: str, default: str) -> list[str]:
    return [part.strip() for part in os.getenv(name, default).split(",") if part.strip()]


class Settings:
    # API
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8000"))
    CORS_ORIGINS = _csv("CORS_ORIGINS", "*")

    # Storage: sqlite+aiosqlite locally, postgresql:// (rewritten to asyncpg) in prod
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///fitlog.db")

    # Auth
    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)

    # Completion service used by plan generation and food info
    ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
    AI_MODEL = os.getenv("AI_MODEL", "claude-sonnet-4-20250514")
    AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "4000"))
    AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))

    # Error reporting (disabled when SENTRY_DSN is empty)
    SENTRY_DSN = os.getenv("SENTRY_DSN", "")
    SENTRY_ENVIRONMENT = os.getenv("SENTRY_ENVIRONMENT", "development")
    SENTRY_TRACES_SAMPLE_RATE = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1"))

    # Logging
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
