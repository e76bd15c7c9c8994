"""Startup validation — catch misconfigurations before the app serves traffic."""
from __future__ import annotations

import logging
import sys

from config.settings import DEFAULT_JWT_SECRET, settings

logger = logging.getLogger(__name__)


def _is_production() -> bool:
    return bool(settings.DATABASE_URL) and not settings.DATABASE_URL.startswith("sqlite")


def _ai_warnings() -> list[str]:
    """Plan generation and food info both depend on these."""
    problems = []
    if not settings.ANTHROPIC_API_KEY:
        problems.append("ANTHROPIC_API_KEY not set — /plans/generate and /food/info will answer 503")
    if not settings.AI_MODEL:
        problems.append("AI_MODEL is empty — completion requests will be rejected")
    if settings.AI_TIMEOUT_SECONDS <= 0:
        problems.append("AI_TIMEOUT_SECONDS must be positive — completion calls may hang")
    if settings.AI_MAX_TOKENS < 1000:
        problems.append(f"AI_MAX_TOKENS={settings.AI_MAX_TOKENS} is likely too small for a 7-day plan")
    return problems


def validate_settings() -> list[str]:
    """Return configuration warnings; exit on a default JWT secret outside SQLite."""
    if _is_production() and settings.JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.critical("JWT_SECRET is still the default! Set a real secret for production.")
        sys.exit(1)

    warnings = _ai_warnings()
    if _is_production() and "*" in settings.CORS_ORIGINS:
        warnings.append("CORS_ORIGINS is set to * — restrict in production")
    if settings.LOG_FORMAT not in ("text", "json"):
        warnings.append(f"LOG_FORMAT={settings.LOG_FORMAT!r} is not 'text' or 'json'; using text")

    for w in warnings:
        logger.warning("%s", w)
    if not warnings:
        logger.info("All startup checks passed")
    return warnings
