"""Weekly plan pipeline: generate (prompt → completion → parse) and save."""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from src.db.repository import FitnessRepository
from src.models import Plan
from src.services.completion import CompletionClient
from src.services.plan_materializer import MaterializeResult, materialize_plan
from src.services.plan_parser import parse_plan
from src.services.plan_prompt import build_plan_prompt

logger = logging.getLogger(__name__)


async def generate_plan(repo: FitnessRepository, client: CompletionClient, user_id: str) -> Plan:
    """Build a plan for `user_id`. Nothing is persisted."""
    profile = await repo.find_user_profile(user_id)
    questionnaire = await repo.find_questionnaire(user_id)
    prompt = build_plan_prompt(profile, questionnaire)

    raw = await client.complete(prompt, force_json=False)
    plan = parse_plan(raw)
    if not plan.is_full_week():
        logger.warning(
            "AI plan for user %s has offsets %s instead of a full week",
            user_id, [d.day_offset for d in plan.days],
        )
    return plan


async def save_plan(
    repo: FitnessRepository,
    user_id: str,
    plan: Plan,
    today: Optional[date] = None,
) -> MaterializeResult:
    """Materialize `plan` in a single transaction: every day is written or none is."""

    async def _write(r: FitnessRepository) -> MaterializeResult:
        return await materialize_plan(r, user_id, plan, today=today)

    return await repo.run_in_transaction(_write)
