"""AI food lookup — free-text description to per-item nutrition estimates.

Read-through only: nothing is persisted. Unlike plan parsing, the reply is
parsed strictly since the completion runs in forced-JSON mode.
"""
from __future__ import annotations

import json
import logging

from src.services.completion import CompletionClient
from src.services.errors import AiFormatError, AiStructureError

logger = logging.getLogger(__name__)

FOOD_INFO_PROMPT = """You are a nutrition database assistant for FitLog, a fitness tracking app.

Estimate the nutrition of the food described below. Split it into its individual items
and assume standard portions when quantities are missing.

Description: {query}

Return a JSON object with exactly these fields:
- items: array of {{"name": string, "calories": number, "protein_g": number, "carbs_g": number, "fat_g": number}}
- summary: a short one or two sentence summary of the meal

Return ONLY valid JSON, no markdown."""


def build_food_info_prompt(query: str) -> str:
    return FOOD_INFO_PROMPT.format(query=query.strip())


def parse_food_info(raw: str) -> dict:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Food info output was not valid JSON (%s): %s", e, raw)
        raise AiFormatError(detail=raw) from e

    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        logger.warning("Food info output has no items list: %s", raw)
        raise AiStructureError(detail=raw)

    summary = data.get("summary")
    return {"items": items, "summary": summary if isinstance(summary, str) else ""}


async def lookup_food_info(client: CompletionClient, query: str) -> dict:
    raw = await client.complete(build_food_info_prompt(query), force_json=True)
    return parse_food_info(raw)
