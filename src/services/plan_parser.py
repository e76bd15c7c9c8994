"""Plan parsing — pull a JSON object out of noisy model output and validate it.

Model replies may wrap the object in prose or markdown fences. We slice from
the first ``{`` to the last ``}`` and parse that. No semantic repair happens
here: a syntactically valid plan with, say, five days is returned as-is.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from src.models import Plan
from src.services.errors import PlanFormatError, PlanStructureError

logger = logging.getLogger(__name__)


def extract_json_object(raw: str) -> Optional[str]:
    """Return the substring spanning the first '{' to the last '}', or None."""
    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end == -1 or start >= end:
        return None
    return raw[start:end + 1]


def validate_plan(data: Any, raw: Optional[str] = None) -> Plan:
    """Validate an already-decoded plan object."""
    days = data.get("days") if isinstance(data, dict) else None
    if not isinstance(days, list) or not days:
        logger.warning("Plan has no days: %s", raw if raw is not None else data)
        raise PlanStructureError(detail=raw)
    try:
        return Plan.model_validate(data)
    except ValidationError as e:
        logger.warning("Plan failed validation: %s; output: %s", e, raw if raw is not None else data)
        raise PlanStructureError(detail=str(e)) from e


def parse_plan(raw: str) -> Plan:
    """Parse raw completion text into a Plan or raise PlanFormatError/PlanStructureError."""
    raw = raw or ""
    candidate = extract_json_object(raw)
    if candidate is None:
        logger.warning("AI plan output contained no JSON object: %s", raw)
        raise PlanFormatError(detail=raw)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning("AI plan output was not valid JSON (%s): %s", e, raw)
        raise PlanFormatError(detail=raw) from e

    return validate_plan(data, raw)
