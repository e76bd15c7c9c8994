"""Domain errors for the planning and food-info pipelines.

Every error carries a user-safe ``message`` and an HTTP ``status_code``. The
optional ``detail`` (raw model output, driver errors) is for server logs only
and is never sent back to the caller.
"""
from __future__ import annotations

from typing import Optional


class FitLogError(Exception):
    status_code = 500
    default_message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class PreconditionMissing(FitLogError):
    status_code = 400
    default_message = "Please complete the fitness questionnaire first."


class CompletionUnavailable(FitLogError):
    status_code = 503
    default_message = "The AI is having trouble right now. Please try again in a moment."


class PlanFormatError(FitLogError):
    status_code = 502
    default_message = "AI did not return valid JSON"


class PlanStructureError(FitLogError):
    status_code = 502
    default_message = "AI returned an invalid plan structure"


class AiFormatError(FitLogError):
    status_code = 502
    default_message = "AI did not return valid JSON"


class AiStructureError(FitLogError):
    status_code = 502
    default_message = "AI returned an invalid response structure"


class PersistenceError(FitLogError):
    status_code = 500
    default_message = "Could not save to your logs. Please try again."
