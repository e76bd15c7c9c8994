from src.models.plan import Plan, PlanDay, PlanWorkout, WEEK_OFFSETS
from src.models.profile import UserProfile, Questionnaire

__all__ = [
    "Plan",
    "PlanDay",
    "PlanWorkout",
    "WEEK_OFFSETS",
    "UserProfile",
    "Questionnaire",
]
