"""Trading discipline: profile limits, rule book and the daily ritual."""

from src.discipline.profile import ProfileService, ProfileUpdate
from src.discipline.ritual import DEFAULT_QUOTES, RitualService, can_start_ritual
from src.discipline.rules import DEFAULT_RULES, RuleService

__all__ = [
    "DEFAULT_QUOTES",
    "DEFAULT_RULES",
    "ProfileService",
    "ProfileUpdate",
    "RitualService",
    "RuleService",
    "can_start_ritual",
]
