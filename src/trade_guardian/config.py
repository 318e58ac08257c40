"""Trade Guardian Configuration.

Step identifiers, fixed option lists and thresholds for the pre-trade
assessment.
"""

from dataclasses import dataclass, field
from enum import IntEnum

from src.db.models import EmotionType


class AssessmentStep(IntEnum):
    """Linear steps of the assessment; APPROVED is terminal."""
    TRADE_DETAILS = 1
    RISK_ACK = 2
    SETUP_VALIDATION = 3
    EMOTION_CHECK = 4
    RULES_ACK = 5
    APPROVED = 6


STEP_TITLES: dict[AssessmentStep, str] = {
    AssessmentStep.TRADE_DETAILS: "Trade Details",
    AssessmentStep.RISK_ACK: "Risk Assessment",
    AssessmentStep.SETUP_VALIDATION: "Setup Validation",
    AssessmentStep.EMOTION_CHECK: "Emotion Check",
    AssessmentStep.RULES_ACK: "Rules Reminder",
    AssessmentStep.APPROVED: "Trade Approved",
}

SETUP_TYPES: tuple[str, ...] = (
    "Breakout",
    "Breakdown",
    "Pullback",
    "Reversal",
    "Trend Following",
    "Range Trade",
    "News Based",
    "Other",
)

# Emotions that trigger a warning on the emotion step (never a block)
DANGEROUS_EMOTIONS: frozenset[EmotionType] = frozenset(
    {EmotionType.GREEDY, EmotionType.FOMO, EmotionType.REVENGE}
)

RISK_ACK_LABELS: dict[str, str] = {
    "risk_understood": "I understand the risk on this trade",
    "can_afford": "I can afford to lose this amount",
    "within_daily_limit": "This trade won't exceed my daily loss limit",
}

SETUP_CHECK_LABELS: dict[str, str] = {
    "chart_analyzed": "I have analyzed the chart",
    "levels_identified": "Key support/resistance levels are identified",
    "valid_reason": "I have a valid reason to take this trade",
    "matches_plan": "This setup matches my trading plan",
    "would_repeat": "I would take this trade again in the same situation",
}

EMOTION_CHECK_LABELS: dict[str, str] = {
    "not_fomo": "I am not trading out of FOMO",
    "not_revenge": "I am not trying to recover a previous loss",
    "not_greedy": "I am not being greedy with size or target",
    "calm_state": "I am calm and focused",
    "will_respect_stop": "I will respect my stop loss",
}

TRADE_REASON_PREFIX = "Trade Reason: "


@dataclass
class GuardianConfig:
    """Configuration for the pre-trade assessment."""
    min_reason_length: int = 20
    fallback_per_trade_risk: float = 5_000.0     # used when the user has no profile
    fallback_daily_loss_limit: float = 10_000.0
    enforce_risk_limits: bool = False             # breaches block step 2 when True
    min_risk_reward: float = 1.0                  # below this a warning is raised
    setup_types: tuple[str, ...] = field(default_factory=lambda: SETUP_TYPES)

    @classmethod
    def from_settings(cls, settings=None) -> "GuardianConfig":
        if settings is None:
            from src.settings import get_settings
            settings = get_settings()
        return cls(
            fallback_per_trade_risk=settings.guardian_per_trade_risk,
            fallback_daily_loss_limit=settings.guardian_daily_loss_limit,
            enforce_risk_limits=settings.guardian_enforce_risk_limits,
        )


DEFAULT_GUARDIAN_CONFIG = GuardianConfig()
