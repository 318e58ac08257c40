"""Trade Guardian - pre-trade risk assessment.

Provides:
- RiskCalculator / calculate_risk: risk, reward and limit usage
- calculate_pnl: direction-aware realized P&L
- gates: per-step completion predicates
- AssessmentWizard: the five-step gated approval state machine
"""

from src.trade_guardian.config import (
    DANGEROUS_EMOTIONS,
    SETUP_TYPES,
    STEP_TITLES,
    AssessmentStep,
    GuardianConfig,
)
from src.trade_guardian.calculator import (
    PnLResult,
    RiskAssessment,
    RiskCalculator,
    RiskInputs,
    calculate_pnl,
    calculate_risk,
    today_realized_loss,
)
from src.trade_guardian.models import (
    ApprovalSummary,
    AssessmentDraft,
    EmotionCheck,
    RiskAcknowledgment,
    SetupValidation,
    TradeDetails,
)
from src.trade_guardian.wizard import AssessmentWizard

__all__ = [
    "ApprovalSummary",
    "AssessmentDraft",
    "AssessmentStep",
    "AssessmentWizard",
    "DANGEROUS_EMOTIONS",
    "EmotionCheck",
    "GuardianConfig",
    "PnLResult",
    "RiskAcknowledgment",
    "RiskAssessment",
    "RiskCalculator",
    "RiskInputs",
    "SETUP_TYPES",
    "STEP_TITLES",
    "SetupValidation",
    "TradeDetails",
    "calculate_pnl",
    "calculate_risk",
    "today_realized_loss",
]
