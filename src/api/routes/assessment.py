"""Trade Guardian API Routes.

Stateless evaluation of an assessment draft. The client sends the whole
draft on every call; commit re-runs every gate before persisting.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from src.api.dependencies import get_journal_service, get_profile_service, get_ritual_service, get_rule_service, get_user_id
from src.api.models import AssessmentRequest, AssessmentResponse, RiskRequest, RiskResponse, TradeResponse
from src.discipline import ProfileService, RitualService, RuleService
from src.journal import JournalService
from src.trade_guardian import (
    AssessmentStep,
    AssessmentWizard,
    EmotionCheck,
    GuardianConfig,
    RiskAcknowledgment,
    RiskCalculator,
    SetupValidation,
    TradeDetails,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/assessments", tags=["Trade Guardian"])


def _build_wizard(
    request: AssessmentRequest,
    user_id: str,
    journal: JournalService,
    profiles: ProfileService,
    rules: RuleService,
) -> AssessmentWizard:
    config = GuardianConfig.from_settings()
    wizard = AssessmentWizard(
        RiskCalculator.for_profile(profiles.get_profile(user_id), config),
        active_rule_ids=[r.id for r in rules.get_active_rules(user_id)],
        today_realized_loss=journal.get_today_realized_loss(user_id),
        config=config,
    )
    wizard.draft.details = TradeDetails.from_form(**request.details.model_dump())
    wizard.draft.risk_ack = RiskAcknowledgment(**request.risk_ack.model_dump())
    wizard.draft.setup = SetupValidation(**request.setup.model_dump())
    wizard.draft.emotion = EmotionCheck(**request.emotion.model_dump())
    wizard.draft.acknowledged_rules = set(request.acknowledged_rules)

    # walk forward as far as the gates allow
    while wizard.can_advance():
        wizard.next()
    return wizard


def _evaluate(wizard: AssessmentWizard) -> AssessmentResponse:
    assessment = wizard.risk()
    return AssessmentResponse(
        steps={
            step.name: wizard.step_complete(step)
            for step in AssessmentStep
            if step != AssessmentStep.APPROVED
        },
        current_step=wizard.step.name,
        approved=wizard.is_approved,
        dangerous_emotion=wizard.is_dangerous_emotion,
        risk=RiskResponse(**asdict(assessment)) if assessment else None,
    )


@router.post("/risk", response_model=RiskResponse)
def calculate_risk(
    request: RiskRequest,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
    profiles: ProfileService = Depends(get_profile_service),
):
    """Risk/reward figures for a planned trade against the caller's limits."""
    calculator = RiskCalculator.for_profile(profiles.get_profile(user_id), GuardianConfig.from_settings())
    result = calculator.assess(
        request.direction,
        request.quantity,
        request.entry_price,
        request.stop_loss,
        request.target_price,
        journal.get_today_realized_loss(user_id),
    )
    return RiskResponse(**asdict(result))


@router.post("/evaluate", response_model=AssessmentResponse)
def evaluate_assessment(
    request: AssessmentRequest,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
    profiles: ProfileService = Depends(get_profile_service),
    rules: RuleService = Depends(get_rule_service),
):
    return _evaluate(_build_wizard(request, user_id, journal, profiles, rules))


@router.post("/commit", response_model=TradeResponse, status_code=201)
def commit_assessment(
    request: AssessmentRequest,
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
    profiles: ProfileService = Depends(get_profile_service),
    rules: RuleService = Depends(get_rule_service),
    ritual: RitualService = Depends(get_ritual_service),
):
    """Persist an approved draft as a new OPEN trade (400 if any gate fails)."""
    wizard = _build_wizard(request, user_id, journal, profiles, rules)
    if not wizard.is_approved:
        # re-raise the blocking step as GateBlockedError
        wizard.next()
    today = ritual.get_today_session(user_id)
    return wizard.commit(journal, user_id, session_id=today.id if today else None)
