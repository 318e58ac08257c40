"""Assessment Wizard.

Explicit state machine for the pre-trade assessment. The wizard owns the
current step and the draft; the view layer only renders it and forwards
user input. Transitions are linear: ``next`` requires the current step's
predicate, ``back`` never skips, and APPROVED only allows ``reset`` or
``commit``.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from src.api_errors import ConflictError, GateBlockedError, TradeMindError
from src.db.models import EmotionType
from src.journal.clock import utc_now
from src.journal.models import NewTrade
from src.trade_guardian import gates
from src.trade_guardian.calculator import RiskAssessment, RiskCalculator
from src.trade_guardian.config import (
    DANGEROUS_EMOTIONS,
    DEFAULT_GUARDIAN_CONFIG,
    STEP_TITLES,
    TRADE_REASON_PREFIX,
    AssessmentStep,
    GuardianConfig,
)
from src.trade_guardian.models import ApprovalSummary, AssessmentDraft

logger = logging.getLogger(__name__)


class AssessmentWizard:
    """Five gated steps followed by a terminal APPROVED state.

    Args:
        calculator: Risk calculator bound to the user's limits.
        active_rule_ids: Ids of the user's currently active trading rules.
        today_realized_loss: Positive magnitude of today's closed losses.
        config: Guardian configuration.
    """

    def __init__(
        self,
        calculator: RiskCalculator,
        active_rule_ids: Iterable[str] = (),
        today_realized_loss: float = 0.0,
        config: Optional[GuardianConfig] = None,
    ):
        self.calculator = calculator
        self.config = config or calculator.config or DEFAULT_GUARDIAN_CONFIG
        self.active_rule_ids = list(active_rule_ids)
        self.today_realized_loss = today_realized_loss
        self.step = AssessmentStep.TRADE_DETAILS
        self.draft = AssessmentDraft()
        self.committed_trade_id: Optional[str] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    @property
    def is_approved(self) -> bool:
        return self.step == AssessmentStep.APPROVED

    @property
    def is_finished(self) -> bool:
        return self.committed_trade_id is not None

    def step_complete(self, step: AssessmentStep) -> bool:
        """Predicate of one step evaluated against the current draft."""
        d = self.draft
        if step == AssessmentStep.TRADE_DETAILS:
            return gates.trade_details_complete(d.details)
        if step == AssessmentStep.RISK_ACK:
            if not gates.risk_acknowledged(d.risk_ack):
                return False
            if self.config.enforce_risk_limits:
                assessment = self.risk()
                return assessment is not None and not assessment.has_breach
            return True
        if step == AssessmentStep.SETUP_VALIDATION:
            return gates.setup_validated(d.setup, self.config)
        if step == AssessmentStep.EMOTION_CHECK:
            return gates.emotion_checked(d.emotion)
        if step == AssessmentStep.RULES_ACK:
            return gates.rules_acknowledged(d.acknowledged_rules, self.active_rule_ids)
        return True

    def can_advance(self) -> bool:
        return not self.is_approved and not self.is_finished and self.step_complete(self.step)

    def can_go_back(self) -> bool:
        return AssessmentStep.TRADE_DETAILS < self.step < AssessmentStep.APPROVED and not self.is_finished

    def risk(self) -> Optional[RiskAssessment]:
        """Risk figures for the current trade details, or None until step 1 is complete."""
        details = self.draft.details
        if not gates.trade_details_complete(details):
            return None
        return self.calculator.assess(
            details.direction,
            details.quantity,
            details.entry_price,
            details.stop_loss,
            details.target_price,
            self.today_realized_loss,
        )

    @property
    def is_dangerous_emotion(self) -> bool:
        emotion = self.draft.emotion.emotion
        return emotion is not None and EmotionType(emotion) in DANGEROUS_EMOTIONS

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def next(self) -> AssessmentStep:
        """Advance one step.

        Raises:
            GateBlockedError: The current step's predicate does not hold.
            ConflictError: Already approved or committed.
        """
        self._ensure_active()
        if self.is_approved:
            raise ConflictError("Assessment is already approved; commit or reset")
        if not self.step_complete(self.step):
            raise GateBlockedError(self.step)

        if self.step == AssessmentStep.RISK_ACK:
            assessment = self.risk()
            if assessment is not None and assessment.has_breach:
                logger.warning("Risk limits breached but acknowledged: %s", "; ".join(assessment.warnings))

        self.step = AssessmentStep(self.step + 1)
        logger.debug("Assessment advanced to %s", self.step.name)
        return self.step

    def back(self) -> AssessmentStep:
        """Return one step; a no-op on the first step."""
        self._ensure_active()
        if self.is_approved:
            raise ConflictError("Approved assessment can only be reset or committed")
        if self.step > AssessmentStep.TRADE_DETAILS:
            self.step = AssessmentStep(self.step - 1)
        return self.step

    def reset(self) -> None:
        """Discard the draft and return to the first step."""
        self.step = AssessmentStep.TRADE_DETAILS
        self.draft = AssessmentDraft()
        self.committed_trade_id = None

    def refresh_context(
        self,
        calculator: Optional[RiskCalculator] = None,
        active_rule_ids: Optional[Iterable[str]] = None,
        today_realized_loss: Optional[float] = None,
    ) -> AssessmentStep:
        """Replace the limits, active rules and daily loss the gates check against.

        The draft is kept. If a step already passed no longer holds under the
        new context, the wizard returns to the earliest such step.
        """
        if calculator is not None:
            self.calculator = calculator
        if active_rule_ids is not None:
            self.active_rule_ids = list(active_rule_ids)
        if today_realized_loss is not None:
            self.today_realized_loss = today_realized_loss
        if self.is_finished:
            return self.step

        for step in AssessmentStep:
            if step >= self.step:
                break
            if not self.step_complete(step):
                logger.info("Assessment returned to %s after context refresh", step.name)
                self.step = step
                break
        return self.step

    def toggle_rule(self, rule_id: str) -> bool:
        """Flip acknowledgment of a rule; returns the new state."""
        acked = self.draft.acknowledged_rules
        if rule_id in acked:
            acked.discard(rule_id)
            return False
        acked.add(rule_id)
        return True

    # ------------------------------------------------------------------
    # Approval & commit
    # ------------------------------------------------------------------

    def summary(self) -> ApprovalSummary:
        if not self.is_approved:
            raise ConflictError("Assessment is not approved yet")
        d = self.draft.details
        assessment = self.risk()
        return ApprovalSummary(
            symbol=d.normalized_symbol,
            trade_type=d.trade_type,
            direction=d.direction,
            quantity=d.quantity,
            entry_price=d.entry_price,
            stop_loss=d.stop_loss,
            target_price=d.target_price,
            position_size=assessment.position_size,
            risk_amount=assessment.risk_amount,
            reward_amount=assessment.reward_amount,
            risk_reward_ratio=assessment.risk_reward_ratio,
            setup_type=self.draft.setup.setup_type,
            emotion=self.draft.emotion.emotion,
            warnings=list(assessment.warnings),
        )

    def build_trade(self, session_id: Optional[str] = None, now: Optional[datetime] = None) -> NewTrade:
        """The OPEN trade that committing would persist."""
        if not self.is_approved:
            raise ConflictError("Assessment is not approved yet")
        d = self.draft
        return NewTrade(
            symbol=d.details.normalized_symbol,
            quantity=d.details.quantity,
            entry_price=d.details.entry_price,
            trade_type=d.details.trade_type,
            direction=d.details.direction,
            stop_loss=d.details.stop_loss,
            target_price=d.details.target_price,
            setup_type=d.setup.setup_type,
            emotion_entry=d.emotion.emotion,
            notes=f"{TRADE_REASON_PREFIX}{d.setup.reason.strip()}",
            entry_time=now or utc_now(),
            session_id=session_id,
        )

    def commit(
        self,
        journal_service,
        user_id: str,
        session_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ):
        """Persist the approved draft as a new OPEN trade.

        On failure the error propagates and the wizard stays APPROVED
        with the draft untouched, so the user can retry.

        Returns:
            The created Trade.
        """
        self._ensure_active()
        trade_payload = self.build_trade(session_id=session_id, now=now)
        try:
            trade = journal_service.create_trade(user_id, trade_payload)
        except TradeMindError:
            logger.warning("Commit of approved assessment for %s failed; draft kept", trade_payload.symbol)
            raise

        self.committed_trade_id = trade.id
        logger.info("Assessment committed as trade %s (%s)", trade.id, trade.symbol)
        return trade

    def _ensure_active(self) -> None:
        if self.is_finished:
            raise ConflictError("Assessment already committed; start a new one")
