"""Tests for the Trade Guardian gates and assessment wizard."""

from unittest.mock import MagicMock

import pytest

from src.api_errors import ConflictError, GateBlockedError, PersistenceError
from src.db.models import EmotionType, TradeDirection
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
from src.trade_guardian import gates
from src.trade_guardian.models import parse_number

from tests.factories import utc

REASON_20 = "Breakout above range"  # exactly 20 characters


def _details(**overrides):
    params = dict(symbol="nifty", quantity="50", entry_price="24500",
                  stop_loss="24400", target_price="24700")
    params.update(overrides)
    return TradeDetails.from_form(**params)


def _setup(reason=REASON_20, setup_type="Breakout"):
    return SetupValidation(
        setup_type=setup_type,
        chart_analyzed=True,
        levels_identified=True,
        valid_reason=True,
        matches_plan=True,
        would_repeat=True,
        reason=reason,
    )


def _emotion(emotion=EmotionType.CALM):
    return EmotionCheck(emotion, True, True, True, True, True)


def _wizard(active_rules=("r1", "r2"), today_loss=0.0, config=None):
    return AssessmentWizard(
        RiskCalculator(5000.0, 10000.0, config),
        active_rule_ids=active_rules,
        today_realized_loss=today_loss,
        config=config,
    )


def _walk_to(wizard, step):
    d = wizard.draft
    d.details = _details()
    d.risk_ack = RiskAcknowledgment(True, True, True)
    d.setup = _setup()
    d.emotion = _emotion()
    d.acknowledged_rules = set(wizard.active_rule_ids)
    while wizard.step < step:
        wizard.next()
    return wizard


class TestParseNumber:
    @pytest.mark.parametrize("raw, expected", [
        ("24500", 24500.0),
        (" 1,250.5 ", 1250.5),
        (50, 50.0),
        ("", None),
        ("abc", None),
        (None, None),
        ("nan", None),
        ("inf", None),
    ])
    def test_parse(self, raw, expected):
        assert parse_number(raw) == expected


class TestGates:
    def test_trade_details_complete(self):
        assert gates.trade_details_complete(_details()) is True

    @pytest.mark.parametrize("override", [
        {"symbol": "  "},
        {"quantity": ""},
        {"entry_price": "abc"},
        {"stop_loss": None},
        {"target_price": ""},
        {"quantity": "0"},
        {"entry_price": "-5"},
    ])
    def test_trade_details_incomplete(self, override):
        assert gates.trade_details_complete(_details(**override)) is False

    def test_risk_ack_needs_all_three(self):
        assert gates.risk_acknowledged(RiskAcknowledgment(True, True, True)) is True
        assert gates.risk_acknowledged(RiskAcknowledgment(True, False, True)) is False

    def test_reason_of_20_characters_passes(self):
        assert len(REASON_20) == 20
        assert gates.setup_validated(_setup(REASON_20)) is True

    def test_reason_of_19_characters_fails(self):
        assert gates.setup_validated(_setup(REASON_20[:19])) is False

    def test_reason_is_trimmed_before_length_check(self):
        assert gates.setup_validated(_setup("   " + REASON_20[:19] + "    ")) is False

    def test_setup_requires_known_type(self):
        assert gates.setup_validated(_setup(setup_type=None)) is False
        assert gates.setup_validated(_setup(setup_type="Hunch")) is False

    def test_setup_requires_every_check(self):
        setup = _setup()
        setup.would_repeat = False
        assert gates.setup_validated(setup) is False

    def test_emotion_requires_selection_and_checks(self):
        assert gates.emotion_checked(_emotion()) is True
        assert gates.emotion_checked(EmotionCheck(None, True, True, True, True, True)) is False
        assert gates.emotion_checked(EmotionCheck(EmotionType.CALM, True, True, False, True, True)) is False

    def test_dangerous_emotion_does_not_block(self):
        assert gates.emotion_checked(_emotion(EmotionType.FOMO)) is True

    def test_rules_superset_of_active_passes(self):
        assert gates.rules_acknowledged({"r1", "r2", "old"}, ["r1", "r2"]) is True

    def test_rules_missing_one_active_fails(self):
        assert gates.rules_acknowledged({"r1"}, ["r1", "r2"]) is False

    def test_no_active_rules_passes(self):
        assert gates.rules_acknowledged(set(), []) is True


class TestWizardTransitions:
    def test_starts_on_trade_details(self):
        wizard = _wizard()
        assert wizard.step == AssessmentStep.TRADE_DETAILS
        assert wizard.title == "Trade Details"
        assert wizard.can_go_back() is False

    def test_next_blocked_when_step_incomplete(self):
        wizard = _wizard()
        with pytest.raises(GateBlockedError):
            wizard.next()
        assert wizard.step == AssessmentStep.TRADE_DETAILS

    def test_back_on_first_step_is_noop(self):
        wizard = _wizard()
        assert wizard.back() == AssessmentStep.TRADE_DETAILS

    def test_walks_linearly_to_approved(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        assert wizard.is_approved is True
        assert wizard.can_advance() is False

    def test_back_returns_one_step_and_keeps_draft(self):
        wizard = _walk_to(_wizard(), AssessmentStep.EMOTION_CHECK)
        assert wizard.back() == AssessmentStep.SETUP_VALIDATION
        assert wizard.draft.setup.reason == REASON_20

    def test_back_from_approved_is_rejected(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        with pytest.raises(ConflictError):
            wizard.back()

    def test_next_from_approved_is_rejected(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        with pytest.raises(ConflictError):
            wizard.next()

    def test_rules_step_blocks_until_every_active_rule_acked(self):
        wizard = _walk_to(_wizard(), AssessmentStep.RULES_ACK)
        wizard.draft.acknowledged_rules = {"r1"}
        assert wizard.can_advance() is False
        assert wizard.toggle_rule("r2") is True
        assert wizard.can_advance() is True
        assert wizard.toggle_rule("r2") is False
        assert wizard.can_advance() is False

    def test_reset_clears_draft(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        wizard.reset()
        assert wizard.step == AssessmentStep.TRADE_DETAILS
        assert wizard.draft.details.symbol == ""

    def test_breach_is_advisory_by_default(self):
        wizard = _walk_to(_wizard(today_loss=9000.0), AssessmentStep.RISK_ACK)
        assert wizard.risk().has_breach is True
        assert wizard.next() == AssessmentStep.SETUP_VALIDATION

    def test_breach_blocks_when_enforced(self):
        config = GuardianConfig(enforce_risk_limits=True)
        wizard = _walk_to(_wizard(today_loss=9000.0, config=config), AssessmentStep.RISK_ACK)
        with pytest.raises(GateBlockedError):
            wizard.next()

    def test_dangerous_emotion_flag(self):
        wizard = _wizard()
        wizard.draft.emotion = _emotion(EmotionType.REVENGE)
        assert wizard.is_dangerous_emotion is True
        wizard.draft.emotion = _emotion(EmotionType.CALM)
        assert wizard.is_dangerous_emotion is False

    def test_risk_is_none_until_details_complete(self):
        wizard = _wizard()
        assert wizard.risk() is None
        wizard.draft.details = _details()
        assert wizard.risk().risk_amount == pytest.approx(5000)


class TestWizardCommit:
    def test_build_trade_prefixes_reason(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        trade = wizard.build_trade(session_id="s1", now=utc(2024, 3, 15, 4, 0))
        assert trade.symbol == "NIFTY"
        assert trade.direction == TradeDirection.LONG
        assert trade.notes == "Trade Reason: " + REASON_20
        assert trade.setup_type == "Breakout"
        assert trade.emotion_entry == EmotionType.CALM
        assert trade.session_id == "s1"

    def test_commit_before_approval_is_rejected(self):
        wizard = _walk_to(_wizard(), AssessmentStep.RULES_ACK)
        with pytest.raises(ConflictError):
            wizard.commit(MagicMock(), "user-1")

    def test_commit_persists_once(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        journal = MagicMock()
        journal.create_trade.return_value = MagicMock(id="trade-1", symbol="NIFTY")

        trade = wizard.commit(journal, "user-1")

        assert trade.id == "trade-1"
        assert wizard.committed_trade_id == "trade-1"
        assert wizard.is_finished is True
        journal.create_trade.assert_called_once()
        with pytest.raises(ConflictError):
            wizard.commit(journal, "user-1")

    def test_failed_commit_keeps_draft_for_retry(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        journal = MagicMock()
        journal.create_trade.side_effect = PersistenceError("Could not create trade")

        with pytest.raises(PersistenceError):
            wizard.commit(journal, "user-1")

        assert wizard.is_approved is True
        assert wizard.is_finished is False
        assert wizard.draft.setup.reason == REASON_20

    def test_summary_includes_risk_figures(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        summary = wizard.summary()
        assert summary.symbol == "NIFTY"
        assert summary.risk_amount == pytest.approx(5000)
        assert summary.risk_reward_ratio == pytest.approx(2.0)


class TestWizardContextRefresh:
    def test_deactivated_rule_no_longer_blocks(self):
        wizard = _walk_to(_wizard(active_rules=("r1", "r2", "r3")), AssessmentStep.RULES_ACK)
        wizard.draft.acknowledged_rules = {"r1", "r2"}
        assert wizard.can_advance() is False

        wizard.refresh_context(active_rule_ids=["r1", "r2"])

        assert wizard.can_advance() is True
        assert wizard.next() == AssessmentStep.APPROVED

    def test_added_rule_must_be_acknowledged(self):
        wizard = _walk_to(_wizard(), AssessmentStep.RULES_ACK)
        assert wizard.can_advance() is True

        wizard.refresh_context(active_rule_ids=["r1", "r2", "r3"])

        assert wizard.can_advance() is False
        wizard.toggle_rule("r3")
        assert wizard.can_advance() is True

    def test_added_rule_pulls_approved_back_to_rules(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        step = wizard.refresh_context(active_rule_ids=["r1", "r2", "r3"])
        assert step == AssessmentStep.RULES_ACK
        assert wizard.draft.setup.reason == REASON_20

    def test_refreshed_daily_loss_used_by_risk(self):
        wizard = _walk_to(_wizard(), AssessmentStep.RISK_ACK)
        assert wizard.risk().daily_loss_used == 0.0
        assert wizard.risk().has_breach is False

        wizard.refresh_context(today_realized_loss=9000.0)

        assert wizard.risk().daily_loss_used == 9000.0
        assert wizard.risk().has_breach is True

    def test_enforced_breach_after_refresh_returns_to_risk_step(self):
        config = GuardianConfig(enforce_risk_limits=True)
        wizard = _walk_to(_wizard(config=config), AssessmentStep.EMOTION_CHECK)
        assert wizard.refresh_context(today_realized_loss=9000.0) == AssessmentStep.RISK_ACK
        assert wizard.can_advance() is False

    def test_refreshed_limits_used_by_risk(self):
        wizard = _walk_to(_wizard(), AssessmentStep.RISK_ACK)
        assert wizard.risk().exceeds_per_trade_risk is False

        wizard.refresh_context(calculator=RiskCalculator(2000.0, 10000.0))

        assert wizard.risk().exceeds_per_trade_risk is True
        assert wizard.step == AssessmentStep.RISK_ACK

    def test_omitted_values_are_kept(self):
        wizard = _wizard(today_loss=1500.0)
        wizard.refresh_context(active_rule_ids=["r9"])
        assert wizard.active_rule_ids == ["r9"]
        assert wizard.today_realized_loss == 1500.0

    def test_committed_wizard_keeps_its_step(self):
        wizard = _walk_to(_wizard(), AssessmentStep.APPROVED)
        journal = MagicMock()
        journal.create_trade.return_value = MagicMock(id="trade-1", symbol="NIFTY")
        wizard.commit(journal, "user-1")

        assert wizard.refresh_context(active_rule_ids=["r1", "r2", "r3"]) == AssessmentStep.APPROVED
        assert wizard.is_finished is True
