"""Trade Guardian - five-step pre-trade assessment.

The AssessmentWizard lives in session state until the user leaves the page;
its limits, active rules and daily loss are re-read on every render. The
page only renders the current step, writes form input into the draft and
calls next/back.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import streamlit as st

from app.services import (
    current_user_id,
    journal_service,
    load_profile,
    ritual_service,
    rule_service,
    show_error,
)
from app.styles import inject_global_styles
from src.api_errors import TradeMindError
from src.db.models import EmotionType, TradeDirection, TradeType
from src.journal import format_inr, format_percent
from src.settings import get_settings
from src.trade_guardian import (
    STEP_TITLES,
    AssessmentStep,
    AssessmentWizard,
    GuardianConfig,
    RiskCalculator,
    TradeDetails,
)
from src.trade_guardian.config import EMOTION_CHECK_LABELS, RISK_ACK_LABELS, SETUP_CHECK_LABELS

try:
    st.set_page_config(page_title="Trade Guardian", page_icon="🛡️", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

settings = get_settings()
user_id = current_user_id()


def current_context() -> dict:
    """Limits, active rules and today's realized loss as they stand right now."""
    config = GuardianConfig.from_settings(settings)
    return {
        "calculator": RiskCalculator.for_profile(load_profile(), config),
        "active_rule_ids": [r.id for r in rule_service().get_active_rules(user_id)],
        "today_realized_loss": journal_service().get_today_realized_loss(user_id),
    }


def new_wizard() -> AssessmentWizard:
    context = current_context()
    return AssessmentWizard(config=context["calculator"].config, **context)


if st.session_state.get("guardian_wizard") is None:
    st.session_state.guardian_wizard = new_wizard()
else:
    st.session_state.guardian_wizard.refresh_context(**current_context())
wizard: AssessmentWizard = st.session_state.guardian_wizard


def render_stepper():
    cols = st.columns(len(AssessmentStep))
    for col, step in zip(cols, AssessmentStep):
        css = "active" if step == wizard.step else "done" if step < wizard.step else ""
        col.markdown(f'<div class="tm-step {css}">{int(step)}. {STEP_TITLES[step]}</div>',
                     unsafe_allow_html=True)


def render_nav():
    col1, col2, _ = st.columns([1, 1, 4])
    with col1:
        if st.button("Back", disabled=not wizard.can_go_back(), use_container_width=True):
            wizard.back()
            st.rerun()
    with col2:
        if st.button("Next", type="primary", disabled=not wizard.can_advance(), use_container_width=True):
            try:
                wizard.next()
            except TradeMindError as e:
                show_error(e)
            else:
                st.rerun()


# =============================================================================
# Steps
# =============================================================================


def render_trade_details():
    d = wizard.draft.details
    col1, col2, col3 = st.columns(3)
    with col1:
        symbol = st.text_input("Symbol", value=d.symbol, placeholder="NIFTY")
        trade_type = st.selectbox("Type", [t.value for t in TradeType],
                                  index=[t.value for t in TradeType].index(d.trade_type.value))
    with col2:
        direction = st.radio("Direction", [t.value for t in TradeDirection], horizontal=True,
                             index=[t.value for t in TradeDirection].index(d.direction.value))
        quantity = st.text_input("Quantity", value="" if d.quantity is None else f"{d.quantity:g}")
    with col3:
        entry = st.text_input("Entry Price", value="" if d.entry_price is None else f"{d.entry_price:g}")
        stop = st.text_input("Stop Loss", value="" if d.stop_loss is None else f"{d.stop_loss:g}")
        target = st.text_input("Target", value="" if d.target_price is None else f"{d.target_price:g}")

    wizard.draft.details = TradeDetails.from_form(
        symbol=symbol,
        quantity=quantity,
        entry_price=entry,
        stop_loss=stop,
        target_price=target,
        trade_type=trade_type,
        direction=direction,
    )
    if not wizard.step_complete(AssessmentStep.TRADE_DETAILS):
        st.caption("Fill in symbol, a positive quantity and entry, stop loss and target to continue.")


def render_risk_ack():
    risk = wizard.risk()
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Position Size", format_inr(risk.position_size, compact=True))
    col2.metric("Risk", format_inr(risk.risk_amount), format_percent(risk.risk_usage_percent, show_sign=False)
                + " of limit", delta_color="off")
    col3.metric("Reward", format_inr(risk.reward_amount))
    col4.metric("Risk : Reward", f"1 : {risk.risk_reward_ratio:.2f}")

    st.progress(
        min(risk.daily_loss_percent, 100.0) / 100,
        text=f"Daily loss used {format_inr(risk.daily_loss_used)}, "
             f"remaining {format_inr(risk.daily_loss_remaining)}",
    )
    for warning in risk.warnings:
        st.warning(warning)

    ack = wizard.draft.risk_ack
    for name, label in RISK_ACK_LABELS.items():
        setattr(ack, name, st.checkbox(label, value=getattr(ack, name), key=f"ack_{name}"))


def render_setup():
    s = wizard.draft.setup
    setup_types = list(wizard.config.setup_types)
    s.setup_type = st.selectbox(
        "Setup Type",
        setup_types,
        index=setup_types.index(s.setup_type) if s.setup_type in setup_types else None,
        placeholder="Select a setup",
    )
    for name, label in SETUP_CHECK_LABELS.items():
        setattr(s, name, st.checkbox(label, value=getattr(s, name), key=f"setup_{name}"))
    s.reason = st.text_area("Why are you taking this trade?", value=s.reason)
    remaining = wizard.config.min_reason_length - len(s.reason.strip())
    if remaining > 0:
        st.caption(f"{remaining} more characters needed")


def render_emotion():
    e = wizard.draft.emotion
    emotions = [m.value for m in EmotionType]
    choice = st.radio(
        "How are you feeling right now?",
        emotions,
        index=emotions.index(EmotionType(e.emotion).value) if e.emotion else None,
        horizontal=True,
    )
    e.emotion = EmotionType(choice) if choice else None
    if wizard.is_dangerous_emotion:
        st.error(f"{e.emotion.value.title()} is a dangerous state to trade in. Consider stepping away.")
    for name, label in EMOTION_CHECK_LABELS.items():
        setattr(e, name, st.checkbox(label, value=getattr(e, name), key=f"emotion_{name}"))


def render_rules():
    rules = rule_service().get_active_rules(user_id)
    if not rules:
        st.info("No active rules. Add some in Settings.")
    for rule in rules:
        checked = st.checkbox(rule.rule_text, value=rule.id in wizard.draft.acknowledged_rules,
                              key=f"rule_{rule.id}")
        if checked != (rule.id in wizard.draft.acknowledged_rules):
            wizard.toggle_rule(rule.id)


def render_approved():
    summary = wizard.summary()
    st.success(f"{summary.direction.value} {summary.symbol} passed every check.")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Quantity", f"{summary.quantity:g}")
    col2.metric("Entry", format_inr(summary.entry_price, decimals=2))
    col3.metric("Stop / Target", f"{summary.stop_loss:g} / {summary.target_price:g}")
    col4.metric("Risk : Reward", f"1 : {summary.risk_reward_ratio:.2f}")
    for warning in summary.warnings:
        st.warning(warning)

    if wizard.is_finished:
        st.info("Trade added to your journal.")
        if st.button("Start a new assessment", type="primary"):
            st.session_state.guardian_wizard = new_wizard()
            st.rerun()
        return

    col1, col2, _ = st.columns([1, 1, 4])
    with col1:
        if st.button("Add to Journal", type="primary", use_container_width=True):
            today_session = ritual_service().get_today_session(user_id)
            try:
                wizard.commit(journal_service(), user_id,
                              session_id=today_session.id if today_session else None)
            except TradeMindError as e:
                show_error(e)
            else:
                st.rerun()
    with col2:
        if st.button("Start Over", use_container_width=True):
            st.session_state.guardian_wizard = new_wizard()
            st.rerun()


STEP_RENDERERS = {
    AssessmentStep.TRADE_DETAILS: render_trade_details,
    AssessmentStep.RISK_ACK: render_risk_ack,
    AssessmentStep.SETUP_VALIDATION: render_setup,
    AssessmentStep.EMOTION_CHECK: render_emotion,
    AssessmentStep.RULES_ACK: render_rules,
    AssessmentStep.APPROVED: render_approved,
}


# =============================================================================
# Page
# =============================================================================

st.title("Trade Guardian")
st.caption("Answer every step honestly before you place the order.")

render_stepper()
st.markdown("---")
st.subheader(wizard.title)
STEP_RENDERERS[wizard.step]()

if not wizard.is_approved:
    st.markdown("---")
    render_nav()
