"""Settings - profile limits and the rule book."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import streamlit as st

from app.services import current_user_id, load_profile, profile_service, rule_service, show_error
from app.styles import inject_global_styles
from src.api_errors import TradeMindError
from src.db.models import RuleCategory, Theme
from src.discipline import ProfileUpdate

try:
    st.set_page_config(page_title="Settings", page_icon="⚙️", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

user_id = current_user_id()
profile = load_profile()
rules_svc = rule_service()

st.title("Settings")
tab1, tab2 = st.tabs(["Profile & Limits", "Trading Rules"])

with tab1:
    with st.form("profile"):
        full_name = st.text_input("Name", value=profile.full_name or "")
        col1, col2, col3 = st.columns(3)
        with col1:
            capital = st.number_input("Trading Capital", min_value=0.0, value=float(profile.trading_capital), step=10_000.0)
            daily_loss = st.number_input("Daily Loss Limit", min_value=0.0, value=float(profile.daily_loss_limit), step=500.0)
            per_trade = st.number_input("Per-Trade Risk", min_value=0.0, value=float(profile.per_trade_risk), step=100.0)
        with col2:
            max_trades = st.number_input("Max Trades / Day", min_value=0, value=int(profile.max_trades_per_day), step=1)
            daily_target = st.number_input("Daily Target", min_value=0.0, value=float(profile.daily_target), step=500.0)
        with col3:
            weekly_target = st.number_input("Weekly Target", min_value=0.0, value=float(profile.weekly_target), step=1_000.0)
            monthly_target = st.number_input("Monthly Target", min_value=0.0, value=float(profile.monthly_target), step=5_000.0)
            themes = [t.value for t in Theme]
            theme = st.selectbox("Theme", themes, index=themes.index((profile.theme or Theme.SYSTEM).value))

        if st.form_submit_button("Save", type="primary"):
            try:
                profile_service().update_profile(user_id, ProfileUpdate(
                    full_name=full_name.strip() or None,
                    trading_capital=capital,
                    daily_loss_limit=daily_loss,
                    per_trade_risk=per_trade,
                    max_trades_per_day=int(max_trades),
                    daily_target=daily_target,
                    weekly_target=weekly_target,
                    monthly_target=monthly_target,
                    theme=Theme(theme),
                ))
            except TradeMindError as e:
                show_error(e)
            else:
                st.success("Profile saved")

with tab2:
    for rule in rules_svc.get_rules(user_id):
        col1, col2, col3 = st.columns([6, 1, 1])
        col1.markdown(f"{rule.rule_text}  \n<small>{rule.category}</small>", unsafe_allow_html=True)
        active = col2.toggle("Active", value=rule.is_active, key=f"active_{rule.id}")
        if active != rule.is_active:
            rules_svc.set_active(user_id, rule.id, active)
            st.rerun()
        if not rule.is_default and col3.button("Delete", key=f"del_{rule.id}"):
            try:
                rules_svc.delete_rule(user_id, rule.id)
            except TradeMindError as e:
                show_error(e)
            else:
                st.rerun()

    st.markdown("---")
    with st.form("add_rule", clear_on_submit=True):
        text = st.text_input("New rule")
        category = st.selectbox("Category", [c.value for c in RuleCategory],
                                index=[c.value for c in RuleCategory].index(RuleCategory.GENERAL.value))
        if st.form_submit_button("Add Rule"):
            try:
                rules_svc.add_rule(user_id, text, RuleCategory(category))
            except TradeMindError as e:
                show_error(e)
            else:
                st.rerun()
