"""Morning Ritual - pre-market checklist and end-of-day reflection."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import streamlit as st

from app.services import current_user_id, ritual_service, rule_service, show_error
from app.styles import inject_global_styles
from src.api_errors import TradeMindError
from src.db.models import MoodType
from src.discipline import can_start_ritual

try:
    st.set_page_config(page_title="Morning Ritual", page_icon="🌅", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

user_id = current_user_id()
ritual = ritual_service()
today_session = ritual.get_today_session(user_id)
rules = rule_service().get_active_rules(user_id)

st.title("Morning Ritual")

quote = ritual.random_quote()
if quote is not None:
    st.markdown(f'<div class="tm-card tm-quote">"{quote.quote_text}"'
                f'{" - " + quote.author if quote.author else ""}</div>', unsafe_allow_html=True)

if today_session is not None and today_session.session_started_at is not None:
    st.success(f"Ritual complete. Mood: {today_session.pre_market_mood.value.title()}")
    if today_session.pre_market_notes:
        st.caption(today_session.pre_market_notes)

    st.markdown("### End of Day")
    with st.form("end_of_day"):
        mood = st.radio("How did the day go?", [m.value for m in MoodType], horizontal=True, index=None)
        notes = st.text_area("Reflection", value=today_session.end_of_day_notes or "")
        if st.form_submit_button("Save"):
            ritual.end_session(user_id, MoodType(mood) if mood else None, notes or None)
            st.rerun()
    st.stop()

if not rules:
    st.warning("Add at least one active rule in Settings before starting your ritual.")
    st.stop()

st.markdown("### Read your rules")
checked = [rule.id for rule in rules if st.checkbox(rule.rule_text, key=f"ritual_rule_{rule.id}")]

mood_value = st.radio("Pre-market mood", [m.value for m in MoodType], horizontal=True, index=None,
                      format_func=lambda m: m.title())
mood = MoodType(mood_value) if mood_value else None
notes = st.text_area("Plan for today", placeholder="Key levels, bias, what you will avoid...")

ready = can_start_ritual([r.id for r in rules], checked, mood)
if st.button("Start Trading Day", type="primary", disabled=not ready):
    try:
        ritual.start_session(user_id, mood, checked, [r.id for r in rules], notes=notes)
    except TradeMindError as e:
        show_error(e)
    else:
        st.rerun()
