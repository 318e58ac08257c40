"""Log Trade - record a trade directly in the journal."""

import sys
import os
from datetime import datetime, time

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import streamlit as st

from app.services import current_user_id, journal_service, ritual_service, show_error
from app.styles import inject_global_styles
from src.api_errors import TradeMindError
from src.db.models import EmotionType, OptionType, TradeDirection, TradeType
from src.journal import NewTrade
from src.journal.clock import get_timezone, today_in_tz
from src.settings import get_settings
from src.trade_guardian import SETUP_TYPES

try:
    st.set_page_config(page_title="Log Trade", page_icon="📝", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

settings = get_settings()
zone = get_timezone(settings.timezone)
user_id = current_user_id()

st.title("Log Trade")
st.caption("For trades already placed. Use Trade Guardian to assess a new one first.")

trade_type = st.radio("Type", [t.value for t in TradeType], horizontal=True)

with st.form("new_trade", clear_on_submit=True):
    col1, col2, col3 = st.columns(3)
    with col1:
        symbol = st.text_input("Symbol", placeholder="RELIANCE")
        direction = st.radio("Direction", [d.value for d in TradeDirection], horizontal=True)
        quantity = st.number_input("Quantity", min_value=0.0, step=1.0)
    with col2:
        entry_price = st.number_input("Entry Price", min_value=0.0, step=0.05, format="%.2f")
        stop_loss = st.number_input("Stop Loss (optional)", min_value=0.0, step=0.05, format="%.2f")
        target_price = st.number_input("Target (optional)", min_value=0.0, step=0.05, format="%.2f")
    with col3:
        entry_date = st.date_input("Entry Date", value=today_in_tz(zone))
        entry_clock = st.time_input("Entry Time", value=time(9, 15))
        setup_type = st.selectbox("Setup", SETUP_TYPES, index=None, placeholder="Optional")
        emotion = st.selectbox("Emotion at entry", [e.value for e in EmotionType], index=None,
                               placeholder="Optional")

    option_type = strike_price = expiry_date = None
    if trade_type == TradeType.OPTIONS.value:
        col1, col2, col3 = st.columns(3)
        option_type = col1.selectbox("Option", [o.value for o in OptionType])
        strike_price = col2.number_input("Strike", min_value=0.0, step=50.0)
        expiry_date = col3.date_input("Expiry")

    notes = st.text_area("Notes")
    tags = st.text_input("Tags", placeholder="comma separated")
    submitted = st.form_submit_button("Save Trade", type="primary")

if submitted:
    today_session = ritual_service().get_today_session(user_id)
    trade = NewTrade(
        symbol=symbol,
        quantity=quantity,
        entry_price=entry_price,
        trade_type=TradeType(trade_type),
        direction=TradeDirection(direction),
        stop_loss=stop_loss or None,
        target_price=target_price or None,
        option_type=OptionType(option_type) if option_type else None,
        strike_price=strike_price or None,
        expiry_date=expiry_date,
        setup_type=setup_type,
        emotion_entry=EmotionType(emotion) if emotion else None,
        notes=notes,
        tags=[t.strip() for t in tags.split(",") if t.strip()],
        entry_time=datetime.combine(entry_date, entry_clock, tzinfo=zone),
        session_id=today_session.id if today_session else None,
    )
    try:
        created = journal_service().create_trade(user_id, trade)
    except TradeMindError as e:
        show_error(e)
    else:
        st.success(f"Logged {created.direction.value} {created.symbol} x {created.quantity:g}")
