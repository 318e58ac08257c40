"""Journal - browse, close, cancel and delete trades."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import streamlit as st

from app.services import current_user_id, journal_service, show_error
from app.styles import inject_global_styles, pnl_color
from src.api_errors import TradeMindError
from src.db.models import EmotionType, TradeStatus
from src.journal import CloseTrade, StatusFilter, TradeQuery, format_inr, format_percent, format_pnl
from src.journal.clock import get_timezone, local_range_bounds, to_local_date, today_in_tz
from src.settings import get_settings

try:
    st.set_page_config(page_title="Journal", page_icon="📓", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

settings = get_settings()
zone = get_timezone(settings.timezone)
user_id = current_user_id()
journal = journal_service()

st.title("Trade Journal")

# --- Filters ---
col1, col2, col3 = st.columns([1, 2, 2])
with col1:
    status = st.selectbox("Status", [s.value for s in StatusFilter],
                          format_func=lambda s: s.title())
with col2:
    search = st.text_input("Search symbol", placeholder="e.g. NIFTY")
with col3:
    today = today_in_tz(zone)
    date_range = st.date_input("Entry dates", value=(today.replace(day=1), today))

start = end = None
if isinstance(date_range, tuple) and len(date_range) == 2:
    start, end = local_range_bounds(date_range[0], date_range[1], zone)

try:
    trades = journal.get_trades(user_id, TradeQuery(
        status=StatusFilter(status),
        start=start,
        end=end,
        symbol_search=search or None,
    ))
except TradeMindError as e:
    show_error(e)
    trades = []

st.caption(f"{len(trades)} trades")


def render_close_form(trade):
    with st.form(f"close_{trade.id}"):
        col1, col2, col3 = st.columns(3)
        exit_price = col1.number_input("Exit Price", min_value=0.0, step=0.05, format="%.2f",
                                       value=float(trade.target_price or trade.entry_price))
        fees = col2.number_input("Fees", min_value=0.0, step=1.0)
        emotion = col3.selectbox("Emotion at exit", [e.value for e in EmotionType], index=None,
                                 placeholder="Optional")
        exit_notes = st.text_input("Exit notes")
        if st.form_submit_button("Close Trade", type="primary"):
            try:
                journal.close_trade(user_id, trade.id, CloseTrade(
                    exit_price=exit_price,
                    fees=fees,
                    emotion_exit=EmotionType(emotion) if emotion else None,
                    exit_notes=exit_notes,
                ))
            except TradeMindError as e:
                show_error(e)
            else:
                st.rerun()


for trade in trades:
    entry_day = to_local_date(trade.entry_time, zone).strftime("%d %b %Y")
    pnl_text = format_pnl(trade.pnl) if trade.pnl is not None else trade.status.value
    with st.expander(f"{entry_day} · {trade.direction.value} {trade.symbol} x {trade.quantity:g} · {pnl_text}"):
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Entry", format_inr(trade.entry_price, decimals=2))
        col2.metric("Exit", format_inr(trade.exit_price, decimals=2) if trade.exit_price else "-")
        col3.metric("Stop / Target", f"{trade.stop_loss or '-'} / {trade.target_price or '-'}")
        if trade.pnl is not None:
            col4.markdown(
                f'<span style="color:{pnl_color(trade.pnl)}; font-size:1.4rem">{format_pnl(trade.pnl)}</span>'
                f"<br>{format_percent(trade.pnl_percent or 0)}",
                unsafe_allow_html=True,
            )
        if trade.setup_type or trade.emotion_entry:
            st.caption(" · ".join(filter(None, [
                trade.setup_type,
                trade.emotion_entry.value.title() if trade.emotion_entry else None,
            ])))
        if trade.notes:
            st.text(trade.notes)

        if trade.status == TradeStatus.OPEN:
            render_close_form(trade)
            if st.button("Cancel trade", key=f"cancel_{trade.id}"):
                try:
                    journal.cancel_trade(user_id, trade.id)
                except TradeMindError as e:
                    show_error(e)
                else:
                    st.rerun()
        if st.button("Delete", key=f"delete_{trade.id}"):
            try:
                journal.delete_trade(user_id, trade.id)
            except TradeMindError as e:
                show_error(e)
            else:
                st.rerun()
