"""Calendar - monthly P&L heatmap."""

import sys
import os
import asyncio
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import streamlit as st

from app.services import current_user_id, journal_service, show_error
from app.styles import heatmap_color, inject_global_styles, pnl_color
from src.api_errors import TradeMindError
from src.journal import (
    MonthlyTradesLoader,
    calendar_days,
    format_inr,
    format_pnl,
    month_grid,
    monthly_stats,
)
from src.journal.calendar import shift_month
from src.journal.clock import get_timezone, today_in_tz
from src.journal.loader import service_month_fetcher
from src.settings import get_settings

try:
    st.set_page_config(page_title="Calendar", page_icon="📅", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

settings = get_settings()
zone = get_timezone(settings.timezone)
user_id = current_user_id()

if st.session_state.get("calendar_month") is None:
    today = today_in_tz(zone)
    st.session_state.calendar_month = (today.year, today.month)
if st.session_state.get("calendar_loader") is None:
    st.session_state.calendar_loader = MonthlyTradesLoader(service_month_fetcher(journal_service(), user_id))

year, month = st.session_state.calendar_month
loader: MonthlyTradesLoader = st.session_state.calendar_loader

# --- Month navigation ---
col1, col2, col3 = st.columns([1, 4, 1])
with col1:
    if st.button("‹ Previous", use_container_width=True):
        st.session_state.calendar_month = shift_month(year, month, -1)
        st.rerun()
with col2:
    st.markdown(f"<h2 style='text-align:center'>{date(year, month, 1).strftime('%B %Y')}</h2>",
                unsafe_allow_html=True)
with col3:
    if st.button("Next ›", use_container_width=True):
        st.session_state.calendar_month = shift_month(year, month, 1)
        st.rerun()

try:
    trades = asyncio.run(loader.load(year, month))
except TradeMindError as e:
    show_error(e)
    trades = None
if trades is None:
    trades = loader.state.trades if (loader.state.year, loader.state.month) == (year, month) else []

# --- Month stats ---
stats = monthly_stats(trades, zone)
col1, col2, col3, col4, col5 = st.columns(5)
col1.metric("Month P&L", format_pnl(stats.total_pnl))
col2.metric("Trading Days", stats.trading_days)
col3.metric("Green / Red", f"{stats.green_days} / {stats.red_days}")
col4.metric("Trades", stats.total_trades)
col5.metric("Win Rate", f"{stats.win_rate:.0f}%")

# --- Heatmap ---
cells = {c.date: c for c in calendar_days(trades, year, month, zone)}
header = st.columns(7)
for col, name in zip(header, ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]):
    col.markdown(f"**{name}**")

for week in month_grid(year, month):
    cols = st.columns(7)
    for col, day in zip(cols, week):
        if day is None:
            col.markdown("&nbsp;", unsafe_allow_html=True)
            continue
        cell = cells[day]
        body = ""
        if cell.trades:
            body = (f'<div class="pnl" style="color:{pnl_color(cell.pnl)}">'
                    f"{format_inr(cell.pnl, show_sign=True, compact=True)}</div>"
                    f"<div>{cell.trades} trade{'s' if cell.trades != 1 else ''}</div>")
        col.markdown(
            f'<div class="tm-day" style="background:{heatmap_color(cell.pnl, cell.intensity)}">'
            f'<div class="num">{day.day}</div>{body}</div>',
            unsafe_allow_html=True,
        )
