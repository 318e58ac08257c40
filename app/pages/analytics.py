"""Analytics - performance over a chosen period."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from app.services import current_user_id, journal_service
from app.styles import LOSS_COLOR, PROFIT_COLOR, inject_global_styles
from src.db.models import TradeStatus
from src.journal import daily_series, format_inr, format_pnl, summarize, top_symbols
from src.journal.analytics import max_drawdown, to_dataframe
from src.journal.clock import get_timezone, local_range_bounds, today_in_tz
from src.settings import get_settings

try:
    st.set_page_config(page_title="Analytics", page_icon="📈", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

settings = get_settings()
zone = get_timezone(settings.timezone)
user_id = current_user_id()

st.title("Analytics")

today = today_in_tz(zone)
period = st.date_input("Period", value=(today.replace(day=1), today))
if not (isinstance(period, tuple) and len(period) == 2):
    st.info("Select a start and end date.")
    st.stop()

trades = journal_service().get_trades_between(user_id, *local_range_bounds(period[0], period[1], zone))
closed = [t for t in trades if t.status == TradeStatus.CLOSED]

if not closed:
    st.info("No closed trades in this period.")
    st.stop()

summary = summarize(closed)
points = daily_series(closed, zone)

col1, col2, col3, col4, col5, col6 = st.columns(6)
col1.metric("Total P&L", format_pnl(summary.total_pnl))
col2.metric("Trades", summary.total_trades, f"W: {summary.winning_trades} / L: {summary.losing_trades}",
            delta_color="off")
col3.metric("Win Rate", f"{summary.win_rate:.1f}%")
col4.metric("Profit Factor", "∞" if summary.profit_factor == float("inf") else f"{summary.profit_factor:.2f}")
col5.metric("Avg Trade", format_pnl(summary.avg_pnl))
col6.metric("Max Drawdown", format_inr(max_drawdown(points)))

tab1, tab2, tab3 = st.tabs(["Daily P&L", "Symbols", "Trades"])

with tab1:
    df = pd.DataFrame([{"date": p.date, "pnl": p.pnl, "cumulative": p.cumulative} for p in points])
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=df["date"],
        y=df["pnl"],
        name="Daily P&L",
        marker_color=[PROFIT_COLOR if v >= 0 else LOSS_COLOR for v in df["pnl"]],
    ))
    fig.add_trace(go.Scatter(
        x=df["date"],
        y=df["cumulative"],
        mode="lines+markers",
        name="Cumulative",
        line=dict(color="#0ea5e9", width=2),
    ))
    fig.add_hline(y=0, line_dash="dash", line_color="gray", opacity=0.5)
    fig.update_layout(height=400, yaxis_title=f"P&L ({settings.currency_symbol})", hovermode="x unified")
    st.plotly_chart(fig, use_container_width=True)

with tab2:
    symbols = top_symbols(closed, settings.top_symbols)
    fig = go.Figure(go.Bar(
        x=[s.pnl for s in symbols],
        y=[s.symbol for s in symbols],
        orientation="h",
        marker_color=[PROFIT_COLOR if s.pnl >= 0 else LOSS_COLOR for s in symbols],
        text=[f"{format_inr(s.pnl, compact=True)} ({s.trades})" for s in symbols],
        textposition="auto",
    ))
    fig.update_layout(height=max(250, 40 * len(symbols)), yaxis=dict(autorange="reversed"))
    st.plotly_chart(fig, use_container_width=True)

with tab3:
    st.dataframe(to_dataframe(closed, zone), use_container_width=True, hide_index=True)
