"""Dashboard - today's P&L against the trader's limits and targets."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import pandas as pd
import streamlit as st

from app.services import current_user_id, journal_service, load_profile, ritual_service
from app.styles import inject_global_styles, pnl_color
from src.journal import dashboard_stats, format_inr, format_pnl
from src.journal.analytics import to_dataframe
from src.journal.clock import greeting, local_range_bounds, today_in_tz, week_start
from src.settings import get_settings

try:
    st.set_page_config(page_title="Dashboard", page_icon="📊", layout="wide")
except st.errors.StreamlitAPIException:
    pass

inject_global_styles()

settings = get_settings()
user_id = current_user_id()
profile = load_profile()
journal = journal_service()
ritual = ritual_service()

today = today_in_tz(settings.timezone)
window_start = min(week_start(today), today.replace(day=1))
recent = journal.get_trades_between(user_id, *local_range_bounds(window_start, today, settings.timezone))
today_trades = journal.get_today_trades(user_id)
stats = dashboard_stats(
    profile,
    today_trades,
    today_session=ritual.get_today_session(user_id),
    recent_trades=recent,
    tz=settings.timezone,
)

st.title(f"{greeting(tz=settings.timezone)}, {profile.full_name or 'Trader'}")

quote = ritual.random_quote()
if quote is not None:
    author = f" - {quote.author}" if quote.author else ""
    st.markdown(f'<div class="tm-quote">"{quote.quote_text}"{author}</div>', unsafe_allow_html=True)

if not stats.ritual_done:
    st.info("Complete your morning ritual before placing trades.")


# =============================================================================
# Today
# =============================================================================

col1, col2, col3, col4 = st.columns(4)
col1.metric("Today's P&L", format_pnl(stats.today_pnl))
col2.metric(
    "Trades",
    stats.today_trades,
    f"{max(stats.trades_remaining, 0)} remaining",
    delta_color="off",
)
col3.metric("Win Rate", f"{stats.today_win_rate:.0f}%")
col4.metric("Open Positions", stats.open_positions)

col1, col2 = st.columns(2)
with col1:
    st.markdown("#### Daily Loss Limit")
    st.progress(
        min(stats.risk_used_percent, 100.0) / 100,
        text=f"{format_inr(stats.daily_loss_used)} of {format_inr(profile.daily_loss_limit)} "
             f"({stats.risk_used_percent:.0f}%)",
    )
    if stats.risk_used_percent >= 100:
        st.error("Daily loss limit reached. Stop trading for today.")
    elif stats.risk_used_percent >= 80:
        st.warning("You are close to your daily loss limit.")
with col2:
    st.markdown("#### Daily Target")
    st.progress(
        max(stats.target_progress, 0.0) / 100,
        text=f"{format_pnl(stats.today_pnl)} of {format_inr(profile.daily_target)} "
             f"({max(stats.target_progress, 0.0):.0f}%)",
    )

st.markdown("---")

col1, col2, col3, col4 = st.columns(4)
col1.metric("This Week", format_pnl(stats.week_pnl))
col2.metric("This Month", format_pnl(stats.month_pnl))
streak_label = "green" if stats.current_streak > 0 else "red" if stats.current_streak < 0 else "-"
col3.metric("Day Streak", f"{abs(stats.current_streak)} {streak_label}")
col4.metric("Best / Worst Today", f"{format_inr(stats.best_trade, compact=True)} / "
                                  f"{format_inr(stats.worst_trade, compact=True)}")


# =============================================================================
# Today's trades
# =============================================================================

st.markdown("### Today's Trades")
if not today_trades:
    st.info("No trades today.")
else:
    df = to_dataframe(today_trades, settings.timezone)
    df["pnl"] = df["pnl"].map(lambda v: format_pnl(v) if pd.notna(v) else "-")
    st.dataframe(
        df[["symbol", "direction", "quantity", "entry_price", "exit_price", "status", "pnl"]],
        use_container_width=True,
        hide_index=True,
    )
    closed_pnl = sum(t.pnl or 0 for t in today_trades)
    st.markdown(
        f'<span style="color:{pnl_color(closed_pnl)}">Realized today: {format_pnl(closed_pnl)}</span>',
        unsafe_allow_html=True,
    )
