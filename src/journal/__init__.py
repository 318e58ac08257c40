"""Trade Journal Module.

Provides:
- JournalService: open/close/cancel/delete trades and filtered trade lists
- analytics: by-day, by-symbol, summary and dashboard reductions
- calendar: month ranges, grids and heatmap cells
- MonthlyTradesLoader: latest-response-wins month fetching
- formatting / clock: INR display and timezone-explicit dates
"""

from src.journal.analytics import (
    DailyPoint,
    DashboardStats,
    DaySummary,
    SymbolSummary,
    TradeSummary,
    daily_series,
    dashboard_stats,
    group_by_day,
    group_by_symbol,
    profit_factor,
    summarize,
    top_symbols,
    win_rate,
)
from src.journal.calendar import CalendarDay, MonthlyStats, calendar_days, month_grid, month_range, monthly_stats
from src.journal.formatting import format_inr, format_percent, format_pnl
from src.journal.loader import MonthlyTradesLoader
from src.journal.models import CloseTrade, NewTrade, StatusFilter, TradeQuery
from src.journal.service import JournalService

__all__ = [
    "CalendarDay",
    "CloseTrade",
    "DailyPoint",
    "DashboardStats",
    "DaySummary",
    "JournalService",
    "MonthlyStats",
    "MonthlyTradesLoader",
    "NewTrade",
    "StatusFilter",
    "SymbolSummary",
    "TradeQuery",
    "TradeSummary",
    "calendar_days",
    "daily_series",
    "dashboard_stats",
    "format_inr",
    "format_percent",
    "format_pnl",
    "group_by_day",
    "group_by_symbol",
    "month_grid",
    "month_range",
    "monthly_stats",
    "profit_factor",
    "summarize",
    "top_symbols",
    "win_rate",
]
