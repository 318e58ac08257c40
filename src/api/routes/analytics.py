"""Analytics API Routes.

Summary, daily series, symbol breakdown, calendar month and dashboard.
"""

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_journal_service, get_profile_service, get_ritual_service, get_user_id
from src.api.models import (
    CalendarDayResponse,
    CalendarResponse,
    DailyPointResponse,
    DashboardResponse,
    MonthlyStatsResponse,
    SummaryResponse,
    SymbolResponse,
)
from src.discipline import ProfileService, RitualService
from src.journal import (
    JournalService,
    StatusFilter,
    TradeQuery,
    calendar_days,
    daily_series,
    dashboard_stats,
    monthly_stats,
    summarize,
    top_symbols,
)
from src.journal.calendar import month_range
from src.journal.clock import is_market_open, local_range_bounds, today_in_tz, week_start
from src.settings import get_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _month_or_current(year: Optional[int], month: Optional[int], journal: JournalService) -> tuple[int, int]:
    today = today_in_tz(journal.tz)
    return year or today.year, month or today.month


def _closed_month_trades(journal: JournalService, user_id: str, year: int, month: int) -> list:
    start, end = month_range(year, month, journal.tz)
    return journal.get_trades(user_id, TradeQuery(status=StatusFilter.CLOSED, start=start, end=end))


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    """Summary statistics over the month's closed trades."""
    year, month = _month_or_current(year, month, journal)
    return summarize(_closed_month_trades(journal, user_id, year, month)).to_dict()


@router.get("/daily", response_model=list[DailyPointResponse])
def get_daily(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    year, month = _month_or_current(year, month, journal)
    trades = _closed_month_trades(journal, user_id, year, month)
    return [asdict(p) for p in daily_series(trades, journal.tz)]


@router.get("/symbols", response_model=list[SymbolResponse])
def get_symbols(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    top: Optional[int] = Query(default=None, ge=1, le=100),
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    year, month = _month_or_current(year, month, journal)
    trades = _closed_month_trades(journal, user_id, year, month)
    return [asdict(s) for s in top_symbols(trades, top or get_settings().top_symbols)]


@router.get("/calendar", response_model=CalendarResponse)
def get_calendar(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
):
    year, month = _month_or_current(year, month, journal)
    trades = journal.get_month_trades(user_id, year, month)
    return CalendarResponse(
        year=year,
        month=month,
        stats=MonthlyStatsResponse(**asdict(monthly_stats(trades, journal.tz))),
        days=[CalendarDayResponse(**asdict(d)) for d in calendar_days(trades, year, month, journal.tz)],
    )


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    user_id: str = Depends(get_user_id),
    journal: JournalService = Depends(get_journal_service),
    profiles: ProfileService = Depends(get_profile_service),
    ritual: RitualService = Depends(get_ritual_service),
):
    today = today_in_tz(journal.tz)
    # covers both the current week and the current month
    first = min(week_start(today), today.replace(day=1))
    start, end = local_range_bounds(first, today, journal.tz)
    recent = journal.get_trades(user_id, TradeQuery(status=StatusFilter.CLOSED, start=start, end=end))

    stats = dashboard_stats(
        profiles.get_profile(user_id),
        journal.get_today_trades(user_id),
        ritual.get_today_session(user_id),
        recent_trades=recent,
        tz=journal.tz,
    )
    return DashboardResponse(**asdict(stats), market_open=is_market_open())
