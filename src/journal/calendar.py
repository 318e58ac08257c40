"""Month calendar helpers: ranges, Monday-first grids and heatmap cells."""

import calendar as _calendar
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from src.db.models import TradeStatus
from src.journal.analytics import group_by_day, win_rate
from src.journal.clock import TzLike, local_range_bounds


@dataclass
class MonthlyStats:
    total_pnl: float = 0.0
    trading_days: int = 0
    green_days: int = 0
    red_days: int = 0
    total_trades: int = 0
    win_rate: float = 0.0


@dataclass
class CalendarDay:
    """One heatmap cell; intensity 0 (no trades) to 4 (largest |P&L| of the month)."""
    date: date
    pnl: float
    trades: int
    intensity: int


def month_range(year: int, month: int, tz: TzLike = None) -> tuple[datetime, datetime]:
    """Inclusive UTC bounds of a local calendar month."""
    last_day = _calendar.monthrange(year, month)[1]
    return local_range_bounds(date(year, month, 1), date(year, month, last_day), tz)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_grid(year: int, month: int) -> list[list[Optional[date]]]:
    """Weeks of the month, Monday first, padded with None outside the month."""
    weeks = []
    for week in _calendar.Calendar(firstweekday=0).monthdayscalendar(year, month):
        weeks.append([date(year, month, d) if d else None for d in week])
    return weeks


def monthly_stats(trades: Iterable, tz: TzLike = None) -> MonthlyStats:
    """Month totals over closed trades."""
    closed = [t for t in trades if t.status == TradeStatus.CLOSED]
    days = group_by_day(closed, tz)
    wins = sum(1 for t in closed if (t.pnl or 0) > 0)
    return MonthlyStats(
        total_pnl=sum(d.pnl for d in days.values()),
        trading_days=len(days),
        green_days=sum(1 for d in days.values() if d.pnl > 0),
        red_days=sum(1 for d in days.values() if d.pnl < 0),
        total_trades=len(closed),
        win_rate=win_rate(wins, len(closed)),
    )


def intensity(pnl: float, max_abs_pnl: float, has_trades: bool = True) -> int:
    if not has_trades:
        return 0
    if max_abs_pnl <= 0:
        return 1
    return max(1, min(4, math.ceil(abs(pnl) / max_abs_pnl * 4)))


def calendar_days(trades: Iterable, year: int, month: int, tz: TzLike = None) -> list[CalendarDay]:
    """Heatmap cells for every day of the month (closed trades only)."""
    closed = [t for t in trades if t.status == TradeStatus.CLOSED]
    days = {d: s for d, s in group_by_day(closed, tz).items() if d.year == year and d.month == month}
    max_abs = max((abs(s.pnl) for s in days.values()), default=0.0)

    cells = []
    for day_num in range(1, _calendar.monthrange(year, month)[1] + 1):
        day = date(year, month, day_num)
        summary = days.get(day)
        if summary is None:
            cells.append(CalendarDay(day, 0.0, 0, 0))
        else:
            cells.append(CalendarDay(day, summary.pnl, summary.trades, intensity(summary.pnl, max_abs)))
    return cells
