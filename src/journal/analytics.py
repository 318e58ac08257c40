"""Trade Journal Analytics.

Pure reductions over a snapshot of trades:
- By-day buckets in an explicit timezone, with a cumulative series
- By-symbol P&L
- Summary statistics (win rate, profit factor, best/worst)
- Dashboard figures for today against the profile's limits

Every function accepts an empty list and returns zero-valued results.
Trades may be ORM rows or any object with the same attributes.
"""

import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from src.db.models import TradeStatus
from src.journal.clock import TzLike, get_timezone, to_local_date, today_in_tz, week_start
from src.logging_config import log_performance

logger = logging.getLogger(__name__)

DEFAULT_TOP_SYMBOLS = 8


@dataclass
class DaySummary:
    """P&L and counts for one local calendar day."""
    pnl: float = 0.0
    trades: int = 0
    wins: int = 0
    losses: int = 0


@dataclass
class DailyPoint:
    date: date
    pnl: float
    trades: int
    cumulative: float


@dataclass
class SymbolSummary:
    symbol: str
    pnl: float
    trades: int


@dataclass
class TradeSummary:
    """Core performance statistics for a set of trades."""
    total_pnl: float = 0.0
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    avg_pnl: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    profit_factor: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        # JSON has no Infinity
        if math.isinf(self.profit_factor):
            data["profit_factor"] = None
        return data


@dataclass
class DashboardStats:
    """Today's numbers against the trader's limits and targets."""
    today_pnl: float = 0.0
    today_trades: int = 0
    today_win_rate: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    week_pnl: float = 0.0
    month_pnl: float = 0.0
    daily_loss_used: float = 0.0
    risk_used_percent: float = 0.0
    trades_remaining: int = 0
    target_progress: float = 0.0
    current_streak: int = 0
    ritual_done: bool = False
    open_positions: int = 0


def _pnl(trade) -> float:
    return trade.pnl or 0.0


def _closed(trades: Iterable) -> list:
    return [t for t in trades if t.status == TradeStatus.CLOSED]


def win_rate(winning: int, total: int) -> float:
    """Percentage of winners; 0 for an empty set."""
    return winning / total * 100 if total > 0 else 0.0


def profit_factor(gross_profit: float, gross_loss: float) -> float:
    """Gross profit over gross loss; inf when only profits, 0 when neither."""
    if gross_loss > 0:
        return gross_profit / gross_loss
    return math.inf if gross_profit > 0 else 0.0


def summarize(trades: Sequence) -> TradeSummary:
    """Summary statistics over the given trades (missing P&L counts as 0)."""
    if not trades:
        return TradeSummary()

    pnls = [_pnl(t) for t in trades]
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]
    total = sum(pnls)
    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))

    return TradeSummary(
        total_pnl=total,
        total_trades=len(pnls),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=win_rate(len(wins), len(pnls)),
        avg_pnl=total / len(pnls),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        profit_factor=profit_factor(gross_profit, gross_loss),
    )


def group_by_day(trades: Iterable, tz: TzLike = None) -> dict[date, DaySummary]:
    """Bucket trades by the local calendar date of their entry_time."""
    zone = get_timezone(tz)
    days: dict[date, DaySummary] = defaultdict(DaySummary)
    for trade in trades:
        if trade.entry_time is None:
            continue
        bucket = days[to_local_date(trade.entry_time, zone)]
        pnl = _pnl(trade)
        bucket.pnl += pnl
        bucket.trades += 1
        if pnl > 0:
            bucket.wins += 1
        elif pnl < 0:
            bucket.losses += 1
    return dict(days)


def daily_series(trades: Iterable, tz: TzLike = None) -> list[DailyPoint]:
    """Per-day P&L in ascending date order with running cumulative P&L."""
    cumulative = 0.0
    points = []
    for day, summary in sorted(group_by_day(trades, tz).items()):
        cumulative += summary.pnl
        points.append(DailyPoint(day, summary.pnl, summary.trades, cumulative))
    return points


def max_drawdown(points: Sequence[DailyPoint]) -> float:
    """Largest peak-to-trough fall of the cumulative P&L curve (positive number)."""
    if not points:
        return 0.0
    curve = np.array([0.0] + [p.cumulative for p in points])
    peaks = np.maximum.accumulate(curve)
    return float((peaks - curve).max())


def group_by_symbol(trades: Iterable) -> list[SymbolSummary]:
    """P&L per symbol over closed trades, sorted by P&L descending then symbol."""
    totals: dict[str, SymbolSummary] = {}
    for trade in _closed(trades):
        summary = totals.setdefault(trade.symbol, SymbolSummary(trade.symbol, 0.0, 0))
        summary.pnl += _pnl(trade)
        summary.trades += 1
    return sorted(totals.values(), key=lambda s: (-s.pnl, s.symbol))


def top_symbols(trades: Iterable, n: int = DEFAULT_TOP_SYMBOLS) -> list[SymbolSummary]:
    return group_by_symbol(trades)[:n]


def current_streak(trades: Iterable, tz: TzLike = None) -> int:
    """Consecutive green (positive) or red (negative) trading days, newest first.

    Flat days end the streak.
    """
    days = sorted(group_by_day(_closed(trades), tz).items(), reverse=True)
    streak = 0
    for _, summary in days:
        if summary.pnl > 0 and streak >= 0:
            streak += 1
        elif summary.pnl < 0 and streak <= 0:
            streak -= 1
        else:
            break
    return streak


@log_performance(threshold_ms=100)
def dashboard_stats(
    profile,
    today_trades: Sequence,
    today_session=None,
    recent_trades: Sequence = (),
    now: Optional[datetime] = None,
    tz: TzLike = None,
) -> DashboardStats:
    """Figures for the dashboard.

    Args:
        profile: The user's Profile, or None when not yet loaded.
        today_trades: All trades entered today (any status).
        today_session: Today's DailySession, or None.
        recent_trades: Trades covering at least the current month, for
            week/month P&L and the streak.
        now: Reference time; defaults to the current time.
        tz: Timezone for week/month boundaries.
    """
    zone = get_timezone(tz)
    closed_today = _closed(today_trades)
    today = summarize(closed_today)
    daily_loss_used = abs(min(0.0, today.total_pnl))

    stats = DashboardStats(
        today_pnl=today.total_pnl,
        today_trades=len(today_trades),
        today_win_rate=today.win_rate,
        best_trade=today.best_trade,
        worst_trade=today.worst_trade,
        daily_loss_used=daily_loss_used,
        ritual_done=bool(today_session is not None and today_session.session_started_at),
        open_positions=sum(1 for t in today_trades if t.status == TradeStatus.OPEN),
    )

    if profile is not None:
        if profile.daily_loss_limit:
            stats.risk_used_percent = daily_loss_used / profile.daily_loss_limit * 100
        stats.trades_remaining = profile.max_trades_per_day - len(today_trades)
        if profile.daily_target and profile.daily_target > 0:
            stats.target_progress = min(100.0, today.total_pnl / profile.daily_target * 100)

    current_day = today_in_tz(zone, now)
    monday = week_start(current_day)
    for day, summary in group_by_day(_closed(recent_trades), zone).items():
        if day.year == current_day.year and day.month == current_day.month and day <= current_day:
            stats.month_pnl += summary.pnl
        if monday <= day <= current_day:
            stats.week_pnl += summary.pnl
    stats.current_streak = current_streak(recent_trades, zone)
    return stats


def to_dataframe(trades: Iterable, tz: TzLike = None) -> pd.DataFrame:
    """Flatten trades into a DataFrame for tables and charts."""
    zone = get_timezone(tz)
    rows = [
        {
            "id": t.id,
            "symbol": t.symbol,
            "trade_type": getattr(t.trade_type, "value", t.trade_type),
            "direction": getattr(t.direction, "value", t.direction),
            "quantity": t.quantity,
            "entry_price": t.entry_price,
            "exit_price": t.exit_price,
            "stop_loss": t.stop_loss,
            "target_price": t.target_price,
            "pnl": t.pnl,
            "pnl_percent": t.pnl_percent,
            "status": getattr(t.status, "value", t.status),
            "entry_date": to_local_date(t.entry_time, zone) if t.entry_time else None,
            "setup_type": t.setup_type,
        }
        for t in trades
    ]
    columns = [
        "id", "symbol", "trade_type", "direction", "quantity", "entry_price",
        "exit_price", "stop_loss", "target_price", "pnl", "pnl_percent",
        "status", "entry_date", "setup_type",
    ]
    return pd.DataFrame(rows, columns=columns)
