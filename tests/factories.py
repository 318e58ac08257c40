"""Plain-object stand-ins for ORM rows used by pure-function tests."""

from datetime import datetime, timezone
from types import SimpleNamespace

from src.db.models import TradeDirection, TradeStatus

IST = "Asia/Kolkata"


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_trade(
    pnl=None,
    entry_time=None,
    symbol="NIFTY",
    status=None,
    direction=TradeDirection.LONG,
    **kwargs,
):
    """A trade-like object; CLOSED when it has P&L, OPEN otherwise."""
    if status is None:
        status = TradeStatus.CLOSED if pnl is not None else TradeStatus.OPEN
    fields = dict(
        id=f"t-{symbol}-{pnl}",
        symbol=symbol,
        pnl=pnl,
        status=status,
        direction=direction,
        entry_time=entry_time or utc(2024, 3, 15, 5, 0),
        trade_type="EQUITY",
        quantity=1,
        entry_price=100.0,
        exit_price=None,
        stop_loss=None,
        target_price=None,
        pnl_percent=None,
        setup_type=None,
    )
    fields.update(kwargs)
    return SimpleNamespace(**fields)


def make_profile(**kwargs):
    fields = dict(
        id="user-1",
        full_name=None,
        trading_capital=100_000.0,
        daily_loss_limit=5_000.0,
        per_trade_risk=1_000.0,
        max_trades_per_day=10,
        daily_target=2_000.0,
        weekly_target=8_000.0,
        monthly_target=30_000.0,
    )
    fields.update(kwargs)
    return SimpleNamespace(**fields)
