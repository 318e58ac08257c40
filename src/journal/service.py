"""Trade Journal Service - persistence for trades.

Provides:
- Open, close, cancel and delete trades
- Filtered trade lists (status, entry_time range, limit, symbol search)
- Today's and a month's trades in the configured timezone

Every write is a single commit; on failure the session is rolled back
and a PersistenceError is raised. Reads go through the query cache and
writes invalidate it.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from src.api_errors import ConflictError, ErrorCode, NotFoundError
from src.cache import QueryCache, get_query_cache, keys
from src.db.engine import write_transaction
from src.db.models import Trade, TradeStatus
from src.journal.calendar import month_range
from src.journal.clock import TzLike, ensure_utc, get_timezone, local_day_bounds, today_in_tz, utc_now
from src.journal.models import CloseTrade, NewTrade, TradeQuery
from src.logging_config import log_performance
from src.trade_guardian.calculator import calculate_pnl, today_realized_loss

logger = logging.getLogger(__name__)


class JournalService:
    """Service for the user's trade journal."""

    def __init__(self, session: Session, cache: Optional[QueryCache] = None, tz: TzLike = None):
        self.session = session
        self.cache = cache if cache is not None else get_query_cache()
        self.tz = get_timezone(tz)

    # =========================================================================
    # Mutations
    # =========================================================================

    def create_trade(self, user_id: str, new_trade: NewTrade) -> Trade:
        """Open a new trade.

        Args:
            user_id: Owner of the trade.
            new_trade: Trade parameters; validated and normalized here.

        Returns:
            The persisted OPEN Trade.
        """
        new_trade.validate()
        trade = Trade(
            user_id=user_id,
            session_id=new_trade.session_id,
            symbol=new_trade.symbol,
            trade_type=new_trade.trade_type,
            direction=new_trade.direction,
            option_type=new_trade.option_type,
            strike_price=new_trade.strike_price,
            expiry_date=new_trade.expiry_date,
            quantity=new_trade.quantity,
            entry_price=new_trade.entry_price,
            stop_loss=new_trade.stop_loss,
            target_price=new_trade.target_price,
            entry_time=ensure_utc(new_trade.entry_time or utc_now()),
            status=TradeStatus.OPEN,
            setup_type=new_trade.setup_type,
            emotion_entry=new_trade.emotion_entry,
            notes=new_trade.notes,
            tags=list(new_trade.tags),
            fees=0.0,
        )
        with write_transaction(self.session, "create trade"):
            self.session.add(trade)
        self.cache.invalidate(keys.TRADES, user_id)

        logger.info("Opened trade %s: %s %s %g @ %.2f",
                    trade.id, trade.direction.value, trade.symbol, trade.quantity, trade.entry_price)
        return trade

    def close_trade(self, user_id: str, trade_id: str, close: CloseTrade) -> Trade:
        """Close an open trade, computing realized P&L at the exit price.

        All exit fields are written in one commit.

        Raises:
            NotFoundError: No such trade for this user.
            ConflictError: The trade is not OPEN.
        """
        close.validate()
        trade = self._get_owned(user_id, trade_id)
        if trade.status != TradeStatus.OPEN:
            raise ConflictError(
                f"Trade {trade_id} is {trade.status.value}, only OPEN trades can be closed",
                ErrorCode.TRADE_NOT_OPEN,
            )

        result = calculate_pnl(trade.entry_price, close.exit_price, trade.quantity, trade.direction)
        fees = close.fees or 0.0

        with write_transaction(self.session, "close trade"):
            trade.exit_price = close.exit_price
            trade.exit_time = ensure_utc(close.exit_time or utc_now())
            trade.pnl = result.pnl - fees
            trade.pnl_percent = result.pnl_percent
            trade.fees = fees
            trade.emotion_exit = close.emotion_exit
            if close.exit_notes and close.exit_notes.strip():
                exit_line = f"Exit: {close.exit_notes.strip()}"
                trade.notes = f"{trade.notes}\n\n{exit_line}" if trade.notes else exit_line
            trade.status = TradeStatus.CLOSED
        self.cache.invalidate(keys.TRADES, user_id)

        logger.info("Closed trade %s: %s P&L %.2f (%.2f%%)",
                    trade.id, trade.symbol, trade.pnl, trade.pnl_percent)
        return trade

    def cancel_trade(self, user_id: str, trade_id: str) -> Trade:
        """Mark an open trade CANCELLED; it never carries P&L."""
        trade = self._get_owned(user_id, trade_id)
        if trade.status != TradeStatus.OPEN:
            raise ConflictError(
                f"Trade {trade_id} is {trade.status.value}, only OPEN trades can be cancelled",
                ErrorCode.TRADE_NOT_OPEN,
            )
        with write_transaction(self.session, "cancel trade"):
            trade.status = TradeStatus.CANCELLED
            trade.pnl = None
            trade.pnl_percent = None
        self.cache.invalidate(keys.TRADES, user_id)
        logger.info("Cancelled trade %s (%s)", trade.id, trade.symbol)
        return trade

    def delete_trade(self, user_id: str, trade_id: str) -> None:
        trade = self._get_owned(user_id, trade_id)
        with write_transaction(self.session, "delete trade"):
            self.session.delete(trade)
        self.cache.invalidate(keys.TRADES, user_id)
        logger.info("Deleted trade %s", trade_id)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_trade(self, user_id: str, trade_id: str) -> Optional[Trade]:
        return self.session.query(Trade).filter(
            Trade.id == trade_id,
            Trade.user_id == user_id,
        ).first()

    def get_trades(self, user_id: str, query: Optional[TradeQuery] = None) -> list[Trade]:
        """Trades matching the query, newest entry first (cached)."""
        query = (query or TradeQuery()).validate()
        return self.cache.get(
            keys.TRADES,
            user_id,
            lambda session=None: self._fetch_trades(user_id, query, session),
            params=query.cache_params(),
            uses_session=True,
        )

    def get_trades_between(self, user_id: str, start: datetime, end: datetime) -> list[Trade]:
        return self.get_trades(user_id, TradeQuery(start=start, end=end))

    def get_today_trades(self, user_id: str, now: Optional[datetime] = None) -> list[Trade]:
        """All trades entered today in the service's timezone."""
        start, end = local_day_bounds(today_in_tz(self.tz, now), self.tz)
        return self.get_trades_between(user_id, start, end)

    def get_month_trades(self, user_id: str, year: int, month: int) -> list[Trade]:
        start, end = month_range(year, month, self.tz)
        return self.get_trades_between(user_id, start, end)

    def get_today_realized_loss(self, user_id: str, now: Optional[datetime] = None) -> float:
        """Positive magnitude of today's closed losses."""
        return today_realized_loss(self.get_today_trades(user_id, now))

    def count_trades(self, user_id: str, status: Optional[TradeStatus] = None) -> int:
        q = self.session.query(func.count(Trade.id)).filter(Trade.user_id == user_id)
        if status is not None:
            q = q.filter(Trade.status == status)
        return q.scalar() or 0

    @log_performance(threshold_ms=250)
    def _fetch_trades(self, user_id: str, query: TradeQuery, session: Optional[Session] = None) -> list[Trade]:
        q = (session or self.session).query(Trade).filter(Trade.user_id == user_id)

        if query.trade_status is not None:
            q = q.filter(Trade.status == query.trade_status)
        if query.start is not None:
            q = q.filter(Trade.entry_time >= ensure_utc(query.start))
        if query.end is not None:
            q = q.filter(Trade.entry_time <= ensure_utc(query.end))
        if query.symbol_search:
            q = q.filter(Trade.symbol.ilike(f"%{query.symbol_search.strip()}%"))

        q = q.order_by(Trade.entry_time.desc())
        if query.limit:
            q = q.limit(query.limit)
        return q.all()

    def _get_owned(self, user_id: str, trade_id: str) -> Trade:
        trade = self.get_trade(user_id, trade_id)
        if trade is None:
            raise NotFoundError(
                f"Trade {trade_id} not found",
                ErrorCode.TRADE_NOT_FOUND,
                resource_type="trade",
                resource_id=trade_id,
            )
        return trade
