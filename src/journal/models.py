"""Journal Data Models.

Inputs to the journal service: a new trade, a close request and the
trade-list query. Validation happens in ``validate`` so both the
Streamlit forms and the API get the same errors.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional

from src.api_errors import (
    ValidationError,
    validate_date_range,
    validate_optional_price,
    validate_price,
    validate_quantity,
    validate_query_limit,
    validate_symbol,
)
from src.db.models import EmotionType, OptionType, TradeDirection, TradeStatus, TradeType


class StatusFilter(str, Enum):
    ALL = "all"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


@dataclass
class NewTrade:
    """A trade to be opened in the journal."""
    symbol: str
    quantity: float
    entry_price: float
    trade_type: TradeType = TradeType.EQUITY
    direction: TradeDirection = TradeDirection.LONG
    stop_loss: Optional[float] = None
    target_price: Optional[float] = None
    option_type: Optional[OptionType] = None
    strike_price: Optional[float] = None
    expiry_date: Optional[date] = None
    setup_type: Optional[str] = None
    emotion_entry: Optional[EmotionType] = None
    notes: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    entry_time: Optional[datetime] = None
    session_id: Optional[str] = None

    def validate(self) -> "NewTrade":
        """Normalize in place and return self; raises ValidationError."""
        self.symbol = validate_symbol(self.symbol)
        self.quantity = validate_quantity(self.quantity)
        self.entry_price = validate_price(self.entry_price, "entry_price")
        self.stop_loss = validate_optional_price(self.stop_loss, "stop_loss")
        self.target_price = validate_optional_price(self.target_price, "target_price")
        self.trade_type = TradeType(self.trade_type)
        self.direction = TradeDirection(self.direction)

        if self.trade_type == TradeType.OPTIONS:
            if self.option_type is not None:
                self.option_type = OptionType(self.option_type)
            self.strike_price = validate_optional_price(self.strike_price, "strike_price")
        else:
            # option fields only apply to OPTIONS
            self.option_type = None
            self.strike_price = None
            self.expiry_date = None

        if self.emotion_entry is not None:
            self.emotion_entry = EmotionType(self.emotion_entry)
        if self.notes is not None and not self.notes.strip():
            self.notes = None
        return self


@dataclass
class CloseTrade:
    """Exit details for an open trade."""
    exit_price: float
    exit_time: Optional[datetime] = None
    emotion_exit: Optional[EmotionType] = None
    exit_notes: Optional[str] = None
    fees: Optional[float] = None

    def validate(self) -> "CloseTrade":
        self.exit_price = validate_price(self.exit_price, "exit_price")
        if self.emotion_exit is not None:
            self.emotion_exit = EmotionType(self.emotion_exit)
        if self.fees is not None and self.fees < 0:
            raise ValidationError("fees must not be negative", field="fees")
        return self


@dataclass
class TradeQuery:
    """Trade-list filter: status, inclusive entry_time range, limit, symbol search.

    Results are always ordered by entry_time descending.
    """
    status: StatusFilter = StatusFilter.ALL
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    limit: Optional[int] = None
    symbol_search: Optional[str] = None

    def validate(self) -> "TradeQuery":
        self.status = StatusFilter(self.status)
        validate_date_range(self.start, self.end)
        validate_query_limit(self.limit)
        return self

    @property
    def trade_status(self) -> Optional[TradeStatus]:
        if self.status == StatusFilter.ALL:
            return None
        return TradeStatus(self.status.value)

    def cache_params(self) -> dict:
        return {
            "status": self.status.value,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "limit": self.limit,
            "symbol": (self.symbol_search or "").upper() or None,
        }
