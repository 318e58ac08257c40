"""SQLAlchemy ORM models for TradeMind.

Tables:
- profiles: per-user capital, risk limits and P&L targets
- trades: journal of equity / options / futures trades
- trading_rules: user's personal rule book
- daily_sessions: pre-market ritual record, one per user per day
- quotes: motivational quotes shown on the ritual page
"""

import enum
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from src.db.base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class TradeType(str, enum.Enum):
    EQUITY = "EQUITY"
    OPTIONS = "OPTIONS"
    FUTURES = "FUTURES"


class TradeDirection(str, enum.Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class TradeStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class OptionType(str, enum.Enum):
    CE = "CE"
    PE = "PE"


class EmotionType(str, enum.Enum):
    """Self-reported emotional state at entry or exit."""
    CONFIDENT = "CONFIDENT"
    FEARFUL = "FEARFUL"
    GREEDY = "GREEDY"
    CALM = "CALM"
    FOMO = "FOMO"
    REVENGE = "REVENGE"


class MoodType(str, enum.Enum):
    """Pre-market / end-of-day mood."""
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    NEUTRAL = "NEUTRAL"
    STRESSED = "STRESSED"
    ANXIOUS = "ANXIOUS"


class RuleCategory(str, enum.Enum):
    RISK_MANAGEMENT = "Risk Management"
    PROFIT_TAKING = "Profit Taking"
    DISCIPLINE = "Discipline"
    GENERAL = "General"


class Theme(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class Profile(Base):
    """Trader profile with capital and risk limits."""

    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)  # user id from the auth provider
    email = Column(String(255))
    full_name = Column(String(255))

    trading_capital = Column(Float, nullable=False, default=100_000.0)
    daily_loss_limit = Column(Float, nullable=False, default=5_000.0)
    per_trade_risk = Column(Float, nullable=False, default=1_000.0)
    max_trades_per_day = Column(Integer, nullable=False, default=10)
    daily_target = Column(Float, nullable=False, default=2_000.0)
    weekly_target = Column(Float, nullable=False, default=8_000.0)
    monthly_target = Column(Float, nullable=False, default=30_000.0)

    onboarding_completed = Column(Boolean, default=False)
    theme = Column(Enum(Theme), default=Theme.SYSTEM)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class DailySession(Base):
    """Pre-market ritual and end-of-day record for one trading day."""

    __tablename__ = "daily_sessions"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(64), nullable=False, index=True)
    session_date = Column(Date, nullable=False)

    # Pre-market
    pre_market_mood = Column(Enum(MoodType))
    sleep_hours = Column(Float)
    exercised = Column(Boolean)
    market_bias = Column(String(20))  # bullish, bearish, neutral
    key_levels = Column(Text)
    rules_checked = Column(JSON, default=list)  # rule ids
    pre_market_notes = Column(Text)
    session_started_at = Column(DateTime(timezone=True))

    # End of day
    session_ended_at = Column(DateTime(timezone=True))
    end_of_day_notes = Column(Text)
    end_of_day_mood = Column(Enum(MoodType))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "session_date", name="uq_daily_session_user_date"),
    )


class Trade(Base):
    """A single journaled trade."""

    __tablename__ = "trades"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(64), nullable=False, index=True)
    session_id = Column(String(36), ForeignKey("daily_sessions.id", ondelete="SET NULL"))

    symbol = Column(String(40), nullable=False, index=True)
    trade_type = Column(Enum(TradeType), nullable=False, default=TradeType.EQUITY)
    direction = Column(Enum(TradeDirection), nullable=False, default=TradeDirection.LONG)

    # Options
    option_type = Column(Enum(OptionType))
    strike_price = Column(Float)
    expiry_date = Column(Date)

    # Execution
    quantity = Column(Float, nullable=False)
    entry_price = Column(Float, nullable=False)
    exit_price = Column(Float)
    stop_loss = Column(Float)
    target_price = Column(Float)
    entry_time = Column(DateTime(timezone=True), nullable=False, index=True)
    exit_time = Column(DateTime(timezone=True))

    # Result
    pnl = Column(Float)
    pnl_percent = Column(Float)
    fees = Column(Float, default=0.0)
    status = Column(Enum(TradeStatus), nullable=False, default=TradeStatus.OPEN)

    # Journal
    setup_type = Column(String(50))
    emotion_entry = Column(Enum(EmotionType))
    emotion_exit = Column(Enum(EmotionType))
    notes = Column(Text)
    screenshot_url = Column(String(500))
    tags = Column(JSON, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index("ix_trades_user_entry_time", "user_id", "entry_time"),
        Index("ix_trades_user_status", "user_id", "status"),
    )


class TradingRule(Base):
    """A personal trading rule shown in the ritual and the guardian."""

    __tablename__ = "trading_rules"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(64), nullable=False, index=True)
    rule_text = Column(Text, nullable=False)
    category = Column(String(50), default=RuleCategory.GENERAL.value)
    is_default = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Quote(Base):
    """Motivational quote (shared, not user-owned)."""

    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_text = Column(Text, nullable=False)
    author = Column(String(255))
    category = Column(String(50))
    is_active = Column(Boolean, default=True)
