"""Database package for TradeMind."""

from src.db.base import Base
from src.db.engine import create_all, get_session, get_sync_engine, write_transaction, SyncSessionLocal
from src.db.models import (
    DailySession,
    EmotionType,
    MoodType,
    OptionType,
    Profile,
    Quote,
    RuleCategory,
    Theme,
    Trade,
    TradeDirection,
    TradeStatus,
    TradeType,
    TradingRule,
)

__all__ = [
    "Base",
    "create_all",
    "get_session",
    "get_sync_engine",
    "SyncSessionLocal",
    "write_transaction",
    "DailySession",
    "EmotionType",
    "MoodType",
    "OptionType",
    "Profile",
    "Quote",
    "RuleCategory",
    "Theme",
    "Trade",
    "TradeDirection",
    "TradeStatus",
    "TradeType",
    "TradingRule",
]
