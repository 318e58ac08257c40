"""API Request/Response Models.

Pydantic schemas for the TradeMind endpoints.
"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.db.models import (
    EmotionType,
    MoodType,
    OptionType,
    RuleCategory,
    Theme,
    TradeDirection,
    TradeStatus,
    TradeType,
)
from src.journal.models import StatusFilter


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ─── Trades ──────────────────────────────────────────────────────────────


class TradeResponse(ORMModel):
    id: str
    user_id: str
    session_id: Optional[str] = None
    symbol: str
    trade_type: TradeType
    direction: TradeDirection
    quantity: float
    entry_price: float
    exit_price: Optional[float] = None
    stop_loss: Optional[float] = None
    target_price: Optional[float] = None
    pnl: Optional[float] = None
    pnl_percent: Optional[float] = None
    fees: Optional[float] = None
    status: TradeStatus
    entry_time: datetime
    exit_time: Optional[datetime] = None
    notes: Optional[str] = None
    emotion_entry: Optional[EmotionType] = None
    emotion_exit: Optional[EmotionType] = None
    setup_type: Optional[str] = None
    option_type: Optional[OptionType] = None
    strike_price: Optional[float] = None
    expiry_date: Optional[date] = None


class CreateTradeRequest(BaseModel):
    symbol: str = Field(..., min_length=1, max_length=40)
    trade_type: TradeType = TradeType.EQUITY
    direction: TradeDirection = TradeDirection.LONG
    quantity: float
    entry_price: float
    stop_loss: Optional[float] = None
    target_price: Optional[float] = None
    option_type: Optional[OptionType] = None
    strike_price: Optional[float] = None
    expiry_date: Optional[date] = None
    setup_type: Optional[str] = None
    emotion_entry: Optional[EmotionType] = None
    notes: Optional[str] = None
    entry_time: Optional[datetime] = None


class CloseTradeRequest(BaseModel):
    exit_price: float
    exit_time: Optional[datetime] = None
    emotion_exit: Optional[EmotionType] = None
    exit_notes: Optional[str] = None
    fees: Optional[float] = None


class TradeListParams(BaseModel):
    status: StatusFilter = StatusFilter.ALL
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    limit: Optional[int] = None
    symbol: Optional[str] = None


# ─── Trade Guardian ──────────────────────────────────────────────────────


class RiskRequest(BaseModel):
    direction: TradeDirection = TradeDirection.LONG
    quantity: float = Field(..., gt=0)
    entry_price: float = Field(..., gt=0)
    stop_loss: float
    target_price: float


class RiskResponse(BaseModel):
    position_size: float
    risk_per_unit: float
    risk_amount: float
    reward_per_unit: float
    reward_amount: float
    risk_reward_ratio: float
    risk_usage_percent: float
    daily_loss_used: float
    daily_loss_remaining: float
    daily_loss_percent: float
    exceeds_per_trade_risk: bool
    exceeds_daily_limit: bool
    warnings: list[str] = []


class TradeDetailsIn(BaseModel):
    symbol: str = ""
    trade_type: TradeType = TradeType.EQUITY
    direction: TradeDirection = TradeDirection.LONG
    quantity: Union[float, str, None] = None
    entry_price: Union[float, str, None] = None
    stop_loss: Union[float, str, None] = None
    target_price: Union[float, str, None] = None


class RiskAckIn(BaseModel):
    risk_understood: bool = False
    can_afford: bool = False
    within_daily_limit: bool = False


class SetupIn(BaseModel):
    setup_type: Optional[str] = None
    chart_analyzed: bool = False
    levels_identified: bool = False
    valid_reason: bool = False
    matches_plan: bool = False
    would_repeat: bool = False
    reason: str = ""


class EmotionIn(BaseModel):
    emotion: Optional[EmotionType] = None
    not_fomo: bool = False
    not_revenge: bool = False
    not_greedy: bool = False
    calm_state: bool = False
    will_respect_stop: bool = False


class AssessmentRequest(BaseModel):
    details: TradeDetailsIn = Field(default_factory=TradeDetailsIn)
    risk_ack: RiskAckIn = Field(default_factory=RiskAckIn)
    setup: SetupIn = Field(default_factory=SetupIn)
    emotion: EmotionIn = Field(default_factory=EmotionIn)
    acknowledged_rules: list[str] = []


class AssessmentResponse(BaseModel):
    steps: dict[str, bool]
    current_step: str
    approved: bool
    dangerous_emotion: bool = False
    risk: Optional[RiskResponse] = None


# ─── Analytics ───────────────────────────────────────────────────────────


class SummaryResponse(BaseModel):
    total_pnl: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    avg_pnl: float
    best_trade: float
    worst_trade: float
    gross_profit: float
    gross_loss: float
    profit_factor: Optional[float] = Field(None, description="null when there are no losses but some profit")


class DailyPointResponse(BaseModel):
    date: date
    pnl: float
    trades: int
    cumulative: float


class SymbolResponse(BaseModel):
    symbol: str
    pnl: float
    trades: int


class CalendarDayResponse(BaseModel):
    date: date
    pnl: float
    trades: int
    intensity: int


class MonthlyStatsResponse(BaseModel):
    total_pnl: float
    trading_days: int
    green_days: int
    red_days: int
    total_trades: int
    win_rate: float


class CalendarResponse(BaseModel):
    year: int
    month: int
    stats: MonthlyStatsResponse
    days: list[CalendarDayResponse]


class DashboardResponse(BaseModel):
    today_pnl: float
    today_trades: int
    today_win_rate: float
    best_trade: float
    worst_trade: float
    week_pnl: float
    month_pnl: float
    daily_loss_used: float
    risk_used_percent: float
    trades_remaining: int
    target_progress: float
    current_streak: int
    ritual_done: bool
    open_positions: int
    market_open: bool


# ─── Settings ────────────────────────────────────────────────────────────


class ProfileResponse(ORMModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    trading_capital: float
    daily_loss_limit: float
    per_trade_risk: float
    max_trades_per_day: int
    daily_target: float
    weekly_target: float
    monthly_target: float
    theme: Optional[Theme] = None
    onboarding_completed: Optional[bool] = None


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = None
    trading_capital: Optional[float] = None
    daily_loss_limit: Optional[float] = None
    per_trade_risk: Optional[float] = None
    max_trades_per_day: Optional[int] = None
    daily_target: Optional[float] = None
    weekly_target: Optional[float] = None
    monthly_target: Optional[float] = None
    theme: Optional[Theme] = None
    onboarding_completed: Optional[bool] = None


class RuleResponse(ORMModel):
    id: str
    rule_text: str
    category: str
    is_default: bool
    is_active: bool
    sort_order: int


class CreateRuleRequest(BaseModel):
    rule_text: str
    category: RuleCategory = RuleCategory.GENERAL


class UpdateRuleRequest(BaseModel):
    rule_text: Optional[str] = None
    category: Optional[RuleCategory] = None
    is_active: Optional[bool] = None


# ─── Ritual ──────────────────────────────────────────────────────────────


class DailySessionResponse(ORMModel):
    id: str
    session_date: date
    pre_market_mood: Optional[MoodType] = None
    rules_checked: list[str] = []
    pre_market_notes: Optional[str] = None
    session_started_at: Optional[datetime] = None


class RitualRequest(BaseModel):
    mood: MoodType
    rules_checked: list[str]
    notes: Optional[str] = None


class RitualStatusResponse(BaseModel):
    done: bool
    session: Optional[DailySessionResponse] = None


class QuoteResponse(ORMModel):
    quote_text: str
    author: Optional[str] = None
