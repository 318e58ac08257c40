"""Risk Calculator.

Pure risk/reward arithmetic for a planned trade, plus the
direction-aware realized P&L used when a trade is closed.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from src.api_errors import ValidationError, validate_positive_limit
from src.db.models import TradeDirection, TradeStatus
from src.trade_guardian.config import DEFAULT_GUARDIAN_CONFIG, GuardianConfig

logger = logging.getLogger(__name__)


@dataclass
class RiskInputs:
    """Parameters of a planned trade and the account limits it is checked against."""
    direction: TradeDirection
    quantity: float
    entry_price: float
    stop_loss: float
    target_price: float
    per_trade_risk_limit: float
    daily_loss_limit: float
    today_realized_loss: float = 0.0


@dataclass
class RiskAssessment:
    """Derived risk figures for a planned trade."""
    position_size: float = 0.0
    risk_per_unit: float = 0.0
    risk_amount: float = 0.0
    reward_per_unit: float = 0.0
    reward_amount: float = 0.0
    risk_reward_ratio: float = 0.0
    risk_usage_percent: float = 0.0
    daily_loss_used: float = 0.0
    daily_loss_remaining: float = 0.0
    daily_loss_percent: float = 0.0
    exceeds_per_trade_risk: bool = False
    exceeds_daily_limit: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def has_breach(self) -> bool:
        return self.exceeds_per_trade_risk or self.exceeds_daily_limit


@dataclass
class PnLResult:
    pnl: float
    pnl_percent: float


def calculate_risk(inputs: RiskInputs, min_risk_reward: float = 1.0) -> RiskAssessment:
    """Compute risk, reward and limit usage for a planned trade.

    Args:
        inputs: Trade parameters and account limits.
        min_risk_reward: R:R below which a warning is attached.

    Returns:
        RiskAssessment with breach flags and display warnings.

    Raises:
        ValidationError: If a limit is not positive or today's loss is negative.
    """
    per_trade_limit = validate_positive_limit(inputs.per_trade_risk_limit, "per_trade_risk_limit")
    daily_limit = validate_positive_limit(inputs.daily_loss_limit, "daily_loss_limit")
    if inputs.today_realized_loss < 0:
        raise ValidationError(
            "today_realized_loss must be a non-negative magnitude",
            field="today_realized_loss",
        )

    qty = inputs.quantity
    entry = inputs.entry_price
    if inputs.direction == TradeDirection.LONG:
        risk_per_unit = entry - inputs.stop_loss
        reward_per_unit = inputs.target_price - entry
    else:
        risk_per_unit = inputs.stop_loss - entry
        reward_per_unit = entry - inputs.target_price

    risk_amount = abs(risk_per_unit * qty)
    reward_amount = abs(reward_per_unit * qty)
    rr = reward_amount / risk_amount if risk_amount > 0 else 0.0
    daily_remaining = max(0.0, daily_limit - inputs.today_realized_loss)

    result = RiskAssessment(
        position_size=qty * entry,
        risk_per_unit=risk_per_unit,
        risk_amount=risk_amount,
        reward_per_unit=reward_per_unit,
        reward_amount=reward_amount,
        risk_reward_ratio=rr,
        risk_usage_percent=risk_amount / per_trade_limit * 100,
        daily_loss_used=inputs.today_realized_loss,
        daily_loss_remaining=daily_remaining,
        daily_loss_percent=inputs.today_realized_loss / daily_limit * 100,
        exceeds_per_trade_risk=risk_amount > per_trade_limit,
        exceeds_daily_limit=risk_amount > daily_remaining,
    )

    if risk_amount > 0 and rr < min_risk_reward:
        result.warnings.append(f"Risk:reward of 1:{rr:.2f} is below 1:{min_risk_reward:g}")
    if result.exceeds_per_trade_risk:
        result.warnings.append(
            f"Risk {risk_amount:,.0f} exceeds per-trade limit {per_trade_limit:,.0f}"
        )
    if result.exceeds_daily_limit:
        result.warnings.append(
            f"Risk {risk_amount:,.0f} exceeds remaining daily loss budget {daily_remaining:,.0f}"
        )
    return result


def calculate_pnl(
    entry_price: float,
    exit_price: float,
    quantity: float,
    direction: TradeDirection,
) -> PnLResult:
    """Direction-aware realized P&L; the percent sign flips for SHORT."""
    if entry_price <= 0:
        raise ValidationError("entry_price must be greater than 0", field="entry_price")

    if direction == TradeDirection.LONG:
        pnl = (exit_price - entry_price) * quantity
    else:
        pnl = (entry_price - exit_price) * quantity

    pct = (exit_price - entry_price) / entry_price * 100
    if direction == TradeDirection.SHORT:
        pct = -pct
    return PnLResult(pnl=pnl, pnl_percent=pct)


def today_realized_loss(trades: Iterable) -> float:
    """Magnitude of the summed negative P&L across closed trades.

    The caller is responsible for passing only today's trades.
    """
    total = sum(
        min(0.0, t.pnl or 0.0)
        for t in trades
        if t.status == TradeStatus.CLOSED and t.pnl is not None
    )
    return abs(total)


class RiskCalculator:
    """Binds the calculator to a user's limits, falling back to defaults.

    Example:
        calc = RiskCalculator.for_profile(profile)
        assessment = calc.assess(TradeDirection.LONG, 50, 24500, 24400, 24700, today_loss)
    """

    def __init__(
        self,
        per_trade_risk_limit: float,
        daily_loss_limit: float,
        config: Optional[GuardianConfig] = None,
    ):
        self.config = config or DEFAULT_GUARDIAN_CONFIG
        self.per_trade_risk_limit = per_trade_risk_limit
        self.daily_loss_limit = daily_loss_limit

    @classmethod
    def for_profile(cls, profile, config: Optional[GuardianConfig] = None) -> "RiskCalculator":
        """Use the profile's limits; a missing profile or zero limit falls back to config."""
        config = config or DEFAULT_GUARDIAN_CONFIG
        per_trade = getattr(profile, "per_trade_risk", None) or config.fallback_per_trade_risk
        daily = getattr(profile, "daily_loss_limit", None) or config.fallback_daily_loss_limit
        if profile is None:
            logger.debug("No profile found; using fallback risk limits")
        return cls(per_trade, daily, config)

    def assess(
        self,
        direction: TradeDirection,
        quantity: float,
        entry_price: float,
        stop_loss: float,
        target_price: float,
        today_loss: float = 0.0,
    ) -> RiskAssessment:
        return calculate_risk(
            RiskInputs(
                direction=direction,
                quantity=quantity,
                entry_price=entry_price,
                stop_loss=stop_loss,
                target_price=target_price,
                per_trade_risk_limit=self.per_trade_risk_limit,
                daily_loss_limit=self.daily_loss_limit,
                today_realized_loss=today_loss,
            ),
            min_risk_reward=self.config.min_risk_reward,
        )
