"""Trade Guardian Data Models.

The in-progress assessment draft, one dataclass per step, and the
summary shown once every step has passed. Nothing here is persisted
until the wizard commits.
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Optional, Union

from src.db.models import EmotionType, TradeDirection, TradeType


def parse_number(raw: Union[str, int, float, None]) -> Optional[float]:
    """Parse a form value; blank, non-numeric or non-finite input gives None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", "")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    return value if math.isfinite(value) else None


@dataclass
class TradeDetails:
    """Step 1: what is being traded."""
    symbol: str = ""
    trade_type: TradeType = TradeType.EQUITY
    direction: TradeDirection = TradeDirection.LONG
    quantity: Optional[float] = None
    entry_price: Optional[float] = None
    stop_loss: Optional[float] = None
    target_price: Optional[float] = None

    @classmethod
    def from_form(
        cls,
        symbol: str = "",
        quantity: Any = None,
        entry_price: Any = None,
        stop_loss: Any = None,
        target_price: Any = None,
        trade_type: Union[TradeType, str] = TradeType.EQUITY,
        direction: Union[TradeDirection, str] = TradeDirection.LONG,
    ) -> "TradeDetails":
        return cls(
            symbol=symbol or "",
            trade_type=TradeType(trade_type),
            direction=TradeDirection(direction),
            quantity=parse_number(quantity),
            entry_price=parse_number(entry_price),
            stop_loss=parse_number(stop_loss),
            target_price=parse_number(target_price),
        )

    @property
    def normalized_symbol(self) -> str:
        return self.symbol.strip().upper()


@dataclass
class RiskAcknowledgment:
    """Step 2: the trader confirms they accept the computed risk."""
    risk_understood: bool = False
    can_afford: bool = False
    within_daily_limit: bool = False


@dataclass
class SetupValidation:
    """Step 3: setup type, chart homework and the written reason."""
    setup_type: Optional[str] = None
    chart_analyzed: bool = False
    levels_identified: bool = False
    valid_reason: bool = False
    matches_plan: bool = False
    would_repeat: bool = False
    reason: str = ""


@dataclass
class EmotionCheck:
    """Step 4: current emotion and honesty checks."""
    emotion: Optional[EmotionType] = None
    not_fomo: bool = False
    not_revenge: bool = False
    not_greedy: bool = False
    calm_state: bool = False
    will_respect_stop: bool = False


def checkbox_values(section: Any) -> list[bool]:
    """All boolean fields of a step dataclass, in declaration order."""
    return [getattr(section, f.name) for f in fields(section) if f.type in (bool, "bool")]


@dataclass
class AssessmentDraft:
    """Everything entered so far in one assessment."""
    details: TradeDetails = field(default_factory=TradeDetails)
    risk_ack: RiskAcknowledgment = field(default_factory=RiskAcknowledgment)
    setup: SetupValidation = field(default_factory=SetupValidation)
    emotion: EmotionCheck = field(default_factory=EmotionCheck)
    acknowledged_rules: set[str] = field(default_factory=set)


@dataclass
class ApprovalSummary:
    """What the trader sees on the approved step before adding to the journal."""
    symbol: str
    trade_type: TradeType
    direction: TradeDirection
    quantity: float
    entry_price: float
    stop_loss: float
    target_price: float
    position_size: float
    risk_amount: float
    reward_amount: float
    risk_reward_ratio: float
    setup_type: Optional[str]
    emotion: Optional[EmotionType]
    warnings: list[str] = field(default_factory=list)
