"""Step completion predicates for the pre-trade assessment.

Each predicate is independent of the others and of the wizard, so the
API can evaluate any step in isolation.
"""

from typing import Iterable, Optional

from src.trade_guardian.config import DEFAULT_GUARDIAN_CONFIG, GuardianConfig
from src.trade_guardian.models import (
    EmotionCheck,
    RiskAcknowledgment,
    SetupValidation,
    TradeDetails,
    checkbox_values,
)
from src.db.models import EmotionType


def trade_details_complete(details: TradeDetails) -> bool:
    """Symbol set and all four numbers present; quantity and entry positive."""
    if not details.symbol or not details.symbol.strip():
        return False
    numbers = (details.quantity, details.entry_price, details.stop_loss, details.target_price)
    if any(n is None for n in numbers):
        return False
    return details.quantity > 0 and details.entry_price > 0


def risk_acknowledged(ack: RiskAcknowledgment) -> bool:
    return all(checkbox_values(ack))


def setup_validated(setup: SetupValidation, config: Optional[GuardianConfig] = None) -> bool:
    config = config or DEFAULT_GUARDIAN_CONFIG
    if setup.setup_type not in config.setup_types:
        return False
    if not all(checkbox_values(setup)):
        return False
    return len(setup.reason.strip()) >= config.min_reason_length


def emotion_checked(check: EmotionCheck) -> bool:
    if check.emotion is None:
        return False
    try:
        EmotionType(check.emotion)
    except ValueError:
        return False
    return all(checkbox_values(check))


def rules_acknowledged(acknowledged: Iterable[str], active_rule_ids: Iterable[str]) -> bool:
    """Every active rule acknowledged; acknowledgments of other rules are ignored."""
    return set(active_rule_ids) <= set(acknowledged)
