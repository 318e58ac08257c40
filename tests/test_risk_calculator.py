"""Tests for the Trade Guardian risk calculator and P&L math."""

import pytest

from src.api_errors import ValidationError
from src.db.models import TradeDirection, TradeStatus
from src.trade_guardian.calculator import (
    RiskCalculator,
    RiskInputs,
    calculate_pnl,
    calculate_risk,
    today_realized_loss,
)
from src.trade_guardian.config import GuardianConfig

from tests.factories import make_profile, make_trade


def _inputs(**overrides):
    params = dict(
        direction=TradeDirection.LONG,
        quantity=50,
        entry_price=24500.0,
        stop_loss=24400.0,
        target_price=24700.0,
        per_trade_risk_limit=5000.0,
        daily_loss_limit=10000.0,
        today_realized_loss=2000.0,
    )
    params.update(overrides)
    return RiskInputs(**params)


class TestCalculateRisk:
    """Risk, reward and limit usage."""

    def test_long_trade_figures(self):
        result = calculate_risk(_inputs())
        assert result.position_size == pytest.approx(1_225_000)
        assert result.risk_per_unit == pytest.approx(100)
        assert result.risk_amount == pytest.approx(5000)
        assert result.reward_per_unit == pytest.approx(200)
        assert result.reward_amount == pytest.approx(10000)
        assert result.risk_reward_ratio == pytest.approx(2.0)
        assert result.risk_usage_percent == pytest.approx(100.0)
        assert result.daily_loss_used == pytest.approx(2000)
        assert result.daily_loss_remaining == pytest.approx(8000)
        assert result.daily_loss_percent == pytest.approx(20.0)

    def test_risk_exactly_at_limit_is_not_a_breach(self):
        result = calculate_risk(_inputs())
        assert result.exceeds_per_trade_risk is False
        assert result.exceeds_daily_limit is False
        assert result.has_breach is False

    def test_short_trade_uses_absolute_distances(self):
        result = calculate_risk(_inputs(
            direction=TradeDirection.SHORT,
            entry_price=24500.0,
            stop_loss=24600.0,
            target_price=24200.0,
        ))
        assert result.risk_per_unit == pytest.approx(100)
        assert result.reward_per_unit == pytest.approx(300)
        assert result.risk_reward_ratio == pytest.approx(3.0)

    def test_exceeds_per_trade_risk(self):
        result = calculate_risk(_inputs(quantity=60))
        assert result.risk_amount == pytest.approx(6000)
        assert result.exceeds_per_trade_risk is True
        assert result.has_breach is True
        assert result.warnings

    def test_exceeds_remaining_daily_limit(self):
        result = calculate_risk(_inputs(today_realized_loss=6000.0))
        assert result.daily_loss_remaining == pytest.approx(4000)
        assert result.exceeds_daily_limit is True

    def test_daily_loss_beyond_limit_clamps_remaining_to_zero(self):
        result = calculate_risk(_inputs(today_realized_loss=12000.0))
        assert result.daily_loss_remaining == 0
        assert result.daily_loss_percent == pytest.approx(120.0)
        assert result.exceeds_daily_limit is True

    def test_zero_risk_per_unit_gives_zero_ratio(self):
        result = calculate_risk(_inputs(stop_loss=24500.0))
        assert result.risk_amount == 0
        assert result.risk_reward_ratio == 0

    def test_low_risk_reward_warns(self):
        result = calculate_risk(_inputs(target_price=24550.0))
        assert result.risk_reward_ratio == pytest.approx(0.5)
        assert any("reward" in w.lower() for w in result.warnings)

    @pytest.mark.parametrize("field", ["per_trade_risk_limit", "daily_loss_limit"])
    def test_non_positive_limits_rejected(self, field):
        with pytest.raises(ValidationError):
            calculate_risk(_inputs(**{field: 0}))

    def test_negative_today_loss_rejected(self):
        with pytest.raises(ValidationError):
            calculate_risk(_inputs(today_realized_loss=-1.0))


class TestCalculatePnl:
    def test_long_profit(self):
        result = calculate_pnl(100.0, 110.0, 10, TradeDirection.LONG)
        assert result.pnl == pytest.approx(100.0)
        assert result.pnl_percent == pytest.approx(10.0)

    def test_short_profit_when_price_falls(self):
        result = calculate_pnl(100.0, 90.0, 10, TradeDirection.SHORT)
        assert result.pnl == pytest.approx(100.0)
        assert result.pnl_percent == pytest.approx(10.0)

    def test_short_loss_when_price_rises(self):
        result = calculate_pnl(100.0, 105.0, 10, TradeDirection.SHORT)
        assert result.pnl == pytest.approx(-50.0)
        assert result.pnl_percent == pytest.approx(-5.0)

    def test_zero_entry_rejected(self):
        with pytest.raises(ValidationError):
            calculate_pnl(0.0, 10.0, 1, TradeDirection.LONG)


class TestTodayRealizedLoss:
    def test_sums_losing_closed_trades(self):
        trades = [make_trade(pnl=-500.0), make_trade(pnl=-300.0), make_trade(pnl=None)]
        assert today_realized_loss(trades) == pytest.approx(800.0)

    def test_ignores_cancelled(self):
        trades = [make_trade(pnl=-500.0), make_trade(status=TradeStatus.CANCELLED)]
        assert today_realized_loss(trades) == pytest.approx(500.0)

    def test_empty(self):
        assert today_realized_loss([]) == 0


class TestRiskCalculator:
    def test_for_profile_uses_profile_limits(self):
        profile = make_profile(per_trade_risk=1000.0, daily_loss_limit=5000.0)
        calc = RiskCalculator.for_profile(profile)
        assert calc.per_trade_risk_limit == 1000.0
        assert calc.daily_loss_limit == 5000.0

    def test_missing_profile_falls_back(self):
        calc = RiskCalculator.for_profile(None, GuardianConfig(fallback_per_trade_risk=5000.0,
                                                               fallback_daily_loss_limit=10000.0))
        assert calc.per_trade_risk_limit == 5000.0
        assert calc.daily_loss_limit == 10000.0

    def test_zero_profile_limit_falls_back(self):
        profile = make_profile(per_trade_risk=0, daily_loss_limit=3000.0)
        calc = RiskCalculator.for_profile(profile)
        assert calc.per_trade_risk_limit == GuardianConfig().fallback_per_trade_risk
        assert calc.daily_loss_limit == 3000.0

    def test_assess(self):
        calc = RiskCalculator(5000.0, 10000.0)
        result = calc.assess(TradeDirection.LONG, 50, 24500, 24400, 24700, 2000.0)
        assert result.risk_amount == pytest.approx(5000)
        assert result.daily_loss_remaining == pytest.approx(8000)
