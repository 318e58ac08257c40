"""Tests for rupee and percentage formatting."""

import pytest

from src.journal.formatting import format_inr, format_percent, format_pnl, group_indian


class TestGroupIndian:
    @pytest.mark.parametrize("digits, expected", [
        ("1", "1"),
        ("999", "999"),
        ("1000", "1,000"),
        ("100000", "1,00,000"),
        ("12345678", "1,23,45,678"),
        ("1234567890", "1,23,45,67,890"),
    ])
    def test_grouping(self, digits, expected):
        assert group_indian(digits) == expected


class TestFormatInr:
    def test_full_form(self):
        assert format_inr(12345678, symbol="₹") == "₹1,23,45,678"

    def test_negative(self):
        assert format_inr(-1500, symbol="₹") == "-₹1,500"

    def test_decimals(self):
        assert format_inr(1234.5, decimals=2, symbol="₹") == "₹1,234.50"

    def test_show_sign(self):
        assert format_inr(500, show_sign=True, symbol="₹") == "+₹500"
        assert format_inr(0, show_sign=True, symbol="₹") == "₹0"

    @pytest.mark.parametrize("amount, expected", [
        (25_000_000, "₹2.50Cr"),
        (150_000, "₹1.50L"),
        (1_500, "₹1.5K"),
        (999, "₹999"),
        (-250_000, "-₹2.50L"),
    ])
    def test_compact(self, amount, expected):
        assert format_inr(amount, compact=True, symbol="₹") == expected

    def test_compact_with_sign(self):
        assert format_inr(2_000, show_sign=True, compact=True, symbol="₹") == "+₹2.0K"

    def test_uses_configured_symbol_by_default(self):
        assert format_inr(100).endswith("100")

    def test_negative_rounding_to_zero_has_no_sign(self):
        assert format_inr(-0.2, symbol="₹") == "₹0"


class TestFormatPnl:
    def test_zero_is_positive(self):
        assert format_pnl(0).startswith("+")

    def test_signs(self):
        assert format_pnl(1500).startswith("+")
        assert format_pnl(-1500).startswith("-")
        assert format_pnl(-1500).endswith("1,500")

    def test_loss_rounding_to_zero_is_not_negative(self):
        assert format_pnl(-0.3) == "+₹0"
        assert "-" not in format_pnl(-0.4)

    def test_loss_rounding_to_one_keeps_sign(self):
        assert format_pnl(-0.6) == "-₹1"


class TestFormatPercent:
    def test_signed(self):
        assert format_percent(12.346) == "+12.35%"
        assert format_percent(-3.1) == "-3.10%"

    def test_unsigned(self):
        assert format_percent(12.345, show_sign=False, decimals=1) == "12.3%"
