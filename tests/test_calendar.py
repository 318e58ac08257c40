"""Tests for month calendar helpers and the heatmap."""

from datetime import date, timedelta, timezone

import pytest

from src.journal.calendar import (
    calendar_days,
    intensity,
    month_grid,
    month_range,
    monthly_stats,
    shift_month,
)

from tests.factories import IST, make_trade, utc


class TestMonthRange:
    def test_ist_month_bounds_in_utc(self):
        start, end = month_range(2024, 3, IST)
        assert start == utc(2024, 2, 29, 18, 30)
        assert end == utc(2024, 3, 31, 18, 29, 59, 999999)
        assert start.tzinfo == timezone.utc

    def test_leap_february(self):
        start, end = month_range(2024, 2, "UTC")
        assert (end - start) + timedelta(microseconds=1) == timedelta(days=29)

    @pytest.mark.parametrize("year, month, delta, expected", [
        (2024, 1, -1, (2023, 12)),
        (2024, 12, 1, (2025, 1)),
        (2024, 3, 0, (2024, 3)),
        (2024, 3, -14, (2023, 1)),
    ])
    def test_shift_month(self, year, month, delta, expected):
        assert shift_month(year, month, delta) == expected


class TestMonthGrid:
    def test_monday_first_with_padding(self):
        weeks = month_grid(2024, 3)  # 1 March 2024 is a Friday
        assert weeks[0][:4] == [None, None, None, None]
        assert weeks[0][4] == date(2024, 3, 1)
        assert all(len(week) == 7 for week in weeks)
        days = [d for week in weeks for d in week if d is not None]
        assert days[0] == date(2024, 3, 1)
        assert days[-1] == date(2024, 3, 31)
        assert len(days) == 31


class TestIntensity:
    def test_no_trades_is_zero(self):
        assert intensity(0.0, 1000.0, has_trades=False) == 0

    def test_scales_to_four_levels(self):
        assert intensity(1000.0, 1000.0) == 4
        assert intensity(-1000.0, 1000.0) == 4
        assert intensity(600.0, 1000.0) == 3
        assert intensity(250.0, 1000.0) == 1
        assert intensity(10.0, 1000.0) == 1

    def test_flat_day_with_trades_is_one(self):
        assert intensity(0.0, 0.0) == 1


class TestCalendarDays:
    def test_cells_cover_month_with_closed_pnl(self):
        trades = [
            make_trade(pnl=1000.0, entry_time=utc(2024, 3, 4, 5)),
            make_trade(pnl=-250.0, entry_time=utc(2024, 3, 5, 5)),
            make_trade(pnl=None, entry_time=utc(2024, 3, 6, 5)),
            make_trade(pnl=500.0, entry_time=utc(2024, 4, 1, 5)),
        ]
        cells = calendar_days(trades, 2024, 3, IST)
        assert len(cells) == 31
        by_day = {c.date.day: c for c in cells}
        assert by_day[4].intensity == 4
        assert by_day[5].pnl == pytest.approx(-250.0)
        assert by_day[5].intensity == 1
        assert by_day[6].trades == 0
        assert by_day[6].intensity == 0


class TestMonthlyStats:
    def test_green_red_days(self):
        trades = [
            make_trade(pnl=1000.0, entry_time=utc(2024, 3, 4, 5)),
            make_trade(pnl=-300.0, entry_time=utc(2024, 3, 4, 6)),
            make_trade(pnl=-250.0, entry_time=utc(2024, 3, 5, 5)),
            make_trade(pnl=None, entry_time=utc(2024, 3, 6, 5)),
        ]
        stats = monthly_stats(trades, IST)
        assert stats.total_pnl == pytest.approx(450.0)
        assert stats.trading_days == 2
        assert stats.green_days == 1
        assert stats.red_days == 1
        assert stats.total_trades == 3
        assert stats.win_rate == pytest.approx(100 / 3)

    def test_empty(self):
        stats = monthly_stats([], IST)
        assert stats.total_pnl == 0
        assert stats.win_rate == 0
