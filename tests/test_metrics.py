"""Tests for per-trade metrics: pips, P&L, risk:reward and status."""

import pytest

from journal.services.metrics import (
    calculate_pips,
    calculate_profit_loss,
    calculate_risk_reward,
    calculate_trade_metrics,
    format_risk_reward,
    pip_multiplier,
)
from journal.utils.numeric import parse_optional_float, round_half_away, trim_decimal


# ---------------------------------------------------------------------------
# 1. Numeric helpers
# ---------------------------------------------------------------------------

class TestRounding:
    def test_half_rounds_away_from_zero(self):
        assert round_half_away(0.125) == 0.13
        assert round_half_away(-0.125) == -0.13

    def test_tiny_negative_becomes_plain_zero(self):
        value = round_half_away(-0.001)
        assert value == 0.0
        assert str(value) == "0.0"

    def test_trim_decimal(self):
        assert trim_decimal(2.0) == "2"
        assert trim_decimal(1.5) == "1.5"
        assert trim_decimal(0.25) == "0.25"

    @pytest.mark.parametrize("raw, expected", [
        (None, None),
        ("", None),
        ("  ", None),
        ("abc", None),
        ("12.5", 12.5),
        (-3, -3.0),
        (float("nan"), None),
    ])
    def test_parse_optional_float(self, raw, expected):
        assert parse_optional_float(raw) == expected


# ---------------------------------------------------------------------------
# 2. Pips and P&L
# ---------------------------------------------------------------------------

class TestPips:
    def test_jpy_pairs_use_two_decimal_pips(self):
        assert pip_multiplier("USD/JPY") == 100.0
        assert pip_multiplier("EUR/USD") == 10000.0

    def test_buy_pips(self):
        assert calculate_pips("EUR/USD", "BUY", 1.1000, 1.1050) == 50.0

    def test_sell_pips(self):
        assert calculate_pips("EUR/USD", "SELL", 1.1050, 1.1000) == 50.0
        assert calculate_pips("EUR/USD", "SELL", 1.1000, 1.1050) == -50.0

    def test_jpy_pips(self):
        assert calculate_pips("USD/JPY", "BUY", 150.00, 150.50) == 50.0

    def test_cash_types_have_no_pip_distance(self):
        assert calculate_pips("EUR/USD", "DEPOSIT", 1.0, 2.0) == 0.0

    def test_profit_loss(self):
        assert calculate_profit_loss(50.0, 1.0) == 500.0
        assert calculate_profit_loss(-20.0, 0.5) == -100.0


# ---------------------------------------------------------------------------
# 3. Risk:reward
# ---------------------------------------------------------------------------

class TestRiskReward:
    def test_buy_ratio(self):
        assert calculate_risk_reward("BUY", 1.1000, 1.1100, 1.0950) == 2.0

    def test_sell_ratio(self):
        assert calculate_risk_reward("SELL", 1.1000, 1.0900, 1.1050) == 2.0

    def test_stop_on_entry_gives_zero(self):
        assert calculate_risk_reward("BUY", 1.1000, 1.1100, 1.1000) == 0.0

    @pytest.mark.parametrize("ratio, expected", [
        (2.0, "1:2"),
        (1.5, "1:1.5"),
        (1.0, "1:1"),
        (0.5, "0.5:1"),
        (-0.5, "-0.5:1"),
        (0.0, None),
    ])
    def test_format(self, ratio, expected):
        assert format_risk_reward(ratio) == expected


# ---------------------------------------------------------------------------
# 4. Combined metrics
# ---------------------------------------------------------------------------

class TestTradeMetrics:
    def test_closed_buy(self):
        m = calculate_trade_metrics("BUY", "EUR/USD", 1.1000, 1.0, exit=1.1050)
        assert m.status == "closed"
        assert m.pips == 50.0
        assert m.pl == 500.0
        assert m.rr is None

    def test_open_trade_has_no_pips_or_pl(self):
        m = calculate_trade_metrics("BUY", "EUR/USD", 1.1000, 1.0)
        assert m.status == "open"
        assert m.pips is None
        assert m.pl is None

    def test_open_trade_gets_planned_ratio_from_take_profit(self):
        m = calculate_trade_metrics(
            "BUY", "EUR/USD", 1.1000, 1.0, stop_loss=1.0950, take_profit=1.1100
        )
        assert m.status == "open"
        assert m.rr == "1:2"

    def test_exit_wins_over_take_profit_for_ratio(self):
        m = calculate_trade_metrics(
            "BUY", "EUR/USD", 1.1000, 1.0, exit=1.1025, stop_loss=1.0950, take_profit=1.1100
        )
        assert m.rr == "0.5:1"

    def test_zero_risk_leaves_ratio_empty(self):
        m = calculate_trade_metrics(
            "BUY", "EUR/USD", 1.1000, 1.0, exit=1.1050, stop_loss=1.1000
        )
        assert m.rr is None
        assert m.pl == 500.0

    def test_cash_movement_with_exit_is_closed_without_pl(self):
        m = calculate_trade_metrics("DEPOSIT", "", 0.0, 0.0, exit=1.0)
        assert m.status == "closed"
        assert m.pips is None
        assert m.pl is None

    def test_same_inputs_same_outputs(self):
        args = ("SELL", "GBP/JPY", 190.25, 0.3)
        kwargs = {"exit": 189.80, "stop_loss": 190.50}
        assert calculate_trade_metrics(*args, **kwargs) == calculate_trade_metrics(*args, **kwargs)


def test_non_finite_values_pass_through_rounding():
    assert round_half_away(float("inf")) == float("inf")
    assert round_half_away(float("-inf")) == float("-inf")


def test_extreme_exit_does_not_crash():
    m = calculate_trade_metrics("BUY", "EUR/USD", 1.0, 1.0, exit=1e306)
    assert m.status == "closed"
    assert m.pips == float("inf")
