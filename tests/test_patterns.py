"""Tests for risk/patterns.py"""

import pytest

from token_signals.risk.patterns import (
    LargeBuyRule,
    OneSidedMarketRule,
    SuddenSellPressureRule,
    WashTradingRule,
    adjust_confidence,
    detect_unusual_patterns,
    manipulation_warning_level,
)
from token_signals.strategies.flow import FlowAnalysis, MultiPeriodFlow


def make_flow(short=None, medium=None, long=None):
    """Neutral multi-period flow with selected windows overridden."""
    return MultiPeriodFlow(
        short_term=short or FlowAnalysis.empty(5),
        medium_term=medium or FlowAnalysis.empty(30),
        long_term=long or FlowAnalysis.empty(120),
    )


class TestRules:
    def test_neutral_flow_has_no_warnings(self):
        report = detect_unusual_patterns(make_flow())
        assert report.warnings == []
        assert report.manipulation_score == 0.0

    def test_sudden_sell_pressure(self):
        flow = make_flow(
            short=FlowAnalysis(window_minutes=5, flow_imbalance=-0.8),
            medium=FlowAnalysis(window_minutes=30, flow_imbalance=0.6),
        )
        report = detect_unusual_patterns(flow)
        assert any("sudden sell pressure" in w.lower() for w in report.warnings)
        assert report.manipulation_score >= 0.3
        assert "sudden_sell_pressure" in report.triggered_rules

    def test_large_buys(self):
        flow = make_flow(
            short=FlowAnalysis(window_minutes=5, average_buy_size=600.0, flow_imbalance=1.0),
            medium=FlowAnalysis(window_minutes=30, average_buy_size=100.0, flow_imbalance=1.0),
        )
        assert LargeBuyRule().check(flow) is not None
        assert SuddenSellPressureRule().check(flow) is None

    def test_large_buys_needs_short_activity(self):
        assert LargeBuyRule().check(make_flow()) is None

    def test_wash_trading(self):
        flow = make_flow(
            short=FlowAnalysis(window_minutes=5, total_volume=600.0, flow_imbalance=0.05),
            medium=FlowAnalysis(window_minutes=30, total_volume=1000.0),
        )
        assert WashTradingRule().check(flow).startswith("Possible wash trading")

    def test_wash_trading_low_volume(self):
        flow = make_flow(
            short=FlowAnalysis(window_minutes=5, total_volume=400.0, flow_imbalance=0.05),
            medium=FlowAnalysis(window_minutes=30, total_volume=1000.0),
        )
        assert WashTradingRule().check(flow) is None

    @pytest.mark.parametrize("imbalance, side", [(0.95, "buy"), (-0.95, "sell")])
    def test_one_sided(self, imbalance, side):
        flow = make_flow(long=FlowAnalysis(window_minutes=120, flow_imbalance=imbalance))
        assert OneSidedMarketRule().check(flow) == f"Extremely {side}-sided market"

    def test_score_capped(self):
        flow = make_flow(
            short=FlowAnalysis(
                window_minutes=5,
                flow_imbalance=-0.8,
                average_buy_size=100.0,
                total_volume=100.0,
            ),
            medium=FlowAnalysis(window_minutes=30, flow_imbalance=0.6, average_buy_size=1.0),
            long=FlowAnalysis(window_minutes=120, flow_imbalance=-0.95),
        )
        rules = [SuddenSellPressureRule(weight=0.9), OneSidedMarketRule(weight=0.9)]
        report = detect_unusual_patterns(flow, rules=rules)
        assert len(report.warnings) == 2
        assert report.manipulation_score == 1.0


class TestRiskSummary:
    @pytest.mark.parametrize(
        "score, level",
        [(0.0, "low"), (0.29, "low"), (0.3, "medium"), (0.59, "medium"), (0.6, "high"), (1.0, "high")],
    )
    def test_warning_level(self, score, level):
        assert manipulation_warning_level(score) == level

    def test_adjust_confidence(self):
        assert adjust_confidence(0.8, 0.0) == pytest.approx(0.8)
        assert adjust_confidence(0.8, 1.0) == pytest.approx(0.4)
        assert adjust_confidence(-0.5, 0.5) == pytest.approx(-0.375)
