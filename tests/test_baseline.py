"""Tests for decision/baseline.py"""

import pytest

from token_signals.data import Snapshot
from token_signals.decision import (
    BaselineWeights,
    Decision,
    ModelThresholds,
    analyze_trading_opportunity,
    calculate_momentum,
    calculate_volume_trend,
)

from conftest import make_candles, make_snapshot, make_trade


class TestFactorHelpers:
    def test_rising_closes_give_positive_momentum(self):
        closes = [1.0 + i / 29.0 for i in range(30)]
        momentum = calculate_momentum(make_candles(closes))
        assert momentum == pytest.approx((2.0 - 1.5) / 1.5)
        assert momentum > 0

    def test_momentum_needs_full_period(self):
        assert calculate_momentum(make_candles([1.0, 2.0, 3.0])) == 0.0

    def test_volume_trend(self):
        candles = make_candles([1.0] * 10, volumes=[100.0] * 5 + [200.0] * 5)
        assert calculate_volume_trend(candles) == pytest.approx(1.0)

    def test_volume_trend_zero_base(self):
        candles = make_candles([1.0] * 10, volumes=[0.0] * 5 + [200.0] * 5)
        assert calculate_volume_trend(candles) == 0.0


class TestAnalyzeTradingOpportunity:
    def test_factor_vector(self, now):
        closes = [1.0 + i / 29.0 for i in range(30)]
        trades = [make_trade("buy", amount=50.0)]
        result = analyze_trading_opportunity(
            make_snapshot(), make_candles(closes), trades, now=now
        )
        factors = result.factors
        assert result.kind == "baseline"
        assert factors.liquidity_score == pytest.approx(0.1)
        assert factors.whale_risk == pytest.approx(0.13)
        assert factors.flow_ratio == pytest.approx(1.0)
        assert factors.volume_trend == 0.0
        expected = (
            0.4 * factors.momentum
            + 0.2 * 1.0
            + 0.1 * 0.1
            - 0.1 * 0.13
        )
        assert result.score == pytest.approx(expected)
        assert result.decision is Decision.BUY

    def test_momentum_contribution_positive(self, now):
        closes = [1.0 + i / 29.0 for i in range(30)]
        flat = analyze_trading_opportunity(Snapshot(), make_candles([1.0] * 30), [], now=now)
        rising = analyze_trading_opportunity(Snapshot(), make_candles(closes), [], now=now)
        assert rising.score > flat.score

    def test_empty_inputs_hold(self, now):
        result = analyze_trading_opportunity(Snapshot(), [], [], now=now)
        assert result.score == 0.0
        assert result.decision is Decision.HOLD

    def test_sell_pressure(self, now):
        trades = [make_trade("sell", amount=100.0), make_trade("buy", amount=10.0)]
        result = analyze_trading_opportunity(Snapshot(), [], trades, now=now)
        assert result.factors.flow_ratio == pytest.approx(-0.9)
        assert result.decision is Decision.SELL

    def test_custom_config(self, now):
        weights = BaselineWeights(momentum=0.0, flow_ratio=1.0)
        thresholds = ModelThresholds(buy=2.0, sell=-2.0)
        trades = [make_trade("buy")]
        result = analyze_trading_opportunity(
            Snapshot(), [], trades, weights=weights, thresholds=thresholds, now=now
        )
        assert result.score == pytest.approx(1.0)
        assert result.decision is Decision.HOLD
