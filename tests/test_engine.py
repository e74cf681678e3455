"""Tests for decision/engine.py and the tagged result union."""

import json

import pytest
from pydantic import ValidationError

from token_signals.config import Settings
from token_signals.data import Snapshot
from token_signals.decision import (
    CONSERVATIVE_THRESHOLDS,
    STANDARD_THRESHOLDS,
    Decision,
    EnhancedModelResult,
    ModelResult,
    ModelThresholds,
    TradingEngine,
    result_from_dict,
)

from conftest import NOW, make_snapshot, make_trade


def sell_off_trades():
    """Sustained buying over the last half hour, then a burst of sells."""
    buys = [make_trade("buy", amount=100.0, minutes_ago=m) for m in (10, 15, 20, 25)]
    sells = [make_trade("sell", amount=50.0, minutes_ago=m) for m in (1, 2)]
    return buys + sells


class TestConstruction:
    def test_defaults(self):
        engine = TradingEngine()
        assert engine.thresholds == CONSERVATIVE_THRESHOLDS
        assert engine.baseline_thresholds == STANDARD_THRESHOLDS
        assert engine.flow_window_minutes == 5

    def test_mapping_config_is_validated(self):
        engine = TradingEngine(weights={"rsi": 0.5}, thresholds={"buy": 0.2, "sell": -0.2})
        assert engine.weights.rsi == 0.5
        assert engine.thresholds == ModelThresholds(buy=0.2, sell=-0.2)

    def test_invalid_config_fails_eagerly(self):
        with pytest.raises(ValidationError):
            TradingEngine(thresholds={"buy": -0.1, "sell": 0.1})
        with pytest.raises(ValidationError):
            TradingEngine(weights={"momentum": float("nan")})
        with pytest.raises(ValidationError):
            TradingEngine(periods={"rsi": 0})

    def test_wrong_config_type(self):
        with pytest.raises(TypeError):
            TradingEngine(weights=[0.1, 0.2])

    def test_bad_flow_window(self):
        with pytest.raises(ValueError, match="flow_window_minutes"):
            TradingEngine(flow_window_minutes=0)

    def test_from_settings(self):
        settings = Settings(threshold_profile="standard", rsi_period=9, flow_window_minutes=10)
        engine = TradingEngine.from_settings(settings)
        assert engine.thresholds == STANDARD_THRESHOLDS
        assert engine.periods.rsi == 9
        assert engine.flow_window_minutes == 10


class TestAnalyze:
    def test_manipulation_screening(self, fixed_clock):
        engine = TradingEngine(clock=fixed_clock)
        analysis = engine.analyze(make_snapshot(), [], sell_off_trades())
        assert analysis.patterns.triggered_rules == ["sudden_sell_pressure"]
        assert analysis.manipulation_score == pytest.approx(0.3)
        assert analysis.warning_level == "medium"
        assert analysis.adjusted_confidence == pytest.approx(
            analysis.model_result.score * 0.85
        )
        assert analysis.flow.short_term.flow_imbalance == -1.0
        assert analysis.model_result.raw_factors.flow_imbalance == -1.0

    def test_quiet_market(self, fixed_clock):
        analysis = TradingEngine(clock=fixed_clock).analyze(Snapshot(), [], [])
        assert analysis.manipulation_warnings == []
        assert analysis.warning_level == "low"
        assert analysis.model_result.decision is Decision.HOLD

    def test_explicit_now_overrides_clock(self, rising_candles):
        engine = TradingEngine(clock=lambda: NOW.replace(year=2030))
        trades = [make_trade("buy")]
        result = engine.analyze_enhanced(make_snapshot(), rising_candles, trades, now=NOW)
        assert result.raw_factors.flow_imbalance == 1.0

    def test_deterministic(self, rising_candles, fixed_clock):
        engine = TradingEngine(clock=fixed_clock)
        trades = sell_off_trades()
        first = engine.analyze(make_snapshot(), rising_candles, trades).to_dict()
        second = engine.analyze(make_snapshot(), rising_candles, trades).to_dict()
        assert first == second
        json.dumps(first)

    def test_baseline(self, rising_candles, fixed_clock):
        result = TradingEngine(clock=fixed_clock).analyze_baseline(
            make_snapshot(), rising_candles, [make_trade("buy")]
        )
        assert isinstance(result, ModelResult)
        assert result.decision is Decision.BUY

    def test_baseline_uses_configured_flow_window(self, fixed_clock):
        trades = [make_trade("buy", amount=10.0, minutes_ago=20)]
        default = TradingEngine(clock=fixed_clock).analyze_baseline(Snapshot(), [], trades)
        wide = TradingEngine(flow_window_minutes=30, clock=fixed_clock).analyze_baseline(
            Snapshot(), [], trades
        )
        assert default.factors.flow_ratio == 0.0
        assert wide.factors.flow_ratio == pytest.approx(1.0)

    def test_snapshot_metrics_reported(self, fixed_clock):
        analysis = TradingEngine(clock=fixed_clock).analyze(make_snapshot(), [], [])
        payload = analysis.to_dict()
        assert payload["snapshot_metrics"]["market_cap"] == pytest.approx(1_000_000)
        assert payload["snapshot_metrics"]["liquidity"] == pytest.approx(100_000)


class TestResultUnion:
    def test_round_trip(self, rising_candles, fixed_clock):
        engine = TradingEngine(clock=fixed_clock)
        baseline = engine.analyze_baseline(make_snapshot(), rising_candles, [])
        enhanced = engine.analyze_enhanced(make_snapshot(), rising_candles, [])
        assert result_from_dict(baseline.to_dict()) == baseline
        rebuilt = result_from_dict(json.loads(json.dumps(enhanced.to_dict())))
        assert isinstance(rebuilt, EnhancedModelResult)
        assert rebuilt == enhanced

    def test_kind_tags(self, fixed_clock):
        engine = TradingEngine(clock=fixed_clock)
        assert engine.analyze_baseline(Snapshot(), [], []).to_dict()["kind"] == "baseline"
        assert engine.analyze_enhanced(Snapshot(), [], []).to_dict()["kind"] == "enhanced"

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="unknown result kind"):
            result_from_dict({"kind": "legacy", "decision": "BUY", "score": 1.0})
