"""Baseline five-factor trading model.

Momentum, volume trend and flow ratio are derived from market history;
liquidity and whale concentration come straight from the snapshot and
are deliberately left unnormalized here. Whale risk enters the score
as a penalty.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from token_signals.data.loaders import CandleInput, candles_to_frame, sort_trades
from token_signals.data.models import Snapshot, Trade
from token_signals.decision.models import (
    STANDARD_THRESHOLDS,
    BaselineWeights,
    ModelResult,
    ModelThresholds,
    TradingFactors,
    decide,
)
from token_signals.strategies.flow import SHORT_WINDOW_MINUTES, calculate_flow_ratio
from token_signals.strategies.indicators import calculate_sma
from token_signals.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)

MOMENTUM_PERIOD = 30
VOLUME_WINDOW = 5


def calculate_momentum(candles: CandleInput, period: int = MOMENTUM_PERIOD) -> float:
    """Latest close relative to its SMA, 0 without ``period`` candles."""
    df = candles_to_frame(candles)
    if len(df) < period:
        return 0.0
    sma = calculate_sma(df, period)
    if sma <= 0:
        return 0.0
    return (float(df["close"].iloc[-1]) - sma) / sma


def calculate_volume_trend(candles: CandleInput, window: int = VOLUME_WINDOW) -> float:
    """Relative change of the last ``window`` bars' volume vs the window before."""
    df = candles_to_frame(candles)
    if len(df) < window * 2:
        return 0.0
    volume = df["volume"]
    recent = float(volume.iloc[-window:].sum())
    previous = float(volume.iloc[-2 * window : -window].sum())
    if previous <= 0:
        return 0.0
    return (recent - previous) / previous


def analyze_trading_opportunity(
    snapshot: Snapshot,
    candles: CandleInput,
    trades: Sequence[Trade],
    weights: Optional[BaselineWeights] = None,
    thresholds: Optional[ModelThresholds] = None,
    flow_window_minutes: float = SHORT_WINDOW_MINUTES,
    now: Optional[datetime] = None,
    clock: Clock = utc_now,
) -> ModelResult:
    weights = weights or BaselineWeights()
    thresholds = thresholds or STANDARD_THRESHOLDS
    df = candles_to_frame(candles)
    ordered_trades = sort_trades(trades)
    logger.debug(
        "Baseline analysis: %d candles, %d trades", len(df), len(ordered_trades)
    )

    liquidity = snapshot.liquidity
    mcap = snapshot.market_cap
    logger.debug("Parsed metrics: %s", snapshot.parsed_metrics())

    factors = TradingFactors(
        momentum=calculate_momentum(df),
        volume_trend=calculate_volume_trend(df),
        # Shift so that a balanced market contributes 0.
        flow_ratio=calculate_flow_ratio(
            ordered_trades, flow_window_minutes, now=now, clock=clock
        )
        - 1.0,
        liquidity_score=liquidity / mcap if mcap > 0 else 0.0,
        whale_risk=sum(snapshot.whale_percentages()),
    )

    score = (
        weights.momentum * factors.momentum
        + weights.volume_trend * factors.volume_trend
        + weights.flow_ratio * factors.flow_ratio
        + weights.liquidity_score * factors.liquidity_score
        - weights.whale_risk * factors.whale_risk
    )
    decision = decide(score, thresholds.buy, thresholds.sell)
    logger.debug("Baseline factors=%s score=%.4f decision=%s", factors, score, decision.value)
    return ModelResult(decision=decision, score=score, factors=factors)
