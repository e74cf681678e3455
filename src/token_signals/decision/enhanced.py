"""Enhanced nine-factor trading model.

Adds RSI, Bollinger volatility, VWAP deviation and volatility-adjusted
momentum to the baseline factors, normalizes every factor into [-1, 1],
weights them and bounds the aggregate with ``tanh``. The raw factors,
normalized factors and per-factor contributions are all returned so
downstream consumers can explain the decision.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional, Sequence

import pandas as pd

from token_signals.data.loaders import CandleInput, candles_to_frame, sort_trades
from token_signals.data.models import Snapshot, Trade
from token_signals.decision.baseline import calculate_volume_trend
from token_signals.decision.models import (
    CONSERVATIVE_THRESHOLDS,
    ENHANCED_FACTORS,
    EnhancedModelResult,
    EnhancedTradingFactors,
    IndicatorPeriods,
    ModelThresholds,
    ModelWeights,
    NormalizedFactors,
    ScalingFactors,
    decide,
)
from token_signals.strategies import normalization as norm
from token_signals.strategies.flow import (
    SHORT_WINDOW_MINUTES,
    FlowAnalysis,
    analyze_trading_flow,
)
from token_signals.strategies.indicators import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_rsi,
    calculate_vwap,
    empty_bands,
    empty_series,
    latest,
)
from token_signals.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TechnicalIndicators:
    ema_short: pd.Series = field(default_factory=lambda: empty_series("ema"))
    ema_long: pd.Series = field(default_factory=lambda: empty_series("ema"))
    rsi: pd.Series = field(default_factory=lambda: empty_series("rsi"))
    atr: pd.Series = field(default_factory=lambda: empty_series("atr"))
    vwap: pd.Series = field(default_factory=lambda: empty_series("vwap"))
    bollinger: pd.DataFrame = field(default_factory=empty_bands)

    @property
    def available(self) -> bool:
        return not self.ema_long.empty


def calculate_technical_indicators(
    candles: CandleInput, periods: Optional[IndicatorPeriods] = None
) -> TechnicalIndicators:
    """Compute every indicator, or none when history is shorter than all periods."""
    periods = periods or IndicatorPeriods()
    df = candles_to_frame(candles)
    if len(df) < periods.minimum_candles:
        logger.debug(
            "Skipping indicators: %d candles < %d required",
            len(df),
            periods.minimum_candles,
        )
        return TechnicalIndicators()
    return TechnicalIndicators(
        ema_short=calculate_ema(df, periods.short_ema),
        ema_long=calculate_ema(df, periods.long_ema),
        rsi=calculate_rsi(df, periods.rsi),
        atr=calculate_atr(df, periods.atr),
        vwap=calculate_vwap(df, periods.vwap),
        bollinger=calculate_bollinger_bands(
            df, periods.bollinger_bands, periods.bollinger_multiplier
        ),
    )


def _momentum(df: pd.DataFrame, indicators: TechnicalIndicators) -> float:
    if not df.empty and not indicators.ema_short.empty and not indicators.ema_long.empty:
        short_ema = latest(indicators.ema_short)
        long_ema = latest(indicators.ema_long)
        return (short_ema - long_ema) / long_ema if long_ema != 0 else 0.0
    if len(df) >= 2:
        # Two-candle price delta when EMAs are unavailable.
        current = float(df["close"].iloc[-1])
        previous = float(df["close"].iloc[-2])
        return (current - previous) / previous if previous != 0 else 0.0
    return 0.0


def calculate_raw_factors(
    snapshot: Snapshot,
    candles: CandleInput,
    indicators: TechnicalIndicators,
    flow: FlowAnalysis,
) -> EnhancedTradingFactors:
    df = candles_to_frame(candles)
    liquidity = snapshot.liquidity
    mcap = snapshot.market_cap
    logger.debug("Parsed metrics: %s", snapshot.parsed_metrics())

    momentum = _momentum(df, indicators)
    volatility = 0.0
    if not indicators.bollinger.empty:
        volatility = float(indicators.bollinger["width"].iloc[-1])

    vwap_deviation = 0.0
    if not indicators.vwap.empty and not df.empty:
        vwap = latest(indicators.vwap)
        close = float(df["close"].iloc[-1])
        vwap_deviation = (close - vwap) / vwap if vwap != 0 else 0.0

    return EnhancedTradingFactors(
        momentum=momentum,
        volume_trend=calculate_volume_trend(df),
        flow_imbalance=flow.flow_imbalance,
        liquidity_score=liquidity / mcap if mcap > 0 else 0.0,
        # Percentage units (0-100).
        whale_risk=sum(snapshot.whale_percentages()) * 100.0,
        rsi=latest(indicators.rsi),
        volatility=volatility,
        vwap_deviation=vwap_deviation,
        volatility_adjusted_momentum=norm.volatility_adjusted_momentum(momentum, volatility),
    )


def normalize_factors(
    raw: EnhancedTradingFactors, scaling: Optional[ScalingFactors] = None
) -> NormalizedFactors:
    scaling = scaling or ScalingFactors()
    return NormalizedFactors(
        momentum=norm.normalize_momentum(raw.momentum, scaling.momentum),
        volume_trend=norm.normalize_volume_trend(raw.volume_trend, scaling.volume),
        flow_imbalance=norm.clip(raw.flow_imbalance),
        liquidity_score=norm.to_signed(
            norm.normalize_liquidity_ratio(raw.liquidity_score, scaling.liquidity)
        ),
        whale_risk=norm.normalize_whale_risk(raw.whale_risk),
        rsi=norm.clip(norm.normalize_rsi(raw.rsi)),
        # Lower volatility is the favorable end.
        volatility=norm.to_signed(
            1.0 - norm.normalize_volatility(raw.volatility, scaling.volatility)
        ),
        vwap_deviation=norm.normalize_vwap_deviation(raw.vwap_deviation, scaling.vwap),
        volatility_adjusted_momentum=norm.normalize_momentum(
            raw.volatility_adjusted_momentum, scaling.momentum
        ),
    )


def calculate_factor_contributions(
    normalized: NormalizedFactors, weights: ModelWeights
) -> Dict[str, float]:
    return {
        factor: getattr(normalized, factor) * weights.weight_for(factor)
        for factor in ENHANCED_FACTORS
    }


def analyze_enhanced_trading_opportunity(
    snapshot: Snapshot,
    candles: CandleInput,
    trades: Sequence[Trade],
    weights: Optional[ModelWeights] = None,
    thresholds: Optional[ModelThresholds] = None,
    periods: Optional[IndicatorPeriods] = None,
    scaling: Optional[ScalingFactors] = None,
    flow_window_minutes: float = SHORT_WINDOW_MINUTES,
    now: Optional[datetime] = None,
    clock: Clock = utc_now,
) -> EnhancedModelResult:
    weights = weights or ModelWeights()
    thresholds = thresholds or CONSERVATIVE_THRESHOLDS
    df = candles_to_frame(candles)
    ordered_trades = sort_trades(trades)
    logger.debug(
        "Enhanced analysis: %d candles, %d trades", len(df), len(ordered_trades)
    )

    indicators = calculate_technical_indicators(df, periods)
    flow = analyze_trading_flow(ordered_trades, flow_window_minutes, now=now, clock=clock)
    raw = calculate_raw_factors(snapshot, df, indicators, flow)
    normalized = normalize_factors(raw, scaling)
    contributions = calculate_factor_contributions(normalized, weights)
    factor_sum = sum(contributions.values())
    score = math.tanh(factor_sum)
    decision = decide(score, thresholds.buy, thresholds.sell)

    logger.debug(
        "Enhanced score: raw=%s normalized=%s contributions=%s sum=%.4f score=%.4f",
        raw,
        normalized,
        contributions,
        factor_sum,
        score,
    )
    logger.debug(
        "Enhanced decision=%s thresholds=(%s, %s)",
        decision.value,
        thresholds.buy,
        thresholds.sell,
    )
    return EnhancedModelResult(
        decision=decision,
        score=score,
        raw_factors=raw,
        normalized_factors=normalized,
        factor_contributions=contributions,
    )
