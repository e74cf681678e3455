"""Bounded normalizers mapping raw heuristic factors into [-1, 1].

Unbounded factors are squashed with ``tanh`` rather than clipped so
outliers compress smoothly. Factors that naturally live in [0, 1] are
rescaled with ``x * 2 - 1`` so they can take part in a signed weighted
sum.
"""

from __future__ import annotations

import math

MOMENTUM_SCALE = 5.0
VOLUME_SCALE = 3.0
LIQUIDITY_SCALE = 5.0
VWAP_SCALE = 10.0
VOLATILITY_SCALE = 5.0
VOLATILITY_EPSILON = 0.1


def clip(value: float, lower: float = -1.0, upper: float = 1.0) -> float:
    return max(lower, min(upper, value))


def to_signed(unit_value: float) -> float:
    """Rescale a [0, 1] value into [-1, 1]."""
    return unit_value * 2.0 - 1.0


def normalize_min_max(
    value: float, minimum: float, maximum: float, clip_result: bool = True
) -> float:
    if maximum == minimum:
        return 0.0
    normalized = 2.0 * ((value - minimum) / (maximum - minimum)) - 1.0
    return clip(normalized) if clip_result else normalized


def normalize_z_score(
    value: float, mean: float, std_dev: float, clip_result: bool = True
) -> float:
    """Z-score divided by 3, so roughly +/-3 sigma spans [-1, 1]."""
    if std_dev == 0:
        return 0.0
    normalized = ((value - mean) / std_dev) / 3.0
    return clip(normalized) if clip_result else normalized


def normalize_momentum(momentum: float, scale: float = MOMENTUM_SCALE) -> float:
    return math.tanh(momentum * scale)


def normalize_volume_trend(volume_trend: float, scale: float = VOLUME_SCALE) -> float:
    return math.tanh(volume_trend * scale)


def calculate_flow_imbalance(buys: float, sells: float) -> float:
    """(buys - sells) / (buys + sells); -1 all sells, +1 all buys."""
    total = buys + sells
    if total == 0:
        return 0.0
    return (buys - sells) / total


def normalize_liquidity_ratio(ratio: float, scale: float = LIQUIDITY_SCALE) -> float:
    """Cap ``liquidity / mcap`` into [0, 1]."""
    return clip(ratio * scale, 0.0, 1.0)


def normalize_whale_risk(whale_pct: float) -> float:
    """Low concentration maps to +1, full concentration (>= 100%) to -1."""
    return to_signed(1.0 - clip(whale_pct / 100.0, 0.0, 1.0))


def normalize_rsi(rsi: float) -> float:
    """50 -> 0, 0 -> -1, 100 -> +1."""
    return (rsi - 50.0) / 50.0


def normalize_volatility(bb_width: float, scale: float = VOLATILITY_SCALE) -> float:
    """Cap Bollinger width into [0, 1]; higher means noisier."""
    return clip(bb_width * scale, 0.0, 1.0)


def normalize_vwap_deviation(deviation: float, scale: float = VWAP_SCALE) -> float:
    return math.tanh(deviation * scale)


def volatility_adjusted_momentum(
    momentum: float, volatility: float, epsilon: float = VOLATILITY_EPSILON
) -> float:
    """Dampen momentum as volatility grows."""
    return momentum / (volatility + epsilon)
