"""Indicator, normalization and flow exports."""

from token_signals.strategies.flow import (
    FlowAnalysis,
    MultiPeriodFlow,
    analyze_multi_period_flow,
    analyze_trading_flow,
    calculate_flow_ratio,
)
from token_signals.strategies.indicators import (
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_rsi,
    calculate_sma,
    calculate_vwap,
    latest,
)
from token_signals.strategies.normalization import (
    calculate_flow_imbalance,
    normalize_min_max,
    normalize_z_score,
)

__all__ = [
    "FlowAnalysis",
    "MultiPeriodFlow",
    "analyze_multi_period_flow",
    "analyze_trading_flow",
    "calculate_atr",
    "calculate_bollinger_bands",
    "calculate_ema",
    "calculate_flow_imbalance",
    "calculate_flow_ratio",
    "calculate_rsi",
    "calculate_sma",
    "calculate_vwap",
    "latest",
    "normalize_min_max",
    "normalize_z_score",
]
