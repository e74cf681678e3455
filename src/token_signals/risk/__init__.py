"""Manipulation heuristics exports."""

from token_signals.risk.patterns import (
    DEFAULT_PATTERN_RULES,
    LargeBuyRule,
    OneSidedMarketRule,
    PatternReport,
    PatternRule,
    SuddenSellPressureRule,
    WashTradingRule,
    adjust_confidence,
    detect_unusual_patterns,
    manipulation_warning_level,
)

__all__ = [
    "DEFAULT_PATTERN_RULES",
    "LargeBuyRule",
    "OneSidedMarketRule",
    "PatternReport",
    "PatternRule",
    "SuddenSellPressureRule",
    "WashTradingRule",
    "adjust_confidence",
    "detect_unusual_patterns",
    "manipulation_warning_level",
]
