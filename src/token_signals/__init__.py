"""Heuristic BUY/SELL/HOLD signal engine for speculative tokens."""

from token_signals.config import Settings
from token_signals.data import Candle, Snapshot, Trade, snapshot_from_dict
from token_signals.decision import (
    Decision,
    EnhancedAnalysis,
    EnhancedModelResult,
    ModelResult,
    TradingEngine,
    analyze_enhanced_trading_opportunity,
    analyze_trading_opportunity,
)

__version__ = "0.1.0"

__all__ = [
    "Candle",
    "Decision",
    "EnhancedAnalysis",
    "EnhancedModelResult",
    "ModelResult",
    "Settings",
    "Snapshot",
    "Trade",
    "TradingEngine",
    "analyze_enhanced_trading_opportunity",
    "analyze_trading_opportunity",
    "snapshot_from_dict",
]
