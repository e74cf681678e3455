"""Decision layer exports."""

from token_signals.decision.baseline import (
    analyze_trading_opportunity,
    calculate_momentum,
    calculate_volume_trend,
)
from token_signals.decision.engine import EnhancedAnalysis, TradingEngine
from token_signals.decision.enhanced import (
    TechnicalIndicators,
    analyze_enhanced_trading_opportunity,
    calculate_technical_indicators,
    normalize_factors,
)
from token_signals.decision.models import (
    CONSERVATIVE_THRESHOLDS,
    STANDARD_THRESHOLDS,
    AnalysisResult,
    BaselineWeights,
    Decision,
    EnhancedModelResult,
    EnhancedTradingFactors,
    FlowWindows,
    IndicatorPeriods,
    ModelResult,
    ModelThresholds,
    ModelWeights,
    NormalizedFactors,
    ScalingFactors,
    TradingFactors,
    decide,
    result_from_dict,
)

__all__ = [
    "AnalysisResult",
    "BaselineWeights",
    "CONSERVATIVE_THRESHOLDS",
    "Decision",
    "EnhancedAnalysis",
    "EnhancedModelResult",
    "EnhancedTradingFactors",
    "FlowWindows",
    "IndicatorPeriods",
    "ModelResult",
    "ModelThresholds",
    "ModelWeights",
    "NormalizedFactors",
    "STANDARD_THRESHOLDS",
    "ScalingFactors",
    "TechnicalIndicators",
    "TradingEngine",
    "TradingFactors",
    "analyze_enhanced_trading_opportunity",
    "analyze_trading_opportunity",
    "calculate_momentum",
    "calculate_technical_indicators",
    "calculate_volume_trend",
    "decide",
    "normalize_factors",
    "result_from_dict",
]
