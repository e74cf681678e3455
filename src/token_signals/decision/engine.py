"""Trading engine facade: validated configuration -> analyses."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel

from token_signals.data.loaders import CandleInput, sort_trades
from token_signals.data.models import Snapshot, Trade
from token_signals.decision.baseline import analyze_trading_opportunity
from token_signals.decision.enhanced import analyze_enhanced_trading_opportunity
from token_signals.decision.models import (
    CONSERVATIVE_THRESHOLDS,
    STANDARD_THRESHOLDS,
    BaselineWeights,
    EnhancedModelResult,
    FlowWindows,
    IndicatorPeriods,
    ModelResult,
    ModelThresholds,
    ModelWeights,
    ScalingFactors,
)
from token_signals.risk.patterns import (
    DEFAULT_PATTERN_RULES,
    PatternReport,
    PatternRule,
    adjust_confidence,
    detect_unusual_patterns,
    manipulation_warning_level,
)
from token_signals.strategies.flow import MultiPeriodFlow, analyze_multi_period_flow
from token_signals.utils.time import Clock, ensure_utc, utc_now

if TYPE_CHECKING:  # pragma: no cover
    from token_signals.config import Settings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
ConfigInput = Union[BaseModel, Mapping[str, Any], None]


def _coerce(model: Type[M], value: ConfigInput, default: M) -> M:
    if value is None:
        return default
    if isinstance(value, model):
        return value
    if isinstance(value, Mapping):
        return model.model_validate(dict(value))
    raise TypeError(f"expected {model.__name__} or mapping, got {type(value).__name__}")


@dataclass(frozen=True)
class EnhancedAnalysis:
    model_result: EnhancedModelResult
    flow: MultiPeriodFlow
    patterns: PatternReport
    warning_level: str
    adjusted_confidence: float
    snapshot_metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def manipulation_warnings(self) -> List[str]:
        return list(self.patterns.warnings)

    @property
    def manipulation_score(self) -> float:
        return self.patterns.manipulation_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_result": self.model_result.to_dict(),
            "flow": self.flow.to_dict(),
            "patterns": self.patterns.to_dict(),
            "warning_level": self.warning_level,
            "adjusted_confidence": self.adjusted_confidence,
            "snapshot_metrics": dict(self.snapshot_metrics),
        }


class TradingEngine:
    """Holds validated model configuration; every analysis is independent.

    Configuration is checked once here, so invalid weights, thresholds
    or periods fail before any market data is touched.
    """

    def __init__(
        self,
        weights: ConfigInput = None,
        thresholds: ConfigInput = None,
        baseline_weights: ConfigInput = None,
        baseline_thresholds: ConfigInput = None,
        periods: ConfigInput = None,
        scaling: ConfigInput = None,
        windows: ConfigInput = None,
        flow_window_minutes: Optional[float] = None,
        pattern_rules: Sequence[PatternRule] = DEFAULT_PATTERN_RULES,
        clock: Clock = utc_now,
    ) -> None:
        self.weights = _coerce(ModelWeights, weights, ModelWeights())
        self.thresholds = _coerce(ModelThresholds, thresholds, CONSERVATIVE_THRESHOLDS)
        self.baseline_weights = _coerce(BaselineWeights, baseline_weights, BaselineWeights())
        self.baseline_thresholds = _coerce(
            ModelThresholds, baseline_thresholds, STANDARD_THRESHOLDS
        )
        self.periods = _coerce(IndicatorPeriods, periods, IndicatorPeriods())
        self.scaling = _coerce(ScalingFactors, scaling, ScalingFactors())
        self.windows = _coerce(FlowWindows, windows, FlowWindows())
        self.flow_window_minutes = (
            self.windows.short if flow_window_minutes is None else flow_window_minutes
        )
        if self.flow_window_minutes <= 0:
            raise ValueError(
                f"flow_window_minutes must be positive, got {self.flow_window_minutes}"
            )
        self.pattern_rules = tuple(pattern_rules)
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: "Settings", clock: Clock = utc_now) -> "TradingEngine":
        return cls(
            thresholds=settings.thresholds(),
            periods=settings.periods(),
            flow_window_minutes=settings.flow_window_minutes,
            clock=clock,
        )

    def _now(self, now: Optional[datetime]) -> datetime:
        return ensure_utc(now if now is not None else self.clock())

    def analyze_baseline(
        self,
        snapshot: Snapshot,
        candles: CandleInput,
        trades: Sequence[Trade],
        now: Optional[datetime] = None,
    ) -> ModelResult:
        return analyze_trading_opportunity(
            snapshot,
            candles,
            trades,
            weights=self.baseline_weights,
            thresholds=self.baseline_thresholds,
            flow_window_minutes=self.flow_window_minutes,
            now=self._now(now),
        )

    def analyze_enhanced(
        self,
        snapshot: Snapshot,
        candles: CandleInput,
        trades: Sequence[Trade],
        now: Optional[datetime] = None,
    ) -> EnhancedModelResult:
        return analyze_enhanced_trading_opportunity(
            snapshot,
            candles,
            trades,
            weights=self.weights,
            thresholds=self.thresholds,
            periods=self.periods,
            scaling=self.scaling,
            flow_window_minutes=self.flow_window_minutes,
            now=self._now(now),
        )

    def analyze(
        self,
        snapshot: Snapshot,
        candles: CandleInput,
        trades: Sequence[Trade],
        now: Optional[datetime] = None,
    ) -> EnhancedAnalysis:
        """Enhanced model plus multi-period manipulation screening."""
        reference = self._now(now)
        ordered_trades = sort_trades(trades)
        flow = analyze_multi_period_flow(
            ordered_trades,
            short_window=self.windows.short,
            medium_window=self.windows.medium,
            long_window=self.windows.long,
            now=reference,
        )
        patterns = detect_unusual_patterns(flow, self.pattern_rules)
        result = self.analyze_enhanced(snapshot, candles, ordered_trades, now=reference)
        level = manipulation_warning_level(patterns.manipulation_score)
        if patterns.warnings:
            logger.info(
                "Manipulation warnings (%s, score %.2f): %s",
                level,
                patterns.manipulation_score,
                "; ".join(patterns.warnings),
            )
        return EnhancedAnalysis(
            model_result=result,
            flow=flow,
            patterns=patterns,
            warning_level=level,
            adjusted_confidence=adjust_confidence(result.score, patterns.manipulation_score),
            snapshot_metrics=snapshot.parsed_metrics(),
        )
