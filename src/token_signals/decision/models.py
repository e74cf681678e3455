"""Model configuration schemas, decisions and result records."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ENHANCED_FACTORS = (
    "momentum",
    "volume_trend",
    "flow_imbalance",
    "liquidity_score",
    "whale_risk",
    "rsi",
    "volatility",
    "vwap_deviation",
    "volatility_adjusted_momentum",
)


def _check_finite(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value


class _ConfigModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class BaselineWeights(_ConfigModel):
    momentum: float = 0.4
    volume_trend: float = 0.2
    flow_ratio: float = 0.2
    liquidity_score: float = 0.1
    whale_risk: float = 0.1

    @field_validator("*")
    @classmethod
    def _finite(cls, value: float) -> float:
        return _check_finite(value)

    def weight_for(self, factor: str) -> float:
        return float(getattr(self, factor, 0.0))


class ModelWeights(_ConfigModel):
    """Enhanced model weights; the defaults sum to 1.0."""

    momentum: float = 0.15
    volume_trend: float = 0.10
    flow_imbalance: float = 0.15
    liquidity_score: float = 0.10
    whale_risk: float = 0.10
    rsi: float = 0.10
    volatility: float = 0.10
    vwap_deviation: float = 0.10
    volatility_adjusted_momentum: float = 0.10

    @field_validator("*")
    @classmethod
    def _finite(cls, value: float) -> float:
        return _check_finite(value)

    def weight_for(self, factor: str) -> float:
        return float(getattr(self, factor, 0.0))


class ModelThresholds(_ConfigModel):
    buy: float = 0.15
    sell: float = -0.15

    @field_validator("buy", "sell")
    @classmethod
    def _finite(cls, value: float) -> float:
        return _check_finite(value)

    @model_validator(mode="after")
    def _check_order(self) -> "ModelThresholds":
        if self.sell >= self.buy:
            raise ValueError(
                f"sell threshold {self.sell} must be below buy threshold {self.buy}"
            )
        return self


STANDARD_THRESHOLDS = ModelThresholds(buy=0.15, sell=-0.15)
CONSERVATIVE_THRESHOLDS = ModelThresholds(buy=0.3, sell=-0.3)
THRESHOLD_PROFILES = {
    "standard": STANDARD_THRESHOLDS,
    "conservative": CONSERVATIVE_THRESHOLDS,
}


class IndicatorPeriods(_ConfigModel):
    short_ema: int = Field(default=12, gt=0)
    long_ema: int = Field(default=26, gt=0)
    rsi: int = Field(default=14, gt=0)
    atr: int = Field(default=14, gt=0)
    # One day on hourly candles; 0 means whole-series VWAP.
    vwap: int = Field(default=24, ge=0)
    bollinger_bands: int = Field(default=20, gt=0)
    bollinger_multiplier: float = Field(default=2.0, gt=0)

    @field_validator("bollinger_multiplier")
    @classmethod
    def _finite(cls, value: float) -> float:
        return _check_finite(value)

    @model_validator(mode="after")
    def _check_ema_order(self) -> "IndicatorPeriods":
        if self.short_ema >= self.long_ema:
            raise ValueError(
                f"short_ema {self.short_ema} must be below long_ema {self.long_ema}"
            )
        return self

    @property
    def minimum_candles(self) -> int:
        return max(self.short_ema, self.long_ema, self.rsi, self.atr)


class ScalingFactors(_ConfigModel):
    momentum: float = Field(default=5.0, gt=0)
    volume: float = Field(default=3.0, gt=0)
    liquidity: float = Field(default=5.0, gt=0)
    vwap: float = Field(default=10.0, gt=0)
    volatility: float = Field(default=5.0, gt=0)

    @field_validator("*")
    @classmethod
    def _finite(cls, value: float) -> float:
        return _check_finite(value)


class FlowWindows(_ConfigModel):
    short: float = Field(default=5, gt=0)
    medium: float = Field(default=30, gt=0)
    long: float = Field(default=120, gt=0)

    @model_validator(mode="after")
    def _check_increasing(self) -> "FlowWindows":
        if not self.short < self.medium < self.long:
            raise ValueError("flow windows must be strictly increasing")
        return self


class Decision(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


def decide(score: float, buy: float, sell: float) -> Decision:
    """Three-way threshold comparison; ``buy == sell`` leaves no HOLD region."""
    if score >= buy:
        return Decision.BUY
    if score <= sell:
        return Decision.SELL
    return Decision.HOLD


@dataclass(frozen=True)
class TradingFactors:
    momentum: float = 0.0
    volume_trend: float = 0.0
    flow_ratio: float = 0.0
    liquidity_score: float = 0.0
    whale_risk: float = 0.0


@dataclass(frozen=True)
class EnhancedTradingFactors:
    momentum: float = 0.0
    volume_trend: float = 0.0
    flow_imbalance: float = 0.0
    liquidity_score: float = 0.0
    whale_risk: float = 0.0
    rsi: float = 0.0
    volatility: float = 0.0
    vwap_deviation: float = 0.0
    volatility_adjusted_momentum: float = 0.0


@dataclass(frozen=True)
class NormalizedFactors:
    """Every value lies in [-1, 1]."""

    momentum: float = 0.0
    volume_trend: float = 0.0
    flow_imbalance: float = 0.0
    liquidity_score: float = 0.0
    whale_risk: float = 0.0
    rsi: float = 0.0
    volatility: float = 0.0
    vwap_deviation: float = 0.0
    volatility_adjusted_momentum: float = 0.0

    def items(self):
        return ((item.name, getattr(self, item.name)) for item in fields(self))


@dataclass(frozen=True)
class ModelResult:
    decision: Decision
    score: float
    factors: TradingFactors
    kind: Literal["baseline"] = field(default="baseline", init=False)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["decision"] = self.decision.value
        return payload


@dataclass(frozen=True)
class EnhancedModelResult:
    decision: Decision
    score: float
    raw_factors: EnhancedTradingFactors
    normalized_factors: NormalizedFactors
    factor_contributions: Dict[str, float]
    kind: Literal["enhanced"] = field(default="enhanced", init=False)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["decision"] = self.decision.value
        return payload


AnalysisResult = Union[ModelResult, EnhancedModelResult]


def result_from_dict(payload: Mapping[str, Any]) -> AnalysisResult:
    """Rebuild a result from ``to_dict`` output using its ``kind`` tag."""
    kind = payload.get("kind")
    if kind == "baseline":
        return ModelResult(
            decision=Decision(payload["decision"]),
            score=float(payload["score"]),
            factors=TradingFactors(**payload["factors"]),
        )
    if kind == "enhanced":
        return EnhancedModelResult(
            decision=Decision(payload["decision"]),
            score=float(payload["score"]),
            raw_factors=EnhancedTradingFactors(**payload["raw_factors"]),
            normalized_factors=NormalizedFactors(**payload["normalized_factors"]),
            factor_contributions={
                str(key): float(value)
                for key, value in payload["factor_contributions"].items()
            },
        )
    raise ValueError(f"unknown result kind: {kind!r}")
