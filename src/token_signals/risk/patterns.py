"""Rule-based manipulation heuristics over multi-period trade flow."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from token_signals.strategies.flow import MultiPeriodFlow

logger = logging.getLogger(__name__)

LOW_RISK_CEILING = 0.3
MEDIUM_RISK_CEILING = 0.6
CONFIDENCE_PENALTY = 0.5


class PatternRule(ABC):
    name: str
    weight: float

    @abstractmethod
    def check(self, flow: MultiPeriodFlow) -> Optional[str]:
        """Return a warning message when the pattern is present."""
        raise NotImplementedError


@dataclass(frozen=True)
class SuddenSellPressureRule(PatternRule):
    short_max_imbalance: float = -0.7
    medium_min_imbalance: float = 0.5
    weight: float = 0.3
    name: str = "sudden_sell_pressure"

    def check(self, flow: MultiPeriodFlow) -> Optional[str]:
        if (
            flow.short_term.flow_imbalance < self.short_max_imbalance
            and flow.medium_term.flow_imbalance > self.medium_min_imbalance
        ):
            return "Sudden sell pressure after sustained buying"
        return None


@dataclass(frozen=True)
class LargeBuyRule(PatternRule):
    size_multiple: float = 5.0
    weight: float = 0.2
    name: str = "large_buys"

    def check(self, flow: MultiPeriodFlow) -> Optional[str]:
        short_avg = flow.short_term.average_buy_size
        medium_avg = flow.medium_term.average_buy_size
        if short_avg > 0 and short_avg > self.size_multiple * medium_avg:
            return "Unusually large buy transactions in recent activity"
        return None


@dataclass(frozen=True)
class WashTradingRule(PatternRule):
    max_abs_imbalance: float = 0.1
    # Medium window volume share that the short window must exceed.
    volume_share: float = 0.5
    weight: float = 0.4
    name: str = "wash_trading"

    def check(self, flow: MultiPeriodFlow) -> Optional[str]:
        if (
            abs(flow.short_term.flow_imbalance) < self.max_abs_imbalance
            and flow.short_term.total_volume
            > flow.medium_term.total_volume * self.volume_share
        ):
            return "Possible wash trading (balanced buys/sells with high volume)"
        return None


@dataclass(frozen=True)
class OneSidedMarketRule(PatternRule):
    min_abs_imbalance: float = 0.9
    weight: float = 0.2
    name: str = "one_sided_market"

    def check(self, flow: MultiPeriodFlow) -> Optional[str]:
        imbalance = flow.long_term.flow_imbalance
        if abs(imbalance) > self.min_abs_imbalance:
            side = "buy" if imbalance > 0 else "sell"
            return f"Extremely {side}-sided market"
        return None


DEFAULT_PATTERN_RULES: tuple[PatternRule, ...] = (
    SuddenSellPressureRule(),
    LargeBuyRule(),
    WashTradingRule(),
    OneSidedMarketRule(),
)


@dataclass(frozen=True)
class PatternReport:
    warnings: List[str] = field(default_factory=list)
    manipulation_score: float = 0.0
    triggered_rules: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "warnings": list(self.warnings),
            "manipulation_score": self.manipulation_score,
            "triggered_rules": list(self.triggered_rules),
        }


def detect_unusual_patterns(
    flow: MultiPeriodFlow, rules: Sequence[PatternRule] = DEFAULT_PATTERN_RULES
) -> PatternReport:
    """Evaluate every rule independently; the score is capped at 1."""
    warnings: List[str] = []
    triggered: List[str] = []
    score = 0.0
    for rule in rules:
        message = rule.check(flow)
        if message is None:
            continue
        warnings.append(message)
        triggered.append(rule.name)
        score += rule.weight
    if warnings:
        logger.debug("Flow patterns triggered: %s", triggered)
    return PatternReport(
        warnings=warnings,
        manipulation_score=min(1.0, score),
        triggered_rules=triggered,
    )


def manipulation_warning_level(manipulation_score: float) -> str:
    if manipulation_score < LOW_RISK_CEILING:
        return "low"
    if manipulation_score < MEDIUM_RISK_CEILING:
        return "medium"
    return "high"


def adjust_confidence(score: float, manipulation_score: float) -> float:
    """Shrink the model score by up to half as manipulation risk rises."""
    return score * (1.0 - manipulation_score * CONFIDENCE_PENALTY)
