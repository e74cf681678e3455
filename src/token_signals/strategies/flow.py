"""Buy/sell flow analysis over trailing trade windows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from token_signals.data.models import Trade
from token_signals.strategies.normalization import calculate_flow_imbalance
from token_signals.utils.time import Clock, ensure_utc, utc_now

logger = logging.getLogger(__name__)

SHORT_WINDOW_MINUTES = 5
MEDIUM_WINDOW_MINUTES = 30
LONG_WINDOW_MINUTES = 120


@dataclass(frozen=True)
class FlowAnalysis:
    window_minutes: float
    buy_volume: float = 0.0
    sell_volume: float = 0.0
    buy_count: int = 0
    sell_count: int = 0
    total_volume: float = 0.0
    net_flow: float = 0.0
    flow_imbalance: float = 0.0
    average_buy_size: float = 0.0
    average_sell_size: float = 0.0
    largest_buy: Optional[Trade] = None
    largest_sell: Optional[Trade] = None

    @classmethod
    def empty(cls, window_minutes: float) -> "FlowAnalysis":
        return cls(window_minutes=window_minutes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window_minutes": self.window_minutes,
            "buy_volume": self.buy_volume,
            "sell_volume": self.sell_volume,
            "buy_count": self.buy_count,
            "sell_count": self.sell_count,
            "total_volume": self.total_volume,
            "net_flow": self.net_flow,
            "flow_imbalance": self.flow_imbalance,
            "average_buy_size": self.average_buy_size,
            "average_sell_size": self.average_sell_size,
            "largest_buy": _trade_summary(self.largest_buy),
            "largest_sell": _trade_summary(self.largest_sell),
        }


@dataclass(frozen=True)
class MultiPeriodFlow:
    short_term: FlowAnalysis
    medium_term: FlowAnalysis
    long_term: FlowAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "short_term": self.short_term.to_dict(),
            "medium_term": self.medium_term.to_dict(),
            "long_term": self.long_term.to_dict(),
        }


def _trade_summary(trade: Optional[Trade]) -> Optional[Dict[str, Any]]:
    if trade is None:
        return None
    return {
        "timestamp": trade.time.isoformat(),
        "type": trade.type.value,
        "price": trade.price,
        "amount": trade.amount,
        "volume": trade.volume,
        "tx_hash": trade.tx_hash,
    }


def _resolve_now(now: Optional[datetime], clock: Clock) -> datetime:
    return ensure_utc(now if now is not None else clock())


def recent_trades(
    trades: Iterable[Trade], window_minutes: float, now: datetime
) -> List[Trade]:
    if window_minutes <= 0:
        raise ValueError(f"window_minutes must be positive, got {window_minutes}")
    cutoff = ensure_utc(now) - timedelta(minutes=window_minutes)
    return [trade for trade in trades if trade.time >= cutoff]


def analyze_trading_flow(
    trades: Iterable[Trade],
    window_minutes: float = SHORT_WINDOW_MINUTES,
    now: Optional[datetime] = None,
    clock: Clock = utc_now,
) -> FlowAnalysis:
    """Aggregate buy/sell notional over the trailing ``window_minutes``."""
    window = recent_trades(trades, window_minutes, _resolve_now(now, clock))
    if not window:
        logger.debug("No trades in the last %s minutes", window_minutes)
        return FlowAnalysis.empty(window_minutes)

    buy_volume = sell_volume = 0.0
    buy_count = sell_count = 0
    largest_buy: Optional[Trade] = None
    largest_sell: Optional[Trade] = None
    for trade in window:
        volume = trade.volume
        if trade.is_buy:
            buy_volume += volume
            buy_count += 1
            if largest_buy is None or volume > largest_buy.volume:
                largest_buy = trade
        else:
            sell_volume += volume
            sell_count += 1
            if largest_sell is None or volume > largest_sell.volume:
                largest_sell = trade

    return FlowAnalysis(
        window_minutes=window_minutes,
        buy_volume=buy_volume,
        sell_volume=sell_volume,
        buy_count=buy_count,
        sell_count=sell_count,
        total_volume=buy_volume + sell_volume,
        net_flow=buy_volume - sell_volume,
        flow_imbalance=calculate_flow_imbalance(buy_volume, sell_volume),
        average_buy_size=buy_volume / buy_count if buy_count else 0.0,
        average_sell_size=sell_volume / sell_count if sell_count else 0.0,
        largest_buy=largest_buy,
        largest_sell=largest_sell,
    )


def analyze_multi_period_flow(
    trades: Iterable[Trade],
    short_window: float = SHORT_WINDOW_MINUTES,
    medium_window: float = MEDIUM_WINDOW_MINUTES,
    long_window: float = LONG_WINDOW_MINUTES,
    now: Optional[datetime] = None,
    clock: Clock = utc_now,
) -> MultiPeriodFlow:
    """Run the flow analysis on short/medium/long windows sharing one "now"."""
    trades = list(trades)
    reference = _resolve_now(now, clock)
    return MultiPeriodFlow(
        short_term=analyze_trading_flow(trades, short_window, now=reference),
        medium_term=analyze_trading_flow(trades, medium_window, now=reference),
        long_term=analyze_trading_flow(trades, long_window, now=reference),
    )


def calculate_flow_ratio(
    trades: Iterable[Trade],
    window_minutes: float = SHORT_WINDOW_MINUTES,
    now: Optional[datetime] = None,
    clock: Clock = utc_now,
) -> float:
    """Buy amount over sell amount in the window.

    Neutral 1.0 without trades, 2.0 when there are buys but no sells.
    """
    window = recent_trades(trades, window_minutes, _resolve_now(now, clock))
    if not window:
        return 1.0
    buy_amount = sum(trade.amount for trade in window if trade.is_buy)
    sell_amount = sum(trade.amount for trade in window if not trade.is_buy)
    if sell_amount > 0:
        return buy_amount / sell_amount
    return 2.0 if buy_amount > 0 else 1.0
