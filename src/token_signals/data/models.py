"""Input value objects consumed by the trading models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Tuple, Union

import pandas as pd

from token_signals.data.parsers import (
    parse_count_string,
    parse_money_string,
    parse_percent_string,
)
from token_signals.utils.time import ensure_utc

TimestampLike = Union[str, datetime, int, float]


@dataclass(frozen=True)
class UserTrading:
    bought: Optional[str] = "0"
    sold: Optional[str] = "0"
    holding: Optional[str] = "0"
    pnl: Optional[str] = "0%"
    balance: Optional[str] = "0"


@dataclass(frozen=True)
class TokenInfo:
    top10_holders: Optional[str] = "0%"
    developer_holding: Optional[str] = "0%"
    sniper_holding: Optional[str] = "0%"
    insider_holdings: Optional[str] = "0%"
    bundlers: Optional[str] = "0"
    lp_burned: Optional[str] = "0%"
    holders: Optional[str] = "0"
    pro_traders: Optional[str] = "0"
    dex_paid: Optional[str] = "0"


@dataclass(frozen=True)
class OverallMetrics:
    mcap: Optional[str] = "0"
    price: Optional[str] = "0"
    liquidity: Optional[str] = "0"
    total_supply: Optional[str] = "0"


@dataclass(frozen=True)
class TimestampedMetrics:
    volume: Optional[str] = "0"
    buyers: Optional[str] = "0"
    sellers: Optional[str] = "0"
    net_volume: Optional[str] = "0"
    timeframe: Optional[str] = "1h"


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time read of token fundamentals; all leaves are raw strings."""

    user_trading: UserTrading = field(default_factory=UserTrading)
    token_info: TokenInfo = field(default_factory=TokenInfo)
    overall: OverallMetrics = field(default_factory=OverallMetrics)
    timestamped: TimestampedMetrics = field(default_factory=TimestampedMetrics)

    @property
    def liquidity(self) -> float:
        return parse_money_string(self.overall.liquidity)

    @property
    def market_cap(self) -> float:
        return parse_money_string(self.overall.mcap)

    @property
    def price(self) -> float:
        return parse_money_string(self.overall.price)

    @property
    def holder_count(self) -> float:
        return parse_count_string(self.token_info.holders)

    @property
    def bundler_count(self) -> float:
        return parse_count_string(self.token_info.bundlers)

    @property
    def pro_trader_count(self) -> float:
        return parse_count_string(self.token_info.pro_traders)

    def parsed_metrics(self) -> Dict[str, float]:
        """Numeric view of the scraped fields, for logging and reporting."""
        return {
            "liquidity": self.liquidity,
            "market_cap": self.market_cap,
            "price": self.price,
            "holders": self.holder_count,
            "bundlers": self.bundler_count,
            "pro_traders": self.pro_trader_count,
        }

    def whale_percentages(self) -> Tuple[float, float, float]:
        """Top-10, developer and insider holdings as fractions."""
        return (
            parse_percent_string(self.token_info.top10_holders),
            parse_percent_string(self.token_info.developer_holding),
            parse_percent_string(self.token_info.insider_holdings),
        )


@dataclass(frozen=True)
class Candle:
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def __post_init__(self) -> None:
        prices = (self.open, self.high, self.low, self.close, self.volume)
        if not all(math.isfinite(value) for value in prices):
            raise ValueError(f"candle {self.timestamp} has non-finite values: {prices}")
        if self.high < self.low:
            raise ValueError(
                f"candle {self.timestamp}: high {self.high} below low {self.low}"
            )
        for name in ("open", "close"):
            value = getattr(self, name)
            if not self.low <= value <= self.high:
                raise ValueError(
                    f"candle {self.timestamp}: {name} {value} outside "
                    f"[{self.low}, {self.high}]"
                )
        if self.volume < 0:
            raise ValueError(f"candle {self.timestamp}: negative volume {self.volume}")


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


def parse_timestamp(value: TimestampLike) -> datetime:
    """Parse ISO-8601 strings, datetimes or epoch seconds into aware UTC."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"invalid trade timestamp: {value!r}")
    text = value.strip()
    # Relative literals such as "now" or "today" carry no digits and
    # would tie results to the wall clock.
    if not any(char.isdigit() for char in text):
        raise ValueError(f"invalid trade timestamp: {value!r}")
    try:
        parsed = pd.Timestamp(text)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"invalid trade timestamp: {value!r}") from exc
    if pd.isna(parsed):
        raise ValueError(f"invalid trade timestamp: {value!r}")
    return ensure_utc(parsed.to_pydatetime())


@dataclass(frozen=True)
class Trade:
    timestamp: TimestampLike
    type: TradeSide
    price: float
    amount: float
    tx_hash: str = ""
    _time: datetime = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        raw_side = self.type.value if isinstance(self.type, TradeSide) else str(self.type)
        try:
            side = TradeSide(raw_side.strip().lower())
        except ValueError as exc:
            raise ValueError(f"unknown trade side: {self.type!r}") from exc
        if not (math.isfinite(self.price) and math.isfinite(self.amount)):
            raise ValueError(f"trade {self.tx_hash!r} has non-finite price/amount")
        if self.price < 0 or self.amount < 0:
            raise ValueError(
                f"trade {self.tx_hash!r}: negative price {self.price} or amount {self.amount}"
            )
        object.__setattr__(self, "type", side)
        object.__setattr__(self, "_time", parse_timestamp(self.timestamp))

    @property
    def time(self) -> datetime:
        return self._time

    @property
    def volume(self) -> float:
        """Notional size of the trade (``amount * price``)."""
        return self.amount * self.price

    @property
    def is_buy(self) -> bool:
        return self.type is TradeSide.BUY
