"""Input data layer exports."""

from token_signals.data.loaders import (
    candles_from_records,
    candles_to_frame,
    snapshot_from_dict,
    sort_trades,
    trades_from_records,
)
from token_signals.data.models import (
    Candle,
    OverallMetrics,
    Snapshot,
    TimestampedMetrics,
    TokenInfo,
    Trade,
    TradeSide,
    UserTrading,
)
from token_signals.data.parsers import (
    parse_count_string,
    parse_money_string,
    parse_percent_string,
)

__all__ = [
    "Candle",
    "OverallMetrics",
    "Snapshot",
    "TimestampedMetrics",
    "TokenInfo",
    "Trade",
    "TradeSide",
    "UserTrading",
    "candles_from_records",
    "candles_to_frame",
    "parse_count_string",
    "parse_money_string",
    "parse_percent_string",
    "snapshot_from_dict",
    "sort_trades",
    "trades_from_records",
]
