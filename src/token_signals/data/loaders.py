"""Input-boundary adapters: raw payloads -> value objects -> frames."""

from __future__ import annotations

from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar, Union

import numpy as np
import pandas as pd

from token_signals.data.models import (
    Candle,
    OverallMetrics,
    Snapshot,
    TimestampedMetrics,
    TokenInfo,
    Trade,
    UserTrading,
)

CANDLE_COLUMNS = ("timestamp", "open", "high", "low", "close", "volume")

MARKET_DATA_MAPPING = {
    "timestamp": ("timestamp", "ts", "time", "t"),
    "open": ("open", "o"),
    "high": ("high", "h"),
    "low": ("low", "l"),
    "close": ("close", "c", "last"),
    "volume": ("volume", "vol", "base_volume", "v"),
}

TRADE_MAPPING = {
    "timestamp": ("timestamp", "ts", "time", "block_timestamp"),
    "type": ("type", "side", "kind"),
    "price": ("price", "price_usd", "price_in_usd"),
    "amount": ("amount", "size", "qty", "quantity"),
    "tx_hash": ("tx_hash", "txHash", "hash", "signature"),
}

SNAPSHOT_GROUPS = {
    "user_trading": ("userTrading", "user_trading"),
    "token_info": ("tokenInfo", "token_info"),
    "overall": ("overall",),
    "timestamped": ("timestamped",),
}

CandleInput = Union[pd.DataFrame, Sequence[Candle]]
G = TypeVar("G")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _pick(record: Mapping[str, Any], candidates: Iterable[str]) -> Any:
    lower_map = {str(key).lower(): key for key in record}
    for candidate in candidates:
        key = lower_map.get(candidate.lower())
        if key is not None:
            return record[key]
    return None


def _group_from_dict(cls: Type[G], payload: Optional[Mapping[str, Any]]) -> G:
    if not payload:
        return cls()
    values = {}
    for item in fields(cls):
        raw = _pick(payload, (item.name, _camel(item.name)))
        # Missing, None and empty strings keep the zero-equivalent default.
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            continue
        values[item.name] = str(raw)
    return cls(**values)


def snapshot_from_dict(payload: Optional[Mapping[str, Any]]) -> Snapshot:
    """Build a Snapshot from camelCase or snake_case scraped payloads."""
    payload = payload or {}
    groups = {}
    for name, aliases in SNAPSHOT_GROUPS.items():
        groups[name] = _pick(payload, aliases)
    return Snapshot(
        user_trading=_group_from_dict(UserTrading, groups["user_trading"]),
        token_info=_group_from_dict(TokenInfo, groups["token_info"]),
        overall=_group_from_dict(OverallMetrics, groups["overall"]),
        timestamped=_group_from_dict(TimestampedMetrics, groups["timestamped"]),
    )


def _resolve(record: Mapping[str, Any], mapping: Mapping[str, Iterable[str]], kind: str) -> dict:
    resolved = {}
    for standard, candidates in mapping.items():
        value = _pick(record, candidates)
        if value is None and standard != "tx_hash":
            raise ValueError(f"{kind} record missing required field {standard}: {dict(record)}")
        resolved[standard] = value
    return resolved


def candles_from_records(records: Iterable[Mapping[str, Any]]) -> List[Candle]:
    candles: List[Candle] = []
    for record in records:
        row = _resolve(record, MARKET_DATA_MAPPING, "candle")
        candles.append(
            Candle(
                timestamp=int(row["timestamp"]),
                open=float(row["open"]),
                high=float(row["high"]),
                low=float(row["low"]),
                close=float(row["close"]),
                volume=float(row["volume"]),
            )
        )
    return candles


def _iso_timestamp(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(float(value), tz=timezone.utc).isoformat()
    return value


def trades_from_records(records: Iterable[Mapping[str, Any]]) -> List[Trade]:
    trades: List[Trade] = []
    for record in records:
        row = _resolve(record, TRADE_MAPPING, "trade")
        trades.append(
            Trade(
                timestamp=_iso_timestamp(row["timestamp"]),
                type=row["type"],
                price=float(row["price"]),
                amount=float(row["amount"]),
                tx_hash=str(row["tx_hash"] or ""),
            )
        )
    return trades


def sort_trades(trades: Iterable[Trade]) -> List[Trade]:
    return sorted(trades, key=lambda trade: trade.time)


def _check_candle_frame(df: pd.DataFrame) -> None:
    """Apply the Candle invariants row-wise to an already sorted frame."""
    values = df.loc[:, list(CANDLE_COLUMNS[1:])]
    high, low = df["high"], df["low"]
    problems = (
        ("non-finite values", ~np.isfinite(values.to_numpy()).all(axis=1)),
        ("high below low", (high < low).to_numpy()),
        ("open outside [low, high]", ((df["open"] < low) | (df["open"] > high)).to_numpy()),
        ("close outside [low, high]", ((df["close"] < low) | (df["close"] > high)).to_numpy()),
        ("negative volume", (df["volume"] < 0).to_numpy()),
    )
    bad = np.zeros(len(df), dtype=bool)
    for _, mask in problems:
        bad |= mask
    if not bad.any():
        return
    first = int(np.argmax(bad))
    reasons = [reason for reason, mask in problems if mask[first]]
    raise ValueError(
        f"candle {df['timestamp'].iloc[first]}: {', '.join(reasons)} "
        f"({int(bad.sum())} invalid rows)"
    )


def candles_to_frame(candles: CandleInput) -> pd.DataFrame:
    """Return an OHLCV frame sorted ascending by timestamp.

    This is the single place indicator code relies on for ordering, so
    callers may pass candles in any order. Frames get the same checks
    as ``Candle``.
    """
    if isinstance(candles, pd.DataFrame):
        missing = [col for col in CANDLE_COLUMNS if col not in candles.columns]
        if missing:
            raise ValueError(f"candle frame missing columns: {missing}")
        df = candles.loc[:, list(CANDLE_COLUMNS)].copy()
        validate = True
    else:
        df = pd.DataFrame(
            [
                (c.timestamp, c.open, c.high, c.low, c.close, c.volume)
                for c in candles
            ],
            columns=list(CANDLE_COLUMNS),
        )
        validate = False
    df = df.astype({col: float for col in CANDLE_COLUMNS[1:]})
    df = df.sort_values("timestamp", kind="mergesort").reset_index(drop=True)
    if validate:
        _check_candle_frame(df)
    return df
