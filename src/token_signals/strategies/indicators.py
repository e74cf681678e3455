"""Technical indicator helpers for the trading models.

Every indicator accepts a candle sequence (or candle frame), sorts it by
timestamp, and returns values aligned to the tail of the input and
indexed by candle timestamp. Inputs shorter than the warm-up length
yield an empty result, which callers treat as "indicator unavailable".
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from token_signals.data.loaders import CandleInput, candles_to_frame

PRICE_FIELDS = ("open", "high", "low", "close")
BOLLINGER_COLUMNS = ["middle", "upper", "lower", "width"]


def _check_period(period: int, allow_zero: bool = False) -> int:
    if isinstance(period, bool) or not isinstance(period, (int, np.integer)):
        raise ValueError(f"period must be an integer, got {period!r}")
    if period < 0 or (period == 0 and not allow_zero):
        raise ValueError(f"period must be positive, got {period}")
    return int(period)


def empty_series(name: str) -> pd.Series:
    return pd.Series(
        [], dtype=float, name=name, index=pd.Index([], dtype="int64", name="timestamp")
    )


def empty_bands() -> pd.DataFrame:
    return pd.DataFrame(
        columns=BOLLINGER_COLUMNS,
        dtype=float,
        index=pd.Index([], dtype="int64", name="timestamp"),
    )


def _tail(df: pd.DataFrame, values, start: int, name: str) -> pd.Series:
    index = pd.Index(df["timestamp"].iloc[start:].to_numpy(), name="timestamp")
    return pd.Series(np.asarray(values, dtype=float), index=index, name=name)


def _seeded_smoothing(seed: float, rest: pd.Series, alpha: float) -> pd.Series:
    """Exponential smoothing whose first value is ``seed``."""
    seeded = pd.concat([pd.Series([seed]), rest], ignore_index=True)
    return seeded.ewm(alpha=alpha, adjust=False).mean()


def latest(series: pd.Series, default: float = 0.0) -> float:
    if series is None or len(series) == 0:
        return default
    return float(series.iloc[-1])


def calculate_sma(candles: CandleInput, period: int) -> float:
    """Mean close of the last ``period`` candles, 0 when history is short."""
    period = _check_period(period)
    df = candles_to_frame(candles)
    if len(df) < period:
        return 0.0
    return float(df["close"].iloc[-period:].mean())


def calculate_ema(
    candles: CandleInput, period: int, price_field: str = "close"
) -> pd.Series:
    period = _check_period(period)
    if price_field not in PRICE_FIELDS:
        raise ValueError(f"unsupported price field: {price_field}")
    df = candles_to_frame(candles)
    if len(df) < period:
        return empty_series("ema")
    prices = df[price_field]
    seed = float(prices.iloc[:period].mean())
    ema = _seeded_smoothing(seed, prices.iloc[period:], alpha=2.0 / (period + 1))
    return _tail(df, ema, period - 1, "ema")


def calculate_rsi(candles: CandleInput, period: int = 14) -> pd.Series:
    """Wilder RSI; the seed window itself emits no value."""
    period = _check_period(period)
    df = candles_to_frame(candles)
    if len(df) < period + 1:
        return empty_series("rsi")
    delta = df["close"].diff().iloc[1:].reset_index(drop=True)
    gains = delta.clip(lower=0.0)
    losses = (-delta).clip(lower=0.0)
    alpha = 1.0 / period
    avg_gain = _seeded_smoothing(float(gains.iloc[:period].mean()), gains.iloc[period:], alpha)
    avg_loss = _seeded_smoothing(float(losses.iloc[:period].mean()), losses.iloc[period:], alpha)
    avg_gain = avg_gain.iloc[1:]
    avg_loss = avg_loss.iloc[1:]
    rs = avg_gain / avg_loss.replace(0.0, np.nan)
    # No losses in the window saturates RS, i.e. RSI 100.
    rsi = (100.0 - 100.0 / (1.0 + rs)).fillna(100.0)
    return _tail(df, rsi, period + 1, "rsi")


def calculate_atr(candles: CandleInput, period: int = 14) -> pd.Series:
    period = _check_period(period)
    df = candles_to_frame(candles)
    if len(df) < period + 1:
        return empty_series("atr")
    high = df["high"]
    low = df["low"]
    prev_close = df["close"].shift(1)
    true_range = (
        pd.concat(
            [
                high - low,
                (high - prev_close).abs(),
                (low - prev_close).abs(),
            ],
            axis=1,
        )
        .max(axis=1)
        .iloc[1:]
        .reset_index(drop=True)
    )
    seed = float(true_range.iloc[:period].mean())
    atr = _seeded_smoothing(seed, true_range.iloc[period:], alpha=1.0 / period)
    return _tail(df, atr, period, "atr")


def calculate_vwap(candles: CandleInput, period: int = 0) -> pd.Series:
    """Rolling VWAP of the typical price; ``period == 0`` uses the whole series."""
    period = _check_period(period, allow_zero=True)
    df = candles_to_frame(candles)
    if df.empty:
        return empty_series("vwap")
    typical = (df["high"] + df["low"] + df["close"]) / 3.0
    price_volume = typical * df["volume"]
    if period == 0:
        pv_sum = price_volume.cumsum()
        volume_sum = df["volume"].cumsum()
    else:
        pv_sum = price_volume.rolling(window=period, min_periods=1).sum()
        volume_sum = df["volume"].rolling(window=period, min_periods=1).sum()
    vwap = (pv_sum / volume_sum.where(volume_sum > 0)).fillna(df["close"])
    return _tail(df, vwap, 0, "vwap")


def calculate_bollinger_bands(
    candles: CandleInput, period: int = 20, multiplier: float = 2.0
) -> pd.DataFrame:
    """SMA of close +/- ``multiplier`` population std-devs plus normalized width."""
    period = _check_period(period)
    df = candles_to_frame(candles)
    if len(df) < period:
        return empty_bands()
    close = df["close"]
    middle = close.rolling(window=period).mean()
    std = close.rolling(window=period).std(ddof=0)
    upper = middle + std * multiplier
    lower = middle - std * multiplier
    width = ((upper - lower) / middle.where(middle != 0)).fillna(0.0)
    bands = pd.DataFrame(
        {"middle": middle, "upper": upper, "lower": lower, "width": width}
    ).iloc[period - 1 :]
    bands.index = pd.Index(df["timestamp"].iloc[period - 1 :].to_numpy(), name="timestamp")
    return bands
