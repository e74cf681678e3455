"""Shared builders and fixtures for the signal engine tests."""

from datetime import datetime, timedelta, timezone

import pytest

from token_signals.data import Candle, Trade, snapshot_from_dict

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_candle(timestamp=0, close=1.0, open_=None, high=None, low=None, volume=100.0):
    """Create a valid candle around ``close``."""
    open_ = close if open_ is None else open_
    high = max(open_, close) if high is None else high
    low = min(open_, close) if low is None else low
    return Candle(
        timestamp=timestamp,
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=volume,
    )


def make_candles(closes, volumes=None, start=1_700_000_000, step=3600, spread=0.0):
    """Chain candles whose open is the previous close."""
    volumes = volumes if volumes is not None else [100.0] * len(closes)
    candles = []
    prev = closes[0] if closes else 0.0
    for i, (close, volume) in enumerate(zip(closes, volumes)):
        high = max(prev, close) * (1.0 + spread)
        low = min(prev, close) * (1.0 - spread)
        candles.append(
            make_candle(
                timestamp=start + i * step,
                close=close,
                open_=prev,
                high=high,
                low=low,
                volume=volume,
            )
        )
        prev = close
    return candles


def make_trade(side="buy", price=1.0, amount=100.0, minutes_ago=1.0, now=NOW, tx_hash=""):
    """Create a trade ``minutes_ago`` before ``now``."""
    at = now - timedelta(minutes=minutes_ago)
    return Trade(
        timestamp=at.isoformat(),
        type=side,
        price=price,
        amount=amount,
        tx_hash=tx_hash,
    )


def make_snapshot(
    mcap="$1M",
    liquidity="$100K",
    price="$0.001",
    top10="10%",
    developer="1%",
    insider="2%",
):
    return snapshot_from_dict(
        {
            "tokenInfo": {
                "top10Holders": top10,
                "developerHolding": developer,
                "insiderHoldings": insider,
            },
            "overall": {"mcap": mcap, "liquidity": liquidity, "price": price},
        }
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def rising_candles():
    """60 hourly closes rising steadily from 1.0 to 2.0."""
    closes = [1.0 + i / 59.0 for i in range(60)]
    return make_candles(closes, spread=0.01)


@pytest.fixture
def snapshot():
    return make_snapshot()
