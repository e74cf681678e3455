"""Smoke test for the trading engine over a JSON payload or synthetic data."""

from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
import json
import logging
from pathlib import Path
import sys

import numpy as np

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from token_signals.config import Settings
from token_signals.data import (
    Candle,
    Trade,
    candles_from_records,
    snapshot_from_dict,
    trades_from_records,
)
from token_signals.decision import TradingEngine

logger = logging.getLogger("smoke_engine")

SYNTHETIC_SNAPSHOT = {
    "tokenInfo": {
        "top10Holders": "18.4%",
        "developerHolding": "2.1%",
        "insiderHoldings": "3.5%",
    },
    "overall": {"mcap": "$8.5M", "price": "$0.0085", "liquidity": "$640K"},
    "timestamped": {"volume": "$1.2M", "buyers": "812", "sellers": "640"},
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Trading engine smoke test")
    parser.add_argument(
        "--input",
        default="",
        help="JSON file with snapshot, candles and trades; empty uses synthetic data.",
    )
    parser.add_argument(
        "--candles",
        type=int,
        default=60,
        help="Number of synthetic hourly candles.",
    )
    parser.add_argument(
        "--trades",
        type=int,
        default=40,
        help="Number of synthetic trades over the last two hours.",
    )
    parser.add_argument("--seed", type=int, default=7, help="Synthetic data seed.")
    parser.add_argument(
        "--baseline",
        action="store_true",
        help="Also print the baseline model result.",
    )
    return parser.parse_args()


def synthetic_market(n_candles: int, n_trades: int, seed: int, now: datetime):
    rng = np.random.default_rng(seed)
    start = int(now.timestamp()) - n_candles * 3600
    close = 0.008 * np.cumprod(1.0 + rng.normal(0.002, 0.02, size=n_candles))
    candles = []
    prev = close[0]
    for i, price in enumerate(close):
        high = max(prev, price) * (1.0 + abs(rng.normal(0, 0.005)))
        low = min(prev, price) * (1.0 - abs(rng.normal(0, 0.005)))
        candles.append(
            Candle(
                timestamp=start + i * 3600,
                open=float(prev),
                high=float(high),
                low=float(low),
                close=float(price),
                volume=float(rng.uniform(5e4, 2e5)),
            )
        )
        prev = price
    trades = []
    for i in range(n_trades):
        at = now - timedelta(minutes=float(rng.uniform(0, 120)))
        trades.append(
            Trade(
                timestamp=at.isoformat(),
                type="buy" if rng.random() < 0.55 else "sell",
                price=float(close[-1]),
                amount=float(rng.uniform(1e4, 5e5)),
                tx_hash=f"synthetic-{i}",
            )
        )
    return candles, trades


def main() -> None:
    args = parse_args()
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    now = datetime.now(timezone.utc)

    if args.input:
        payload = json.loads(Path(args.input).read_text(encoding="utf-8"))
        snapshot = snapshot_from_dict(payload.get("snapshot"))
        candles = candles_from_records(payload.get("candles") or [])
        trades = trades_from_records(payload.get("trades") or [])
    else:
        snapshot = snapshot_from_dict(SYNTHETIC_SNAPSHOT)
        candles, trades = synthetic_market(args.candles, args.trades, args.seed, now)
    logger.info("Loaded %d candles and %d trades", len(candles), len(trades))

    engine = TradingEngine.from_settings(settings, clock=lambda: now)
    analysis = engine.analyze(snapshot, candles, trades)
    print(json.dumps(analysis.to_dict(), indent=2))
    if args.baseline:
        result = engine.analyze_baseline(snapshot, candles, trades)
        print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
