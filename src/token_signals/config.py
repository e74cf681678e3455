"""Environment-driven runtime settings for the signal engine."""

from dataclasses import dataclass
import os
from typing import Optional

from dotenv import load_dotenv

from token_signals.decision.models import (
    THRESHOLD_PROFILES,
    IndicatorPeriods,
    ModelThresholds,
)

ENV_PREFIX = "TOKEN_SIGNALS_"


def _env(name: str) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name)


def _get_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_optional_float(value: str | None) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _get_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    threshold_profile: str = "conservative"
    buy_threshold: Optional[float] = None
    sell_threshold: Optional[float] = None
    short_ema: int = 12
    long_ema: int = 26
    rsi_period: int = 14
    atr_period: int = 14
    vwap_period: int = 24
    bb_period: int = 20
    flow_window_minutes: float = 5.0

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        defaults = IndicatorPeriods()
        return cls(
            log_level=(_env("LOG_LEVEL") or "INFO").strip().upper(),
            threshold_profile=(_env("THRESHOLD_PROFILE") or "conservative").strip().lower(),
            buy_threshold=_get_optional_float(_env("BUY_THRESHOLD")),
            sell_threshold=_get_optional_float(_env("SELL_THRESHOLD")),
            short_ema=_get_int(_env("SHORT_EMA"), defaults.short_ema),
            long_ema=_get_int(_env("LONG_EMA"), defaults.long_ema),
            rsi_period=_get_int(_env("RSI_PERIOD"), defaults.rsi),
            atr_period=_get_int(_env("ATR_PERIOD"), defaults.atr),
            vwap_period=_get_int(_env("VWAP_PERIOD"), defaults.vwap),
            bb_period=_get_int(_env("BB_PERIOD"), defaults.bollinger_bands),
            flow_window_minutes=_get_float(_env("FLOW_WINDOW_MINUTES"), 5.0),
        )

    def thresholds(self) -> ModelThresholds:
        """Profile thresholds with explicit overrides applied, validated."""
        if self.threshold_profile not in THRESHOLD_PROFILES:
            raise ValueError(
                f"unknown threshold profile {self.threshold_profile!r}; "
                f"expected one of {sorted(THRESHOLD_PROFILES)}"
            )
        base = THRESHOLD_PROFILES[self.threshold_profile]
        return ModelThresholds(
            buy=base.buy if self.buy_threshold is None else self.buy_threshold,
            sell=base.sell if self.sell_threshold is None else self.sell_threshold,
        )

    def periods(self) -> IndicatorPeriods:
        return IndicatorPeriods(
            short_ema=self.short_ema,
            long_ema=self.long_ema,
            rsi=self.rsi_period,
            atr=self.atr_period,
            vwap=self.vwap_period,
            bollinger_bands=self.bb_period,
        )
