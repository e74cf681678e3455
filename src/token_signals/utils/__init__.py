"""Shared helpers."""

from token_signals.utils.time import Clock, ensure_utc, utc_now

__all__ = ["Clock", "ensure_utc", "utc_now"]
