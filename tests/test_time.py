"""Tests for utils/time.py"""

from datetime import datetime, timedelta, timezone

from token_signals.utils import ensure_utc, utc_now


def test_now_is_aware_utc():
    now = utc_now()
    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)


def test_ensure_utc():
    naive = datetime(2024, 5, 1, 12, 0)
    assert ensure_utc(naive) == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    plus_two = timezone(timedelta(hours=2))
    shifted = ensure_utc(datetime(2024, 5, 1, 14, 0, tzinfo=plus_two))
    assert shifted.hour == 12
    assert shifted.tzinfo == timezone.utc
