"""Parsers for human-formatted metric strings scraped from token pages.

Every parser is total: malformed, empty or missing input degrades to
``0.0`` instead of raising, because upstream scraped data is frequently
incomplete.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

SUFFIX_MULTIPLIERS = {
    "K": 1_000.0,
    "M": 1_000_000.0,
    "B": 1_000_000_000.0,
    "T": 1_000_000_000_000.0,
}

_MONEY_RE = re.compile(r"^([0-9.]+)([KMBT])?$", re.IGNORECASE)
_LEADING_NUMBER_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _parse_suffixed(text: str) -> float:
    match = _MONEY_RE.match(text)
    if not match:
        return 0.0
    numeric, suffix = match.groups()
    try:
        value = float(numeric)
    except ValueError:
        return 0.0
    if suffix:
        value *= SUFFIX_MULTIPLIERS[suffix.upper()]
    return _finite_or_zero(value)


def parse_money_string(value: Any) -> float:
    """Parse ``"$66.6M"`` / ``"$1.9K"`` / ``"1,234"`` into base units."""
    if not value or not isinstance(value, str):
        return 0.0
    cleaned = value.strip().replace("$", "").replace(",", "")
    parsed = _parse_suffixed(cleaned)
    if parsed == 0.0 and cleaned not in {"0", "0.0"}:
        logger.debug("Unparseable money string %r, using 0", value)
    return parsed


def parse_count_string(value: Any) -> float:
    """Parse holder/trader counts such as ``"1.2K"`` or ``"523"``."""
    if not value or not isinstance(value, str):
        return 0.0
    return _parse_suffixed(value.strip().replace(",", ""))


def parse_percent_string(value: Any) -> float:
    """Parse ``"13.6%"`` into the fraction ``0.136``.

    Only the leading number is read, so annotated values such as
    ``"13.6% (dev)"`` still parse.
    """
    if not value or not isinstance(value, str):
        return 0.0
    match = _LEADING_NUMBER_RE.match(value)
    if not match:
        return 0.0
    return _finite_or_zero(float(match.group(0))) / 100.0
