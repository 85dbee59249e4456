"""Normalization of persisted streak values.

Streaks are owned by another part of the application and have been written
in several encodings over time:

- a mapping: ``{"last_date_updated": "2025-01-10", "streak_days": 5}``
- a pair: ``["2025-01-10", 5]``
- a mapping keyed by position: ``{"0": "2025-01-10", "1": 5}``
- a string holding any of the above as JSON, or a Postgres array
  literal such as ``{2025-01-10,5}``

``normalize_streak`` folds all of them into a ``StreakState`` and never
raises; anything it does not recognise becomes ``ZERO_STREAK``.
"""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

DATE_KEYS = ("last_date_updated", "lastUpdateDate", "date")
COUNT_KEYS = ("streak_days", "count", "days")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_ARRAY_LITERAL = re.compile(
    r"""^[\{\(\[]\s*["']?([^,"']*?)["']?\s*,\s*["']?([^,"'\}\)\]]*?)["']?\s*[\}\)\]]$"""
)


@dataclass(frozen=True)
class StreakState:
    """Canonical streak: the last calendar date it was extended and its length."""

    last_update_date: str
    count: int


ZERO_STREAK = StreakState(last_update_date="", count=0)


class StreakShape(Enum):
    """Known raw encodings of a persisted streak."""

    MISSING = "missing"
    MAPPING = "mapping"
    PAIR = "pair"
    INDEXED_MAPPING = "indexed_mapping"
    ENCODED = "encoded"
    UNKNOWN = "unknown"


class StreakStatus(Enum):
    """Where a streak stands relative to today."""

    CURRENT = "current"
    GRACE = "grace"
    BROKEN = "broken"


@dataclass(frozen=True)
class StreakReport:
    """A normalized streak classified against a given day."""

    state: StreakState
    status: StreakStatus
    days_behind: int

    @property
    def display_count(self) -> int:
        """Streak length to show; broken streaks still report their count."""
        return self.state.count

    @property
    def pending_reset(self) -> bool:
        return self.status is StreakStatus.BROKEN

    def describe(self) -> str:
        """Short human description for prompts."""
        if self.status is StreakStatus.CURRENT:
            return f"{self.display_count} days active"
        if self.status is StreakStatus.GRACE:
            return f"{self.display_count} days, not extended yet today"
        return (
            f"streak broken, {self.days_behind} days behind "
            f"(was {self.display_count})"
        )


def shape_of(raw: Any) -> StreakShape:
    """Tag a raw persisted value with its encoding."""
    if raw is None:
        return StreakShape.MISSING
    if isinstance(raw, str):
        return StreakShape.ENCODED
    if isinstance(raw, Mapping):
        if any(key in raw for key in DATE_KEYS):
            return StreakShape.MAPPING
        if "0" in raw or 0 in raw:
            return StreakShape.INDEXED_MAPPING
        return StreakShape.UNKNOWN
    if isinstance(raw, (list, tuple)) and raw:
        return StreakShape.PAIR
    return StreakShape.UNKNOWN


def _parse_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        return max(0, int(value))
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return max(0, int(match.group(1)))
    return 0


def _parse_date(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10]).isoformat()
        except ValueError:
            return ""
    return ""


def _first_present(raw: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def _from_mapping(raw: Mapping) -> StreakState:
    return StreakState(
        last_update_date=_parse_date(_first_present(raw, DATE_KEYS)),
        count=_parse_count(_first_present(raw, COUNT_KEYS)),
    )


def _from_pair(raw: list | tuple) -> StreakState:
    return StreakState(
        last_update_date=_parse_date(raw[0]),
        count=_parse_count(raw[1] if len(raw) > 1 else None),
    )


def _from_indexed(raw: Mapping) -> StreakState:
    first = raw.get("0", raw.get(0))
    second = raw.get("1", raw.get(1))
    return StreakState(last_update_date=_parse_date(first), count=_parse_count(second))


def _from_encoded(raw: str) -> StreakState:
    text = raw.strip()
    if not text:
        return ZERO_STREAK
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        match = _ARRAY_LITERAL.match(text)
        if match:
            return _from_pair(match.groups())
        logger.warning(f"Unparseable streak value: {raw!r}")
        return ZERO_STREAK

    # One level of decoding only; a string inside a string is not a streak.
    if isinstance(decoded, str):
        return ZERO_STREAK
    return _decode(decoded)


_DECODERS = {
    StreakShape.MAPPING: _from_mapping,
    StreakShape.PAIR: _from_pair,
    StreakShape.INDEXED_MAPPING: _from_indexed,
    StreakShape.ENCODED: _from_encoded,
}


def _decode(raw: Any) -> StreakState:
    decoder = _DECODERS.get(shape_of(raw))
    if decoder is None:
        return ZERO_STREAK
    return decoder(raw)


def normalize_streak(raw: Any) -> StreakState:
    """Normalize a raw persisted streak value.

    Args:
        raw: A mapping, a ``[date, count]`` pair, a string encoding of
            either, or anything else.

    Returns:
        The canonical ``StreakState``; ``ZERO_STREAK`` when the value
        cannot be interpreted.
    """
    try:
        return _decode(raw)
    except Exception as e:
        logger.warning(f"Failed to normalize streak {raw!r}: {e}")
        return ZERO_STREAK


def classify_streak(state: StreakState, today: date) -> StreakReport:
    """Classify a streak as current, in grace, or broken.

    Args:
        state: The normalized streak.
        today: "Today" in the application's fixed calendar offset.

    Returns:
        A ``StreakReport``; a streak with no date is broken, one day behind.
    """
    if not state.last_update_date:
        return StreakReport(state=state, status=StreakStatus.BROKEN, days_behind=1)

    last = date.fromisoformat(state.last_update_date)
    behind = (today - last).days

    if behind <= 0:
        return StreakReport(state=state, status=StreakStatus.CURRENT, days_behind=0)
    if behind == 1:
        return StreakReport(state=state, status=StreakStatus.GRACE, days_behind=1)
    return StreakReport(state=state, status=StreakStatus.BROKEN, days_behind=behind)
