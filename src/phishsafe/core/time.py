"""Timestamp normalisation and elapsed-time arithmetic.

All recorded timestamps are stored as naive UTC datetimes.  Timezone-aware
inputs are converted to UTC first so that mixed-origin timestamps can be
subtracted without ``TypeError``.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

_ONE_MS = timedelta(milliseconds=1)
_ONE_SECOND = timedelta(seconds=1)


def to_naive_utc(ts: datetime) -> datetime:
    """Convert *ts* to a naive UTC datetime (no-op for naive input)."""
    if ts.tzinfo is not None:
        return ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def utc_now() -> datetime:
    """Current wall-clock time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: Any) -> datetime | None:
    """Leniently coerce *value* into a naive UTC datetime.

    Accepts :class:`datetime` instances and ISO-8601 strings (a trailing
    ``Z`` is understood).  Anything else -- ``None``, numbers, garbage
    strings -- yields ``None`` so callers can treat the event as having
    no usable time.

    Args:
        value: Raw timestamp candidate, e.g. from a re-loaded JSON document.

    Returns:
        The parsed naive-UTC datetime, or ``None``.
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_naive_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def elapsed_ms(earlier: datetime, later: datetime) -> int:
    """Whole milliseconds from *earlier* to *later*, truncated toward zero."""
    return int((later - earlier) / _ONE_MS)


def elapsed_seconds(earlier: datetime, later: datetime) -> int:
    """Whole seconds from *earlier* to *later*, truncated toward zero."""
    return int((later - earlier) / _ONE_SECOND)


class Clock(Protocol):
    def now(self) -> datetime: ...
    def monotonic_ms(self) -> float | None: ...


class SystemClock:
    """Wall clock plus a monotonic millisecond counter."""

    def now(self) -> datetime:
        return utc_now()

    def monotonic_ms(self) -> float | None:
        return time.monotonic() * 1000.0


class ManualClock:
    """Caller-driven clock for replaying recorded logs and for tests.

    Has no monotonic source, so recorders fall back to wall-clock
    differences.
    """

    def __init__(self, start: datetime) -> None:
        self._now = to_naive_utc(start)

    def now(self) -> datetime:
        return self._now

    def monotonic_ms(self) -> float | None:
        return None

    def set(self, ts: datetime) -> None:
        self._now = to_naive_utc(ts)

    def advance(self, *, seconds: float = 0.0, milliseconds: float = 0.0) -> datetime:
        self._now += timedelta(seconds=seconds, milliseconds=milliseconds)
        return self._now


def within_window(a: datetime | None, b: datetime | None, window: timedelta) -> bool:
    """True if both timestamps are present and ``|a - b| <= window``.

    The boundary is inclusive.  A missing timestamp on either side never
    matches.
    """
    if a is None or b is None:
        return False
    return abs(a - b) <= window
