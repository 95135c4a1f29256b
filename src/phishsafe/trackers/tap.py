"""Append-only tap recorder with incremental inter-tap durations."""

from __future__ import annotations

import logging
from datetime import datetime

from phishsafe.core.time import elapsed_ms
from phishsafe.core.types import Position, TapEvent, Zone

logger = logging.getLogger(__name__)


def _gap_ms(prev: TapEvent, cur: TapEvent) -> int | None:
    if prev.monotonic_ms is not None and cur.monotonic_ms is not None:
        return int(cur.monotonic_ms - prev.monotonic_ms)
    if prev.timestamp is not None and cur.timestamp is not None:
        return elapsed_ms(prev.timestamp, cur.timestamp)
    return None


class TapRecorder:
    """Accumulates :class:`TapEvent` records for one session.

    Every tap after the first also appends the gap to the previous tap
    (in ms) to :attr:`tap_durations`.  The monotonic reading is preferred
    when both taps carry one; otherwise wall-clock timestamps are used.
    A gap that cannot be computed (missing time on either side) is
    skipped rather than guessed.
    """

    def __init__(self) -> None:
        self._events: list[TapEvent] = []
        self._durations: list[int] = []
        self._last: TapEvent | None = None

    def record_tap(
        self,
        screen: str,
        position: Position,
        zone: Zone | str,
        timestamp: datetime | None,
        monotonic_ms: float | None = None,
    ) -> TapEvent:
        event = TapEvent(
            timestamp=timestamp,
            monotonic_ms=monotonic_ms,
            screen=screen,
            position=position,
            zone=zone,
        )
        if self._last is not None:
            gap = _gap_ms(self._last, event)
            if gap is not None:
                self._durations.append(gap)
        self._events.append(event)
        self._last = event
        logger.debug(
            "Tap on %s at (%.1f, %.1f) zone=%s",
            screen, position.dx, position.dy, event.zone.value,
        )
        return event

    @property
    def tap_events(self) -> tuple[TapEvent, ...]:
        return tuple(self._events)

    @property
    def tap_durations(self) -> tuple[int, ...]:
        return tuple(self._durations)

    def reset(self) -> None:
        self._events.clear()
        self._durations.clear()
        self._last = None
