"""Two-phase swipe recorder: pointer-down opens, pointer-up measures."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from phishsafe.core.defaults import DEFAULT_SWIPE_THRESHOLD_PX, MIN_SWIPE_DURATION_MS
from phishsafe.core.time import elapsed_ms
from phishsafe.core.types import Position, SwipeEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PendingSwipe:
    position: Position
    timestamp: datetime | None
    monotonic_ms: float | None


def as_position(value: Position | float) -> Position:
    """Accept a full :class:`Position` or a bare vertical ordinate (x = 0)."""
    if isinstance(value, Position):
        return value
    return Position(dx=0.0, dy=float(value))


def _duration_ms(
    start: _PendingSwipe,
    end_time: datetime | None,
    end_monotonic: float | None,
) -> int:
    if start.monotonic_ms is not None and end_monotonic is not None:
        return max(int(end_monotonic - start.monotonic_ms), 0)
    if start.timestamp is not None and end_time is not None:
        return max(elapsed_ms(start.timestamp, end_time), 0)
    return 0


class SwipeRecorder:
    """Emits a :class:`SwipeEvent` per gesture that travels beyond the threshold.

    Movement of *threshold_px* or less between :meth:`start` and
    :meth:`end` is a tap, not a swipe, and is dropped silently.  Speed
    divides by ``max(duration_ms, 1)`` so a 0 ms gesture never yields an
    infinite speed.

    Args:
        threshold_px: Minimum Euclidean travel (exclusive) for a swipe.
    """

    def __init__(self, threshold_px: float = DEFAULT_SWIPE_THRESHOLD_PX) -> None:
        self._threshold_px = threshold_px
        self._pending: _PendingSwipe | None = None
        self._events: list[SwipeEvent] = []

    def start(
        self,
        position: Position | float,
        timestamp: datetime | None,
        monotonic_ms: float | None = None,
    ) -> None:
        self._pending = _PendingSwipe(as_position(position), timestamp, monotonic_ms)

    def end(
        self,
        position: Position | float,
        timestamp: datetime | None,
        monotonic_ms: float | None = None,
    ) -> SwipeEvent | None:
        """Close the pending gesture and return the swipe, if any.

        Returns ``None`` when no gesture is pending (``start`` never
        called, or already consumed) or when travel is under threshold.
        """
        pending = self._pending
        if pending is None:
            return None
        self._pending = None

        end_pos = as_position(position)
        dx = end_pos.dx - pending.position.dx
        dy = end_pos.dy - pending.position.dy
        distance = math.hypot(dx, dy)
        if not distance > self._threshold_px:
            return None

        duration = _duration_ms(pending, timestamp, monotonic_ms)
        speed = distance / max(duration, MIN_SWIPE_DURATION_MS)
        event = SwipeEvent(
            start_position=pending.position,
            end_position=end_pos,
            start_time=pending.timestamp,
            end_time=timestamp,
            duration_ms=duration,
            distance_px=distance,
            speed_px_per_ms=speed,
        )
        self._events.append(event)
        logger.debug(
            "Swipe %.2f px in %d ms (%.3f px/ms)", distance, duration, speed,
        )
        return event

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def swipe_events(self) -> tuple[SwipeEvent, ...]:
        return tuple(self._events)

    def reset(self) -> None:
        self._pending = None
        self._events.clear()
