"""Session-end cleanup: filter capture failures, collapse duplicate taps, and
time-join gestures onto screen visits.

All functions are pure and single-pass over an immutable snapshot of the
recorders, so they may run on any worker without locking.

Pipeline::

    kept = filter_taps(raw_taps)
    deduped = deduplicate_taps(kept)
    visits = join_visits(visits, deduped, swipes)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

from phishsafe.core.defaults import DEFAULT_DEDUP_WINDOW_MS, DEFAULT_JOIN_WINDOW_SECONDS
from phishsafe.core.time import within_window
from phishsafe.core.types import (
    EnrichedScreenVisit,
    ScreenVisit,
    SwipeEvent,
    TapEvent,
    Zone,
)


@dataclass(frozen=True)
class EnrichmentResult:
    """Output of :func:`enrich_session`."""

    tap_events: list[TapEvent]
    swipe_events: list[SwipeEvent]
    screens_visited: list[EnrichedScreenVisit]


def is_capture_failure(tap: TapEvent) -> bool:
    """A tap at exactly (0, 0) with an unknown zone never came from a real touch."""
    return tap.position.is_origin() and tap.zone == Zone.UNKNOWN


def filter_taps(taps: Sequence[TapEvent]) -> list[TapEvent]:
    return [tap for tap in taps if not is_capture_failure(tap)]


def _is_duplicate(candidate: TapEvent, kept: TapEvent, window: timedelta) -> bool:
    return (
        candidate.screen == kept.screen
        and candidate.zone == kept.zone
        and candidate.position == kept.position
        and within_window(candidate.timestamp, kept.timestamp, window)
    )


def deduplicate_taps(
    taps: Sequence[TapEvent],
    window_ms: int = DEFAULT_DEDUP_WINDOW_MS,
) -> list[TapEvent]:
    """Drop taps that repeat an earlier *kept* tap.

    A tap duplicates a kept tap when screen, zone, and position are all
    identical and the timestamps are within *window_ms* (inclusive).
    The first tap of every cluster survives and input order is preserved.
    Taps without a usable timestamp are never considered duplicates.

    Args:
        taps: Taps in chronological recording order.
        window_ms: Duplicate tolerance in milliseconds.

    Returns:
        The surviving taps, in their original order.
    """
    window = timedelta(milliseconds=window_ms)
    kept: list[TapEvent] = []
    for tap in taps:
        if not any(_is_duplicate(tap, prev, window) for prev in kept):
            kept.append(tap)
    return kept


def join_visits(
    visits: Sequence[ScreenVisit],
    taps: Sequence[TapEvent],
    swipes: Sequence[SwipeEvent],
    window_seconds: float = DEFAULT_JOIN_WINDOW_SECONDS,
) -> list[EnrichedScreenVisit]:
    """Attach nearby gestures to each screen visit.

    Taps must share the visit's screen; swipes carry no screen label and
    match on time alone (by ``end_time``).  The window is symmetric and
    inclusive, and a gesture may attach to several overlapping visits.
    """
    window = timedelta(seconds=window_seconds)
    enriched: list[EnrichedScreenVisit] = []
    for visit in visits:
        related_taps = [
            tap for tap in taps
            if tap.screen == visit.screen
            and within_window(tap.timestamp, visit.timestamp, window)
        ]
        related_swipes = [
            swipe for swipe in swipes
            if within_window(swipe.end_time, visit.timestamp, window)
        ]
        enriched.append(
            EnrichedScreenVisit(
                screen=visit.screen,
                timestamp=visit.timestamp,
                tap_events=related_taps,
                swipe_events=related_swipes,
            )
        )
    return enriched


def enrich_session(
    taps: Sequence[TapEvent],
    swipes: Sequence[SwipeEvent],
    visits: Sequence[ScreenVisit],
    *,
    dedup_window_ms: int = DEFAULT_DEDUP_WINDOW_MS,
    join_window_seconds: float = DEFAULT_JOIN_WINDOW_SECONDS,
) -> EnrichmentResult:
    """Run filter -> deduplicate -> time-join over one session's raw events."""
    deduped = deduplicate_taps(filter_taps(taps), window_ms=dedup_window_ms)
    return EnrichmentResult(
        tap_events=deduped,
        swipe_events=list(swipes),
        screens_visited=join_visits(
            visits, deduped, swipes, window_seconds=join_window_seconds,
        ),
    )
