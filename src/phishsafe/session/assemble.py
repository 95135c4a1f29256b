"""Merge recorder snapshots, enrichment output, and host context into one document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from phishsafe.adapters.collaborators import DeviceInfoProvider, LocationProvider
from phishsafe.core.defaults import DEFAULT_DEDUP_WINDOW_MS, DEFAULT_JOIN_WINDOW_SECONDS
from phishsafe.core.types import (
    Location,
    ScreenVisit,
    SessionDocument,
    SessionInfo,
    SessionInput,
    SwipeEvent,
    TapEvent,
)
from phishsafe.features.enrich import enrich_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable copy of every recorder's state, taken at session end."""

    session: SessionInfo
    tap_events: Sequence[TapEvent] = ()
    tap_durations_ms: Sequence[int] = ()
    swipe_events: Sequence[SwipeEvent] = ()
    screen_visits: Sequence[ScreenVisit] = ()
    screen_durations: dict[str, int] = field(default_factory=dict)
    session_input: SessionInput = field(default_factory=SessionInput)
    screen_recording_detected: bool = False


def resolve_location(provider: LocationProvider) -> Location | None:
    """Ask *provider* for a fix; failures degrade to ``None`` (unavailable)."""
    try:
        return provider.get_current_location()
    except Exception:
        logger.warning("Location provider failed; exporting without location", exc_info=True)
        return None


def resolve_device_info(provider: DeviceInfoProvider) -> dict[str, Any]:
    """Ask *provider* for device info; failures degrade to an empty mapping."""
    try:
        info = provider.get_device_info()
    except Exception:
        logger.warning("Device-info provider failed; exporting without device info", exc_info=True)
        return {}
    return dict(info) if info else {}


def assemble_document(
    snapshot: SessionSnapshot,
    *,
    location: Location | None = None,
    device_info: dict[str, Any] | None = None,
    dedup_window_ms: int = DEFAULT_DEDUP_WINDOW_MS,
    join_window_seconds: float = DEFAULT_JOIN_WINDOW_SECONDS,
) -> SessionDocument:
    """Enrich *snapshot* and wrap everything in a :class:`SessionDocument`.

    Args:
        snapshot: Recorder state frozen at session end.
        location: Current fix, or ``None`` for the explicit
            "unavailable" marker.
        device_info: Opaque device mapping, passed through unmodified.
        dedup_window_ms: Duplicate-tap tolerance.
        join_window_seconds: Half-width of the visit time-join window.

    Returns:
        The document ready for export and feature extraction.
    """
    enriched = enrich_session(
        snapshot.tap_events,
        snapshot.swipe_events,
        snapshot.screen_visits,
        dedup_window_ms=dedup_window_ms,
        join_window_seconds=join_window_seconds,
    )
    dropped = len(snapshot.tap_events) - len(enriched.tap_events)
    if dropped:
        logger.debug("Enrichment dropped %d of %d taps", dropped, len(snapshot.tap_events))

    return SessionDocument(
        session=snapshot.session,
        device=device_info or {},
        location=location,
        tap_durations_ms=list(snapshot.tap_durations_ms),
        tap_events=enriched.tap_events,
        raw_tap_events=list(snapshot.tap_events),
        swipe_events=enriched.swipe_events,
        screens_visited=enriched.screens_visited,
        screen_durations=dict(snapshot.screen_durations),
        screen_recording_detected=snapshot.screen_recording_detected,
        session_input=snapshot.session_input,
    )
