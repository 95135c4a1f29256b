"""Shared fixtures for the phishsafe test suite."""

from __future__ import annotations

import datetime as dt
from typing import Any

import pytest

from phishsafe.core.time import ManualClock
from phishsafe.core.types import Position, TapEvent, Zone


@pytest.fixture()
def t0() -> dt.datetime:
    return dt.datetime(2026, 3, 14, 9, 30, 0)


@pytest.fixture()
def clock(t0: dt.datetime) -> ManualClock:
    return ManualClock(t0)


@pytest.fixture()
def make_tap(t0: dt.datetime):
    """Factory for TapEvents offset from ``t0`` by *ms* milliseconds."""

    def _make(
        ms: float = 0,
        *,
        screen: str = "Home",
        dx: float = 10.0,
        dy: float = 10.0,
        zone: Zone | str = Zone.TOP_LEFT,
    ) -> TapEvent:
        return TapEvent(
            timestamp=t0 + dt.timedelta(milliseconds=ms),
            screen=screen,
            position=Position(dx=dx, dy=dy),
            zone=zone,
        )

    return _make


@pytest.fixture()
def full_session_data() -> dict[str, Any]:
    """A persisted session document as it looks after a JSON round trip."""
    return {
        "session": {
            "start": "2026-03-14T09:30:00",
            "end": "2026-03-14T09:32:00",
            "duration_seconds": 120,
        },
        "device": {"model": "Pixel 8", "os": "Android 15"},
        "location": {"latitude": 19.07, "longitude": 72.87},
        "tap_durations_ms": [200, 400],
        "tap_events": [
            {"timestamp": "2026-03-14T09:30:01", "screen": "Home",
             "position": {"dx": 10.0, "dy": 20.0}, "zone": "top_left"},
            {"timestamp": "2026-03-14T09:30:02", "screen": "Home",
             "position": {"dx": 30.0, "dy": 40.0}, "zone": "top_left"},
        ],
        "raw_tap_events": [
            {"timestamp": "2026-03-14T09:30:01", "screen": "Home",
             "position": {"dx": 10.0, "dy": 20.0}, "zone": "top_left"},
            {"timestamp": "2026-03-14T09:30:01.200000", "screen": "Home",
             "position": {"dx": 10.0, "dy": 20.0}, "zone": "top_left"},
            {"timestamp": "2026-03-14T09:30:02", "screen": "Home",
             "position": {"dx": 40.0, "dy": 50.0}, "zone": "top_left"},
        ],
        "swipe_events": [
            {"start_position": {"dx": 0.0, "dy": 100.0}, "end_position": {"dx": 0.0, "dy": 140.0},
             "start_time": "2026-03-14T09:30:10", "end_time": "2026-03-14T09:30:10.200000",
             "duration_ms": 200, "distance_px": 40.0, "speed_px_per_ms": 0.2},
            {"start_position": {"dx": 0.0, "dy": 100.0}, "end_position": {"dx": 0.0, "dy": 200.0},
             "start_time": "2026-03-14T09:31:50", "end_time": "2026-03-14T09:31:50.500000",
             "duration_ms": 500, "distance_px": 100.0, "speed_px_per_ms": 0.2},
        ],
        "screens_visited": [
            {"screen": "Home", "timestamp": "2026-03-14T09:30:00",
             "tap_events": [],
             "swipe_events": [
                 {"start_position": {"dx": 0.0, "dy": 100.0}, "end_position": {"dx": 0.0, "dy": 140.0},
                  "start_time": "2026-03-14T09:30:10", "end_time": "2026-03-14T09:30:10.200000",
                  "duration_ms": 200, "distance_px": 40.0, "speed_px_per_ms": 0.2},
             ]},
        ],
        "screen_durations": {"Home": 60, "Transfer": 30},
        "screen_recording_detected": False,
        "session_input": {
            "within_bank_transfer_amount": "2500",
            "fd_broken": True,
            "loan_taken": False,
            "time_from_login_to_fd": 45,
            "time_from_login_to_loan": None,
            "time_from_login_to_transaction": 20,
            "time_for_transaction": 15,
        },
    }
