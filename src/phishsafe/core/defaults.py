"""Centralised default constants for phishsafe.

Every project-wide magic number / string lives here.
Import these instead of hard-coding values in function signatures or CLI options.
"""

from __future__ import annotations

from typing import Final

# ── Gestures ──
DEFAULT_SWIPE_THRESHOLD_PX: Final[float] = 20.0
MIN_SWIPE_DURATION_MS: Final[int] = 1

# ── Enrichment ──
DEFAULT_DEDUP_WINDOW_MS: Final[int] = 300
DEFAULT_JOIN_WINDOW_SECONDS: Final[float] = 30.0

# ── Screen-recording detection ──
DEFAULT_RECORDING_POLL_SECONDS: Final[float] = 5.0

# ── Export ──
DEFAULT_EXPORT_NAME: Final[str] = "session_log"
DEFAULT_EXPORT_DIR: Final[str] = "data/sessions"
LOCATION_UNAVAILABLE: Final[str] = "Location unavailable"

# ── Features ──
FEATURE_VECTOR_LENGTH: Final[int] = 19
MIN_SESSION_SECONDS_FOR_FREQUENCY: Final[float] = 1.0
