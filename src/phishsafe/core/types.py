"""Core data contracts: gesture events, screen visits, and the session document."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Final, Literal

from pydantic import BaseModel, Field, field_validator

from phishsafe.core.defaults import LOCATION_UNAVAILABLE
from phishsafe.core.time import parse_timestamp


class Zone(StrEnum):
    """Named cells of the 3x3 grid laid over a screen, plus ``unknown``.

    ``unknown`` marks taps whose container size was unavailable at
    capture time.
    """

    TOP_LEFT = "top_left"
    TOP_CENTER = "top_center"
    TOP_RIGHT = "top_right"
    MIDDLE_LEFT = "middle_left"
    CENTER = "center"
    MIDDLE_RIGHT = "middle_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_CENTER = "bottom_center"
    BOTTOM_RIGHT = "bottom_right"
    UNKNOWN = "unknown"


ZONE_LABELS: Final[frozenset[str]] = frozenset(Zone)


def _lenient_timestamp(value: Any) -> datetime | None:
    # Unparseable times become None so the event survives validation but
    # never matches in time-dependent computations.
    return parse_timestamp(value)


class Position(BaseModel, frozen=True):
    """A point in screen-local pixels."""

    dx: float = Field(description="Horizontal offset (px).")
    dy: float = Field(description="Vertical offset (px).")

    def is_origin(self) -> bool:
        return self.dx == 0.0 and self.dy == 0.0


class TapEvent(BaseModel, frozen=True):
    """A single recorded tap.  Never mutated after recording."""

    timestamp: datetime | None = Field(default=None, description="Wall-clock time (naive UTC); None if unparseable.")
    monotonic_ms: float | None = Field(default=None, description="Monotonic clock reading in ms.")
    screen: str = Field(description="Logical screen name the tap landed on.")
    position: Position = Field(description="Tap position.")
    zone: Zone = Field(default=Zone.UNKNOWN, description="3x3 grid cell of the tap.")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime | None:
        return _lenient_timestamp(value)

    @field_validator("zone", mode="before")
    @classmethod
    def _known_zone(cls, value: Any) -> Any:
        if not isinstance(value, str) or value not in ZONE_LABELS:
            return Zone.UNKNOWN
        return value


class SwipeEvent(BaseModel, frozen=True):
    """A pointer gesture whose travel exceeded the swipe threshold."""

    start_position: Position
    end_position: Position
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration_ms: int = Field(ge=0, description="Pointer-down to pointer-up (ms).")
    distance_px: float = Field(ge=0.0, description="Euclidean travel distance (px).")
    speed_px_per_ms: float = Field(ge=0.0, description="distance / max(duration, 1 ms).")

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _coerce_times(cls, value: Any) -> datetime | None:
        return _lenient_timestamp(value)


class ScreenVisit(BaseModel, frozen=True):
    """One navigation transition onto *screen*."""

    screen: str
    timestamp: datetime | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime | None:
        return _lenient_timestamp(value)


class EnrichedScreenVisit(ScreenVisit, frozen=True):
    """A :class:`ScreenVisit` annotated with its temporally-nearby gestures."""

    tap_events: list[TapEvent] = Field(default_factory=list)
    swipe_events: list[SwipeEvent] = Field(default_factory=list)


class SessionInfo(BaseModel, frozen=True):
    """Lifecycle timestamps of one session."""

    start: datetime | None = None
    end: datetime | None = None
    duration_seconds: int = Field(default=0, ge=0)


class Location(BaseModel, frozen=True):
    latitude: float
    longitude: float


class SessionInput(BaseModel, frozen=True):
    """Business-flow flags and their login-relative offsets (seconds)."""

    within_bank_transfer_amount: str | None = None
    fd_broken: bool = False
    loan_taken: bool = False
    time_from_login_to_fd: int | None = None
    time_from_login_to_loan: int | None = None
    time_from_login_to_transaction: int | None = None
    time_for_transaction: int | None = None


class SessionDocument(BaseModel, frozen=True):
    """The assembled, persisted record of one session.

    This is the unit written by an export sink and the unit read back by
    the feature extractor.  ``device`` is the only open-ended field; it is
    passed through from the device-info provider unmodified.

    ``tap_events`` is filtered and deduplicated; ``raw_tap_events`` holds
    every tap exactly as recorded.  ``swipe_events`` is never deduplicated.
    """

    session: SessionInfo = Field(default_factory=SessionInfo)
    device: dict[str, Any] = Field(default_factory=dict)
    location: Location | Literal["Location unavailable"] = LOCATION_UNAVAILABLE
    tap_durations_ms: list[int] = Field(default_factory=list)
    tap_events: list[TapEvent] = Field(default_factory=list)
    raw_tap_events: list[TapEvent] = Field(default_factory=list)
    swipe_events: list[SwipeEvent] = Field(default_factory=list)
    screens_visited: list[EnrichedScreenVisit] = Field(default_factory=list)
    screen_durations: dict[str, int] = Field(default_factory=dict)
    screen_recording_detected: bool = False
    session_input: SessionInput = Field(default_factory=SessionInput)

    @field_validator("location", mode="before")
    @classmethod
    def _explicit_unavailable(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return LOCATION_UNAVAILABLE
        return value
