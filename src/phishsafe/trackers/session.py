"""Session lifecycle: start/end timestamps and elapsed duration."""

from __future__ import annotations

from datetime import datetime

from phishsafe.core.time import elapsed_seconds, to_naive_utc
from phishsafe.core.types import SessionInfo


class SessionLifecycle:
    """Tracks the validity window that gates every recorder.

    :attr:`is_active` is ``True`` between :meth:`start` and :meth:`end`.
    Ending is a hard barrier; a new :meth:`start` opens a fresh window
    and clears the previous end timestamp.
    """

    def __init__(self) -> None:
        self._start: datetime | None = None
        self._end: datetime | None = None

    def start(self, timestamp: datetime) -> None:
        self._start = to_naive_utc(timestamp)
        self._end = None

    def end(self, timestamp: datetime) -> None:
        if self._start is not None and self._end is None:
            self._end = to_naive_utc(timestamp)

    @property
    def is_active(self) -> bool:
        return self._start is not None and self._end is None

    @property
    def duration_seconds(self) -> int:
        """Whole seconds between start and end; ``0`` until both are set."""
        if self._start is None or self._end is None:
            return 0
        return max(elapsed_seconds(self._start, self._end), 0)

    def snapshot(self) -> SessionInfo:
        return SessionInfo(
            start=self._start,
            end=self._end,
            duration_seconds=self.duration_seconds,
        )
