"""Screen-visit log and cumulative per-screen dwell time."""

from __future__ import annotations

import logging
from datetime import datetime

from phishsafe.core.types import ScreenVisit

logger = logging.getLogger(__name__)


class NavigationRecorder:
    """Pure accumulation of navigation transitions and screen durations."""

    def __init__(self) -> None:
        self._visits: list[ScreenVisit] = []
        self._durations: dict[str, int] = {}

    def log_visit(self, screen: str, timestamp: datetime | None) -> ScreenVisit:
        visit = ScreenVisit(screen=screen, timestamp=timestamp)
        self._visits.append(visit)
        logger.debug("Visited %s", screen)
        return visit

    def record_duration(self, screen: str, seconds: int) -> int:
        """Add *seconds* to the running total for *screen*; returns the new total.

        Negative durations are ignored with a warning.
        """
        if seconds < 0:
            logger.warning("Ignoring negative duration %ds for %s", seconds, screen)
            return self._durations.get(screen, 0)
        total = self._durations.get(screen, 0) + seconds
        self._durations[screen] = total
        logger.debug("Screen duration %s += %ds (total %ds)", screen, seconds, total)
        return total

    @property
    def visits(self) -> tuple[ScreenVisit, ...]:
        return tuple(self._visits)

    @property
    def screen_durations(self) -> dict[str, int]:
        return dict(self._durations)

    def reset(self) -> None:
        self._visits.clear()
        self._durations.clear()
