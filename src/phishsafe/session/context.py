"""Host-owned session context: the single entry point for UI event capture.

One :class:`SessionContext` is constructed by the hosting application and
passed to whatever receives UI input.  It owns every recorder, the
session lifecycle, and the background recording monitor.  All recorder
calls must come from the UI thread, in arrival order.

Typical flow::

    ctx = SessionContext(config, location_provider=gps, export_sink=sink)
    ctx.start()
    ctx.screen_visited("Home")
    ctx.record_tap_position("Home", Position(dx=40, dy=80), container_size=(360, 640))
    ...
    document = ctx.end_and_export()
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from phishsafe.adapters.collaborators import (
    DeviceInfoProvider,
    EmptyDeviceInfo,
    ExportSink,
    LocationProvider,
    NeverRecording,
    NoLocation,
    RecordingDetector,
)
from phishsafe.core.config import TrackerConfig
from phishsafe.core.time import Clock, SystemClock
from phishsafe.core.types import Position, SessionDocument, Zone
from phishsafe.features.zones import zone_for_container
from phishsafe.session.assemble import (
    SessionSnapshot,
    assemble_document,
    resolve_device_info,
    resolve_location,
)
from phishsafe.session.recording import RecordingMonitor
from phishsafe.trackers.flow import FlowRecorder
from phishsafe.trackers.navigation import NavigationRecorder
from phishsafe.trackers.session import SessionLifecycle
from phishsafe.trackers.swipe import SwipeRecorder
from phishsafe.trackers.tap import TapRecorder

logger = logging.getLogger(__name__)


class SessionContext:
    """Recorders, lifecycle, and collaborators for one user session at a time.

    :meth:`start` resets every recorder and opens the validity window;
    :meth:`end` is a hard barrier after which recorder calls are ignored
    (with a warning) until the next :meth:`start`.

    Args:
        config: Thresholds, windows, and export naming.
        location_provider: Supplies the current fix at session end.
        device_info_provider: Supplies the opaque device mapping.
        recording_detector: Polled by the background recording monitor.
        export_sink: Destination for :meth:`end_and_export`.
        clock: Source of wall-clock and monotonic readings.
        on_recording_detected: Notification hook for the host UI.
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        *,
        location_provider: LocationProvider | None = None,
        device_info_provider: DeviceInfoProvider | None = None,
        recording_detector: RecordingDetector | None = None,
        export_sink: ExportSink | None = None,
        clock: Clock | None = None,
        on_recording_detected: Callable[[], Any] | None = None,
    ) -> None:
        self._config = config or TrackerConfig()
        self._location_provider = location_provider or NoLocation()
        self._device_info_provider = device_info_provider or EmptyDeviceInfo()
        self._recording_detector = recording_detector or NeverRecording()
        self._export_sink = export_sink
        self._clock: Clock = clock or SystemClock()
        self._on_recording_detected = on_recording_detected

        self._lifecycle = SessionLifecycle()
        self._taps = TapRecorder()
        self._swipes = SwipeRecorder(threshold_px=self._config.swipe_threshold_px)
        self._navigation = NavigationRecorder()
        self._flow = FlowRecorder()
        self._monitor: RecordingMonitor | None = None

    # -- lifecycle -------------------------------------------------------------

    def start(self) -> None:
        """Open a new session, discarding all previous recorder state."""
        if self._monitor is not None:
            self._monitor.stop()

        self._taps.reset()
        self._swipes.reset()
        self._navigation.reset()
        self._flow.reset()

        now = self._clock.now()
        self._lifecycle.start(now)
        self._flow.mark_login(now)

        self._monitor = RecordingMonitor(
            self._recording_detector,
            poll_seconds=self._config.recording_poll_seconds,
            on_detected=self._on_recording_detected,
        )
        self._monitor.start()
        logger.info("Session started")

    @property
    def is_active(self) -> bool:
        return self._lifecycle.is_active

    def end(self) -> SessionDocument:
        """Close the session and assemble its document.

        The recording monitor is stopped before its latch is read so that
        no detection can race document assembly.  Calling ``end`` again
        without a new ``start`` keeps the original end timestamp.
        """
        detected = False
        if self._monitor is not None:
            self._monitor.stop()
            detected = self._monitor.detected

        self._lifecycle.end(self._clock.now())

        snapshot = SessionSnapshot(
            session=self._lifecycle.snapshot(),
            tap_events=self._taps.tap_events,
            tap_durations_ms=self._taps.tap_durations,
            swipe_events=self._swipes.swipe_events,
            screen_visits=self._navigation.visits,
            screen_durations=self._navigation.screen_durations,
            session_input=self._flow.snapshot(),
            screen_recording_detected=detected,
        )
        location = resolve_location(self._location_provider)
        device_info = resolve_device_info(self._device_info_provider)
        logger.debug("Session context resolved: location=%s device=%s", location, device_info)
        document = assemble_document(
            snapshot,
            location=location,
            device_info=device_info,
            dedup_window_ms=self._config.dedup_window_ms,
            join_window_seconds=self._config.join_window_seconds,
        )
        logger.info(
            "Session ended after %ds (%d taps, %d swipes, %d visits)",
            document.session.duration_seconds,
            len(document.raw_tap_events),
            len(document.swipe_events),
            len(document.screens_visited),
        )
        return document

    def end_and_export(self, logical_name: str | None = None) -> SessionDocument:
        """End the session and hand the document to the export sink.

        Without a configured sink the document is only returned.
        """
        document = self.end()
        if self._export_sink is None:
            logger.warning("No export sink configured; session not persisted")
            return document
        self._export_sink.write(document, logical_name or self._config.export_name)
        return document

    def _accepting(self, action: str) -> bool:
        if self._lifecycle.is_active:
            return True
        logger.warning("Ignoring %s: no active session", action)
        return False

    # -- taps ------------------------------------------------------------------

    def record_tap(self, screen: str, position: Position, zone: Zone | str) -> None:
        if not self._accepting("tap"):
            return
        self._taps.record_tap(
            screen, position, zone, self._clock.now(), self._clock.monotonic_ms(),
        )

    def record_tap_position(
        self,
        screen: str,
        position: Position,
        container_size: tuple[float, float] | None = None,
    ) -> None:
        """Record a tap, classifying its zone from the container size.

        An unavailable container size yields zone ``unknown``; the tap is
        still recorded.
        """
        self.record_tap(screen, position, zone_for_container(position, container_size))

    def tap(self, screen: str) -> None:
        """Fallback tap with no geometry: position (0, 0), zone ``unknown``."""
        self.record_tap(screen, Position(dx=0.0, dy=0.0), Zone.UNKNOWN)

    # -- swipes ----------------------------------------------------------------

    def swipe_start(self, position: Position | float) -> None:
        if not self._accepting("swipe start"):
            return
        self._swipes.start(position, self._clock.now(), self._clock.monotonic_ms())

    def swipe_end(self, position: Position | float) -> None:
        if not self._accepting("swipe end"):
            return
        self._swipes.end(position, self._clock.now(), self._clock.monotonic_ms())

    # -- navigation ------------------------------------------------------------

    def screen_visited(self, screen: str) -> None:
        if not self._accepting("screen visit"):
            return
        self._navigation.log_visit(screen, self._clock.now())

    def record_screen_duration(self, screen: str, seconds: int) -> None:
        if not self._accepting("screen duration"):
            return
        self._navigation.record_duration(screen, seconds)

    # -- business flow ---------------------------------------------------------

    def record_transfer_amount(self, amount: str) -> None:
        if not self._accepting("transfer amount"):
            return
        self._flow.set_transaction_amount(amount)

    def record_fd_broken(self) -> None:
        if not self._accepting("FD broken"):
            return
        self._flow.mark_fd_broken(self._clock.now())

    def record_loan_taken(self) -> None:
        if not self._accepting("loan taken"):
            return
        self._flow.mark_loan_taken(self._clock.now())

    def mark_transaction_start(self) -> None:
        if not self._accepting("transaction start"):
            return
        self._flow.mark_transaction_start(self._clock.now())

    def mark_transaction_end(self) -> None:
        if not self._accepting("transaction end"):
            return
        self._flow.mark_transaction_end(self._clock.now())
