"""Background screen-recording poller with a latched, thread-safe verdict.

The monitor is the only writer that runs concurrently with UI event
capture.  It polls a :class:`~phishsafe.adapters.collaborators.RecordingDetector`
every *poll_seconds* on a daemon thread and latches the first positive
answer for the rest of the session.  Presentation (e.g. a warning
dialog) is the host's concern: it subscribes via *on_detected*.

Session end must call :meth:`RecordingMonitor.stop` before reading
:attr:`RecordingMonitor.detected` so that no poll can land between the
read and document assembly.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from phishsafe.adapters.collaborators import RecordingDetector
from phishsafe.core.defaults import DEFAULT_RECORDING_POLL_SECONDS

logger = logging.getLogger(__name__)


class RecordingMonitor:
    """Polls a recording detector and latches the first detection.

    Args:
        detector: Collaborator answering ``is_recording()``.
        poll_seconds: Seconds between polls.
        on_detected: Callback invoked once, from the polling thread, when
            recording is first detected.
    """

    def __init__(
        self,
        detector: RecordingDetector,
        *,
        poll_seconds: float = DEFAULT_RECORDING_POLL_SECONDS,
        on_detected: Callable[[], Any] | None = None,
    ) -> None:
        self._detector = detector
        self._poll_seconds = poll_seconds
        self._on_detected = on_detected
        self._lock = threading.Lock()
        self._detected = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def check(self) -> bool:
        """Poll the detector once and latch a positive answer.

        Exposed so the latch logic can be unit-tested without a thread.
        Detector failures are logged and treated as "not recording".

        Returns:
            ``True`` only on the poll that first latched a detection.
        """
        try:
            recording = bool(self._detector.is_recording())
        except Exception:
            logger.debug("Recording detector failed", exc_info=True)
            return False

        if not recording:
            return False
        with self._lock:
            if self._detected:
                return False
            self._detected = True

        logger.warning("Screen recording detected")
        if self._on_detected is not None:
            self._on_detected()
        return True

    def run(self) -> None:
        """Blocking poll loop. Call from a daemon thread."""
        while not self._stop.wait(timeout=self._poll_seconds):
            self.check()

    def start(self) -> None:
        """Spawn the polling daemon thread (no-op if already running)."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run, name="phishsafe-recording-monitor", daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Signal the poll loop to stop and wait for the thread to exit."""
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None

    @property
    def detected(self) -> bool:
        with self._lock:
            return self._detected

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
