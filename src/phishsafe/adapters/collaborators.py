"""Narrow contracts for the host-owned collaborators the pipeline consumes.

Any object exposing the right method satisfies a contract -- no
inheritance required.  The null implementations below are the defaults
a :class:`~phishsafe.session.context.SessionContext` falls back to when
the host does not wire a real provider.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np

from phishsafe.core.types import Location, SessionDocument


@runtime_checkable
class LocationProvider(Protocol):
    def get_current_location(self) -> Location | None: ...


@runtime_checkable
class DeviceInfoProvider(Protocol):
    def get_device_info(self) -> dict[str, Any]: ...


@runtime_checkable
class RecordingDetector(Protocol):
    """Answers whether the screen is currently being captured.

    Implementations must return within one poll interval.
    """

    def is_recording(self) -> bool: ...


@runtime_checkable
class ExportSink(Protocol):
    def write(self, document: SessionDocument, logical_name: str) -> Any: ...


@runtime_checkable
class Scorer(Protocol):
    """Risk-scoring model fed with a ``(1, 19)`` float32 feature batch."""

    def predict(self, features: np.ndarray) -> Any: ...


class NoLocation:
    def get_current_location(self) -> Location | None:
        return None


class EmptyDeviceInfo:
    def get_device_info(self) -> dict[str, Any]:
        return {}


class NeverRecording:
    def is_recording(self) -> bool:
        return False
