"""Tracker configuration: gesture thresholds, enrichment windows, export target.

Loaded from YAML whose keys match :class:`TrackerConfig` fields; every
field has a default so an empty file (or no file) is valid.

Example ``configs/tracker.yaml``::

    swipe_threshold_px: 20
    dedup_window_ms: 300
    join_window_seconds: 30
    recording_poll_seconds: 5
    export_dir: data/sessions
    export_name: session_log
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from phishsafe.core.defaults import (
    DEFAULT_DEDUP_WINDOW_MS,
    DEFAULT_EXPORT_DIR,
    DEFAULT_EXPORT_NAME,
    DEFAULT_JOIN_WINDOW_SECONDS,
    DEFAULT_RECORDING_POLL_SECONDS,
    DEFAULT_SWIPE_THRESHOLD_PX,
)


class TrackerConfig(BaseModel, frozen=True):
    """Tunable knobs of the capture and enrichment pipeline."""

    swipe_threshold_px: float = Field(default=DEFAULT_SWIPE_THRESHOLD_PX, ge=0.0)
    dedup_window_ms: int = Field(default=DEFAULT_DEDUP_WINDOW_MS, ge=0)
    join_window_seconds: float = Field(default=DEFAULT_JOIN_WINDOW_SECONDS, ge=0.0)
    recording_poll_seconds: float = Field(default=DEFAULT_RECORDING_POLL_SECONDS, gt=0.0)
    export_dir: str = DEFAULT_EXPORT_DIR
    export_name: str = Field(default=DEFAULT_EXPORT_NAME, min_length=1)


def load_tracker_config(path: Path) -> TrackerConfig:
    """Load a :class:`TrackerConfig` from a YAML file.

    Args:
        path: Path to a YAML mapping of config fields.

    Returns:
        A validated config instance.

    Raises:
        FileNotFoundError: If *path* does not exist.
        pydantic.ValidationError: If a value is out of range.
    """
    raw = yaml.safe_load(path.read_text())
    return TrackerConfig.model_validate(raw or {})


def save_tracker_config(config: TrackerConfig, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
    )
    return path
