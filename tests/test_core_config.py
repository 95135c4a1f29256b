"""Tests for phishsafe.core.config.TrackerConfig."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from phishsafe.core.config import TrackerConfig, load_tracker_config, save_tracker_config


def test_defaults():
    cfg = TrackerConfig()
    assert cfg.swipe_threshold_px == 20.0
    assert cfg.dedup_window_ms == 300
    assert cfg.join_window_seconds == 30.0
    assert cfg.recording_poll_seconds == 5.0
    assert cfg.export_name == "session_log"


def test_load_partial_yaml(tmp_path):
    path = tmp_path / "tracker.yaml"
    path.write_text("swipe_threshold_px: 35\ndedup_window_ms: 150\n")
    cfg = load_tracker_config(path)
    assert cfg.swipe_threshold_px == 35.0
    assert cfg.dedup_window_ms == 150
    assert cfg.join_window_seconds == 30.0


def test_empty_file_is_defaults(tmp_path):
    path = tmp_path / "tracker.yaml"
    path.write_text("")
    assert load_tracker_config(path) == TrackerConfig()


def test_save_then_load(tmp_path):
    cfg = TrackerConfig(join_window_seconds=10, export_name="nightly")
    path = save_tracker_config(cfg, tmp_path / "nested" / "tracker.yaml")
    assert load_tracker_config(path) == cfg


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_tracker_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "field, value",
    [
        ("swipe_threshold_px", -1),
        ("dedup_window_ms", -5),
        ("join_window_seconds", -0.5),
        ("recording_poll_seconds", 0),
        ("export_name", ""),
    ],
)
def test_out_of_range_rejected(tmp_path, field, value):
    path = tmp_path / "tracker.yaml"
    path.write_text(f"{field}: {value!r}\n")
    with pytest.raises(ValidationError):
        load_tracker_config(path)
