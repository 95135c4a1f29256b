"""Tests for persistence primitives.

Covers: session JSON round trip, JsonFileSink naming, parquet round trip,
auto-creation of parent directories, no leftover temp files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from phishsafe.core.store import (
    JsonFileSink,
    load_session_document,
    read_parquet,
    read_session_json,
    write_parquet,
    write_session_json,
)
from phishsafe.core.types import SessionDocument


class TestSessionJson:
    def test_round_trip(self, tmp_path: Path, full_session_data: dict[str, Any]) -> None:
        doc = SessionDocument.model_validate(full_session_data)
        path = write_session_json(doc, tmp_path / "s.json")
        assert load_session_document(path) == doc

    def test_raw_read_is_mapping(self, tmp_path: Path) -> None:
        path = write_session_json(SessionDocument(), tmp_path / "s.json")
        raw = read_session_json(path)
        assert raw["location"] == "Location unavailable"
        assert raw["session"]["duration_seconds"] == 0

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        write_session_json(SessionDocument(), tmp_path / "s.json")
        assert [p.name for p in tmp_path.iterdir()] == ["s.json"]

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "s.json"
        target.write_text("stale")
        write_session_json(SessionDocument(), target)
        assert read_session_json(target)["tap_events"] == []


class TestJsonFileSink:
    def test_writes_logical_name(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path / "exports")
        path = sink.write(SessionDocument(), "session_log")
        assert path == tmp_path / "exports" / "session_log.json"
        assert path.exists()


class TestParquetRoundTrip:
    def test_write_then_read_preserves_data(self, tmp_path: Path) -> None:
        df = pd.DataFrame({"a": [1.0, 2.0], "b": ["x", "y"]})
        out = write_parquet(df, tmp_path / "deep" / "f.parquet")
        pd.testing.assert_frame_equal(read_parquet(out), df)

    def test_read_nonexistent_raises(self, tmp_path: Path) -> None:
        with pytest.raises(Exception):
            read_parquet(tmp_path / "does_not_exist.parquet")
