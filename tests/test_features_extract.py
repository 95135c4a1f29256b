"""Tests for the 19-value session feature extractor.

Covers:
- Exact values on a fully-populated re-loaded document
- Empty session -> zero vector except explicitly-set flags
- Degradation on partial / malformed documents (never raises)
- Determinism across repeated calls and across model vs. mapping input
- Centroid source (raw taps) and nested-visit swipe walk
- features_frame shape and dtypes
"""

from __future__ import annotations

import copy
import math
from typing import Any

import pandas as pd
import pytest

from phishsafe.core.defaults import FEATURE_VECTOR_LENGTH
from phishsafe.core.schema import FeatureSchemaV1
from phishsafe.core.types import SessionDocument, SessionInput
from phishsafe.features.extract import extract_features, features_frame


class TestExtractFeaturesValues:
    def test_full_document(self, full_session_data: dict[str, Any]) -> None:
        v = extract_features(full_session_data)

        assert len(v) == FEATURE_VECTOR_LENGTH
        assert v[0] == 120.0
        assert v[1] == pytest.approx(300.0)
        assert v[2] == pytest.approx(math.sqrt(20000.0))
        assert v[3] == pytest.approx(2 / 120)
        assert v[4] == pytest.approx(0.2)
        assert v[5] == pytest.approx(0.0, abs=1e-12)
        assert v[6] == pytest.approx(70.0)
        assert v[7] == pytest.approx(math.sqrt(1800.0))
        assert v[8] == pytest.approx(20.0)
        assert v[9] == pytest.approx(30.0)
        assert v[10] == pytest.approx(40.0)
        assert v[11] == pytest.approx(0.2)
        assert v[12] == pytest.approx(45.0)
        assert v[13] == pytest.approx(math.sqrt(450.0))
        assert v[14] == 1.0
        assert v[15] == 0.0
        assert v[16] == 45.0
        assert v[17] == 0.0
        assert v[18] == 20.0

    def test_all_values_are_python_floats(self, full_session_data: dict[str, Any]) -> None:
        v = extract_features(full_session_data)
        assert all(type(x) is float for x in v)
        FeatureSchemaV1.validate_vector(v)

    def test_tap_frequency_guards_short_sessions(self) -> None:
        doc = {"session": {"duration_seconds": 0}, "tap_durations_ms": [100, 100, 100]}
        assert extract_features(doc)[3] == 3.0

    def test_single_tap_duration_has_zero_std(self) -> None:
        v = extract_features({"tap_durations_ms": [250]})
        assert v[1] == 250.0
        assert v[2] == 0.0


class TestExtractFeaturesEmpty:
    def test_empty_document_is_zero_vector(self) -> None:
        assert extract_features(SessionDocument()) == [0.0] * FEATURE_VECTOR_LENGTH

    def test_empty_mapping_is_zero_vector(self) -> None:
        assert extract_features({}) == [0.0] * FEATURE_VECTOR_LENGTH

    def test_empty_session_keeps_set_flags(self) -> None:
        doc = SessionDocument(session_input=SessionInput(fd_broken=True, loan_taken=True))
        v = extract_features(doc)
        assert v[14] == 1.0
        assert v[15] == 1.0
        assert [x for i, x in enumerate(v) if i not in (14, 15)] == [0.0] * 17


class TestExtractFeaturesDegrades:
    def test_nulls_and_garbage_default_to_zero(self) -> None:
        doc = {
            "session": None,
            "tap_durations_ms": None,
            "swipe_events": [{"speed_px_per_ms": None, "distance_px": "far"}],
            "raw_tap_events": [{"position": None}, "not-a-tap"],
            "screens_visited": [{"swipe_events": None}, None],
            "screen_durations": "n/a",
            "session_input": {"fd_broken": "yes", "time_from_login_to_fd": None},
        }
        v = extract_features(doc)
        assert v == [0.0] * FEATURE_VECTOR_LENGTH

    def test_non_mapping_document(self) -> None:
        assert extract_features([1, 2, 3]) == [0.0] * FEATURE_VECTOR_LENGTH  # type: ignore[arg-type]

    def test_non_finite_values_coerced(self) -> None:
        doc = {
            "session": {"duration_seconds": float("inf")},
            "swipe_events": [{"speed_px_per_ms": float("nan"), "distance_px": 30.0}],
        }
        v = extract_features(doc)
        assert all(math.isfinite(x) for x in v)
        assert v[0] == 0.0
        assert v[4] == 0.0
        assert v[6] == 30.0


class TestExtractFeaturesSources:
    def test_centroid_uses_raw_taps(self, full_session_data: dict[str, Any]) -> None:
        doc = copy.deepcopy(full_session_data)
        doc["tap_events"] = []
        v = extract_features(doc)
        assert v[8] == pytest.approx(20.0)
        assert v[9] == pytest.approx(30.0)

    def test_centroid_falls_back_to_tap_events(self, full_session_data: dict[str, Any]) -> None:
        doc = copy.deepcopy(full_session_data)
        del doc["raw_tap_events"]
        v = extract_features(doc)
        assert v[8] == pytest.approx(20.0)  # (10 + 30) / 2
        assert v[9] == pytest.approx(30.0)  # (20 + 40) / 2

    def test_centroid_skips_capture_failures(self, full_session_data: dict[str, Any]) -> None:
        doc = copy.deepcopy(full_session_data)
        doc["raw_tap_events"].append(
            {"timestamp": "2026-03-14T09:30:03", "screen": "Home",
             "position": {"dx": 0.0, "dy": 0.0}, "zone": "unknown"},
        )
        v = extract_features(doc)
        assert v[8] == pytest.approx(20.0)
        assert v[9] == pytest.approx(30.0)

    def test_centroid_keeps_origin_tap_with_known_zone(self) -> None:
        doc = {"raw_tap_events": [
            {"position": {"dx": 0.0, "dy": 0.0}, "zone": "top_left"},
            {"position": {"dx": 40.0, "dy": 60.0}, "zone": "center"},
        ]}
        v = extract_features(doc)
        assert v[8] == pytest.approx(20.0)
        assert v[9] == pytest.approx(30.0)

    def test_nested_swipes_are_distinct_from_global(self, full_session_data: dict[str, Any]) -> None:
        doc = copy.deepcopy(full_session_data)
        doc["screens_visited"] = []
        v = extract_features(doc)
        assert v[6] == pytest.approx(70.0)
        assert v[10] == 0.0
        assert v[11] == 0.0

    def test_nested_swipes_counted_per_visit(self, full_session_data: dict[str, Any]) -> None:
        doc = copy.deepcopy(full_session_data)
        swipe = doc["swipe_events"][1]
        doc["screens_visited"].append({"screen": "Transfer", "swipe_events": [swipe]})
        v = extract_features(doc)
        assert v[10] == pytest.approx(70.0)


class TestDeterminism:
    def test_repeated_calls_identical(self, full_session_data: dict[str, Any]) -> None:
        first = extract_features(full_session_data)
        for _ in range(5):
            assert extract_features(full_session_data) == first

    def test_model_and_mapping_agree(self, full_session_data: dict[str, Any]) -> None:
        doc = SessionDocument.model_validate(full_session_data)
        assert extract_features(doc) == extract_features(full_session_data)


class TestFeaturesFrame:
    def test_one_row_per_document(self, full_session_data: dict[str, Any]) -> None:
        df = features_frame([full_session_data, SessionDocument()])
        assert len(df) == 2
        assert list(df.columns) == ["session_start", *FeatureSchemaV1.NAMES]
        assert df.loc[0, "session_start"] == "2026-03-14T09:30:00"
        assert pd.isna(df.loc[1, "session_start"])
        FeatureSchemaV1.validate_dataframe(df)

    def test_row_matches_vector(self, full_session_data: dict[str, Any]) -> None:
        df = features_frame([full_session_data])
        row = [float(df.loc[0, name]) for name in FeatureSchemaV1.NAMES]
        assert row == extract_features(full_session_data)
