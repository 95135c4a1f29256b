"""Tests for the scoring seam: feature batch shape/dtype and scorer wiring."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from phishsafe.adapters.collaborators import Scorer
from phishsafe.core.types import SessionDocument
from phishsafe.features.extract import extract_features
from phishsafe.infer.score import feature_batch, roundtrip_document, score_session


class _FakeScorer:
    def __init__(self, output: Any) -> None:
        self.output = output
        self.seen: list[np.ndarray] = []

    def predict(self, features: np.ndarray) -> Any:
        self.seen.append(features)
        return self.output


class TestFeatureBatch:
    def test_shape_and_dtype(self, full_session_data: dict[str, Any]) -> None:
        batch = feature_batch(full_session_data)
        assert batch.shape == (1, 19)
        assert batch.dtype == np.float32

    def test_matches_extractor(self, full_session_data: dict[str, Any]) -> None:
        batch = feature_batch(full_session_data)
        expected = np.asarray(extract_features(full_session_data), dtype=np.float32)
        np.testing.assert_array_equal(batch[0], expected)


class TestRoundtrip:
    def test_plain_json_types(self, full_session_data: dict[str, Any]) -> None:
        doc = SessionDocument.model_validate(full_session_data)
        raw = roundtrip_document(doc)
        assert raw["session"]["start"] == "2026-03-14T09:30:00"
        assert raw["location"] == {"latitude": 19.07, "longitude": 72.87}


class TestScoreSession:
    def test_scorer_receives_batch(self, full_session_data: dict[str, Any]) -> None:
        scorer = _FakeScorer([[0.83]])
        score = score_session(SessionDocument.model_validate(full_session_data), scorer)
        assert score == pytest.approx(0.83)
        [batch] = scorer.seen
        assert batch.shape == (1, 19)
        assert batch.dtype == np.float32

    def test_scalar_output(self) -> None:
        assert score_session(SessionDocument(), _FakeScorer(0.1)) == pytest.approx(0.1)

    def test_fake_satisfies_protocol(self) -> None:
        assert isinstance(_FakeScorer(0.0), Scorer)
