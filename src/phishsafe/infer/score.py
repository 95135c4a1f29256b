"""Scoring seam: session document -> feature batch -> external model.

The scoring model itself is host-owned; this module only prepares its
input exactly the way the reference flow does.  The document is pushed
through a JSON round trip first so the extractor sees what a re-loaded
export would contain.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import numpy as np

from phishsafe.adapters.collaborators import Scorer
from phishsafe.core.schema import FeatureSchemaV1
from phishsafe.core.types import SessionDocument
from phishsafe.features.extract import extract_features

logger = logging.getLogger(__name__)


def roundtrip_document(document: SessionDocument) -> dict[str, Any]:
    """Serialize *document* to JSON text and parse it back into a mapping."""
    return json.loads(json.dumps(document.model_dump(mode="json")))


def feature_batch(document: SessionDocument | Mapping[str, Any]) -> np.ndarray:
    """Build the ``(1, 19)`` float32 input batch for a scoring model."""
    vector = extract_features(document)
    FeatureSchemaV1.validate_vector(vector)
    return np.asarray([vector], dtype=np.float32)


def score_session(document: SessionDocument, scorer: Scorer) -> float:
    """Run *scorer* on the features of *document*.

    Args:
        document: Assembled session document.
        scorer: Host model whose ``predict`` accepts a ``(1, 19)`` batch.

    Returns:
        The first scalar of the model output.
    """
    batch = feature_batch(roundtrip_document(document))
    output = np.asarray(scorer.predict(batch), dtype=np.float64)
    score = float(output.reshape(-1)[0])
    logger.info("Session scored %.4f (schema=%s)", score, FeatureSchemaV1.SCHEMA_HASH)
    return score
