"""Feature-vector schema: canonical ordering, deterministic hash, and validation."""

from __future__ import annotations

import json
import math
from typing import Final, Sequence

import pandas as pd

from phishsafe.core.hashing import stable_hash

# Index order is the scoring model's input contract.  Do NOT reorder or
# remove entries without a version bump.
_FEATURE_NAMES_V1: Final[tuple[str, ...]] = (
    "session_duration_s",
    "tap_duration_mean_ms",
    "tap_duration_std_ms",
    "tap_frequency",
    "swipe_speed_mean",
    "swipe_speed_std",
    "swipe_distance_mean",
    "swipe_distance_std",
    "tap_x_mean",
    "tap_y_mean",
    "visit_swipe_distance_mean",
    "visit_swipe_speed_mean",
    "screen_duration_mean_s",
    "screen_duration_std_s",
    "fd_broken",
    "loan_taken",
    "login_to_fd_s",
    "login_to_loan_s",
    "login_to_transaction_s",
)


def _build_schema_hash(names: Sequence[str]) -> str:
    return stable_hash(json.dumps(list(names), separators=(",", ":")))


class FeatureSchemaV1:
    """Schema contract for the 19-value session feature vector (v1)."""

    VERSION: Final[str] = "v1"
    NAMES: Final[tuple[str, ...]] = _FEATURE_NAMES_V1
    SCHEMA_HASH: Final[str] = _build_schema_hash(_FEATURE_NAMES_V1)

    @classmethod
    def as_dict(cls, vector: Sequence[float]) -> dict[str, float]:
        """Label *vector* with feature names (after validating it)."""
        cls.validate_vector(vector)
        return dict(zip(cls.NAMES, vector))

    @classmethod
    def validate_vector(cls, vector: Sequence[float]) -> None:
        """Check length and finiteness of a single feature vector.

        Raises:
            ValueError: If the vector length is not 19 or any value is
                non-numeric or non-finite.
        """
        if len(vector) != len(cls.NAMES):
            raise ValueError(
                f"Feature vector length mismatch: expected {len(cls.NAMES)}, "
                f"got {len(vector)}"
            )
        bad = [
            name for name, value in zip(cls.NAMES, vector)
            if not isinstance(value, float) or not math.isfinite(value)
        ]
        if bad:
            raise ValueError(f"Non-finite or non-float features: {bad}")

    @classmethod
    def validate_dataframe(cls, df: pd.DataFrame) -> None:
        """Check that *df* carries every feature column with a float dtype.

        Extra columns (e.g. ``session_start``) are allowed.

        Raises:
            ValueError: If feature columns are missing or not floating point.
        """
        missing = [name for name in cls.NAMES if name not in df.columns]
        if missing:
            raise ValueError(f"Missing columns: {missing}")

        errors = [
            f"Column '{name}': expected float, got dtype={df[name].dtype}"
            for name in cls.NAMES
            if df[name].dtype.kind != "f"
        ]
        if errors:
            raise ValueError("DataFrame dtype mismatches:\n" + "\n".join(errors))
