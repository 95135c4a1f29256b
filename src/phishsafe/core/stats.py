"""Aggregate statistics shared by every feature that summarises a sample set."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; ``0.0`` for an empty sample."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def std(values: Sequence[float]) -> float:
    """Unbiased (n - 1) sample standard deviation; ``0.0`` for <= 1 sample."""
    if len(values) <= 1:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=1))


def finite_or_zero(value: float) -> float:
    """Replace NaN / +-inf with ``0.0`` so vectors stay finite."""
    return value if math.isfinite(value) else 0.0
