"""Reduce a session document to the fixed 19-value feature vector.

The extractor reads the document the way the scoring flow does: as a
loosely-typed mapping re-loaded from storage.  Missing, null, or
non-numeric fields default to zero / false and non-finite values are
coerced to ``0.0``, so extraction never raises on a partially-populated
document; it degrades to zeroed features instead.

Index order is defined by :attr:`FeatureSchemaV1.NAMES`.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import pandas as pd

from phishsafe.core.defaults import MIN_SESSION_SECONDS_FOR_FREQUENCY
from phishsafe.core.schema import FeatureSchemaV1
from phishsafe.core.stats import finite_or_zero, mean, std
from phishsafe.core.types import ZONE_LABELS, SessionDocument, Zone


def _num(value: Any) -> float:
    if isinstance(value, (int, float)):
        return finite_or_zero(float(value))
    return 0.0


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _items(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _flag(value: Any) -> float:
    return 1.0 if value is True else 0.0


def _as_mapping(document: SessionDocument | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(document, SessionDocument):
        return document.model_dump(mode="json")
    return _mapping(document)


def _known_zone(value: Any) -> bool:
    return isinstance(value, str) and value in ZONE_LABELS and value != Zone.UNKNOWN


def _tap_centroid(doc: Mapping[str, Any]) -> tuple[float, float]:
    # Centroid is taken before deduplication but after the capture-failure
    # filter; older documents without the raw list fall back to the
    # exported tap_events.
    source = doc["raw_tap_events"] if "raw_tap_events" in doc else doc.get("tap_events")
    xs: list[float] = []
    ys: list[float] = []
    for tap in _items(source):
        tap = _mapping(tap)
        position = _mapping(tap.get("position"))
        dx, dy = _num(position.get("dx")), _num(position.get("dy"))
        if dx == 0.0 and dy == 0.0 and not _known_zone(tap.get("zone")):
            continue
        xs.append(dx)
        ys.append(dy)
    return mean(xs), mean(ys)


def _nested_swipes(doc: Mapping[str, Any]) -> tuple[float, float]:
    distances: list[float] = []
    speeds: list[float] = []
    for visit in _items(doc.get("screens_visited")):
        for swipe in _items(_mapping(visit).get("swipe_events")):
            swipe = _mapping(swipe)
            distances.append(_num(swipe.get("distance_px")))
            speeds.append(_num(swipe.get("speed_px_per_ms")))
    return mean(distances), mean(speeds)


def extract_features(document: SessionDocument | Mapping[str, Any]) -> list[float]:
    """Compute the 19-value feature vector of one session.

    Deterministic: the same document always yields a bit-identical vector.

    Args:
        document: A :class:`SessionDocument` or a re-loaded JSON mapping
            of one (possibly partial).

    Returns:
        Nineteen Python floats in :attr:`FeatureSchemaV1.NAMES` order.
    """
    doc = _as_mapping(document)

    session_duration = _num(_mapping(doc.get("session")).get("duration_seconds"))

    tap_durations = [_num(v) for v in _items(doc.get("tap_durations_ms"))]
    tap_frequency = len(tap_durations) / max(
        session_duration, MIN_SESSION_SECONDS_FOR_FREQUENCY,
    )

    swipe_speeds: list[float] = []
    swipe_distances: list[float] = []
    for swipe in _items(doc.get("swipe_events")):
        swipe = _mapping(swipe)
        swipe_speeds.append(_num(swipe.get("speed_px_per_ms")))
        swipe_distances.append(_num(swipe.get("distance_px")))

    tap_x, tap_y = _tap_centroid(doc)
    visit_swipe_distance, visit_swipe_speed = _nested_swipes(doc)

    screen_values = [_num(v) for v in _mapping(doc.get("screen_durations")).values()]

    flow = _mapping(doc.get("session_input"))

    vector = [
        session_duration,
        mean(tap_durations),
        std(tap_durations),
        tap_frequency,
        mean(swipe_speeds),
        std(swipe_speeds),
        mean(swipe_distances),
        std(swipe_distances),
        tap_x,
        tap_y,
        visit_swipe_distance,
        visit_swipe_speed,
        mean(screen_values),
        std(screen_values),
        _flag(flow.get("fd_broken")),
        _flag(flow.get("loan_taken")),
        _num(flow.get("time_from_login_to_fd")),
        _num(flow.get("time_from_login_to_loan")),
        _num(flow.get("time_from_login_to_transaction")),
    ]
    return [finite_or_zero(float(v)) for v in vector]


def features_frame(
    documents: Iterable[SessionDocument | Mapping[str, Any]],
) -> pd.DataFrame:
    """Build one feature row per session document.

    Columns are ``session_start`` (ISO string or ``None``) followed by the
    feature names in schema order.
    """
    rows: list[dict[str, Any]] = []
    for document in documents:
        doc = _as_mapping(document)
        row: dict[str, Any] = {
            "session_start": _mapping(doc.get("session")).get("start"),
        }
        row.update(zip(FeatureSchemaV1.NAMES, extract_features(doc)))
        rows.append(row)
    return pd.DataFrame(rows, columns=["session_start", *FeatureSchemaV1.NAMES])
