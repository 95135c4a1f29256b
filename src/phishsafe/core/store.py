"""Persistence primitives: session documents as JSON, feature tables as parquet."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import pandas as pd

from phishsafe.core.defaults import DEFAULT_EXPORT_DIR
from phishsafe.core.types import SessionDocument

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, suffix: str, write: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=suffix)
    try:
        os.close(fd)
        write(tmp)
        os.replace(tmp, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp)
        raise
    return path


def write_session_json(document: SessionDocument, path: Path) -> Path:
    """Write *document* to *path* as JSON atomically.

    Writes to a temporary file in the same directory first, then
    atomically replaces the target via :func:`os.replace`, so readers
    never see a partially-written session.

    Args:
        document: Assembled session document.
        path: Destination file path (e.g. ``data/sessions/session_log.json``).

    Returns:
        The *path* that was written, for convenient chaining.
    """
    payload = json.dumps(document.model_dump(mode="json"), indent=2) + "\n"
    return _atomic_write(
        path, ".json.tmp", lambda tmp: Path(tmp).write_text(payload, "utf-8"),
    )


def read_session_json(path: Path) -> dict[str, Any]:
    """Read a persisted session as a plain mapping (no validation)."""
    return json.loads(path.read_text("utf-8"))


def load_session_document(path: Path) -> SessionDocument:
    """Read and validate a persisted session.

    Raises:
        pydantic.ValidationError: If the file does not match the document schema.
    """
    return SessionDocument.model_validate(read_session_json(path))


class JsonFileSink:
    """Export sink writing ``<out_dir>/<logical_name>.json``."""

    def __init__(self, out_dir: Path | str = DEFAULT_EXPORT_DIR) -> None:
        self._out_dir = Path(out_dir)

    def write(self, document: SessionDocument, logical_name: str) -> Path:
        path = write_session_json(document, self._out_dir / f"{logical_name}.json")
        logger.info("Session exported to %s", path)
        return path


def write_parquet(df: pd.DataFrame, path: Path) -> Path:
    """Write *df* to a parquet file at *path* atomically.

    Args:
        df: DataFrame to persist (typically from
            :func:`~phishsafe.features.extract.features_frame`).
        path: Destination file path.

    Returns:
        The *path* that was written.
    """
    return _atomic_write(
        path,
        ".parquet.tmp",
        lambda tmp: df.to_parquet(tmp, engine="pyarrow", index=False),
    )


def read_parquet(path: Path) -> pd.DataFrame:
    return pd.read_parquet(path, engine="pyarrow")
