"""Replay a recorded raw-event log through a :class:`SessionContext`.

Each log record is a JSON object with a ``type`` and an ISO-8601
``timestamp``; the context's clock is moved to that timestamp before the
event is applied, so durations and joins reflect the original timing.

Supported types and their extra fields:

=====================  ==============================================
``start`` / ``end``    --
``tap``                ``screen``, ``position`` {dx, dy}, and either
                       ``zone`` or ``container_size`` [w, h]
``swipe_start``        ``position`` {dx, dy} or ``y``
``swipe_end``          ``position`` {dx, dy} or ``y``
``visit``              ``screen``
``screen_duration``    ``screen``, ``seconds``
``transaction_amount`` ``amount``
``fd_broken`` / ``loan_taken`` / ``transaction_start`` / ``transaction_end``
=====================  ==============================================
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from phishsafe.adapters.collaborators import DeviceInfoProvider, LocationProvider
from phishsafe.core.config import TrackerConfig
from phishsafe.core.time import ManualClock, parse_timestamp, utc_now
from phishsafe.core.types import Position, SessionDocument
from phishsafe.session.context import SessionContext

logger = logging.getLogger(__name__)


def read_event_log(path: Path) -> Iterator[dict[str, Any]]:
    """Yield JSON-lines records from *path*, skipping blank and malformed lines."""
    with path.open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("Skipping malformed event at %s:%d", path, lineno)
                continue
            if isinstance(record, dict):
                yield record


def _position(record: Mapping[str, Any]) -> Position | float:
    pos = record.get("position")
    if isinstance(pos, Mapping):
        return Position(dx=float(pos.get("dx", 0.0)), dy=float(pos.get("dy", 0.0)))
    return float(record.get("y", 0.0))


def _apply(ctx: SessionContext, record: Mapping[str, Any]) -> None:
    kind = record.get("type")
    if kind == "start":
        ctx.start()
    elif kind == "end":
        pass
    elif kind == "tap":
        position = _position(record)
        if not isinstance(position, Position):
            position = Position(dx=0.0, dy=position)
        if "zone" in record:
            ctx.record_tap(str(record.get("screen", "")), position, str(record["zone"]))
        else:
            size = record.get("container_size")
            ctx.record_tap_position(
                str(record.get("screen", "")),
                position,
                (float(size[0]), float(size[1])) if size else None,
            )
    elif kind == "swipe_start":
        ctx.swipe_start(_position(record))
    elif kind == "swipe_end":
        ctx.swipe_end(_position(record))
    elif kind == "visit":
        ctx.screen_visited(str(record.get("screen", "")))
    elif kind == "screen_duration":
        ctx.record_screen_duration(str(record.get("screen", "")), int(record.get("seconds", 0)))
    elif kind == "transaction_amount":
        ctx.record_transfer_amount(str(record.get("amount", "")))
    elif kind == "fd_broken":
        ctx.record_fd_broken()
    elif kind == "loan_taken":
        ctx.record_loan_taken()
    elif kind == "transaction_start":
        ctx.mark_transaction_start()
    elif kind == "transaction_end":
        ctx.mark_transaction_end()
    else:
        logger.warning("Skipping unknown event type %r", kind)


def replay_events(
    records: Iterable[Mapping[str, Any]],
    config: TrackerConfig | None = None,
    *,
    location_provider: LocationProvider | None = None,
    device_info_provider: DeviceInfoProvider | None = None,
) -> SessionDocument:
    """Drive a fresh :class:`SessionContext` with *records* and return its document.

    A session is started implicitly if the log does not begin with
    ``start``.  Records are applied up to the first ``end`` (or the end of
    the log); the session end time is that record's timestamp.
    """
    records = list(records)
    first_ts = next(
        (ts for ts in (parse_timestamp(r.get("timestamp")) for r in records) if ts is not None),
        None,
    )
    clock = ManualClock(first_ts or utc_now())
    ctx = SessionContext(
        config,
        location_provider=location_provider,
        device_info_provider=device_info_provider,
        clock=clock,
    )

    for record in records:
        ts = parse_timestamp(record.get("timestamp"))
        if ts is not None:
            clock.set(ts)
        if not ctx.is_active and record.get("type") != "start":
            ctx.start()
        try:
            _apply(ctx, record)
        except (TypeError, ValueError, IndexError):
            logger.warning("Skipping invalid %r event", record.get("type"), exc_info=True)
        if record.get("type") == "end":
            break

    if not records:
        ctx.start()
    return ctx.end()
