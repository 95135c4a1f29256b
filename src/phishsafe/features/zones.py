"""Coarsen tap positions into the cells of a 3x3 screen grid."""

from __future__ import annotations

import math
from typing import Final

from phishsafe.core.types import Position, Zone

# Rows top -> bottom, columns left -> right.
_ZONE_GRID: Final[tuple[tuple[Zone, Zone, Zone], ...]] = (
    (Zone.TOP_LEFT, Zone.TOP_CENTER, Zone.TOP_RIGHT),
    (Zone.MIDDLE_LEFT, Zone.CENTER, Zone.MIDDLE_RIGHT),
    (Zone.BOTTOM_LEFT, Zone.BOTTOM_CENTER, Zone.BOTTOM_RIGHT),
)


def _band(offset: float, extent: float) -> int | None:
    if not (math.isfinite(offset) and math.isfinite(extent) and extent > 0):
        return None
    return min(max(math.floor(offset / (extent / 3)), 0), 2)


def tap_zone(position: Position, width: float, height: float) -> Zone:
    """Map a container-local *position* to its grid cell.

    Width and height are each split into three equal bands.  Positions
    outside the container clamp to the nearest edge cell.  A non-finite
    coordinate or a side that is not a finite positive number yields
    :attr:`Zone.UNKNOWN`.

    Args:
        position: Tap position relative to the container's top-left corner.
        width: Container width in px.
        height: Container height in px.

    Returns:
        One of the nine named :class:`Zone` cells, or ``unknown``.
    """
    row = _band(position.dy, height)
    col = _band(position.dx, width)
    if row is None or col is None:
        return Zone.UNKNOWN
    return _ZONE_GRID[row][col]


def zone_for_container(
    position: Position,
    size: tuple[float, float] | None,
) -> Zone:
    """Like :func:`tap_zone` but tolerant of an unavailable container size.

    Returns :attr:`Zone.UNKNOWN` when *size* is ``None``.
    """
    if size is None:
        return Zone.UNKNOWN
    width, height = size
    return tap_zone(position, width, height)
