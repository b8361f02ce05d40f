"""Geometry helpers for resolving drop targets.

Column drop zones and ticket cards share one id space: columns are keyed
``column-<status>`` and cards by their ticket id.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from trackboard.board.models import TicketStatus

COLUMN_PREFIX = "column-"

# Pointer travel (in pixels) before a press becomes a drag
DEFAULT_ACTIVATION_DISTANCE = 5.0


@dataclass(frozen=True)
class Point:
    """A pointer position."""

    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """An axis-aligned bounding box."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def corners(self) -> tuple[Point, Point, Point, Point]:
        """Corners in a fixed order: top-left, top-right, bottom-left, bottom-right."""
        return (
            Point(self.left, self.top),
            Point(self.right, self.top),
            Point(self.left, self.bottom),
            Point(self.right, self.bottom),
        )


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)


def corner_distance(dragged: Rect, candidate: Rect) -> float:
    """Sum of distances between corresponding corners of two rects."""
    return sum(
        distance(a, b) for a, b in zip(dragged.corners(), candidate.corners(), strict=True)
    )


def closest_corners(
    dragged_rect: Rect,
    candidate_rects: Mapping[str, Rect] | Iterable[tuple[str, Rect]],
) -> str | None:
    """Pick the drop target whose corners sit nearest the dragged item's corners.

    Comparing all four corners keeps the choice stable when a card straddles
    the edge between two adjacent columns.

    Args:
        dragged_rect: Current bounding box of the dragged card.
        candidate_rects: Droppable id -> bounding box.

    Returns:
        Id of the nearest candidate (first one wins a tie), or None when
        there are no candidates.
    """
    items = candidate_rects.items() if isinstance(candidate_rects, Mapping) else candidate_rects

    best_id: str | None = None
    best_distance = math.inf
    for candidate_id, rect in items:
        d = corner_distance(dragged_rect, rect)
        if d < best_distance:
            best_id = candidate_id
            best_distance = d
    return best_id


def column_droppable_id(status: TicketStatus | str) -> str:
    """Droppable id of a column."""
    return f"{COLUMN_PREFIX}{TicketStatus(status).value}"


def parse_droppable_id(droppable_id: str) -> TicketStatus | None:
    """Return the column status for a column droppable id.

    Returns None for anything that is not a valid column id (e.g. a ticket id).
    """
    if not droppable_id.startswith(COLUMN_PREFIX):
        return None
    try:
        return TicketStatus(droppable_id.removeprefix(COLUMN_PREFIX))
    except ValueError:
        return None


def exceeds_activation_distance(
    origin: Point,
    point: Point,
    activation_distance: float = DEFAULT_ACTIVATION_DISTANCE,
) -> bool:
    """Whether the pointer moved far enough from the press to start a drag."""
    return distance(origin, point) >= activation_distance
