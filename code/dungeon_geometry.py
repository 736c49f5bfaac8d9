"""Geometry helpers for working with tiles, rectangles, and wall directions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class Direction(Enum):
    """Cardinal directions with unit vectors on the tile grid (y grows south)."""

    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def is_vertical(self) -> bool:
        """True for NORTH/SOUTH, i.e. movement along the Y axis."""
        return self.value[0] == 0


@dataclass(frozen=True, order=True)
class TilePos:
    """Integer tile coordinate."""

    x: int
    y: int

    def __getitem__(self, index: int) -> int:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        raise IndexError("TilePos only supports two coordinates")

    def to_tuple(self) -> Tuple[int, int]:
        return self.x, self.y


@dataclass(frozen=True)
class Rect:
    """Immutable axis-aligned rectangle using integer tile coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def max_x(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def max_y(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> TilePos:
        return TilePos(self.x + self.width // 2, self.y + self.height // 2)

    def overlaps(self, other: Rect) -> bool:
        """Return True when the interior of this rect intersects another rect."""
        if self.max_x <= other.x or other.max_x <= self.x:
            return False
        if self.max_y <= other.y or other.max_y <= self.y:
            return False
        return True

    def contains(self, point: TilePos) -> bool:
        """Return True if the provided tile lies inside this rect."""
        return self.x <= point.x < self.max_x and self.y <= point.y < self.max_y

    def contains_rect(self, other: Rect) -> bool:
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def is_on_edge(self, point: TilePos) -> bool:
        """Return True if ``point`` is one of this rect's perimeter tiles."""
        if not self.contains(point):
            return False
        return (
            point.x in (self.x, self.max_x - 1)
            or point.y in (self.y, self.max_y - 1)
        )

    def split(self, vertical: bool, offset: int) -> Tuple[Rect, Rect]:
        """Cut the rect ``offset`` tiles from its origin.

        A vertical cut produces a left and right half, a horizontal cut a top
        and bottom half. The halves tessellate the original rect exactly.
        """
        if vertical:
            if not 0 < offset < self.width:
                raise ValueError(f"Vertical split offset {offset} outside width {self.width}")
            return (
                Rect(self.x, self.y, offset, self.height),
                Rect(self.x + offset, self.y, self.width - offset, self.height),
            )
        if not 0 < offset < self.height:
            raise ValueError(f"Horizontal split offset {offset} outside height {self.height}")
        return (
            Rect(self.x, self.y, self.width, offset),
            Rect(self.x, self.y + offset, self.width, self.height - offset),
        )

    def span(self, axis_index: int) -> Tuple[int, int]:
        """Return the ``[start, end)`` interval covered along an axis."""
        if axis_index == 0:
            return self.x, self.max_x
        return self.y, self.max_y

    def gap_to(self, other: Rect) -> int:
        """Manhattan gap between two rects (0 when touching or overlapping)."""
        gap_x = max(0, other.x - self.max_x, self.x - other.max_x)
        gap_y = max(0, other.y - self.max_y, self.y - other.max_y)
        return gap_x + gap_y

    def iter_tiles(self) -> Iterator[TilePos]:
        for ty in range(self.y, self.max_y):
            for tx in range(self.x, self.max_x):
                yield TilePos(tx, ty)

    def to_tuple(self) -> Tuple[int, int, int, int]:
        """Return the rect as an ``(x, y, width, height)`` tuple."""
        return self.x, self.y, self.width, self.height


def overlap_interval(a: Tuple[int, int], b: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    """Intersect two half-open intervals, returning None when they are disjoint."""
    start = max(a[0], b[0])
    end = min(a[1], b[1])
    if start >= end:
        return None
    return start, end


def distance_to_region_edge(point: TilePos, direction: Direction, width: int, height: int) -> int:
    """Number of tiles between ``point`` and the region boundary along ``direction``."""
    if direction is Direction.NORTH:
        return point.y
    if direction is Direction.SOUTH:
        return height - 1 - point.y
    if direction is Direction.WEST:
        return point.x
    if direction is Direction.EAST:
        return width - 1 - point.x
    raise AssertionError(f"Unhandled direction {direction}")
