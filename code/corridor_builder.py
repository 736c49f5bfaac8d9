"""Corridor geometry: straight and single-bend paths between two rooms."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from dungeon_geometry import Direction, Rect, TilePos, overlap_interval
from dungeon_models import Room

STRAIGHT = "straight"
BEND_X_FIRST = "bend_x_first"
BEND_Y_FIRST = "bend_y_first"

_POSITIVE = {0: Direction.EAST, 1: Direction.SOUTH}
_NEGATIVE = {0: Direction.WEST, 1: Direction.NORTH}


@dataclass(frozen=True)
class CorridorPlan:
    """A candidate corridor: its cells plus the door placed in each room's wall."""

    kind: str
    cells: Tuple[TilePos, ...]
    door_a: TilePos
    side_a: Direction
    door_b: TilePos
    side_b: Direction

    @property
    def is_straight(self) -> bool:
        return self.kind == STRAIGHT


def _tile(axis: int, along: int, across: int) -> TilePos:
    """Build a tile from coordinates expressed relative to ``axis``."""
    if axis == 0:
        return TilePos(along, across)
    return TilePos(across, along)


def _band(center: int, width: int, *limits: Tuple[int, int]) -> List[int]:
    """Return ``width`` consecutive coordinates around ``center`` clipped to every limit."""
    start = center - (width - 1) // 2
    values = range(start, start + width)
    return [v for v in values if all(lo <= v < hi for lo, hi in limits)]


class CorridorBuilder:
    """Plans corridors of a fixed width inside a bounded region."""

    def __init__(self, corridor_width: int, region: Rect) -> None:
        if corridor_width < 1:
            raise ValueError("Corridor width must be positive")
        self.corridor_width = corridor_width
        self.region = region

    def plan_corridors(self, room_a: Room, room_b: Room, rng: random.Random) -> List[CorridorPlan]:
        """Return every geometrically possible path from ``room_a`` to ``room_b``.

        The straight path comes first when the rooms share a span; the two
        single-bend paths follow in an order drawn from ``rng``.
        """
        plans: List[CorridorPlan] = []
        straight = self.plan_straight(room_a, room_b)
        if straight is not None:
            plans.append(straight)
        bend_axes = [0, 1]
        if rng.random() < 0.5:
            bend_axes.reverse()
        for axis in bend_axes:
            bent = self.plan_bent(room_a, room_b, axis)
            if bent is not None:
                plans.append(bent)
        return plans

    def plan_straight(self, room_a: Room, room_b: Room) -> Optional[CorridorPlan]:
        """Plan a straight corridor, or return None when the rooms share no span."""
        a, b = room_a.bounds, room_b.bounds
        for axis in (0, 1):
            across = 1 - axis
            shared = overlap_interval(a.span(across), b.span(across))
            if shared is None:
                continue
            a_start, a_end = a.span(axis)
            b_start, b_end = b.span(axis)
            if a_end <= b_start:
                forward = True
            elif b_end <= a_start:
                forward = False
            else:
                continue

            center = (shared[0] + shared[1] - 1) // 2
            band = _band(center, self.corridor_width, shared, self.region.span(across))
            if forward:
                along_values: Iterable[int] = range(a_end, b_start)
                door_a = _tile(axis, a_end - 1, center)
                door_b = _tile(axis, b_start, center)
                side_a, side_b = _POSITIVE[axis], _NEGATIVE[axis]
            else:
                along_values = range(a_start - 1, b_end - 1, -1)
                door_a = _tile(axis, a_start, center)
                door_b = _tile(axis, b_end - 1, center)
                side_a, side_b = _NEGATIVE[axis], _POSITIVE[axis]

            cells = [_tile(axis, along, value) for along in along_values for value in band]
            return CorridorPlan(
                kind=STRAIGHT,
                cells=self._finalize(cells, a, b),
                door_a=door_a,
                side_a=side_a,
                door_b=door_b,
                side_b=side_b,
            )
        return None

    def plan_bent(self, room_a: Room, room_b: Room, axis: int) -> Optional[CorridorPlan]:
        """Plan an L corridor leaving ``room_a`` along ``axis`` and entering ``room_b`` across it.

        Returns None when the bend would start inside room A's span or end
        outside room B's wall.
        """
        a, b = room_a.bounds, room_b.bounds
        across = 1 - axis
        a_start, a_end = a.span(axis)
        b_start, b_end = b.span(axis)
        b_across_start, b_across_end = b.span(across)
        exit_across = a.center[across]
        turn_along = b.center[axis]

        if a_start <= turn_along < a_end:
            return None
        if b_across_start <= exit_across < b_across_end:
            return None

        first_band = _band(exit_across, self.corridor_width, a.span(across), self.region.span(across))
        second_band = _band(turn_along, self.corridor_width, b.span(axis), self.region.span(axis))
        forward_first = turn_along >= a_end
        forward_second = b_across_start > exit_across

        if forward_first:
            first_values: Iterable[int] = range(a_end, max(second_band) + 1)
            door_a = _tile(axis, a_end - 1, exit_across)
            side_a = _POSITIVE[axis]
        else:
            first_values = range(a_start - 1, min(second_band) - 1, -1)
            door_a = _tile(axis, a_start, exit_across)
            side_a = _NEGATIVE[axis]

        if forward_second:
            second_values: Iterable[int] = range(max(first_band) + 1, b_across_start)
            door_b = _tile(axis, turn_along, b_across_start)
            side_b = _NEGATIVE[across]
        else:
            second_values = range(min(first_band) - 1, b_across_end - 1, -1)
            door_b = _tile(axis, turn_along, b_across_end - 1)
            side_b = _POSITIVE[across]

        cells = [_tile(axis, along, value) for along in first_values for value in first_band]
        cells.extend(_tile(axis, value, step) for step in second_values for value in second_band)
        return CorridorPlan(
            kind=BEND_X_FIRST if axis == 0 else BEND_Y_FIRST,
            cells=self._finalize(cells, a, b),
            door_a=door_a,
            side_a=side_a,
            door_b=door_b,
            side_b=side_b,
        )

    def _finalize(self, cells: Iterable[TilePos], a: Rect, b: Rect) -> Tuple[TilePos, ...]:
        """Drop duplicates, cells outside the region and cells of the two end rooms."""
        seen: Set[TilePos] = set()
        kept: List[TilePos] = []
        for cell in cells:
            if cell in seen:
                continue
            seen.add(cell)
            if not self.region.contains(cell) or a.contains(cell) or b.contains(cell):
                continue
            kept.append(cell)
        return tuple(kept)
