"""Room placement: one room per partition leaf."""

from __future__ import annotations

import logging
import random
from typing import List, Tuple

from dungeon_config import DungeonConfig
from dungeon_geometry import Rect
from dungeon_models import PartitionNode, Room, RoomType

logger = logging.getLogger(__name__)


class RoomPlacer:
    """Creates a room inside every leaf of a partition tree and assigns its type."""

    def __init__(self, config: DungeonConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng

    def place_rooms(self, root: PartitionNode) -> List[Room]:
        """Attach a room to each leaf of ``root`` and return the rooms in leaf order."""
        rooms: List[Room] = []
        for leaf in root.iter_leaves():
            bounds = self._room_bounds(leaf.bounds)
            room = Room(id=len(rooms), bounds=bounds, base_type=self._draw_room_type(bounds))
            leaf.room = room
            rooms.append(room)
        logger.debug("Placed %d rooms", len(rooms))
        return rooms

    def _room_bounds(self, leaf: Rect) -> Rect:
        x, width = self._place_along_axis(leaf.x, leaf.width)
        y, height = self._place_along_axis(leaf.y, leaf.height)
        return Rect(x, y, width, height)

    def _place_along_axis(self, leaf_start: int, leaf_length: int) -> Tuple[int, int]:
        """Return ``(start, size)`` of the room along one axis of its leaf."""
        padding = self.config.room_padding
        min_size = self.config.min_room_size
        available = leaf_length - 2 * padding
        if available < min_size:
            # Leaf too tight for the inset: clamp the room to the leaf instead.
            size = min(leaf_length, self.config.max_room_size)
            return leaf_start + (leaf_length - size) // 2, size

        size = self.rng.randint(min_size, min(self.config.max_room_size, available))
        start = leaf_start + padding + self.rng.randint(0, available - size)
        return start, size

    def _draw_room_type(self, bounds: Rect) -> RoomType:
        """Weighted draw among the special types; the remainder maps to a size type."""
        roll = self.rng.random()
        cumulative = 0.0
        for room_type, chance in (
            (RoomType.TREASURE, self.config.treasure_room_chance),
            (RoomType.GUARD, self.config.guard_room_chance),
            (RoomType.LABORATORY, self.config.laboratory_chance),
            (RoomType.BOSS, self.config.boss_room_chance),
        ):
            cumulative += chance
            if roll < cumulative:
                return room_type
        return RoomType.for_area(bounds.area)
