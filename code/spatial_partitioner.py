"""Binary space partitioning of the dungeon region."""

from __future__ import annotations

import logging
import random
from typing import Optional

from dungeon_config import DungeonConfig
from dungeon_constants import SPLIT_JITTER_FRACTION
from dungeon_geometry import Rect
from dungeon_models import PartitionNode

logger = logging.getLogger(__name__)


class SpatialPartitioner:
    """Recursively splits a rectangle into a tree of leaves big enough to hold a room.

    A leaf is never narrower than ``2 * min_room_size`` on either axis unless
    the whole region already is. Every split uses the run's own generator so
    that a seed always reproduces the same tree.
    """

    def __init__(self, config: DungeonConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng
        self.min_leaf_side = 2 * config.min_room_size

    def partition(self, bounds: Optional[Rect] = None) -> PartitionNode:
        """Build the partition tree for ``bounds`` (the whole region by default)."""
        if bounds is None:
            bounds = Rect(0, 0, self.config.width, self.config.height)
        root = PartitionNode(bounds=bounds, depth=0)
        self._split(root)
        leaf_count = sum(1 for _ in root.iter_leaves())
        logger.debug("Partitioned %sx%s region into %d leaves", bounds.width, bounds.height, leaf_count)
        return root

    def _split(self, node: PartitionNode) -> None:
        if node.depth >= self.config.max_partition_depth:
            return
        bounds = node.bounds
        if bounds.width < self.min_leaf_side or bounds.height < self.min_leaf_side:
            return

        vertical = self._choose_axis(bounds)
        if vertical is None:
            return

        length = bounds.width if vertical else bounds.height
        offset = self._split_offset(length)
        left_bounds, right_bounds = bounds.split(vertical, offset)

        node.split_vertical = vertical
        node.left = PartitionNode(bounds=left_bounds, depth=node.depth + 1)
        node.right = PartitionNode(bounds=right_bounds, depth=node.depth + 1)
        self._split(node.left)
        self._split(node.right)

    def _can_split(self, length: int) -> bool:
        return length >= 2 * self.min_leaf_side

    def _choose_axis(self, bounds: Rect) -> Optional[bool]:
        """Pick a split axis 50/50, falling back to the other axis if the pick is too short.

        Returns True for a vertical cut, False for a horizontal cut, None when
        neither axis can be split.
        """
        vertical = self.rng.random() < 0.5
        can_vertical = self._can_split(bounds.width)
        can_horizontal = self._can_split(bounds.height)
        if vertical and can_vertical:
            return True
        if not vertical and can_horizontal:
            return False
        if can_vertical:
            return True
        if can_horizontal:
            return False
        return None

    def _split_offset(self, length: int) -> int:
        midpoint = length // 2
        jitter = int(length * SPLIT_JITTER_FRACTION)
        offset = midpoint + (self.rng.randint(-jitter, jitter) if jitter > 0 else 0)
        return max(self.min_leaf_side, min(length - self.min_leaf_side, offset))


def partition_region(config: DungeonConfig, rng: random.Random) -> PartitionNode:
    """Convenience wrapper returning the partition tree for the configured region."""
    return SpatialPartitioner(config, rng).partition()
