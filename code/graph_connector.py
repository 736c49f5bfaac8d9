"""Connects the rooms of a partition tree with doors and corridors."""

from __future__ import annotations

import itertools
import logging
import random
from typing import FrozenSet, List, Optional, Set, Tuple

from component_manager import ComponentManager
from corridor_builder import CorridorBuilder, CorridorPlan
from dungeon_config import DungeonConfig
from dungeon_constants import MAX_LOOP_PAIR_ATTEMPTS, MAX_PAIR_CANDIDATES
from dungeon_errors import DungeonGenerationError
from dungeon_geometry import Rect
from dungeon_models import Corridor, Door, PartitionNode, Room
from spatial_index import SpatialIndex

logger = logging.getLogger(__name__)

RoomPair = Tuple[Room, Room]


class GraphConnector:
    """Builds a spanning corridor network bottom-up over the partition tree.

    Every internal node joins one room of its left subtree to one room of its
    right subtree, so the spanning edges reach every leaf. Optional straight
    loop corridors are added afterwards for route variety.
    """

    def __init__(self, config: DungeonConfig, rng: random.Random) -> None:
        self.config = config
        self.rng = rng
        self.region = Rect(0, 0, config.width, config.height)
        self.builder = CorridorBuilder(config.corridor_width, self.region)
        self.spatial_index = SpatialIndex()
        self.components = ComponentManager()
        self.doors: List[Door] = []
        self.corridors: List[Corridor] = []
        self._linked_pairs: Set[FrozenSet[int]] = set()

    def connect(self, root: PartitionNode, rooms: List[Room]) -> Tuple[List[Door], List[Corridor]]:
        """Create doors and corridors for ``rooms`` and return them."""
        for room in rooms:
            self.spatial_index.add_room(room)
            self.components.register_room(room.id)

        internal_nodes = [node for node in root.iter_post_order() if not node.is_leaf]
        for node in internal_nodes:
            self._connect_subtrees(node)

        if not self.components.has_single_component():
            logger.error(
                "Spanning pass left %d components: %s",
                self.components.total_components(),
                self.components.component_sizes(),
            )
        logger.debug("Spanning pass created %d corridors", len(self.corridors))

        loops_before = len(self.corridors)
        for node in internal_nodes:
            if self.rng.random() < self.config.extra_connection_chance:
                self._try_add_loop(node)
        logger.debug("Loop pass added %d corridors", len(self.corridors) - loops_before)
        return self.doors, self.corridors

    def _candidate_pairs(self, node: PartitionNode) -> List[RoomPair]:
        """Cross-subtree room pairs, nearest first, ties broken by room ids."""
        assert node.left is not None and node.right is not None
        pairs = list(itertools.product(node.left.rooms(), node.right.rooms()))
        pairs.sort(key=lambda pair: (pair[0].bounds.gap_to(pair[1].bounds), pair[0].id, pair[1].id))
        return pairs

    def _connect_subtrees(self, node: PartitionNode) -> None:
        fallback: Optional[Tuple[Room, Room, CorridorPlan]] = None
        for room_a, room_b in self._candidate_pairs(node)[:MAX_PAIR_CANDIDATES]:
            plans = self.builder.plan_corridors(room_a, room_b, self.rng)
            if not plans:
                continue
            if fallback is None:
                fallback = (room_a, room_b, plans[0])
            for plan in plans:
                if self._is_clear(plan, room_a, room_b):
                    self._add_connection(room_a, room_b, plan, is_loop=False)
                    return

        if fallback is None:
            raise DungeonGenerationError(f"No corridor geometry between the subtrees of {node.bounds}")
        room_a, room_b, plan = fallback
        logger.debug("No clear corridor at %s; using nearest pair %d-%d", node.bounds, room_a.id, room_b.id)
        self._add_connection(room_a, room_b, plan, is_loop=False)

    def _try_add_loop(self, node: PartitionNode) -> None:
        limit = self.config.max_doors_per_room
        attempts = 0
        for room_a, room_b in self._candidate_pairs(node):
            if frozenset((room_a.id, room_b.id)) in self._linked_pairs:
                continue
            if room_a.connection_count >= limit or room_b.connection_count >= limit:
                continue
            if attempts >= MAX_LOOP_PAIR_ATTEMPTS:
                break
            attempts += 1
            plan = self.builder.plan_straight(room_a, room_b)
            if plan is not None and self._is_clear(plan, room_a, room_b):
                self._add_connection(room_a, room_b, plan, is_loop=True)
                return
        if attempts:
            logger.warning("Gave up on loop corridor at %s after %d pairs", node.bounds, attempts)

    def _is_clear(self, plan: CorridorPlan, room_a: Room, room_b: Room) -> bool:
        return self.spatial_index.is_path_clear(plan.cells, ignore_rooms={room_a.id, room_b.id})

    def _add_connection(self, room_a: Room, room_b: Room, plan: CorridorPlan, *, is_loop: bool) -> None:
        corridor = Corridor(
            id=len(self.corridors),
            room_a_id=room_a.id,
            room_b_id=room_b.id,
            cells=plan.cells,
            is_loop=is_loop,
        )
        self.corridors.append(corridor)
        self.spatial_index.add_corridor(corridor.id, corridor.cells)

        for owner, other, position, side in (
            (room_a, room_b, plan.door_a, plan.side_a),
            (room_b, room_a, plan.door_b, plan.side_b),
        ):
            door = Door(
                id=len(self.doors),
                position=position,
                side=side,
                room_a_id=owner.id,
                room_b_id=other.id,
                corridor_id=corridor.id,
            )
            self.doors.append(door)
            owner.door_ids.add(door.id)

        self.components.connect(room_a.id, room_b.id)
        self._linked_pairs.add(frozenset((room_a.id, room_b.id)))
