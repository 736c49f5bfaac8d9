"""Distance labels, entrance designation and initial door lock states."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from dungeon_config import StartCriteria
from dungeon_geometry import distance_to_region_edge
from dungeon_models import UNREACHED, Corridor, Door, DoorState, Room

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressionLabels:
    distances: Dict[int, int]
    entrance_door_id: Optional[int]
    locked_door_ids: Tuple[int, ...]
    unreached_room_ids: Tuple[int, ...]

    @property
    def max_distance(self) -> int:
        return max(self.distances.values(), default=UNREACHED)


def build_adjacency(rooms: Sequence[Room], doors: Sequence[Door]) -> Dict[int, List[int]]:
    """Room adjacency induced by doors, neighbor lists sorted by id."""
    adjacency: Dict[int, set] = {room.id: set() for room in rooms}
    for door in doors:
        if door.room_a_id in adjacency and door.room_b_id in adjacency:
            adjacency[door.room_a_id].add(door.room_b_id)
            adjacency[door.room_b_id].add(door.room_a_id)
    return {room_id: sorted(neighbors) for room_id, neighbors in adjacency.items()}


def bfs_distances(adjacency: Dict[int, List[int]], start_id: int) -> Dict[int, int]:
    """Breadth-first hop counts from ``start_id``; rooms not reached are absent."""
    distances = {start_id: 0}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        for neighbor in adjacency.get(current, ()):
            if neighbor not in distances:
                distances[neighbor] = distances[current] + 1
                queue.append(neighbor)
    return distances


class ProgressionLabeler:
    """Labels rooms with their distance from the start and sets up doors."""

    def __init__(self, width: int, height: int, criteria: Optional[StartCriteria] = None) -> None:
        self.width = width
        self.height = height
        self.criteria = criteria or StartCriteria()

    def label(
        self,
        rooms: Sequence[Room],
        doors: Sequence[Door],
        corridors: Sequence[Corridor],
        start_room: Room,
    ) -> ProgressionLabels:
        reached = bfs_distances(build_adjacency(rooms, doors), start_room.id)
        distances: Dict[int, int] = {}
        for room in rooms:
            room.distance_from_start = reached.get(room.id, UNREACHED)
            distances[room.id] = room.distance_from_start
        unreached = tuple(room.id for room in rooms if room.distance_from_start == UNREACHED)
        if unreached:
            logger.warning("%d rooms are unreachable from room %d", len(unreached), start_room.id)

        for door in doors:
            door.is_entrance = False
            door.state = DoorState.OPEN

        locked = self._lock_gated_rooms(rooms, doors, distances)
        entrance = self._choose_entrance(start_room, doors, corridors)
        if entrance is not None:
            entrance.is_entrance = True
            entrance.state = DoorState.OPEN

        return ProgressionLabels(
            distances=distances,
            entrance_door_id=entrance.id if entrance is not None else None,
            locked_door_ids=tuple(locked),
            unreached_room_ids=unreached,
        )

    def _choose_entrance(
        self,
        start_room: Room,
        doors: Sequence[Door],
        corridors: Sequence[Corridor],
    ) -> Optional[Door]:
        candidates = [door for door in doors if door.room_a_id == start_room.id]
        if not candidates:
            return None
        if self.criteria.create_exterior_entrance:
            return min(
                candidates,
                key=lambda door: (
                    distance_to_region_edge(door.position, door.side, self.width, self.height),
                    door.id,
                ),
            )
        lengths = {corridor.id: corridor.length for corridor in corridors}
        return min(candidates, key=lambda door: (lengths.get(door.corridor_id, 0), door.id))

    @staticmethod
    def _lock_gated_rooms(
        rooms: Sequence[Room],
        doors: Sequence[Door],
        distances: Dict[int, int],
    ) -> List[int]:
        """Lock the doors through which each boss or treasure room is first entered."""
        doors_by_id = {door.id: door for door in doors}
        locked: List[int] = []
        for room in rooms:
            if not room.room_type.is_gated or room.distance_from_start <= 0:  # type: ignore[union-attr]
                continue
            for door_id in sorted(room.door_ids):
                door = doors_by_id[door_id]
                if distances.get(door.room_b_id) == room.distance_from_start - 1:
                    door.state = DoorState.LOCKED
                    locked.append(door.id)
        return locked
