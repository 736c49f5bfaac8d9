"""Scores rooms and picks the starting room of a dungeon."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from dungeon_config import EdgePreference, StartCriteria
from dungeon_constants import (
    CENTRALITY_WEIGHT,
    CONNECTION_BONUS,
    CORNER_PENALTY,
    EXCESS_CONNECTION_PENALTY,
    PREFERRED_EDGE_BONUS,
    TOUCHING_EDGE_BONUS,
    TOUCHING_EDGE_DISTANCE,
    UNPREFERRED_EDGE_PENALTY,
)
from dungeon_errors import NoStartCandidateError
from dungeon_geometry import Direction
from dungeon_models import Room, RoomType

logger = logging.getLogger(__name__)

_PREFERRED_EDGES: Dict[EdgePreference, FrozenSet[Direction]] = {
    EdgePreference.ANY: frozenset(Direction),
    EdgePreference.NORTH: frozenset({Direction.NORTH}),
    EdgePreference.SOUTH: frozenset({Direction.SOUTH}),
    EdgePreference.EAST: frozenset({Direction.EAST}),
    EdgePreference.WEST: frozenset({Direction.WEST}),
    EdgePreference.NORTH_SOUTH: frozenset({Direction.NORTH, Direction.SOUTH}),
    EdgePreference.EAST_WEST: frozenset({Direction.EAST, Direction.WEST}),
}


@dataclass
class StartSelection:
    """Outcome of a starting room selection."""

    room: Room
    score: float
    nearest_edge: Direction
    edge_distance: int
    candidate_scores: Dict[int, float] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def relaxed(self) -> bool:
        return bool(self.warnings)


class StartingPointSelector:
    """Chooses the start room by weighted score after hard area/connection filters."""

    def __init__(self, width: int, height: int, criteria: Optional[StartCriteria] = None) -> None:
        self.width = width
        self.height = height
        self.criteria = criteria or StartCriteria()

    def nearest_edge(self, room: Room) -> Tuple[Direction, int]:
        """Return the region edge closest to ``room`` and the gap to it in tiles."""
        bounds = room.bounds
        distances = (
            (Direction.NORTH, bounds.y),
            (Direction.SOUTH, self.height - bounds.max_y),
            (Direction.EAST, self.width - bounds.max_x),
            (Direction.WEST, bounds.x),
        )
        return min(distances, key=lambda item: item[1])

    def is_in_corner(self, room: Room) -> bool:
        cx, cy = room.center
        corners = ((0, 0), (self.width, 0), (self.width, self.height), (0, self.height))
        radius = self.criteria.corner_avoidance_radius
        return any(math.hypot(cx - x, cy - y) < radius for x, y in corners)

    def score(self, room: Room) -> float:
        criteria = self.criteria
        score = 0.0

        connections = room.connection_count
        if connections > criteria.max_connections:
            score -= (connections - criteria.max_connections) * EXCESS_CONNECTION_PENALTY
        else:
            score += connections * CONNECTION_BONUS

        edge, distance = self.nearest_edge(room)
        if criteria.prefer_map_edge:
            half_extent = max(min(self.width, self.height) / 2.0, 1.0)
            closeness = max(0.0, 1.0 - distance / half_extent)
            score += closeness * criteria.edge_preference_strength
            if distance < TOUCHING_EDGE_DISTANCE:
                score += TOUCHING_EDGE_BONUS
            if criteria.preferred_edge is not EdgePreference.ANY:
                if edge in _PREFERRED_EDGES[criteria.preferred_edge]:
                    score += PREFERRED_EDGE_BONUS
                else:
                    score -= UNPREFERRED_EDGE_PENALTY
        else:
            mid_x, mid_y = self.width / 2.0, self.height / 2.0
            max_distance = math.hypot(mid_x, mid_y)
            from_center = math.hypot(room.center.x - mid_x, room.center.y - mid_y)
            score += (1.0 - from_center / max_distance) * CENTRALITY_WEIGHT

        if not criteria.allow_corners and self.is_in_corner(room):
            score -= CORNER_PENALTY
        return score

    def _filter_candidates(self, rooms: Sequence[Room], warnings: List[str]) -> List[Room]:
        criteria = self.criteria
        big_enough = [room for room in rooms if room.area >= criteria.min_room_area]
        candidates = [room for room in big_enough if room.connection_count >= criteria.min_connections]
        if candidates:
            return candidates

        message = f"No room has {criteria.min_connections}+ connections; ignoring the connection filter"
        logger.warning(message)
        warnings.append(message)
        if big_enough:
            return big_enough

        message = f"No room has area >= {criteria.min_room_area}; ignoring the area filter"
        logger.warning(message)
        warnings.append(message)
        return list(rooms)

    def select(self, rooms: Sequence[Room]) -> StartSelection:
        """Pick the start room among ``rooms`` and flag it.

        Raises NoStartCandidateError when ``rooms`` is empty.
        """
        if not rooms:
            raise NoStartCandidateError("Cannot choose a starting room from an empty room set")

        warnings: List[str] = []
        candidates = self._filter_candidates(rooms, warnings)
        scores = {room.id: self.score(room) for room in rooms}
        chosen = max(candidates, key=lambda room: (scores[room.id], -room.id))

        for room in rooms:
            if room.is_starting_room:
                room.is_starting_room = False
                room.room_type = room.base_type
        chosen.is_starting_room = True
        chosen.room_type = RoomType.STARTING

        edge, distance = self.nearest_edge(chosen)
        logger.debug(
            "Selected starting room %d on %s edge (score %.2f)",
            chosen.id,
            edge.name.lower(),
            scores[chosen.id],
        )
        return StartSelection(
            room=chosen,
            score=scores[chosen.id],
            nearest_edge=edge,
            edge_distance=distance,
            candidate_scores=scores,
            warnings=warnings,
        )

