"""Post-generation checks and quality scores for a finished dungeon."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from dungeon_constants import (
    CRAMPED_STARTING_ROOM_AREA,
    EARLY_BOSS_DISTANCE,
    MAX_LARGE_ROOM_RATIO,
    MAX_SMALL_ROOM_RATIO,
    MAX_STARTING_ROOM_CONNECTIONS,
    MIN_ROOM_TYPE_VARIETY,
    MIN_STARTING_ROOM_CONNECTIONS,
    VERY_LARGE_ROOM_AREA,
)
from dungeon_models import UNREACHED, DungeonResult, Room, RoomType


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    completability_score: float = 0.0
    balance_score: float = 0.0
    reachable_room_ids: Tuple[int, ...] = ()


def gini_coefficient(counts: Iterable[int]) -> float:
    """Compute the Gini coefficient for a list of non-negative counts."""
    data = [value for value in counts if value > 0]
    if not data:
        return 0.0
    data.sort()
    total = sum(data)
    n = len(data)
    weighted_sum = 0.0
    for index, value in enumerate(data, start=1):
        weighted_sum += index * value
    return (2.0 * weighted_sum) / (n * total) - (n + 1) / n


def normalized_entropy(counts: Iterable[int], categories: int) -> float:
    """Shannon entropy of a histogram divided by its maximum over ``categories`` bins."""
    data = [value for value in counts if value > 0]
    total = sum(data)
    if total <= 0 or categories <= 1:
        return 0.0
    entropy = -sum((value / total) * math.log(value / total) for value in data)
    return entropy / math.log(categories)


def build_room_graph(result: DungeonResult) -> nx.Graph:
    """Undirected room graph with one edge per pair of rooms joined by a door."""
    graph = nx.Graph()
    for room in result.rooms:
        graph.add_node(room.id)
    for door in result.doors:
        if graph.has_node(door.room_a_id) and graph.has_node(door.room_b_id):
            graph.add_edge(door.room_a_id, door.room_b_id)
    return graph


def balance_score(rooms: Iterable[Room]) -> float:
    """Evenness of the room-type mix and of the rooms-per-distance spread, in [0, 1]."""
    rooms = list(rooms)
    if not rooms:
        return 0.0
    type_counts = Counter(room.room_type for room in rooms)
    type_evenness = normalized_entropy(type_counts.values(), len(RoomType))
    distance_counts = Counter(room.distance_from_start for room in rooms if room.distance_from_start >= 0)
    distance_evenness = 1.0 - gini_coefficient(distance_counts.values())
    return min(1.0, max(0.0, 0.5 * type_evenness + 0.5 * distance_evenness))


class DungeonValidator:
    """Inspects a DungeonResult without modifying it.

    Errors make the result invalid; warnings flag layouts that are legal but
    likely to play poorly.
    """

    def validate(self, result: Optional[DungeonResult]) -> ValidationResult:
        if result is None:
            return ValidationResult(is_valid=False, errors=["No dungeon result to validate"])
        if result.width <= 0 or result.height <= 0:
            return ValidationResult(
                is_valid=False,
                errors=[f"Dungeon region {result.width}x{result.height} is empty"],
            )
        if not result.rooms:
            return ValidationResult(is_valid=False, errors=["Dungeon has no rooms"])

        errors: List[str] = []
        warnings: List[str] = []
        rooms_by_id: Dict[int, Room] = {room.id: room for room in result.rooms}
        graph = build_room_graph(result)

        starts = [room for room in result.rooms if room.is_starting_room]
        start = result.starting_room
        if not starts or start is None:
            errors.append("Dungeon has no starting room")
        elif len(starts) > 1:
            errors.append(f"Dungeon has {len(starts)} starting rooms")
        if start is not None and start.distance_from_start != 0:
            errors.append(
                f"Starting room {start.id} has distance {start.distance_from_start}, expected 0"
            )

        reachable: Tuple[int, ...] = ()
        if start is not None and graph.has_node(start.id):
            shortest = nx.single_source_shortest_path_length(graph, start.id)
            reachable = tuple(sorted(shortest))
            for room in result.rooms:
                expected = shortest.get(room.id)
                if expected is None:
                    if room.distance_from_start != UNREACHED:
                        errors.append(
                            f"Room {room.id} is unreachable but labeled distance {room.distance_from_start}"
                        )
                elif room.distance_from_start != expected:
                    errors.append(
                        f"Room {room.id} is labeled distance {room.distance_from_start}"
                        f" but is {expected} doors from the start"
                    )

        reachable_set = set(reachable)
        unreachable = [room for room in result.rooms if room.id not in reachable_set]
        if unreachable:
            errors.append(f"{len(unreachable)} rooms are unreachable from the starting room")
            for room_type, count in sorted(
                Counter(room.room_type for room in unreachable).items(),
                key=lambda item: item[0].value,
            ):
                warnings.append(f"{count} unreachable {room_type.value} rooms")

        errors.extend(self._overlap_errors(result.rooms))
        errors.extend(self._door_errors(result, rooms_by_id, start))
        warnings.extend(self._layout_warnings(result, rooms_by_id, start))

        completability = len(reachable) / len(result.rooms)
        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            completability_score=completability,
            balance_score=balance_score(result.rooms),
            reachable_room_ids=reachable,
        )

    @staticmethod
    def _overlap_errors(rooms: Tuple[Room, ...]) -> List[str]:
        errors = []
        for index, room in enumerate(rooms):
            for other in rooms[index + 1:]:
                if room.bounds.overlaps(other.bounds):
                    errors.append(f"Rooms {room.id} and {other.id} overlap")
        return errors

    @staticmethod
    def _door_errors(
        result: DungeonResult,
        rooms_by_id: Dict[int, Room],
        start: Optional[Room],
    ) -> List[str]:
        errors = []
        for door in result.doors:
            missing = [room_id for room_id in (door.room_a_id, door.room_b_id) if room_id not in rooms_by_id]
            if missing:
                errors.append(f"Door {door.id} references unknown rooms {missing}")

        entrances = [door for door in result.doors if door.is_entrance]
        if len(entrances) > 1:
            errors.append(f"Dungeon has {len(entrances)} entrance doors")
        elif not entrances and result.doors:
            errors.append("Dungeon has doors but no entrance door")
        for door in entrances:
            if start is None or start.id not in (door.room_a_id, door.room_b_id):
                errors.append(f"Entrance door {door.id} does not open into the starting room")
        return errors

    @staticmethod
    def _layout_warnings(
        result: DungeonResult,
        rooms_by_id: Dict[int, Room],
        start: Optional[Room],
    ) -> List[str]:
        warnings = []
        total = len(result.rooms)
        type_counts = Counter(room.base_type for room in result.rooms)

        if len(type_counts) < MIN_ROOM_TYPE_VARIETY:
            warnings.append(f"Low room type variety: only {len(type_counts)} types")
        small_ratio = type_counts[RoomType.SMALL] / total
        if small_ratio > MAX_SMALL_ROOM_RATIO:
            warnings.append(f"Too many small rooms ({small_ratio:.0%})")
        large_ratio = type_counts[RoomType.LARGE] / total
        if large_ratio > MAX_LARGE_ROOM_RATIO:
            warnings.append(f"Too many large rooms ({large_ratio:.0%})")
        if not type_counts[RoomType.TREASURE]:
            warnings.append("No treasure rooms")

        boss_rooms = [room for room in result.rooms if room.room_type is RoomType.BOSS]
        if len(boss_rooms) > 1:
            warnings.append(f"Multiple boss rooms ({len(boss_rooms)})")
        for boss in boss_rooms:
            if 0 <= boss.distance_from_start <= EARLY_BOSS_DISTANCE:
                warnings.append(f"Boss room {boss.id} is only {boss.distance_from_start} rooms from the start")

        if start is not None:
            if start.area < CRAMPED_STARTING_ROOM_AREA:
                warnings.append(f"Starting room is cramped ({start.area} cells)")
            if total > 1 and start.connection_count < MIN_STARTING_ROOM_CONNECTIONS:
                warnings.append(f"Starting room has only {start.connection_count} connections")
            elif start.connection_count > MAX_STARTING_ROOM_CONNECTIONS:
                warnings.append(f"Starting room has {start.connection_count} connections")

        for room in result.rooms:
            if room.area > VERY_LARGE_ROOM_AREA:
                warnings.append(f"Room {room.id} is very large ({room.area} cells)")

        for door in result.doors:
            owner = rooms_by_id.get(door.room_a_id)
            if owner is not None and not owner.bounds.is_on_edge(door.position):
                warnings.append(f"Door {door.id} is not on the edge of room {owner.id}")
        return warnings


def validate_dungeon(result: Optional[DungeonResult]) -> ValidationResult:
    return DungeonValidator().validate(result)
