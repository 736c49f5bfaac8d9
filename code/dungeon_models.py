"""Core dataclasses used by the dungeon generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple

from dungeon_constants import MEDIUM_ROOM_MAX_AREA, SMALL_ROOM_MAX_AREA
from dungeon_geometry import Direction, Rect, TilePos
from spatial_index import SpatialIndex

UNREACHED = -1


class RoomType(Enum):
    """Gameplay tag of a room; drives population and progression gating."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    TREASURE = "treasure"
    GUARD = "guard"
    LABORATORY = "laboratory"
    BOSS = "boss"
    STARTING = "starting"

    @classmethod
    def for_area(cls, area: int) -> RoomType:
        """Size-based type used when no special type was drawn."""
        if area <= SMALL_ROOM_MAX_AREA:
            return cls.SMALL
        if area <= MEDIUM_ROOM_MAX_AREA:
            return cls.MEDIUM
        return cls.LARGE

    @property
    def is_gated(self) -> bool:
        """Gated rooms start behind locked doors."""
        return self in (RoomType.BOSS, RoomType.TREASURE)


class DoorOrientation(Enum):
    HORIZONTAL = "horizontal"  # Door sits in a top or bottom wall.
    VERTICAL = "vertical"  # Door sits in a left or right wall.

    @classmethod
    def for_side(cls, side: Direction) -> DoorOrientation:
        if side.is_vertical:
            return cls.HORIZONTAL
        return cls.VERTICAL


class TileType(Enum):
    """What a consumer finds on a single tile of the region."""

    WALL = "wall"
    FLOOR = "floor"
    DOOR = "door"


class DoorState(Enum):
    OPEN = "open"
    CLOSED = "closed"
    LOCKED = "locked"
    SEALED = "sealed"
    HIDDEN = "hidden"


@dataclass
class Room:
    """A rectangular playable area assigned to one partition leaf."""

    id: int
    bounds: Rect
    base_type: RoomType
    room_type: Optional[RoomType] = None
    distance_from_start: int = UNREACHED
    is_starting_room: bool = False
    door_ids: Set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.room_type is None:
            self.room_type = self.base_type

    @property
    def center(self) -> TilePos:
        return self.bounds.center

    @property
    def area(self) -> int:
        return self.bounds.area

    @property
    def connection_count(self) -> int:
        return len(self.door_ids)


@dataclass
class Door:
    """Connection point in the wall of ``room_a_id`` leading towards ``room_b_id``."""

    id: int
    position: TilePos
    side: Direction
    room_a_id: int
    room_b_id: int
    corridor_id: int
    is_entrance: bool = False
    state: DoorState = DoorState.OPEN

    @property
    def orientation(self) -> DoorOrientation:
        return DoorOrientation.for_side(self.side)

    def other_room(self, room_id: int) -> Optional[int]:
        if room_id == self.room_a_id:
            return self.room_b_id
        if room_id == self.room_b_id:
            return self.room_a_id
        return None

    def joins(self, room_a_id: int, room_b_id: int) -> bool:
        return {self.room_a_id, self.room_b_id} == {room_a_id, room_b_id}


@dataclass(frozen=True)
class Corridor:
    """Ordered cells carved between two rooms, from room A towards room B."""

    id: int
    room_a_id: int
    room_b_id: int
    cells: Tuple[TilePos, ...]
    is_loop: bool = False

    @property
    def length(self) -> int:
        return len(self.cells)


@dataclass
class PartitionNode:
    """Node of the binary space partition; children are owned exclusively."""

    bounds: Rect
    depth: int = 0
    left: Optional[PartitionNode] = None
    right: Optional[PartitionNode] = None
    room: Optional[Room] = None
    split_vertical: Optional[bool] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def children(self) -> Tuple[PartitionNode, ...]:
        return tuple(child for child in (self.left, self.right) if child is not None)

    def iter_leaves(self) -> Iterator[PartitionNode]:
        """Yield leaves left to right."""
        if self.is_leaf:
            yield self
            return
        for child in self.children():
            yield from child.iter_leaves()

    def iter_post_order(self) -> Iterator[PartitionNode]:
        for child in self.children():
            yield from child.iter_post_order()
        yield self

    def rooms(self) -> List[Room]:
        return [leaf.room for leaf in self.iter_leaves() if leaf.room is not None]


@dataclass(frozen=True)
class DungeonResult:
    """Output of one generation run, read by renderers, spawners and debug tools."""

    width: int
    height: int
    seed: int
    rooms: Tuple[Room, ...]
    doors: Tuple[Door, ...]
    corridors: Tuple[Corridor, ...]
    starting_room: Optional[Room]
    rooms_by_type: Mapping[RoomType, Tuple[Room, ...]]
    tile_index: SpatialIndex = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        index = SpatialIndex()
        for room in self.rooms:
            index.add_room(room)
        for corridor in self.corridors:
            index.add_corridor(corridor.id, corridor.cells)
        object.__setattr__(self, "tile_index", index)

    @classmethod
    def assemble(
        cls,
        width: int,
        height: int,
        seed: int,
        rooms: List[Room],
        doors: List[Door],
        corridors: List[Corridor],
        starting_room: Optional[Room],
    ) -> DungeonResult:
        grouped: Dict[RoomType, List[Room]] = {room_type: [] for room_type in RoomType}
        for room in rooms:
            grouped[room.room_type].append(room)  # type: ignore[index]
        return cls(
            width=width,
            height=height,
            seed=seed,
            rooms=tuple(rooms),
            doors=tuple(doors),
            corridors=tuple(corridors),
            starting_room=starting_room,
            rooms_by_type={room_type: tuple(members) for room_type, members in grouped.items()},
        )

    @property
    def corridor_cells(self) -> Tuple[TilePos, ...]:
        """Every carved corridor cell, in carving order, without duplicates."""
        seen: Set[TilePos] = set()
        cells: List[TilePos] = []
        for corridor in self.corridors:
            for cell in corridor.cells:
                if cell not in seen:
                    seen.add(cell)
                    cells.append(cell)
        return tuple(cells)

    @property
    def entrance_door(self) -> Optional[Door]:
        for door in self.doors:
            if door.is_entrance:
                return door
        return None

    @property
    def room_count(self) -> int:
        return len(self.rooms)

    @property
    def door_count(self) -> int:
        return len(self.doors)

    def room_by_id(self, room_id: int) -> Room:
        for room in self.rooms:
            if room.id == room_id:
                return room
        raise KeyError(f"Unknown room id {room_id}")

    def door_by_id(self, door_id: int) -> Door:
        for door in self.doors:
            if door.id == door_id:
                return door
        raise KeyError(f"Unknown door id {door_id}")

    def doors_for_room(self, room_id: int) -> List[Door]:
        """Doors incident to a room, whichever wall they sit in."""
        return [door for door in self.doors if room_id in (door.room_a_id, door.room_b_id)]

    def neighbors(self, room_id: int) -> List[int]:
        neighbor_ids = {door.other_room(room_id) for door in self.doors_for_room(room_id)}
        return sorted(room for room in neighbor_ids if room is not None and room != room_id)

    def is_valid_position(self, pos: TilePos) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def tile_at(self, pos: TilePos) -> TileType:
        """Tile kind at ``pos``; anything outside the region reads as wall.

        Room interiors and corridor cells are floor, door positions are doors.
        """
        if not self.is_valid_position(pos):
            return TileType.WALL
        if any(door.position == pos for door in self.doors):
            return TileType.DOOR
        if self.tile_index.get_room_at(pos) is not None or self.tile_index.has_corridor_at(pos):
            return TileType.FLOOR
        return TileType.WALL

    def room_at(self, pos: TilePos) -> Optional[Room]:
        room_id = self.tile_index.get_room_at(pos)
        if room_id is None:
            return None
        return self.room_by_id(room_id)
