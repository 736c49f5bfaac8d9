"""Spatial index for tracking tile occupancy by rooms and corridors."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Dict, Optional, Set

from dungeon_geometry import TilePos

if TYPE_CHECKING:
    from dungeon_models import Room


class SpatialIndex:
    """Caches tile occupancy for corridor clearance checks and tile lookups."""

    def __init__(self) -> None:
        self._tile_to_room: Dict[TilePos, int] = {}
        self._tile_to_corridors: Dict[TilePos, Set[int]] = {}

    def add_room(self, room: Room) -> None:
        """Record all tiles occupied by ``room``."""
        for tile in room.bounds.iter_tiles():
            self._tile_to_room[tile] = room.id

    def add_corridor(self, corridor_id: int, tiles: Iterable[TilePos]) -> None:
        """Record all tiles occupied by a corridor."""
        for tile in tiles:
            self._tile_to_corridors.setdefault(tile, set()).add(corridor_id)

    def get_room_at(self, tile: TilePos) -> Optional[int]:
        """Return the id of the room occupying ``tile`` if any."""
        return self._tile_to_room.get(tile)

    def has_corridor_at(self, tile: TilePos) -> bool:
        return tile in self._tile_to_corridors

    def is_path_clear(
        self,
        tiles: Iterable[TilePos],
        *,
        ignore_rooms: Optional[Set[int]] = None,
    ) -> bool:
        """Return True if no tile lies inside a room other than the ignored ones."""
        ignore_rooms = ignore_rooms or set()
        for tile in tiles:
            room_owner = self._tile_to_room.get(tile)
            if room_owner is not None and room_owner not in ignore_rooms:
                return False
        return True

