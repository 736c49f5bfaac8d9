"""Render a generated dungeon to an ASCII grid for debugging."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from dungeon_models import DoorState, DungeonResult, RoomType
from dungeon_validator import ValidationResult

logger = logging.getLogger(__name__)

ROOM_CHARS: Dict[RoomType, str] = {
    RoomType.SMALL: "s",
    RoomType.MEDIUM: "m",
    RoomType.LARGE: "l",
    RoomType.TREASURE: "T",
    RoomType.GUARD: "G",
    RoomType.LABORATORY: "L",
    RoomType.BOSS: "B",
    RoomType.STARTING: "@",
}
CORRIDOR_CHAR = "░"
DOOR_CHAR = "█"
LOCKED_DOOR_CHAR = "▓"
ENTRANCE_CHAR = "E"


class GridRenderer:
    """Draws rooms, corridors and doors of a DungeonResult onto a character grid."""

    def __init__(self, result: DungeonResult) -> None:
        self.result = result
        self.width = result.width
        self.height = result.height
        self.grid: List[List[str]] = [[" "] * self.width for _ in range(self.height)]

    def _clear_grid(self) -> None:
        for row in self.grid:
            for x in range(self.width):
                row[x] = " "

    def draw_to_grid(self) -> List[List[str]]:
        """Renders the rooms, corridors and doors onto the ASCII grid."""
        self._clear_grid()
        for room in self.result.rooms:
            room_char = ROOM_CHARS[room.room_type]  # type: ignore[index]
            for tile in room.bounds.iter_tiles():
                self.grid[tile.y][tile.x] = room_char
        for tile in self.result.corridor_cells:
            if self.grid[tile.y][tile.x] != " ":
                logger.warning("Corridor tile %s overlaps a room", tile.to_tuple())
            self.grid[tile.y][tile.x] = CORRIDOR_CHAR
        # Entrances last so a shared door tile still shows the entrance.
        for door in sorted(self.result.doors, key=lambda door: door.is_entrance):
            if door.is_entrance:
                char = ENTRANCE_CHAR
            elif door.state is DoorState.LOCKED:
                char = LOCKED_DOOR_CHAR
            else:
                char = DOOR_CHAR
            self.grid[door.position.y][door.position.x] = char
        return self.grid

    def to_text(self, horizontal_sep: str = "") -> str:
        return "\n".join(horizontal_sep.join(row) for row in self.grid)

    def print_grid(self, horizontal_sep: str = "") -> None:
        """Prints the ASCII grid to the console."""
        for row in self.grid:
            print(horizontal_sep.join(row))


def render_ascii(result: DungeonResult) -> str:
    renderer = GridRenderer(result)
    renderer.draw_to_grid()
    return renderer.to_text()


def describe(result: DungeonResult, validation: Optional[ValidationResult] = None) -> str:
    """Multi-line summary of counts, the start room and the validation report."""
    lines = [
        f"Seed {result.seed}, region {result.width}x{result.height}",
        f"Rooms: {result.room_count}, doors: {result.door_count}, corridors: {len(result.corridors)}",
    ]
    counts = ", ".join(
        f"{room_type.value}={len(rooms)}" for room_type, rooms in result.rooms_by_type.items() if rooms
    )
    lines.append(f"Room types: {counts}")
    start = result.starting_room
    if start is not None:
        lines.append(f"Starting room {start.id} at {start.center.to_tuple()} ({start.area} cells)")
    entrance = result.entrance_door
    if entrance is not None:
        lines.append(f"Entrance door {entrance.id} at {entrance.position.to_tuple()} facing {entrance.side.name.lower()}")
    if result.rooms:
        deepest = max(room.distance_from_start for room in result.rooms)
        lines.append(f"Deepest room: {deepest} doors from the start")
    if validation is not None:
        lines.append(
            f"Valid: {validation.is_valid}, completability {validation.completability_score:.2f},"
            f" balance {validation.balance_score:.2f}"
        )
        lines.extend(f"  error: {error}" for error in validation.errors)
        lines.extend(f"  warning: {warning}" for warning in validation.warnings)
    return "\n".join(lines)
