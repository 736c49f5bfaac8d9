"""Configuration containers for dungeon layout generation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict

from dungeon_constants import DEFAULT_MAX_PARTITION_DEPTH
from dungeon_errors import ConfigurationError


@dataclass
class DungeonConfig:
    """Aggregates all tunable parameters for one generation run."""

    seed: int = 12345
    width: int = 100
    height: int = 100
    min_room_size: int = 8
    max_room_size: int = 20
    corridor_width: int = 3

    # Chance that a room is given a special type; the remainder falls back to a size-based type.
    treasure_room_chance: float = 0.1
    guard_room_chance: float = 0.2
    laboratory_chance: float = 0.15
    boss_room_chance: float = 0.05

    max_partition_depth: int = DEFAULT_MAX_PARTITION_DEPTH
    # Tiles kept free between a room and the edge of its partition leaf.
    room_padding: int = 1
    # Chance per partition node of attempting an extra loop corridor.
    extra_connection_chance: float = 0.15
    # Loop corridors are not added to rooms that already have this many doors.
    max_doors_per_room: int = 4
    # Upper bound on runs made by generate_dungeon when a result fails validation.
    max_generation_attempts: int = 3
    collect_metrics: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise ConfigurationError(f"DungeonConfig seed must be an integer, got {self.seed!r}")
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError("DungeonConfig width and height must be positive")
        if self.min_room_size < 1:
            raise ConfigurationError("DungeonConfig min_room_size must be at least 1")
        if self.max_room_size < self.min_room_size:
            raise ConfigurationError("DungeonConfig max_room_size must be >= min_room_size")
        if self.corridor_width < 1:
            raise ConfigurationError("DungeonConfig corridor_width must be at least 1")
        if self.max_partition_depth < 0:
            raise ConfigurationError("DungeonConfig max_partition_depth cannot be negative")
        if self.room_padding < 0:
            raise ConfigurationError("DungeonConfig room_padding cannot be negative")
        if self.max_doors_per_room < 1:
            raise ConfigurationError("DungeonConfig max_doors_per_room must be positive")
        if self.max_generation_attempts < 1:
            raise ConfigurationError("DungeonConfig max_generation_attempts must be positive")

        for name in (
            "treasure_room_chance",
            "guard_room_chance",
            "laboratory_chance",
            "boss_room_chance",
            "extra_connection_chance",
        ):
            value = float(getattr(self, name))
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"DungeonConfig {name} must lie within [0, 1], got {value}")
            setattr(self, name, value)

        if self.special_room_chance_total > 1.0 + 1e-9:
            raise ConfigurationError(
                "DungeonConfig special room chances must not sum above 1"
            )

    @property
    def special_room_chance_total(self) -> float:
        return (
            self.treasure_room_chance
            + self.guard_room_chance
            + self.laboratory_chance
            + self.boss_room_chance
        )

    def with_seed(self, seed: int) -> DungeonConfig:
        """Return a copy of this config using ``seed``."""
        return replace(self, seed=seed)


class EdgePreference(Enum):
    """Which region edges a starting room is encouraged to sit against."""

    ANY = "any"
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    NORTH_SOUTH = "north_south"
    EAST_WEST = "east_west"


@dataclass
class StartCriteria:
    """Constraints and preferences used when choosing the starting room."""

    prefer_map_edge: bool = True
    create_exterior_entrance: bool = True
    edge_preference_strength: float = 50.0  # 0-100
    min_room_area: float = 64.0
    min_connections: int = 1
    max_connections: int = 3  # Connections above this are penalized rather than rewarded.
    corner_avoidance_radius: float = 20.0
    allow_corners: bool = False
    preferred_edge: EdgePreference = EdgePreference.ANY

    def __post_init__(self) -> None:
        if self.edge_preference_strength < 0:
            raise ConfigurationError("StartCriteria edge_preference_strength cannot be negative")
        if self.min_room_area < 0:
            raise ConfigurationError("StartCriteria min_room_area cannot be negative")
        if self.min_connections < 0:
            raise ConfigurationError("StartCriteria min_connections cannot be negative")
        if self.max_connections < 0:
            raise ConfigurationError("StartCriteria max_connections cannot be negative")
        if self.corner_avoidance_radius < 0:
            raise ConfigurationError("StartCriteria corner_avoidance_radius cannot be negative")
        if not isinstance(self.preferred_edge, EdgePreference):
            try:
                self.preferred_edge = EdgePreference(self.preferred_edge)
            except ValueError as exc:
                raise ConfigurationError(
                    f"Unsupported preferred_edge {self.preferred_edge!r}"
                ) from exc


# Ready-made parameter sets for common game styles.
PRESETS: Dict[str, Dict[str, object]] = {
    "metroidvania": dict(
        width=80,
        height=60,
        min_room_size=6,
        max_room_size=15,
        corridor_width=2,
        treasure_room_chance=0.15,
        guard_room_chance=0.25,
        laboratory_chance=0.1,
        boss_room_chance=0.05,
    ),
    "dungeon_crawler": dict(
        width=100,
        height=100,
        min_room_size=8,
        max_room_size=25,
        corridor_width=3,
        treasure_room_chance=0.2,
        guard_room_chance=0.3,
        laboratory_chance=0.05,
        boss_room_chance=0.1,
    ),
    "survival_horror": dict(
        width=60,
        height=60,
        min_room_size=5,
        max_room_size=12,
        corridor_width=2,
        treasure_room_chance=0.05,
        guard_room_chance=0.1,
        laboratory_chance=0.2,
        boss_room_chance=0.03,
    ),
}


def config_from_preset(name: str, seed: int, **overrides: object) -> DungeonConfig:
    """Build a DungeonConfig from a named preset, applying keyword overrides."""
    try:
        values = dict(PRESETS[name])
    except KeyError as exc:
        raise ConfigurationError(f"Unknown preset {name!r}") from exc
    values.update(overrides)
    return DungeonConfig(seed=seed, **values)  # type: ignore[arg-type]
