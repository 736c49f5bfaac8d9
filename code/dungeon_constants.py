"""Shared constants for the dungeon layout generator."""

from __future__ import annotations

# Partitioning.
DEFAULT_MAX_PARTITION_DEPTH = 6
SPLIT_JITTER_FRACTION = 0.125  # Split position may drift this fraction of the axis away from the midpoint.

# Room sizing. Areas are in tiles.
SMALL_ROOM_MAX_AREA = 100
MEDIUM_ROOM_MAX_AREA = 400

# Connector.
MAX_PAIR_CANDIDATES = 12  # Nearest room pairs tried per partition node before falling back.
MAX_LOOP_PAIR_ATTEMPTS = 4  # Alternate pairs tried for an optional loop edge before giving up.

# Starting point scoring.
CORNER_PENALTY = 30.0
CONNECTION_BONUS = 5.0
EXCESS_CONNECTION_PENALTY = 5.0
TOUCHING_EDGE_BONUS = 25.0
TOUCHING_EDGE_DISTANCE = 2
PREFERRED_EDGE_BONUS = 15.0
UNPREFERRED_EDGE_PENALTY = 10.0
CENTRALITY_WEIGHT = 15.0

# Validator thresholds (warnings only).
CRAMPED_STARTING_ROOM_AREA = 64
MIN_STARTING_ROOM_CONNECTIONS = 2
MAX_STARTING_ROOM_CONNECTIONS = 4
MIN_ROOM_TYPE_VARIETY = 3
MAX_SMALL_ROOM_RATIO = 0.7
MAX_LARGE_ROOM_RATIO = 0.4
VERY_LARGE_ROOM_AREA = 600
EARLY_BOSS_DISTANCE = 2
