import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
CODE_DIR = ROOT_DIR / "code"
if str(CODE_DIR) not in sys.path:
    sys.path.insert(0, str(CODE_DIR))

from dungeon_config import DungeonConfig, StartCriteria
from dungeon_generator import DungeonGenerator
from dungeon_geometry import Rect
from dungeon_models import DungeonResult, Room, RoomType


@pytest.fixture
def default_config() -> DungeonConfig:
    return DungeonConfig()


@pytest.fixture
def scenario_config() -> DungeonConfig:
    """80x80 region with rooms of 6-15 tiles, seed 42."""
    return DungeonConfig(seed=42, width=80, height=80, min_room_size=6, max_room_size=15)


@pytest.fixture
def tiny_config() -> DungeonConfig:
    """A region too small to split."""
    return DungeonConfig(seed=7, width=10, height=10, min_room_size=6, max_room_size=15)


@pytest.fixture
def criteria() -> StartCriteria:
    return StartCriteria()


@pytest.fixture
def scenario_result(scenario_config: DungeonConfig) -> DungeonResult:
    return DungeonGenerator(scenario_config).generate()


@pytest.fixture
def make_room():
    def _make_room(room_id: int, x: int, y: int, width: int, height: int, room_type: RoomType = RoomType.MEDIUM) -> Room:
        return Room(id=room_id, bounds=Rect(x, y, width, height), base_type=room_type)

    return _make_room
