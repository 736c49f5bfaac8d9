import pytest

from dungeon_config import PRESETS, DungeonConfig, EdgePreference, StartCriteria, config_from_preset
from dungeon_errors import ConfigurationError, DungeonGenerationError


def test_defaults_are_valid():
    config = DungeonConfig()

    assert (config.width, config.height) == (100, 100)
    assert config.min_room_size <= config.max_room_size
    assert config.special_room_chance_total == pytest.approx(0.5)


@pytest.mark.parametrize(
    "overrides",
    [
        {"width": 0},
        {"height": -5},
        {"min_room_size": 0},
        {"min_room_size": 10, "max_room_size": 5},
        {"corridor_width": 0},
        {"treasure_room_chance": 1.5},
        {"boss_room_chance": -0.1},
        {"extra_connection_chance": 2.0},
        {"treasure_room_chance": 0.6, "guard_room_chance": 0.6},
        {"seed": "abc"},
        {"seed": True},
        {"max_partition_depth": -1},
        {"room_padding": -1},
        {"max_doors_per_room": 0},
        {"max_generation_attempts": 0},
    ],
)
def test_invalid_config_raises(overrides):
    with pytest.raises(ConfigurationError):
        DungeonConfig(**overrides)


def test_configuration_error_is_a_value_error():
    assert issubclass(ConfigurationError, ValueError)
    assert issubclass(ConfigurationError, DungeonGenerationError)


def test_with_seed_copies_config():
    config = DungeonConfig(width=50)

    reseeded = config.with_seed(99)

    assert reseeded.seed == 99
    assert reseeded.width == 50
    assert config.seed == 12345


@pytest.mark.parametrize("name", sorted(PRESETS))
def test_presets_build_valid_configs(name):
    config = config_from_preset(name, 3)

    assert config.seed == 3
    assert config.width == PRESETS[name]["width"]


def test_preset_overrides_apply():
    config = config_from_preset("metroidvania", 1, width=90)

    assert config.width == 90
    assert config.height == PRESETS["metroidvania"]["height"]


def test_unknown_preset_raises():
    with pytest.raises(ConfigurationError):
        config_from_preset("roguelike", 1)


@pytest.mark.parametrize(
    "overrides",
    [
        {"edge_preference_strength": -1.0},
        {"min_room_area": -1.0},
        {"min_connections": -1},
        {"max_connections": -2},
        {"corner_avoidance_radius": -3.0},
        {"preferred_edge": "diagonal"},
    ],
)
def test_invalid_criteria_raise(overrides):
    with pytest.raises(ConfigurationError):
        StartCriteria(**overrides)


def test_criteria_accepts_edge_preference_by_value():
    assert StartCriteria(preferred_edge="north").preferred_edge is EdgePreference.NORTH
