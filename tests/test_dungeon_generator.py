import logging

import pytest

from corridor_builder import CorridorBuilder
from dungeon_config import DungeonConfig, PRESETS, StartCriteria, config_from_preset
from dungeon_errors import DungeonGenerationError
from dungeon_generator import PHASES, DungeonGenerator, generate_dungeon
from dungeon_models import DoorState, RoomType
from dungeon_validator import DungeonValidator, ValidationResult


def _snapshot(result):
    return (
        [(room.id, room.bounds, room.room_type, room.distance_from_start) for room in result.rooms],
        [(door.id, door.position, door.side, door.room_a_id, door.room_b_id, door.state) for door in result.doors],
        [corridor.cells for corridor in result.corridors],
        result.starting_room.id,
    )


def test_scenario_generation_succeeds(scenario_config):
    generator = DungeonGenerator(scenario_config)

    result = generator.generate()

    assert result.room_count >= 1
    assert generator.validation is not None
    assert generator.validation.is_valid, generator.validation.errors
    assert generator.validation.completability_score == 1.0


def test_same_seed_gives_identical_dungeon(scenario_config):
    first = DungeonGenerator(scenario_config).generate()
    second = DungeonGenerator(scenario_config).generate()

    assert _snapshot(first) == _snapshot(second)
    assert first.rooms == second.rooms
    assert first.doors == second.doors


def test_different_seeds_differ(scenario_config):
    first = DungeonGenerator(scenario_config).generate()
    second = DungeonGenerator(scenario_config.with_seed(43)).generate()

    assert _snapshot(first) != _snapshot(second)


def test_region_too_small_to_split_gives_one_room(tiny_config):
    generator = DungeonGenerator(tiny_config)

    result = generator.generate()

    assert result.room_count == 1
    assert result.doors == ()
    assert result.starting_room is result.rooms[0]
    assert result.starting_room.distance_from_start == 0
    assert result.entrance_door is None
    assert generator.validation.is_valid, generator.validation.errors


def test_unsatisfiable_start_criteria_relax_with_warning(scenario_config, caplog):
    generator = DungeonGenerator(scenario_config, StartCriteria(min_connections=99))

    with caplog.at_level(logging.WARNING, logger="starting_point"):
        result = generator.generate()

    assert result.starting_room is not None
    assert generator.selection.warnings
    assert generator.validation.is_valid, generator.validation.errors
    assert any(record.name == "starting_point" for record in caplog.records)


@pytest.mark.parametrize(
    "config",
    [DungeonConfig(seed=seed) for seed in (1, 2, 3, 99, 2024)]
    + [config_from_preset(name, 17) for name in sorted(PRESETS)]
    + [DungeonConfig(seed=5, width=120, height=60, min_room_size=5, max_room_size=9, extra_connection_chance=1.0)],
)
def test_layout_invariants(config):
    generator = DungeonGenerator(config)
    result = generator.generate()

    for index, room in enumerate(result.rooms):
        for other in result.rooms[index + 1:]:
            assert not room.bounds.overlaps(other.bounds)

    starts = [room for room in result.rooms if room.is_starting_room]
    assert starts == [result.starting_room]
    assert result.starting_room.distance_from_start == 0
    assert all(room.distance_from_start >= 1 for room in result.rooms if room is not result.starting_room)

    entrances = [door for door in result.doors if door.is_entrance]
    assert len(entrances) == 1
    assert entrances[0].room_a_id == result.starting_room.id
    assert entrances[0].state is DoorState.OPEN

    assert result.rooms_by_type[RoomType.STARTING] == (result.starting_room,)
    assert generator.validation.is_valid, generator.validation.errors
    assert generator.validation.completability_score == 1.0


def test_selector_constraints_hold_when_satisfiable(default_config, criteria):
    result = DungeonGenerator(default_config, criteria).generate()
    start = result.starting_room

    satisfiable = any(
        room.area >= criteria.min_room_area and room.connection_count >= criteria.min_connections
        for room in result.rooms
    )
    assert satisfiable
    assert start.area >= criteria.min_room_area
    assert start.connection_count >= criteria.min_connections


def test_generate_steps_yields_phases_in_order(scenario_config):
    generator = DungeonGenerator(scenario_config)

    assert list(generator.generate_steps()) == list(PHASES)
    assert generator.result is not None


def test_abandoned_run_produces_no_result(scenario_config):
    generator = DungeonGenerator(scenario_config)
    steps = generator.generate_steps()

    assert next(steps) == "partition"
    assert next(steps) == "place_rooms"

    assert generator.rooms
    assert generator.result is None
    assert generator.validation is None


def test_regenerating_does_not_touch_previous_result(scenario_config):
    generator = DungeonGenerator(scenario_config)
    first = generator.generate()
    before = _snapshot(first)

    second = generator.generate()

    assert _snapshot(first) == before
    assert first.rooms[0] is not second.rooms[0]


def test_metrics_record_every_phase(scenario_config):
    scenario_config.collect_metrics = True
    generator = DungeonGenerator(scenario_config)

    result = generator.generate()

    snapshot = generator.metrics.snapshot()
    assert list(snapshot) == list(PHASES)
    assert snapshot["place_rooms"]["total_rooms_added"] == result.room_count
    assert snapshot["connect"]["total_corridors_added"] == len(result.corridors)
    assert snapshot["connect"]["total_doors_added"] == result.door_count


def test_metrics_disabled_by_default(scenario_config):
    assert DungeonGenerator(scenario_config).metrics is None


def test_generate_dungeon_succeeds_first_time(scenario_config):
    report = generate_dungeon(scenario_config)

    assert report.succeeded
    assert report.attempts == 1
    assert report.seeds == [scenario_config.seed]
    assert report.result.seed == scenario_config.seed


def test_generate_dungeon_retries_are_bounded(scenario_config, monkeypatch, caplog):
    def always_invalid(self, result):
        return ValidationResult(is_valid=False, errors=["forced failure"])

    monkeypatch.setattr(DungeonValidator, "validate", always_invalid)
    scenario_config.max_generation_attempts = 3

    with caplog.at_level(logging.WARNING, logger="dungeon_generator"):
        report = generate_dungeon(scenario_config)

    assert not report.succeeded
    assert report.attempts == 3
    assert len(report.seeds) == 3
    assert report.seeds[0] == scenario_config.seed
    assert report.result.seed == report.seeds[-1]
    assert any(record.levelno == logging.ERROR for record in caplog.records)


def test_generate_dungeon_retry_seeds_are_reproducible(scenario_config, monkeypatch):
    monkeypatch.setattr(
        DungeonValidator,
        "validate",
        lambda self, result: ValidationResult(is_valid=False, errors=["forced failure"]),
    )

    first = generate_dungeon(scenario_config)
    second = generate_dungeon(scenario_config)

    assert first.seeds == second.seeds


def test_generate_dungeon_reports_connector_failure(scenario_config, monkeypatch):
    monkeypatch.setattr(CorridorBuilder, "plan_corridors", lambda self, room_a, room_b, rng: [])

    with pytest.raises(DungeonGenerationError):
        DungeonGenerator(scenario_config).generate()

    report = generate_dungeon(scenario_config)

    assert not report.succeeded
    assert report.result is None
    assert report.attempts == scenario_config.max_generation_attempts
    assert any("No corridor geometry" in error for error in report.validation.errors)
