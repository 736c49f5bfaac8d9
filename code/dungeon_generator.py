"""DungeonGenerator orchestrates the six phases of BSP dungeon generation."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from time import perf_counter
from typing import Callable, Iterator, List, Optional

from dungeon_config import DungeonConfig, StartCriteria
from dungeon_errors import DungeonGenerationError
from dungeon_models import Corridor, Door, DungeonResult, PartitionNode, Room
from dungeon_validator import DungeonValidator, ValidationResult
from graph_connector import GraphConnector
from metrics import GenerationMetrics
from progression import ProgressionLabeler, ProgressionLabels
from room_placement import RoomPlacer
from spatial_partitioner import SpatialPartitioner
from starting_point import StartingPointSelector, StartSelection

logger = logging.getLogger(__name__)

PHASES = (
    "partition",
    "place_rooms",
    "connect",
    "select_start",
    "label_progression",
    "validate",
)


class DungeonGenerator:
    """Manages the overall process of generating a dungeon floor layout.

    Each run builds everything from scratch with a generator seeded from
    ``config.seed``; nothing carries over from a previous run.
    """

    def __init__(self, config: DungeonConfig, criteria: Optional[StartCriteria] = None) -> None:
        self.config = config
        self.criteria = criteria or StartCriteria()
        self._reset()

    def _reset(self) -> None:
        self.rng = random.Random(self.config.seed)
        self.metrics = GenerationMetrics() if self.config.collect_metrics else None
        self.root: Optional[PartitionNode] = None
        self.rooms: List[Room] = []
        self.doors: List[Door] = []
        self.corridors: List[Corridor] = []
        self.selection: Optional[StartSelection] = None
        self.labels: Optional[ProgressionLabels] = None
        self.result: Optional[DungeonResult] = None
        self.validation: Optional[ValidationResult] = None

    def _run_phase(self, name: str, func: Callable[[], None]) -> None:
        if self.metrics is None:
            func()
            return

        rooms_before = len(self.rooms)
        doors_before = len(self.doors)
        corridors_before = len(self.corridors)
        start = perf_counter()
        try:
            func()
        finally:
            self.metrics.record_phase(
                name,
                perf_counter() - start,
                len(self.rooms) - rooms_before,
                len(self.doors) - doors_before,
                len(self.corridors) - corridors_before,
            )

    def _partition(self) -> None:
        self.root = SpatialPartitioner(self.config, self.rng).partition()

    def _place_rooms(self) -> None:
        assert self.root is not None
        self.rooms = RoomPlacer(self.config, self.rng).place_rooms(self.root)

    def _connect(self) -> None:
        assert self.root is not None
        self.doors, self.corridors = GraphConnector(self.config, self.rng).connect(self.root, self.rooms)

    def _select_start(self) -> None:
        selector = StartingPointSelector(self.config.width, self.config.height, self.criteria)
        self.selection = selector.select(self.rooms)

    def _label_progression(self) -> None:
        assert self.selection is not None
        labeler = ProgressionLabeler(self.config.width, self.config.height, self.criteria)
        self.labels = labeler.label(self.rooms, self.doors, self.corridors, self.selection.room)
        self.result = DungeonResult.assemble(
            width=self.config.width,
            height=self.config.height,
            seed=self.config.seed,
            rooms=self.rooms,
            doors=self.doors,
            corridors=self.corridors,
            starting_room=self.selection.room,
        )

    def _validate(self) -> None:
        self.validation = DungeonValidator().validate(self.result)

    def generate_steps(self) -> Iterator[str]:
        """Run the phases in order, yielding each phase name once it completes.

        Callers may interleave other work between phases or stop iterating to
        abandon the run.
        """
        self._reset()
        steps = (
            self._partition,
            self._place_rooms,
            self._connect,
            self._select_start,
            self._label_progression,
            self._validate,
        )
        for name, step in zip(PHASES, steps):
            self._run_phase(name, step)
            logger.debug("Finished phase %s", name)
            yield name

    def generate(self) -> DungeonResult:
        """Generates the dungeon and returns the result; the validation report is kept on ``self.validation``."""
        for _ in self.generate_steps():
            pass
        assert self.result is not None and self.validation is not None
        logger.info(
            "Generated dungeon seed=%s: %d rooms, %d doors, %d corridors, valid=%s",
            self.config.seed,
            self.result.room_count,
            self.result.door_count,
            len(self.result.corridors),
            self.validation.is_valid,
        )
        return self.result


@dataclass
class GenerationReport:
    """Outcome of generate_dungeon, including every seed that was tried.

    ``result`` is None when the last attempt stopped before a layout was
    assembled; ``validation.errors`` then carries the reason.
    """

    result: Optional[DungeonResult]
    validation: ValidationResult
    attempts: int
    seeds: List[int] = field(default_factory=list)
    metrics: Optional[GenerationMetrics] = None

    @property
    def succeeded(self) -> bool:
        return self.validation.is_valid


def generate_dungeon(config: DungeonConfig, criteria: Optional[StartCriteria] = None) -> GenerationReport:
    """Generate a dungeon, retrying with fresh seeds while validation fails.

    At most ``config.max_generation_attempts`` runs are made. Replacement
    seeds are drawn from a generator seeded with ``config.seed`` so the whole
    sequence is reproducible.
    """
    seed_source = random.Random(config.seed)
    seeds: List[int] = []
    seed = config.seed
    generator: Optional[DungeonGenerator] = None

    for attempt in range(1, config.max_generation_attempts + 1):
        seeds.append(seed)
        generator = DungeonGenerator(config.with_seed(seed), criteria)
        try:
            generator.generate()
        except DungeonGenerationError as exc:
            generator.validation = ValidationResult(is_valid=False, errors=[str(exc)])
        assert generator.validation is not None
        if generator.validation.is_valid:
            break
        logger.warning(
            "Attempt %d with seed %s failed validation: %s",
            attempt,
            seed,
            "; ".join(generator.validation.errors),
        )
        seed = seed_source.randint(0, 2**31 - 1)
    else:
        logger.error(
            "All %d generation attempts failed validation (seeds %s)",
            config.max_generation_attempts,
            seeds,
        )

    assert generator is not None and generator.validation is not None
    return GenerationReport(
        result=generator.result,
        validation=generator.validation,
        attempts=len(seeds),
        seeds=seeds,
        metrics=generator.metrics,
    )
