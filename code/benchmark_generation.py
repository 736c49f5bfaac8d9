#!/usr/bin/env python3
"""Benchmark harness: generate many dungeons and report timing and quality statistics."""

from __future__ import annotations

import argparse
from collections import Counter
import datetime
from dataclasses import dataclass, field
import json
import logging
import os
import random
import statistics
import subprocess
import time
from typing import Any, Callable, Dict, List, Optional

import networkx as nx

from dungeon_config import PRESETS, DungeonConfig, config_from_preset
from dungeon_generator import DungeonGenerator
from dungeon_validator import build_room_graph, gini_coefficient

DEFAULT_MIN_BALANCE = 0.4
DEFAULT_CYCLE_COUNT_THRESHOLD = 1

REPORTED_PERCENTILES = (10, 50, 90, 99)


def build_config(seed: int, preset: str | None) -> DungeonConfig:
    if preset is not None:
        return config_from_preset(preset, seed, collect_metrics=True)
    return DungeonConfig(seed=seed, collect_metrics=True)


@dataclass
class GenerationRunResult:
    seed: int
    duration: float
    total_rooms: int
    total_doors: int
    total_corridors: int
    loop_corridors: int
    is_valid: bool
    completability_score: float
    balance_score: float
    type_diversity: float
    cycle_count: int
    cycle_lengths: List[int]
    graph_diameter: int
    max_distance: int
    room_type_counts: Counter[str]
    phase_metrics: Dict[str, Dict[str, float | int]]


@dataclass
class MetricSummary:
    """Distribution of one per-run metric across the whole benchmark."""

    key: str
    name: str
    count: int
    mean: float
    median: float
    minimum: float
    maximum: float
    stdev: Optional[float]
    percentiles: Dict[str, float] = field(default_factory=dict)
    success_threshold: Optional[float] = None
    success_rate: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "min": self.minimum,
            "max": self.maximum,
            "stdev": self.stdev,
            "percentiles": dict(self.percentiles),
        }
        if self.success_threshold is not None:
            data["success_threshold"] = self.success_threshold
            data["success_rate"] = self.success_rate
        return data


def summarize_metric(
    key: str,
    name: str,
    values: List[float],
    success_threshold: float | None = None,
) -> MetricSummary:
    """Summarize ``values``; percentiles fall back to the single value for one run."""
    if not values:
        raise ValueError(f"No values recorded for metric {key!r}")
    if len(values) > 1:
        cuts = statistics.quantiles(values, n=100, method="inclusive")
        percentiles = {f"p{pct}": cuts[pct - 1] for pct in REPORTED_PERCENTILES}
    else:
        percentiles = {f"p{pct}": values[0] for pct in REPORTED_PERCENTILES}
    success_rate = None
    if success_threshold is not None:
        success_rate = sum(1 for value in values if value >= success_threshold) / len(values)
    return MetricSummary(
        key=key,
        name=name,
        count=len(values),
        mean=statistics.mean(values),
        median=statistics.median(values),
        minimum=min(values),
        maximum=max(values),
        stdev=statistics.stdev(values) if len(values) > 1 else None,
        percentiles=percentiles,
        success_threshold=success_threshold,
        success_rate=success_rate,
    )


def print_metric(summary: MetricSummary, fmt: Callable[[float], str] = "{:.3f}".format) -> None:
    stdev = fmt(summary.stdev) if summary.stdev is not None else "-"
    print(f"{summary.name}:")
    print(
        f"  Count {summary.count}, mean {fmt(summary.mean)}, median {fmt(summary.median)},"
        f" min {fmt(summary.minimum)}, max {fmt(summary.maximum)}, stdev {stdev}"
    )
    print("  Percentiles: " + ", ".join(f"{label}={fmt(value)}" for label, value in summary.percentiles.items()))
    if summary.success_rate is not None:
        print(f"  Success rate {summary.success_rate:.1%} (>= {fmt(summary.success_threshold)})")


def git_commit_hash() -> str | None:
    try:
        completed = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except (subprocess.CalledProcessError, OSError):
        return None
    return completed.stdout.strip()


def run_single_generation(seed: int, preset: str | None) -> GenerationRunResult:
    """Run one dungeon generation with the provided seed and collect metrics."""
    generator = DungeonGenerator(build_config(seed, preset))

    start = time.perf_counter()
    result = generator.generate()
    end = time.perf_counter()

    validation = generator.validation
    assert validation is not None

    graph = build_room_graph(result)
    cycle_lengths = [len(cycle) for cycle in nx.cycle_basis(graph)]

    graph_diameter = 0
    if graph.number_of_nodes() >= 2:
        largest = max(nx.connected_components(graph), key=len)
        if len(largest) >= 2:
            try:
                graph_diameter = int(nx.diameter(graph.subgraph(largest).copy()))
            except nx.NetworkXError:
                graph_diameter = 0

    type_counts: Counter[str] = Counter(room.base_type.value for room in result.rooms)

    return GenerationRunResult(
        seed=seed,
        duration=end - start,
        total_rooms=result.room_count,
        total_doors=result.door_count,
        total_corridors=len(result.corridors),
        loop_corridors=sum(1 for corridor in result.corridors if corridor.is_loop),
        is_valid=validation.is_valid,
        completability_score=validation.completability_score,
        balance_score=validation.balance_score,
        type_diversity=1.0 - gini_coefficient(list(type_counts.values())),
        cycle_count=len(cycle_lengths),
        cycle_lengths=cycle_lengths,
        graph_diameter=graph_diameter,
        max_distance=max(room.distance_from_start for room in result.rooms),
        room_type_counts=type_counts,
        phase_metrics=generator.metrics.snapshot() if generator.metrics else {},
    )


def run_benchmark(num_runs: int, seed: int | None, preset: str | None) -> List[GenerationRunResult]:
    """Run the generator multiple times and collect run-level metrics."""
    rng = random.Random(seed)
    return [run_single_generation(rng.randint(0, 1_000_000), preset) for _ in range(num_runs)]

def format_seconds(value: float) -> str:
    if value >= 1.0:
        return f"{value:.3f}s"
    return f"{value * 1000:.1f}ms"


def aggregate_phase_metrics(results: List[GenerationRunResult]) -> Dict[str, Dict[str, float]]:
    totals: Dict[str, Dict[str, float]] = {}
    for result in results:
        for name, metrics in result.phase_metrics.items():
            aggregate = totals.setdefault(name, {"invocations": 0.0, "total_time": 0.0})
            aggregate["invocations"] += float(metrics.get("invocations", 0))
            aggregate["total_time"] += float(metrics.get("total_time", 0.0))
    for aggregate in totals.values():
        invocations = aggregate["invocations"]
        aggregate["average_time"] = aggregate["total_time"] / invocations if invocations else 0.0
    return totals


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run the dungeon generator multiple times and report timing and quality statistics."
    )
    parser.add_argument("-n", "--runs", type=int, default=20, help="Number of dungeon generations to execute (default: 20)")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Optional seed for the benchmark harness RNG; keeps run seeds reproducible",
    )
    parser.add_argument("--preset", choices=sorted(PRESETS), default=None, help="Named configuration preset")
    parser.add_argument(
        "--min-balance",
        type=float,
        default=DEFAULT_MIN_BALANCE,
        help="Minimum acceptable balance score for success evaluation",
    )
    parser.add_argument(
        "--cycle-count-threshold",
        type=float,
        default=DEFAULT_CYCLE_COUNT_THRESHOLD,
        help="Minimum cycle count in the room graph for success evaluation",
    )
    parser.add_argument("--output", default=None, help="Optional path of a JSON file to write the results to")
    args = parser.parse_args()

    if args.runs <= 0:
        raise SystemExit("Number of runs must be a positive integer")
    if not (0.0 <= args.min_balance <= 1.0):
        raise SystemExit("Minimum balance must be within [0, 1]")
    if args.cycle_count_threshold < 0.0:
        raise SystemExit("Cycle count threshold must be non-negative")

    # Loop give-ups are expected noise in a benchmark.
    logging.basicConfig(level=logging.ERROR)

    results = run_benchmark(args.runs, args.seed, args.preset)

    durations = [result.duration for result in results]
    worst_duration = max(durations)
    worst_index = durations.index(worst_duration)
    worst_seed = results[worst_index].seed

    results_json: List[Dict[str, Any]] = []
    for idx, result in enumerate(results, start=1):
        cycle_lengths_display = ", ".join(str(length) for length in result.cycle_lengths) or "-"
        print(
            "Run {idx:02d}: {time} (seed {seed}) | rooms {rooms}, doors {doors}, corridors {corridors}"
            " ({loops} loops) | valid {valid}".format(
                idx=idx,
                time=format_seconds(result.duration),
                seed=result.seed,
                rooms=result.total_rooms,
                doors=result.total_doors,
                corridors=result.total_corridors,
                loops=result.loop_corridors,
                valid="yes" if result.is_valid else "NO",
            )
        )
        print(
            "  balance {balance:.3f}, depth {depth}, diameter {diameter}, cycles {cycles} [{lengths}]".format(
                balance=result.balance_score,
                depth=result.max_distance,
                diameter=result.graph_diameter,
                cycles=result.cycle_count,
                lengths=cycle_lengths_display,
            )
        )
        results_json.append(
            {
                "run_id": idx,
                "seed": result.seed,
                "is_valid": result.is_valid,
                "total_time_seconds": result.duration,
                "phase_times": {
                    name: float(metrics.get("total_time", 0.0))
                    for name, metrics in sorted(result.phase_metrics.items())
                },
                "quality_metrics": {
                    "num_rooms": result.total_rooms,
                    "num_doors": result.total_doors,
                    "num_corridors": result.total_corridors,
                    "num_loops": result.loop_corridors,
                    "completability_score": result.completability_score,
                    "balance_score": result.balance_score,
                    "type_diversity": result.type_diversity,
                    "graph_diameter": result.graph_diameter,
                    "max_distance": result.max_distance,
                    "num_cycles": result.cycle_count,
                },
            }
        )

    print()
    print(f"Config runs: {args.runs}")
    print(f"Worst-case generation time: {format_seconds(worst_duration)} (seed {worst_seed})")

    whole = "{:.0f}".format
    metrics_to_report = [
        (summarize_metric("generation_time", "Generation time", durations), "{:.4f}s".format),
        (
            summarize_metric(
                "valid",
                "Valid layouts",
                [1.0 if result.is_valid else 0.0 for result in results],
                success_threshold=1.0,
            ),
            "{:.2f}".format,
        ),
        (summarize_metric("rooms_placed", "Rooms placed", [float(r.total_rooms) for r in results]), whole),
        (summarize_metric("corridors_placed", "Corridors placed", [float(r.total_corridors) for r in results]), whole),
        (
            summarize_metric("completability", "Completability", [r.completability_score for r in results]),
            "{:.1%}".format,
        ),
        (
            summarize_metric(
                "balance",
                "Balance score",
                [r.balance_score for r in results],
                success_threshold=args.min_balance,
            ),
            "{:.3f}".format,
        ),
        (
            summarize_metric("type_diversity", "Room type diversity (1 - Gini)", [r.type_diversity for r in results]),
            "{:.3f}".format,
        ),
        (summarize_metric("graph_diameter", "Graph diameter", [float(r.graph_diameter) for r in results]), whole),
        (
            summarize_metric(
                "cycle_count",
                "Cycle count",
                [float(r.cycle_count) for r in results],
                success_threshold=args.cycle_count_threshold,
            ),
            "{:.1f}".format,
        ),
    ]

    aggregated_results_json: Dict[str, Any] = {}
    for summary, fmt in metrics_to_report:
        print()
        print_metric(summary, fmt)
        aggregated_results_json[summary.key] = summary.to_dict()

    total_type_counts: Counter[str] = Counter()
    for result in results:
        total_type_counts.update(result.room_type_counts)
    total_rooms = sum(total_type_counts.values())
    if total_rooms > 0:
        print()
        print("Room type distribution across runs:")
        for type_name, count in total_type_counts.most_common():
            print(f"  {type_name}: {count} rooms ({count / total_rooms:.1%} of {total_rooms} total rooms)")

    phase_totals = aggregate_phase_metrics(results)
    if phase_totals:
        print()
        print("Phase performance summary:")
        for name, metrics in sorted(phase_totals.items(), key=lambda item: item[1]["total_time"], reverse=True):
            print(
                f"  {name}: total_time={format_seconds(metrics['total_time'])},"
                f" avg_time={format_seconds(metrics['average_time'])}"
            )

    aggregated_results_json["worst_case_run"] = {
        "duration_seconds": worst_duration,
        "seed": worst_seed,
        "run_id": worst_index + 1,
    }

    if args.output is None:
        return

    timestamp = datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)
    benchmark_data = {
        "benchmark_run_info": {
            "timestamp": timestamp.isoformat(),
            "git_commit_hash": git_commit_hash(),
            "num_iterations": args.runs,
            "parameters": {
                "seed": args.seed,
                "preset": args.preset,
                "min_balance": args.min_balance,
                "cycle_count_threshold": args.cycle_count_threshold,
            },
        },
        "aggregated_results": aggregated_results_json,
        "results": results_json,
        "phase_summary": {
            name: dict(metrics) for name, metrics in sorted(phase_totals.items())
        },
    }

    output_dir = os.path.dirname(os.path.abspath(args.output))
    os.makedirs(output_dir, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as handle:
        json.dump(benchmark_data, handle, indent=2, sort_keys=True)
        handle.write("\n")
    print(f"\nSaved benchmark results to {os.path.relpath(args.output)}")


if __name__ == "__main__":
    main()
