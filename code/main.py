#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import random

from dungeon_config import PRESETS, DungeonConfig, StartCriteria, config_from_preset
from dungeon_generator import generate_dungeon
from grid_renderer import GridRenderer, describe


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a BSP dungeon layout and print it as ASCII.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: pick one and print it)")
    parser.add_argument("--preset", choices=sorted(PRESETS), default=None, help="Named parameter preset")
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--min-room-size", type=int, default=None)
    parser.add_argument("--max-room-size", type=int, default=None)
    parser.add_argument(
        "--center-start",
        action="store_true",
        help="Prefer a central starting room instead of one near the map edge",
    )
    parser.add_argument("--no-grid", action="store_true", help="Only print the summary")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    seed = args.seed
    if seed is None:
        # Pick a seed and print it, so a layout can be reproduced later.
        seed = random.randint(0, 1000000)
    print(f"Using random seed {seed}")

    overrides = {
        name: value
        for name, value in (
            ("width", args.width),
            ("height", args.height),
            ("min_room_size", args.min_room_size),
            ("max_room_size", args.max_room_size),
        )
        if value is not None
    }
    if args.preset:
        config = config_from_preset(args.preset, seed, **overrides)
    else:
        config = DungeonConfig(seed=seed, **overrides)  # type: ignore[arg-type]
    criteria = StartCriteria(prefer_map_edge=not args.center_start)

    report = generate_dungeon(config, criteria)
    if report.attempts > 1:
        print(f"Regenerated {report.attempts - 1} times (seeds {report.seeds})")

    if report.result is None:
        print("Generation failed: " + "; ".join(report.validation.errors))
        return

    if not args.no_grid:
        renderer = GridRenderer(report.result)
        renderer.draw_to_grid()
        renderer.print_grid(horizontal_sep="")
    print(describe(report.result, report.validation))

if __name__ == "__main__":
    main()
