#!/usr/bin/env python3
"""
TSP Oracle command line

Generates seeded random points, computes the greedy + 2-opt baseline and
then the optimal tour, prints both and saves a result file.

Usage:
    tsp-oracle -n 10 --seed 42
    python -m tsporacle -n 12 --strategy exhaustive --timeout 60
"""

import argparse
import logging
import sys
from datetime import timedelta
from typing import List, Optional

from tsporacle.config import STRATEGIES, load_config
from tsporacle.errors import InvalidInputError
from tsporacle.geometry import DistanceModel, generate_points
from tsporacle.report import format_summary, write_result_file
from tsporacle.solver import count_permutations, format_large_number, solve_model

logger = logging.getLogger(__name__)

CLI_MIN_POINTS = 3
CONFIRM_ABOVE = 25


def print_progress(tours_evaluated: int, elapsed: float) -> None:
    speed = tours_evaluated / elapsed if elapsed > 0 else 0.0
    print(f"\rChecked: {format_large_number(tours_evaluated)} paths | Speed: {speed:.0f}/sec | "
          f"Time: {timedelta(seconds=round(elapsed))}", end="", flush=True)


def confirm_large_instance(n: int) -> bool:
    total = count_permutations(n - 1)
    print(f"WARNING: for {n} points there will be approximately {format_large_number(total)} permutations")
    print("This may take a considerable amount of time.")
    try:
        response = input("Continue? (y/n): ")
    except EOFError:
        return False
    return response.strip() in ("y", "Y")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exact TSP solver for seeded random points")
    parser.add_argument("-n", type=int, default=10,
                        help="Number of points")
    parser.add_argument("--seed", type=int, default=42,
                        help="Seed for generating random points")
    parser.add_argument("--strategy", choices=STRATEGIES, default=None,
                        help="adaptive ceiling search or a single exhaustive run")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Stop the search after this many seconds")
    parser.add_argument("--output-dir", type=str, default=".",
                        help="Directory for the result file")
    parser.add_argument("--no-save", action="store_true",
                        help="Do not write a result file")
    parser.add_argument("--yes", "-y", action="store_true",
                        help="Skip the confirmation for large instances")
    parser.add_argument("--env-file", type=str, default=None,
                        help="Read TSP_ORACLE_* settings from this .env file")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.n < CLI_MIN_POINTS:
        print(f"Error: Minimum {CLI_MIN_POINTS} dots required")
        return 1

    try:
        config = load_config(args.env_file).with_overrides(strategy=args.strategy, timeout=args.timeout)
    except InvalidInputError as e:
        print(f"Error: {e}")
        return 1

    if args.n > CONFIRM_ABOVE and not args.yes:
        if not confirm_large_instance(args.n):
            print("Cancelled by user")
            return 0

    points = generate_points(args.n, args.seed)

    print("=" * 50)
    print(f"TSP SOLVER (ORACLE) - {args.n} POINTS")
    print(f"SEED: {args.seed}")
    print(f"STRATEGY: {config.strategy}")
    print("=" * 50)

    print("\nCoordinates of points:")
    for i, (x, y) in enumerate(points):
        print(f"   Dot {i}: ({x:.2f}, {y:.2f})")

    try:
        model = DistanceModel.from_points(points, config.neighbor_count)
        result = solve_model(model, config, progress=print_progress, seed=args.seed)
    except InvalidInputError as e:
        print(f"Error: {e}")
        return 1
    print()

    print("\nRESULTS:")
    print("=" * 50)
    for line in format_summary(result):
        print(line)

    if not args.no_save:
        try:
            path = write_result_file(result, args.output_dir)
            print(f"\nThe results are saved in {path}")
        except OSError as e:
            logger.error(f"Error saving file: {e}")
            print(f"\nError saving file: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
