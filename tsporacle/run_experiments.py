#!/usr/bin/env python3
"""
TSP Oracle Experiment Runner

Runs the solver on classic geometric instances and random uniform
instances, and compares the adaptive ceiling search with a single
exhaustive branch-and-bound run.
"""

import argparse
import numpy as np

from tsporacle.config import SolverConfig
from tsporacle.geometry import DistanceModel, generate_points
from tsporacle.heuristics import multi_start_greedy
from tsporacle.mst import MSTOracle
from tsporacle.solver import solve_model, solve_points


def generate_classic_instance(name: str) -> np.ndarray:
    """Coordinates of a classic instance with a known optimal tour."""
    if name == 'square':
        # 4 corners of a unit square - optimal is 4
        return np.array([[0, 0], [0, 1], [1, 1], [1, 0]], dtype=float)
    if name == 'line':
        # 3 collinear points - optimal is 4 (there and back)
        return np.array([[0, 0], [1, 0], [2, 0]], dtype=float)
    if name == 'pentagon':
        n = 5
        angles = np.linspace(0, 2 * np.pi, n, endpoint=False)
        radius = 500
        return np.column_stack([
            500 + radius * np.cos(angles),
            500 + radius * np.sin(angles)
        ])
    if name == 'star':
        # 10-point star
        n = 10
        coords = []
        for i in range(n):
            angle = 2 * np.pi * i / n
            r = 500 if i % 2 == 0 else 200
            coords.append([500 + r * np.cos(angle), 500 + r * np.sin(angle)])
        return np.array(coords)
    raise ValueError(f"Unknown classic instance: {name}")


def mst_lower_bound(model: DistanceModel) -> float:
    """MST weight over all vertices, a lower bound on any tour."""
    return MSTOracle(model.matrix).weight(range(model.n))


def run_classic_instances():
    """Run on classic geometric instances."""
    print("\n" + "=" * 70)
    print("CLASSIC INSTANCES: Known Geometric Configurations")
    print("=" * 70)

    for name in ['square', 'line', 'pentagon', 'star']:
        coords = generate_classic_instance(name)
        result = solve_points(coords)
        lb = mst_lower_bound(DistanceModel.from_points(coords))

        print(f"\n--- {name.upper()} ({len(coords)} cities) ---")
        print(f"Greedy + 2-opt: {result.greedy_distance:.4f}")
        print(f"Optimal:        {result.distance:.4f}")
        print(f"MST lower bound: {lb:.4f}")
        print(f"Time: {result.elapsed * 1000:.1f} ms")
        print(f"Tour: {result.path}")


def run_scaling_experiment(sizes=(6, 8, 10, 12), seed: int = 42):
    """Test how the exact search scales with problem size."""
    print("\n" + "=" * 70)
    print("SCALING EXPERIMENT: Performance vs Problem Size")
    print("=" * 70)

    print(f"\n{'Size':>6} | {'Greedy':>12} | {'Optimal':>12} | {'Improvement':>11} | {'Tours':>10} | {'Rounds':>6} | {'Time (ms)':>10}")
    print("-" * 85)

    results = []
    for n in sizes:
        coords = generate_points(n, seed)
        result = solve_points(coords, seed=seed)
        results.append({
            'size': n,
            'greedy': result.greedy_distance,
            'optimal': result.distance,
            'improvement': result.improvement_pct,
            'tours': result.tours_evaluated,
            'rounds': len(result.rounds),
            'time_ms': result.elapsed * 1000,
        })
        print(f"{n:>6} | {result.greedy_distance:>12.2f} | {result.distance:>12.2f} | "
              f"{result.improvement_pct:>10.2f}% | {result.tours_evaluated:>10} | "
              f"{len(result.rounds):>6} | {result.elapsed * 1000:>10.1f}")

    return results


def run_strategy_comparison(n: int = 10, seeds=range(5)):
    """Adaptive ceiling search vs a single exhaustive run on the same instances."""
    print("\n" + "=" * 70)
    print("STRATEGY COMPARISON: Adaptive Ceiling vs Exhaustive")
    print("=" * 70)

    print(f"\n{'Seed':>6} | {'Adaptive':>12} | {'Exhaustive':>12} | {'Adaptive ms':>12} | {'Exhaustive ms':>13}")
    print("-" * 68)

    adaptive_times = []
    exhaustive_times = []
    for seed in seeds:
        model = DistanceModel.from_points(generate_points(n, seed))
        adaptive = solve_model(model, SolverConfig(strategy="adaptive"), seed=seed)
        exhaustive = solve_model(model, SolverConfig(strategy="exhaustive"), seed=seed)
        adaptive_times.append(adaptive.elapsed * 1000)
        exhaustive_times.append(exhaustive.elapsed * 1000)

        print(f"{seed:>6} | {adaptive.distance:>12.4f} | {exhaustive.distance:>12.4f} | "
              f"{adaptive.elapsed * 1000:>12.1f} | {exhaustive.elapsed * 1000:>13.1f}")

    print(f"\nMean time: adaptive {np.mean(adaptive_times):.1f} ms, exhaustive {np.mean(exhaustive_times):.1f} ms")


def run_heuristic_gap(n: int = 10, seeds=range(20)):
    """How far the greedy + 2-opt baseline is from the optimum."""
    print("\n" + "=" * 70)
    print("HEURISTIC GAP: Greedy + 2-opt vs Optimal")
    print("=" * 70)

    gaps = []
    for seed in seeds:
        model = DistanceModel.from_points(generate_points(n, seed))
        _, greedy = multi_start_greedy(model)
        result = solve_model(model, seed=seed)
        gaps.append((greedy - result.distance) / result.distance * 100)

    print(f"\nInstances: {len(gaps)} x {n} cities, uniform distribution")
    print(f"  Optimal already:  {sum(1 for g in gaps if g < 1e-9)}")
    print(f"  Mean gap:         {np.mean(gaps):.2f}%")
    print(f"  Worst gap:        {max(gaps):.2f}%")


def main():
    parser = argparse.ArgumentParser(description="TSP oracle experiments")
    parser.add_argument("--quick", action="store_true",
                        help="Only run the classic instances")
    args = parser.parse_args()

    print("=" * 70)
    print("TSP ORACLE EXPERIMENTS")
    print("Greedy + 2-opt Baseline, MST-bounded Branch and Bound")
    print("=" * 70)

    run_classic_instances()
    if not args.quick:
        run_scaling_experiment()
        run_strategy_comparison()
        run_heuristic_gap()

    print("\n" + "=" * 70)
    print("ALL EXPERIMENTS COMPLETED")
    print("=" * 70)


if __name__ == "__main__":
    main()
