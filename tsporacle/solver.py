# tsporacle/solver.py

import logging
import math
import time
import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional

from tsporacle.adaptive import RoundRecord, adaptive_search
from tsporacle.config import SolverConfig
from tsporacle.errors import InvalidInputError
from tsporacle.geometry import DistanceModel, generate_points
from tsporacle.heuristics import multi_start_greedy
from tsporacle.search import CancellationToken, ProgressCallback, ProgressReporter, branch_and_bound

logger = logging.getLogger(__name__)

PERMUTATIONS_TOO_LARGE = 2 ** 63 - 1
MIN_POINTS = 2


@dataclass
class SolveResult:
    points: Optional[np.ndarray]
    greedy_path: List[int]
    greedy_distance: float
    path: List[int]
    distance: float
    tours_evaluated: int
    total_permutations: int
    elapsed: float
    strategy: str
    seed: Optional[int] = None
    rounds: List[RoundRecord] = field(default_factory=list)
    cancelled: bool = False

    @property
    def n(self) -> int:
        return len(self.path)

    @property
    def improvement(self) -> float:
        return self.greedy_distance - self.distance

    @property
    def improvement_pct(self) -> float:
        if self.greedy_distance == 0:
            return 0.0
        return self.improvement / self.greedy_distance * 100


def count_permutations(n: int) -> int:
    """n!, saturating to PERMUTATIONS_TOO_LARGE above 20 where it no longer fits in 63 bits."""
    if n <= 1:
        return 1
    if n > 20:
        return PERMUTATIONS_TOO_LARGE
    return math.factorial(n)


def format_large_number(value: int) -> str:
    """Human readable count, e.g. '3.6 million'."""
    if value < 0 or value >= PERMUTATIONS_TOO_LARGE:
        return "so many"
    if value < 1_000:
        return str(value)
    if value < 1_000_000:
        return f"{value / 1_000:.1f} thousand"
    if value < 1_000_000_000:
        return f"{value / 1_000_000:.1f} million"
    if value < 1_000_000_000_000:
        return f"{value / 1_000_000_000:.1f} billion"
    return "so many"


def solve_model(model: DistanceModel, config: Optional[SolverConfig] = None,
                progress: Optional[ProgressCallback] = None,
                cancel_token: Optional[CancellationToken] = None,
                seed: Optional[int] = None) -> SolveResult:
    """
    Solve the TSP on a prepared distance model.

    Args:
        model: Distance model with at least two vertices
        config: Solver settings; defaults to SolverConfig()
        progress: Optional callback(tours_evaluated, elapsed_seconds)
        cancel_token: Optional cancellation token; a config timeout creates one
        seed: Seed the points were generated from, recorded in the result

    Returns:
        SolveResult with the heuristic baseline and the best tour found
    """
    config = (config or SolverConfig()).validate()
    n = model.n
    if n < MIN_POINTS:
        raise InvalidInputError(f"At least {MIN_POINTS} points are required, got {n}")
    if n > config.max_points:
        raise InvalidInputError(f"At most {config.max_points} points are supported, got {n}")

    if cancel_token is None and config.timeout is not None:
        cancel_token = CancellationToken(config.timeout)
    reporter = ProgressReporter(progress, config.progress_interval)

    start_time = time.perf_counter()
    if config.strategy == "exhaustive":
        greedy_path, greedy_dist = multi_start_greedy(model, max_starts=None, refine=False)
        logger.info(f"Multi-start greedy: length = {greedy_dist:.2f}")
        outcome = branch_and_bound(model, greedy_path, greedy_dist,
                                   progress=reporter, cancel_token=cancel_token)
        path, distance = outcome.path, outcome.distance
        tours, rounds, cancelled = outcome.tours_evaluated, [], outcome.cancelled
    else:
        greedy_path, greedy_dist = multi_start_greedy(model, config.max_starts, True,
                                                      config.two_opt_iterations)
        logger.info(f"Multi-start greedy + 2-opt: length = {greedy_dist:.2f}")
        outcome = adaptive_search(
            model,
            baseline=(greedy_path, greedy_dist),
            initial_ratio=config.initial_ratio,
            step=config.step,
            max_rounds=config.max_rounds,
            progress=reporter,
            cancel_token=cancel_token,
        )
        path, distance = outcome.path, outcome.distance
        tours, rounds, cancelled = outcome.tours_evaluated, outcome.rounds, outcome.cancelled
    elapsed = time.perf_counter() - start_time

    return SolveResult(
        points=model.points,
        greedy_path=greedy_path,
        greedy_distance=greedy_dist,
        path=path,
        distance=distance,
        tours_evaluated=tours,
        total_permutations=count_permutations(n),
        elapsed=elapsed,
        strategy=config.strategy,
        seed=seed,
        rounds=rounds,
        cancelled=cancelled,
    )


def solve_points(points, config: Optional[SolverConfig] = None,
                 progress: Optional[ProgressCallback] = None,
                 cancel_token: Optional[CancellationToken] = None,
                 seed: Optional[int] = None) -> SolveResult:
    """Solve the TSP for explicit (n, 2) coordinates."""
    coords = np.asarray(points, dtype=float)
    if coords.ndim != 2 or len(coords) < MIN_POINTS:
        raise InvalidInputError(f"At least {MIN_POINTS} points are required, got {len(coords)}")
    config = (config or SolverConfig()).validate()
    model = DistanceModel.from_points(coords, config.neighbor_count)
    return solve_model(model, config, progress, cancel_token, seed)


def solve(n: int, seed: int, config: Optional[SolverConfig] = None,
          progress: Optional[ProgressCallback] = None,
          cancel_token: Optional[CancellationToken] = None) -> SolveResult:
    """Generate n seeded random points and solve the TSP over them."""
    if n < MIN_POINTS:
        raise InvalidInputError(f"At least {MIN_POINTS} points are required, got {n}")
    return solve_points(generate_points(n, seed), config, progress, cancel_token, seed)
