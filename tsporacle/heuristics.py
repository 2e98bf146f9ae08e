# tsporacle/heuristics.py

import logging
from typing import List, Optional, Sequence, Tuple

from tsporacle.geometry import DistanceModel

logger = logging.getLogger(__name__)

MAX_GREEDY_STARTS = 5
MAX_TWO_OPT_ITERATIONS = 1000
IMPROVEMENT_EPS = 1e-9


def nearest_neighbor_path(model: DistanceModel, start: int) -> List[int]:
    """
    Construct a path using the nearest neighbor heuristic.

    The precomputed neighbor ranking is tried first; a linear scan over
    the remaining vertices is used only when none of the ranked
    neighbors is still unvisited.
    """
    rows = model.rows
    n = model.n
    path = [start]
    unvisited = set(range(n))
    unvisited.discard(start)

    while unvisited:
        current = path[-1]
        next_point = -1
        min_dist = float('inf')

        for neighbor in model.neighbors[current]:
            if neighbor in unvisited and rows[current][neighbor] < min_dist:
                min_dist = rows[current][neighbor]
                next_point = neighbor

        if next_point < 0:
            for point in sorted(unvisited):
                if rows[current][point] < min_dist:
                    min_dist = rows[current][point]
                    next_point = point

        path.append(next_point)
        unvisited.discard(next_point)

    return path


def rotate_to_start(path: Sequence[int], start: int = 0) -> List[int]:
    """Rotate a closed tour so it begins at start; the length is unchanged."""
    path = list(path)
    if start not in path:
        return path
    k = path.index(start)
    return path[k:] + path[:k]


def two_opt(model: DistanceModel, path: Sequence[int],
            max_iterations: int = MAX_TWO_OPT_ITERATIONS) -> Tuple[List[int], float]:
    """
    Best-improvement 2-opt local search.

    Each pass scans all pairs 1 <= i < j <= n-2 and applies only the best
    improving segment reversal. The first vertex stays in place.

    Args:
        model: Distance model
        path: Starting tour
        max_iterations: Cap on the number of passes

    Returns:
        (tour, length) where length never exceeds the input tour length
    """
    tour = list(path)
    length = model.tour_length(tour)
    n = len(tour)
    if n < 4:
        return tour, length

    rows = model.rows
    iterations = 0
    improved = True
    while improved and iterations < max_iterations:
        iterations += 1
        improved = False
        best_delta = -IMPROVEMENT_EPS
        best_i, best_j = -1, -1

        for i in range(1, n - 2):
            a, b = tour[i - 1], tour[i]
            for j in range(i + 1, n - 1):
                c, d = tour[j], tour[j + 1]
                # Remove edges (a,b) and (c,d), add edges (a,c) and (b,d)
                delta = (rows[a][c] + rows[b][d]) - (rows[a][b] + rows[c][d])
                if delta < best_delta:
                    best_delta = delta
                    best_i, best_j = i, j
                    improved = True

        if improved:
            tour[best_i:best_j + 1] = tour[best_i:best_j + 1][::-1]
            length += best_delta

    logger.debug(f"2-opt finished after {iterations} passes, length = {length:.4f}")
    # Recompute to drop the drift accumulated by summing deltas
    return tour, model.tour_length(tour)


def multi_start_greedy(model: DistanceModel, max_starts: Optional[int] = MAX_GREEDY_STARTS,
                       refine: bool = True,
                       two_opt_iterations: int = MAX_TWO_OPT_ITERATIONS) -> Tuple[List[int], float]:
    """
    Best nearest neighbor tour over several start vertices.

    Args:
        model: Distance model
        max_starts: Number of start vertices tried (0, 1, ...); None tries all of them
        refine: Pass the winning tour through 2-opt
        two_opt_iterations: Pass cap for the 2-opt refinement

    Returns:
        (tour, length) with the tour rotated to start at vertex 0
    """
    n = model.n
    starts = n if max_starts is None else min(n, max_starts)

    best_path: List[int] = []
    best_dist = float('inf')
    for start in range(starts):
        path = nearest_neighbor_path(model, start)
        distance = model.tour_length(path)
        if distance < best_dist:
            best_dist = distance
            best_path = path

    best_path = rotate_to_start(best_path)
    best_dist = model.tour_length(best_path)
    if refine:
        best_path, best_dist = two_opt(model, best_path, two_opt_iterations)
    return best_path, best_dist
