"""
tsporacle: exact Euclidean TSP search for small seeded instances.

Multi-start nearest neighbor + 2-opt gives a baseline tour; a
branch-and-bound search pruned by an MST lower bound, driven by an
adaptive distance ceiling, then proves or improves it.
"""

from tsporacle.adaptive import AdaptiveResult, RoundRecord, adaptive_search
from tsporacle.config import SolverConfig, load_config
from tsporacle.errors import InvalidInputError, SearchCancelled
from tsporacle.geometry import (
    DistanceModel,
    build_distance_matrix,
    build_neighbor_ranking,
    generate_points,
)
from tsporacle.heuristics import multi_start_greedy, nearest_neighbor_path, two_opt
from tsporacle.mst import MSTOracle
from tsporacle.search import (
    CancellationToken,
    ProgressReporter,
    SearchEpisode,
    SearchResult,
    branch_and_bound,
)
from tsporacle.solver import (
    PERMUTATIONS_TOO_LARGE,
    SolveResult,
    count_permutations,
    format_large_number,
    solve,
    solve_model,
    solve_points,
)
from tsporacle.union_find import UnionFind

__version__ = "0.1.0"

__all__ = [
    "AdaptiveResult",
    "RoundRecord",
    "adaptive_search",
    "SolverConfig",
    "load_config",
    "InvalidInputError",
    "SearchCancelled",
    "DistanceModel",
    "build_distance_matrix",
    "build_neighbor_ranking",
    "generate_points",
    "multi_start_greedy",
    "nearest_neighbor_path",
    "two_opt",
    "MSTOracle",
    "CancellationToken",
    "ProgressReporter",
    "SearchEpisode",
    "SearchResult",
    "branch_and_bound",
    "PERMUTATIONS_TOO_LARGE",
    "SolveResult",
    "count_permutations",
    "format_large_number",
    "solve",
    "solve_model",
    "solve_points",
    "UnionFind",
]
