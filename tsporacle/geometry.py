# tsporacle/geometry.py

import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from tsporacle.errors import InvalidInputError

COORD_LIMIT = 1000.0
NEIGHBOR_COUNT = 10


def generate_points(n: int, seed: int) -> np.ndarray:
    """
    Generate n random points, uniform over [0, 1000) x [0, 1000).

    Args:
        n: Number of points
        seed: Seed for the generator; the same seed always yields the same points

    Returns:
        np.ndarray of shape (n, 2)
    """
    if n < 1:
        raise InvalidInputError(f"Cannot generate {n} points")
    rng = np.random.default_rng(seed)
    return rng.uniform(0, COORD_LIMIT, size=(n, 2))


def build_distance_matrix(points: np.ndarray) -> np.ndarray:
    """Compute the symmetric Euclidean distance matrix of a point set."""
    coords = np.asarray(points, dtype=float)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise InvalidInputError(f"Points must have shape (n, 2), got {coords.shape}")

    diff = coords[:, np.newaxis, :] - coords[np.newaxis, :, :]
    dist = np.sqrt(np.sum(diff ** 2, axis=2))
    # Force exact symmetry and a clean diagonal
    dist = np.triu(dist, 1)
    return dist + dist.T


def build_neighbor_ranking(dist: np.ndarray, k: int = NEIGHBOR_COUNT) -> List[List[int]]:
    """
    Rank the nearest other vertices of every vertex.

    Ties are broken by the lower vertex index (stable sort).

    Args:
        dist: (n, n) distance matrix
        k: Maximum number of neighbors kept per vertex

    Returns:
        List of n lists, each holding up to k vertex indices, nearest first
    """
    n = len(dist)
    ranking = []
    for i in range(n):
        order = np.argsort(dist[i], kind='stable')
        neighbors = [int(j) for j in order if j != i]
        ranking.append(neighbors[:k])
    return ranking


def validate_matrix(dist: np.ndarray, tol: float = 1e-9) -> None:
    """Check that a matrix is square, symmetric, non-negative with a zero diagonal."""
    if dist.ndim != 2 or dist.shape[0] != dist.shape[1]:
        raise InvalidInputError(f"Distance matrix must be square, got shape {dist.shape}")
    if not np.all(np.isfinite(dist)):
        raise InvalidInputError("Distance matrix contains non-finite values")
    if np.any(dist < 0):
        raise InvalidInputError("Distance matrix contains negative distances")
    if np.any(np.abs(np.diag(dist)) > tol):
        raise InvalidInputError("Distance matrix diagonal must be zero")
    if not np.allclose(dist, dist.T, atol=tol, rtol=0.0):
        raise InvalidInputError("Distance matrix must be symmetric")


@dataclass
class DistanceModel:
    """
    Read-only distance model shared by the heuristics and the search.

    Holds the distance matrix both as an ndarray and as nested lists;
    the search indexes the lists since scalar ndarray access is slow
    in tight Python loops. Build it with from_points or from_matrix;
    direct construction does not validate the matrix.
    """
    matrix: np.ndarray
    neighbors: List[List[int]]
    points: Optional[np.ndarray] = None
    rows: List[List[float]] = field(init=False, repr=False)

    def __post_init__(self):
        # Private copy, so freezing it never touches the caller's array
        self.matrix = np.array(self.matrix, dtype=float)
        self.matrix.setflags(write=False)
        self.rows = self.matrix.tolist()

    @classmethod
    def from_points(cls, points: np.ndarray, neighbor_count: int = NEIGHBOR_COUNT) -> 'DistanceModel':
        coords = np.array(points, dtype=float)
        dist = build_distance_matrix(coords)
        coords.setflags(write=False)
        return cls(matrix=dist, neighbors=build_neighbor_ranking(dist, neighbor_count), points=coords)

    @classmethod
    def from_matrix(cls, matrix, neighbor_count: int = NEIGHBOR_COUNT) -> 'DistanceModel':
        dist = np.asarray(matrix, dtype=float)
        validate_matrix(dist)
        return cls(matrix=dist, neighbors=build_neighbor_ranking(dist, neighbor_count))

    @property
    def n(self) -> int:
        return len(self.rows)

    def distance(self, a: int, b: int) -> float:
        return self.rows[a][b]

    def partial_length(self, path: Sequence[int]) -> float:
        """Length of an open path (no closing edge)."""
        rows = self.rows
        return sum(rows[path[i]][path[i + 1]] for i in range(len(path) - 1))

    def tour_length(self, path: Sequence[int]) -> float:
        """Length of a closed tour, including the edge back to the first vertex."""
        if len(path) < 2:
            return 0.0
        return self.partial_length(path) + self.rows[path[-1]][path[0]]

    def is_tour(self, path: Sequence[int]) -> bool:
        """True when path visits every vertex exactly once."""
        return len(path) == self.n and set(path) == set(range(self.n))
