"""
Minimum spanning tree lower bound over vertex subsets.

The branch-and-bound search asks for the MST weight of the unvisited
vertices at every node. Sibling branches share most of those subsets,
so results are memoized under a canonical bitmask key.
"""

import logging
import numpy as np
from typing import Dict, Iterable, List

from tsporacle.union_find import UnionFind

logger = logging.getLogger(__name__)


def subset_key(vertices: Iterable[int]) -> int:
    """Canonical key of a vertex subset: order and duplicates do not matter."""
    key = 0
    for v in vertices:
        key |= 1 << v
    return key


def kruskal_weight(dist: np.ndarray, vertices: List[int]) -> float:
    """
    Weight of the minimum spanning tree of the complete subgraph on vertices.

    Args:
        dist: (n, n) distance matrix
        vertices: Sorted, duplicate-free vertex indices

    Returns:
        Total weight of the accepted edges (0.0 for fewer than two vertices)
    """
    k = len(vertices)
    if k <= 1:
        return 0.0

    idx = np.asarray(vertices)
    sub = dist[np.ix_(idx, idx)]
    rows, cols = np.triu_indices(k, 1)
    weights = sub[rows, cols]
    order = np.argsort(weights, kind='stable')

    uf = UnionFind(k)
    total = 0.0
    used = 0
    for e in order:
        if uf.union(int(rows[e]), int(cols[e])):
            total += float(weights[e])
            used += 1
            if used == k - 1:
                break
    return total


class MSTOracle:
    """Memoized MST weights for one search episode."""

    def __init__(self, dist: np.ndarray):
        self.dist = dist
        self._cache: Dict[int, float] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def weight(self, vertices: Iterable[int]) -> float:
        canonical = sorted(set(vertices))
        if len(canonical) <= 1:
            return 0.0
        return self.weight_for_key(subset_key(canonical), canonical)

    def weight_for_key(self, key: int, vertices: List[int]) -> float:
        """Cached lookup when the caller already holds the subset key."""
        cached = self._cache.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        value = kruskal_weight(self.dist, vertices)
        self._cache[key] = value
        return value

    def clear(self) -> None:
        if self._cache:
            logger.debug(f"Dropping MST cache: {len(self._cache)} subsets, {self.hits} hits, {self.misses} misses")
        self._cache.clear()
        self.hits = 0
        self.misses = 0
