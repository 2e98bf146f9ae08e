import itertools

import numpy as np
import pytest

from tsporacle.geometry import build_distance_matrix, generate_points
from tsporacle.mst import MSTOracle, kruskal_weight, subset_key


def prim_weight(dist, vertices):
    vertices = list(vertices)
    in_tree = {vertices[0]}
    total = 0.0
    while len(in_tree) < len(vertices):
        w, v = min((dist[a, b], b) for a in in_tree for b in vertices if b not in in_tree)
        in_tree.add(v)
        total += w
    return total


@pytest.fixture
def dist():
    return build_distance_matrix(generate_points(10, seed=11))


def test_trivial_subsets(dist):
    oracle = MSTOracle(dist)
    assert oracle.weight([]) == 0.0
    assert oracle.weight([4]) == 0.0
    assert oracle.weight([4, 4]) == 0.0


def test_two_vertices_is_edge_weight(dist):
    assert MSTOracle(dist).weight([2, 7]) == pytest.approx(dist[2, 7])


def test_matches_prim(dist):
    oracle = MSTOracle(dist)
    for subset in [range(10), [0, 3, 5, 9], [1, 2, 4, 6, 8]]:
        assert oracle.weight(subset) == pytest.approx(prim_weight(dist, subset))


def test_square_mst():
    square = build_distance_matrix(np.array([[0, 0], [0, 1], [1, 1], [1, 0]], dtype=float))
    assert kruskal_weight(square, [0, 1, 2, 3]) == pytest.approx(3.0)


def test_invariant_under_permutation(dist):
    oracle = MSTOracle(dist)
    subset = [1, 3, 4, 8, 9]
    expected = oracle.weight(subset)
    for perm in itertools.permutations(subset):
        assert oracle.weight(perm) == expected
    assert oracle.weight(subset + [3, 8]) == expected


def test_cache_hits_do_not_recompute(dist):
    oracle = MSTOracle(dist)
    oracle.weight([5, 1, 3])
    assert oracle.misses == 1 and len(oracle) == 1
    oracle.weight([3, 5, 1])
    oracle.weight((1, 3, 5))
    assert oracle.misses == 1
    assert oracle.hits == 2


def test_clear_resets_cache(dist):
    oracle = MSTOracle(dist)
    first = oracle.weight([0, 1, 2])
    oracle.clear()
    assert len(oracle) == 0 and oracle.hits == 0 and oracle.misses == 0
    assert oracle.weight([0, 1, 2]) == first


def test_subset_key_is_canonical():
    assert subset_key([3, 1, 2]) == subset_key([1, 2, 3, 3])
    assert subset_key([1, 2]) != subset_key([1, 3])
