import itertools
import os

import numpy as np
import pytest

from tsporacle.geometry import DistanceModel, generate_points


def brute_force_length(model: DistanceModel) -> float:
    """Shortest closed tour by trying every permutation rooted at vertex 0."""
    best = float('inf')
    for perm in itertools.permutations(range(1, model.n)):
        best = min(best, model.tour_length((0,) + perm))
    return best


@pytest.fixture
def square_model():
    coords = np.array([[0, 0], [0, 1], [1, 1], [1, 0]], dtype=float)
    return DistanceModel.from_points(coords)


@pytest.fixture
def collinear_model():
    coords = np.array([[0, 0], [1, 0], [2, 0]], dtype=float)
    return DistanceModel.from_points(coords)


@pytest.fixture
def random_model():
    return DistanceModel.from_points(generate_points(9, seed=42))


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no TSP_ORACLE_* variables set."""
    for key in list(os.environ):
        if key.startswith("TSP_ORACLE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
