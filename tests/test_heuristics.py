import numpy as np
import pytest

from tsporacle.geometry import DistanceModel, generate_points
from tsporacle.heuristics import multi_start_greedy, nearest_neighbor_path, rotate_to_start, two_opt


def test_nearest_neighbor_on_line():
    coords = np.array([[0, 0], [3, 0], [1, 0], [2, 0]], dtype=float)
    model = DistanceModel.from_points(coords)
    assert nearest_neighbor_path(model, 0) == [0, 2, 3, 1]


def test_nearest_neighbor_falls_back_to_scan():
    # With an empty neighbor ranking every step uses the linear scan
    model = DistanceModel.from_points(generate_points(8, seed=4), neighbor_count=0)
    path = nearest_neighbor_path(model, 3)
    assert path[0] == 3
    assert sorted(path) == list(range(8))

    ranked = DistanceModel.from_points(generate_points(8, seed=4))
    assert nearest_neighbor_path(ranked, 3) == path


def test_rotate_to_start():
    assert rotate_to_start([2, 3, 0, 1]) == [0, 1, 2, 3]
    assert rotate_to_start([0, 1, 2]) == [0, 1, 2]


def test_two_opt_uncrosses_square(square_model):
    tour, length = two_opt(square_model, [0, 2, 1, 3])
    assert length == pytest.approx(4.0)
    assert square_model.tour_length(tour) == pytest.approx(4.0)
    assert tour[0] == 0


def test_two_opt_short_paths_unchanged(collinear_model):
    assert two_opt(collinear_model, [0, 2, 1]) == ([0, 2, 1], collinear_model.tour_length([0, 2, 1]))


@pytest.mark.parametrize("seed", range(10))
def test_two_opt_never_increases_length(seed):
    model = DistanceModel.from_points(generate_points(12, seed=seed))
    rng = np.random.default_rng(seed)
    start = [0] + list(rng.permutation(np.arange(1, 12)))
    start = [int(v) for v in start]
    before = model.tour_length(start)
    tour, after = two_opt(model, start)
    assert after <= before
    assert sorted(tour) == list(range(12))
    # A second run finds nothing left to improve
    again, after_again = two_opt(model, tour)
    assert again == tour and after_again == after


def test_two_opt_iteration_cap():
    model = DistanceModel.from_points(generate_points(12, seed=1))
    start = list(range(12))
    capped, _ = two_opt(model, start, max_iterations=0)
    assert capped == start


def test_multi_start_greedy_returns_tour_from_zero(random_model):
    tour, length = multi_start_greedy(random_model)
    assert tour[0] == 0
    assert random_model.is_tour(tour)
    assert length == pytest.approx(random_model.tour_length(tour))


def test_refinement_does_not_hurt(random_model):
    _, plain = multi_start_greedy(random_model, refine=False)
    _, refined = multi_start_greedy(random_model, refine=True)
    assert refined <= plain


def test_all_starts_no_worse_than_five():
    model = DistanceModel.from_points(generate_points(15, seed=9))
    _, five = multi_start_greedy(model, max_starts=5, refine=False)
    _, every = multi_start_greedy(model, max_starts=None, refine=False)
    assert every <= five
