import pytest

from tests.conftest import brute_force_length
from tsporacle.adaptive import adaptive_search
from tsporacle.geometry import DistanceModel, generate_points
from tsporacle.heuristics import multi_start_greedy
from tsporacle.search import CancellationToken


@pytest.mark.parametrize("n", [4, 5, 6, 7, 8])
@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_matches_brute_force(n, seed):
    model = DistanceModel.from_points(generate_points(n, seed=seed))
    result = adaptive_search(model)
    assert result.distance == pytest.approx(brute_force_length(model))
    assert model.is_tour(result.path)
    assert model.tour_length(result.path) == pytest.approx(result.distance)


def test_square(square_model):
    result = adaptive_search(square_model)
    assert result.distance == pytest.approx(4.0)
    assert result.path in ([0, 1, 2, 3], [0, 3, 2, 1])


def test_collinear(collinear_model):
    result = adaptive_search(collinear_model)
    assert result.distance == pytest.approx(4.0)
    assert not result.improved


def test_never_worse_than_baseline(random_model):
    result = adaptive_search(random_model)
    assert result.distance <= result.baseline_distance
    assert result.rounds


def test_optimal_baseline_returns_it_unchanged(random_model):
    optimum = brute_force_length(random_model)
    path, length = multi_start_greedy(random_model)
    result = adaptive_search(random_model, baseline=(path, length))
    if length <= optimum + 1e-9:
        assert result.path == path
        assert not result.improved
    # Ceilings only ever grow while nothing is found
    misses = []
    for record in result.rounds:
        if record.found:
            break
        misses.append(record.ceiling)
    assert misses == sorted(misses)
    assert all(c <= result.baseline_distance for c in misses)


def test_bad_baseline_is_improved():
    model = DistanceModel.from_points(generate_points(8, seed=5))
    bad = list(range(8))
    result = adaptive_search(model, baseline=(bad, model.tour_length(bad)))
    assert result.improved
    assert result.distance == pytest.approx(brute_force_length(model))
    found = [r for r in result.rounds if r.found]
    assert found
    # The round after a hit searches below the hit
    hit_index = result.rounds.index(found[-1])
    if hit_index + 1 < len(result.rounds):
        assert result.rounds[hit_index + 1].ceiling < found[-1].distance


def test_round_tours_add_up(random_model):
    result = adaptive_search(random_model)
    assert result.tours_evaluated == sum(r.tours_evaluated for r in result.rounds)


def test_round_cap():
    model = DistanceModel.from_points(generate_points(8, seed=6))
    result = adaptive_search(model, max_rounds=1)
    assert len(result.rounds) == 1
    assert result.distance <= result.baseline_distance


def test_cancellation_returns_best_known(random_model):
    token = CancellationToken()
    token.cancel()
    result = adaptive_search(random_model, cancel_token=token)
    assert result.cancelled
    assert len(result.rounds) == 1
    assert result.path == result.baseline_path
