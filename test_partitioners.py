import math

import numpy as np
import pytest

from models import WeightedPointSet
from partitioners import compare_partitioners, solve_exhaustive, solve_rotating
from sector_geometry import (
    direction_angles, imbalance, quadrant_imbalance, sector_weights, step_count,
    weighted_centroid
)
from utils import DegenerateInputError, InvalidParameterError


def brute_force_exhaustive(point_set):
    """Plain nested loops over the same candidate pairs, first strict minimum wins."""
    best = (0.0, 0.0, math.inf)
    for py in point_set.points:
        for px in point_set.points:
            sums = [0.0, 0.0, 0.0, 0.0]
            for p, w in zip(point_set.points, point_set.weights):
                if p.x < px.x and p.y < py.y:
                    sums[0] += w
                elif p.x >= px.x and p.y < py.y:
                    sums[1] += w
                elif p.x >= px.x and p.y >= py.y:
                    sums[2] += w
                else:
                    sums[3] += w
            d = max(sums) - min(sums)
            if d < best[2]:
                best = (px.x, py.y, d)
    return best


def full_scan(point_set, angle_step):
    """Imbalance at every sampled offset, no early stop."""
    centroid = weighted_centroid(point_set.xs, point_set.ys, point_set.weight_array)
    directions = direction_angles(point_set.xs, point_set.ys, centroid)
    return [imbalance(sector_weights(directions, point_set.weight_array, k * angle_step))
            for k in range(step_count(angle_step))]


def random_set(seed, count=12):
    return WeightedPointSet.generate(count, 1.0, 1.0, 10.0, rng=np.random.default_rng(seed))


# ---------------------------------------------------------------------------
# Greedy
# ---------------------------------------------------------------------------

def test_exhaustive_symmetric_square(unit_square):
    result = solve_exhaustive(unit_square)
    assert result.split_x == 1
    assert result.split_y == 1
    assert result.imbalance == 0
    assert result.bin_weights == (1.0, 1.0, 1.0, 1.0)


def test_exhaustive_single_point_imbalance_is_its_weight():
    point_set = WeightedPointSet.from_lists([0.3], [-0.2], [7.5])
    result = solve_exhaustive(point_set)
    assert result.imbalance == 7.5
    assert (result.split_x, result.split_y) == (0.3, -0.2)
    assert result.bin_weights == (0.0, 0.0, 7.5, 0.0)


def test_exhaustive_ties_keep_first_pair():
    # (x=1, y=0) is the first pair reaching D=1; later pairs only tie
    point_set = WeightedPointSet.from_lists([0, 1], [0, 1], [1, 1])
    result = solve_exhaustive(point_set)
    assert result.imbalance == 1
    assert (result.split_x, result.split_y) == (1, 0)


def tenths_set(seed):
    """Random points with one-decimal weights, where float ties are common."""
    rng = np.random.default_rng(seed)
    count = int(rng.integers(4, 14))
    points = WeightedPointSet.generate(count, 1.0, 1.0, 1.0, rng=rng)
    weights = rng.integers(1, 9, size=count) / 10
    return WeightedPointSet.from_lists(points.xs, points.ys, weights)


@pytest.mark.parametrize("seed", range(8))
def test_exhaustive_matches_brute_force(seed):
    point_set = random_set(seed)
    result = solve_exhaustive(point_set)

    assert (result.split_x, result.split_y, result.imbalance) == brute_force_exhaustive(point_set)
    assert quadrant_imbalance(point_set, result.split_x, result.split_y) == pytest.approx(result.imbalance)


def test_exhaustive_tie_order_with_decimal_weights():
    for seed in range(300):
        point_set = tenths_set(seed)
        result = solve_exhaustive(point_set)
        assert (result.split_x, result.split_y, result.imbalance) == \
            brute_force_exhaustive(point_set), f"seed {seed}"


def test_exhaustive_not_worse_than_any_point_split():
    point_set = random_set(42, count=9)
    result = solve_exhaustive(point_set)
    for px in point_set.points:
        for py in point_set.points:
            assert result.imbalance <= quadrant_imbalance(point_set, px.x, py.y) + 1e-12


def test_exhaustive_deterministic():
    point_set = random_set(3, count=20)
    assert solve_exhaustive(point_set) == solve_exhaustive(point_set)


def test_exhaustive_zero_weights_balance_trivially():
    point_set = WeightedPointSet.from_lists([0, 1], [0, 1], [0, 0])
    assert solve_exhaustive(point_set).imbalance == 0


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("patience", [1, 2, 10])
def test_rotating_symmetric_square(unit_square, patience):
    result = solve_rotating(unit_square, patience, math.pi / 2)
    assert result.angle_offset == 0
    assert result.imbalance == 0
    assert result.sector_weights == (1.0, 1.0, 1.0, 1.0)
    assert result.centroid.x == pytest.approx(0)
    assert result.centroid.y == pytest.approx(0)


def test_rotating_deterministic():
    point_set = random_set(5, count=30)
    first = solve_rotating(point_set, 4, math.pi / 16)
    second = solve_rotating(point_set, 4, math.pi / 16)
    assert first == second


def test_rotating_offset_in_range():
    for seed in range(5):
        result = solve_rotating(random_set(seed, count=25), 100, 0.1)
        assert 0 <= result.angle_offset < 2 * math.pi


def test_rotating_large_patience_is_full_scan():
    point_set = random_set(11, count=40)
    angle_step = math.pi / 32
    scan = full_scan(point_set, angle_step)

    result = solve_rotating(point_set, len(scan), angle_step)

    assert result.steps_evaluated == result.step_count == len(scan) == 64
    assert not result.stopped_early
    assert result.imbalance == min(scan)
    assert result.angle_offset == scan.index(min(scan)) * angle_step


@pytest.mark.parametrize("patience", [1, 2, 3, 5])
def test_rotating_patience_bound(patience):
    point_set = random_set(17, count=40)
    angle_step = math.pi / 64
    scan = full_scan(point_set, angle_step)

    result = solve_rotating(point_set, patience, angle_step)

    evaluated = scan[:result.steps_evaluated]
    best_index = evaluated.index(min(evaluated))
    assert result.imbalance == min(evaluated)
    assert result.angle_offset == best_index * angle_step
    assert result.steps_evaluated - 1 - best_index <= patience
    if result.stopped_early:
        # Stopped exactly when the stagnation counter hit the limit
        assert result.steps_evaluated - 1 - best_index == patience


def test_rotating_stops_after_patience_without_improvement():
    # Best offset is the first one; everything after only ties
    point_set = WeightedPointSet.from_lists([1, -1, -1, 1], [1, 1, -1, -1], [1, 1, 1, 1])
    result = solve_rotating(point_set, 3, math.pi / 8)
    assert result.steps_evaluated == 4
    assert result.step_count == 16
    assert result.stopped_early


def test_finer_angle_step_never_worse():
    point_set = random_set(23, count=50)
    results = [solve_rotating(point_set, 10_000, math.pi / d).imbalance for d in (4, 8, 16, 32)]
    for coarse, fine in zip(results, results[1:]):
        assert fine <= coarse


def test_rotating_zero_total_weight():
    point_set = WeightedPointSet.from_lists([0, 1], [0, 1], [0, 0])
    with pytest.raises(DegenerateInputError):
        solve_rotating(point_set, 3, math.pi / 4)


@pytest.mark.parametrize("angle_step", [2 * math.pi, 7.0, math.inf])
def test_rotating_angle_step_too_large(unit_square, angle_step):
    with pytest.raises(DegenerateInputError):
        solve_rotating(unit_square, 3, angle_step)


@pytest.mark.parametrize("patience", [0, -2, 1.5, True, "3"])
def test_rotating_invalid_patience(unit_square, patience):
    with pytest.raises(InvalidParameterError):
        solve_rotating(unit_square, patience, math.pi / 4)


@pytest.mark.parametrize("angle_step", [0, -0.5, math.nan])
def test_rotating_invalid_angle_step(unit_square, angle_step):
    with pytest.raises(InvalidParameterError):
        solve_rotating(unit_square, 3, angle_step)


def test_rotating_step_just_below_full_turn(unit_square):
    result = solve_rotating(unit_square, 1, 2 * math.pi - 1e-9)
    assert result.step_count == 1
    assert result.steps_evaluated == 1
    assert result.angle_offset == 0


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def test_compare_partitioners_uses_configured_defaults(unit_square):
    comparison = compare_partitioners(unit_square)
    assert comparison.patience == 5
    assert comparison.angle_step == pytest.approx(math.pi / 8)
    assert comparison.exhaustive.imbalance == 0
    assert comparison.rotating.imbalance == 0
    assert comparison.imbalance_gap == 0
    assert comparison.exhaustive_time >= 0
    assert comparison.rotating_time >= 0


def test_comparison_dict():
    point_set = random_set(8, count=30)
    comparison = compare_partitioners(point_set, 5, math.pi / 8)
    assert comparison.to_dict()['imbalance_gap'] == pytest.approx(comparison.imbalance_gap)
    assert comparison.to_dict()['rotating']['steps_evaluated'] == comparison.rotating.steps_evaluated
