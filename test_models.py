import dataclasses
import math

import numpy as np
import pytest

from models import ExperimentRecord, Point, RotatingPartition, WeightedPointSet
from reports import CSV_COLUMNS
from utils import DegenerateInputError, InvalidParameterError, ValidationError


def test_point_helpers():
    assert Point(0, 0) == Point(0.0, 0.0)
    assert Point(1.5, -2).to_tuple() == (1.5, -2)


def test_from_lists_normalizes_types():
    point_set = WeightedPointSet.from_lists([1, 2], [3, 4], [5, 6], radius=2)
    assert point_set.count == 2
    assert point_set.radius == 2.0
    assert point_set.points == (Point(1.0, 3.0), Point(2.0, 4.0))
    assert point_set.weights == (5.0, 6.0)


def test_point_set_is_immutable(unit_square):
    with pytest.raises(dataclasses.FrozenInstanceError):
        unit_square.count = 5


def test_count_must_match_points():
    with pytest.raises(ValidationError):
        WeightedPointSet(count=3, radius=1.0, points=[(0, 0), (1, 1)], weights=[1, 1])


def test_empty_point_set_rejected():
    with pytest.raises(ValidationError):
        WeightedPointSet.from_lists([], [], [])


@pytest.mark.parametrize("weight", [-1.0, math.nan, math.inf])
def test_bad_weights_rejected(weight):
    with pytest.raises(ValidationError):
        WeightedPointSet.from_lists([0, 1], [0, 1], [1.0, weight])


def test_non_finite_coordinates_rejected():
    with pytest.raises(ValidationError):
        WeightedPointSet.from_lists([0, math.nan], [0, 1], [1, 1])


def test_mismatched_coordinate_lists_rejected():
    with pytest.raises(ValidationError):
        WeightedPointSet.from_lists([0, 1], [0], [1, 1])


def test_validation_errors_share_a_base():
    assert issubclass(InvalidParameterError, ValidationError)
    assert issubclass(DegenerateInputError, ValidationError)


def test_generate_is_reproducible_with_seed():
    first = WeightedPointSet.generate(25, 2.0, 1.0, 5.0, rng=np.random.default_rng(7))
    second = WeightedPointSet.generate(25, 2.0, 1.0, 5.0, rng=np.random.default_rng(7))
    assert first == second


def test_generated_points_inside_disk_with_weights_in_range():
    point_set = WeightedPointSet.generate(200, 3.0, 2.0, 4.0, rng=np.random.default_rng(1))
    assert point_set.count == 200
    for point, weight in zip(point_set.points, point_set.weights):
        assert point.x ** 2 + point.y ** 2 <= 9.0
        assert 2.0 <= weight <= 4.0


def test_generate_with_equal_weight_bounds():
    point_set = WeightedPointSet.generate(10, 1.0, 3.0, 3.0, rng=np.random.default_rng(0))
    assert set(point_set.weights) == {3.0}


@pytest.mark.parametrize("count, radius, weight_min, weight_max", [
    (0, 1.0, 1.0, 2.0),
    (-3, 1.0, 1.0, 2.0),
    (2.5, 1.0, 1.0, 2.0),
    (5, 0.0, 1.0, 2.0),
    (5, -1.0, 1.0, 2.0),
    (5, 1.0, 3.0, 2.0),
    (5, 1.0, -1.0, 2.0),
])
def test_generate_rejects_invalid_parameters(count, radius, weight_min, weight_max):
    with pytest.raises(InvalidParameterError):
        WeightedPointSet.generate(count, radius, weight_min, weight_max)


def test_dict_round_trip():
    point_set = WeightedPointSet.generate(6, 1.0, 1.0, 10.0, rng=np.random.default_rng(3))
    assert WeightedPointSet.from_dict(point_set.to_dict()) == point_set


@pytest.mark.parametrize("data", [
    {'points': [{'x': 0, 'y': 0}]},
    {'points': [{'x': 0}], 'weights': [1]},
    {'points': [{'x': 'a', 'y': 0}], 'weights': [1]},
    {'points': None, 'weights': [1]},
])
def test_from_dict_rejects_malformed_data(data):
    with pytest.raises(ValidationError):
        WeightedPointSet.from_dict(data)


def test_centroid_and_total_weight():
    point_set = WeightedPointSet.from_lists([0, 4], [0, 2], [1, 3])
    assert point_set.total_weight == 4.0
    assert point_set.centroid() == Point(3.0, 1.5)


def test_centroid_of_zero_weight_set():
    point_set = WeightedPointSet.from_lists([0, 1], [0, 1], [0, 0])
    with pytest.raises(DegenerateInputError):
        point_set.centroid()


def test_rotating_partition_stopped_early():
    assert RotatingPartition(0.0, 1.0, steps_evaluated=4, step_count=16).stopped_early
    assert not RotatingPartition(0.0, 1.0, steps_evaluated=16, step_count=16).stopped_early


def test_experiment_record_row():
    record = ExperimentRecord(
        experiment='size', count=10, patience=5, angle_step=0.5,
        weight_min=1.0, weight_max=3.0, repetition=0,
        time_exhaustive=0.01, imbalance_exhaustive=1.0,
        time_rotating=0.001, imbalance_rotating=2.0, steps_evaluated=7
    )
    row = record.to_row()
    assert list(row) == CSV_COLUMNS
    assert row['count'] == 10
    assert row['steps_evaluated'] == 7


@pytest.mark.parametrize("radius", [0.0, -2.0, math.nan, math.inf])
def test_radius_must_be_positive(radius):
    with pytest.raises(ValidationError, match="radius"):
        WeightedPointSet(count=1, radius=radius, points=[(0, 0)], weights=[1])
    with pytest.raises(ValidationError):
        WeightedPointSet.from_dict({'radius': radius, 'points': [{'x': 0, 'y': 0}], 'weights': [1]})
