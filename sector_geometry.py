"""
sector_geometry.py - Quadrant and Sector Binning Helpers
=========================================================
Geometry shared by both partitioners: axis-aligned quadrant binning,
angular sector binning around a pivot and the imbalance measure.
"""

import math
from typing import Sequence, Tuple

import numpy as np

from models import Point, WeightedPointSet
from utils import DegenerateInputError


TWO_PI = 2 * math.pi
QUARTER_TURN = math.pi / 2
REGION_COUNT = 4


def imbalance(sums: Sequence[float]) -> float:
    """Difference between the heaviest and the lightest region."""
    return float(max(sums) - min(sums))


# ============================================================================
# AXIS-ALIGNED QUADRANTS
# ============================================================================

def quadrant_bin_indices(xs: np.ndarray, ys: np.ndarray,
                         split_x: float, split_y: float) -> np.ndarray:
    """
    Quadrant index of every point for the split lines x=split_x, y=split_y.

    0: left/below, 1: right/below, 2: right/above, 3: left/above.
    Points on a split line count as right (or above).
    """
    right = np.asarray(xs) >= split_x
    above = np.asarray(ys) >= split_y
    indices = np.full(right.shape, 3, dtype=int)
    indices[~right & ~above] = 0
    indices[right & ~above] = 1
    indices[right & above] = 2
    return indices


def quadrant_bin_weights(point_set: WeightedPointSet,
                         split_x: float, split_y: float) -> Tuple[float, float, float, float]:
    """Total weight in each of the four quadrants."""
    indices = quadrant_bin_indices(point_set.xs, point_set.ys, split_x, split_y)
    sums = np.bincount(indices, weights=point_set.weight_array, minlength=REGION_COUNT)
    return tuple(float(s) for s in sums)


def quadrant_imbalance(point_set: WeightedPointSet, split_x: float, split_y: float) -> float:
    """Imbalance of the quadrants induced by an arbitrary split."""
    return imbalance(quadrant_bin_weights(point_set, split_x, split_y))


# ============================================================================
# ANGULAR SECTORS
# ============================================================================

def weighted_centroid(xs: np.ndarray, ys: np.ndarray, weights: np.ndarray) -> Point:
    """Weight-averaged position of the points."""
    total = float(np.sum(weights))
    if total == 0:
        raise DegenerateInputError("total weight is zero, centroid is undefined")
    return Point(float(np.dot(xs, weights) / total), float(np.dot(ys, weights) / total))


def direction_angles(xs: np.ndarray, ys: np.ndarray, pivot: Point) -> np.ndarray:
    """Direction of every point seen from the pivot, in (-pi, pi]."""
    return np.arctan2(np.asarray(ys) - pivot.y, np.asarray(xs) - pivot.x)


def wrap_angle_once(alpha: np.ndarray) -> np.ndarray:
    """
    Single 2*pi correction for angles known to lie in (-2*pi, pi].

    Used by the rotating search where directions come from atan2 and the
    offset lies in [0, 2*pi). The result is in [0, 2*pi]; the closed upper end
    is handled by the sector clamp.
    """
    alpha = np.asarray(alpha, dtype=float)
    return np.where(alpha < 0, alpha + TWO_PI, alpha)


def normalize_angle(alpha):
    """Full modulo into [0, 2*pi) for angles of any magnitude."""
    wrapped = np.mod(np.mod(alpha, TWO_PI) + TWO_PI, TWO_PI)
    # mod can round up to exactly 2*pi for tiny negative inputs
    wrapped = np.where(wrapped >= TWO_PI, 0.0, wrapped)
    if np.ndim(wrapped) == 0:
        return float(wrapped)
    return wrapped


def sector_indices(directions: np.ndarray, offset: float) -> np.ndarray:
    """Sector 0-3 of every direction for a partition rotated by offset."""
    alpha = wrap_angle_once(np.asarray(directions) - offset)
    indices = np.floor(alpha / QUARTER_TURN).astype(int)
    # alpha == 2*pi lands one past the last sector
    return np.minimum(indices, REGION_COUNT - 1)


def sector_weights(directions: np.ndarray, weights: np.ndarray,
                   offset: float) -> Tuple[float, float, float, float]:
    """Total weight in each sector for the given rotation offset."""
    sums = np.bincount(sector_indices(directions, offset), weights=weights,
                       minlength=REGION_COUNT)
    return tuple(float(s) for s in sums)


def step_count(angle_step: float) -> int:
    """Number of offsets k*angle_step sampled in one full turn."""
    if math.isinf(angle_step):
        return 0
    return int(math.floor(TWO_PI / angle_step))
