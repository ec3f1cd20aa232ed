"""
partitioners.py - Quadrant Balancing Heuristics
================================================
Two ways of splitting a weighted point set into four regions of roughly
equal weight:

* Greedy (exhaustive line search): axis-aligned split lines drawn through
  the points' own coordinates, every pair tried.
* Aggregate (rotating quadrants): four 90 degree sectors around the weighted
  centroid, rotated in fixed steps until the improvement stalls.

Both are pure functions of the point set; nothing is cached between calls.
"""

import logging
import math
import time
from typing import Optional

import numpy as np

from config import Config
from models import (
    ExhaustivePartition, PartitionComparison, RotatingPartition, WeightedPointSet
)
from sector_geometry import (
    TWO_PI, direction_angles, imbalance, sector_weights, step_count, weighted_centroid
)
from utils import DegenerateInputError, require_positive_int, require_positive_real

logger = logging.getLogger(__name__)


def solve_exhaustive(point_set: WeightedPointSet) -> ExhaustivePartition:
    """
    Find the split lines, taken from the points' coordinates, that minimise
    the quadrant imbalance.

    The imbalance only changes when a split line crosses a point, so the
    count**2 candidate pairs cover every distinct split and the result is the
    global optimum of the quadrant objective. Candidates are visited with the
    point supplying the y line in the outer loop and the point supplying the
    x line in the inner loop; ties keep the first pair visited.

    Args:
        point_set: Task to balance

    Returns:
        ExhaustivePartition with the winning (split_x, split_y) and imbalance
    """
    xs = point_set.xs
    ys = point_set.ys
    weights = point_set.weight_array

    # left[i, j] is True when point j lies strictly left of candidate line x = xs[i]
    left = xs[np.newaxis, :] < xs[:, np.newaxis]
    right = ~left

    best_d = math.inf
    best_x = 0.0
    best_y = 0.0
    best_bins = (0.0, 0.0, 0.0, 0.0)

    for candidate_y in ys:
        below = (ys < candidate_y)[np.newaxis, :]
        above = ~below
        members = np.stack((left & below, right & below, right & above, left & above))

        # cumsum adds in point order, so equal splits get bit-identical sums;
        # one row per candidate x, columns are bins 0-3
        sums = np.cumsum(np.where(members, weights, 0.0), axis=2)[:, :, -1].T
        row_d = sums.max(axis=1) - sums.min(axis=1)

        # argmin returns the first minimum, keeping the inner-loop tie order
        j = int(np.argmin(row_d))
        if row_d[j] < best_d:
            best_d = float(row_d[j])
            best_x = float(xs[j])
            best_y = float(candidate_y)
            best_bins = tuple(float(s) for s in sums[j])

    logger.debug(f"Greedy: x={best_x:.4f}, y={best_y:.4f}, D={best_d:.6f} "
                 f"over {point_set.count ** 2} candidate pairs")

    return ExhaustivePartition(split_x=best_x, split_y=best_y, imbalance=best_d,
                               bin_weights=best_bins)


def solve_rotating(point_set: WeightedPointSet, patience: int,
                   angle_step: float) -> RotatingPartition:
    """
    Rotate a four-sector partition around the weighted centroid and keep
    the offset with the smallest imbalance.

    Offsets k*angle_step are scanned in increasing order. The scan stops as
    soon as ``patience`` consecutive offsets fail to strictly improve on the
    best one, so the result is a sampled approximation, not the angular
    optimum.

    Args:
        point_set: Task to balance
        patience: Consecutive non-improving steps tolerated (>= 1)
        angle_step: Rotation increment in radians, 0 < angle_step < 2*pi

    Returns:
        RotatingPartition with the winning offset in [0, 2*pi) and imbalance

    Raises:
        InvalidParameterError: patience or angle_step is not positive
        DegenerateInputError: angle_step >= 2*pi or the total weight is zero
    """
    patience = require_positive_int("patience", patience)
    angle_step = require_positive_real("angle_step", angle_step)
    if angle_step >= TWO_PI:
        raise DegenerateInputError(
            f"angle_step={angle_step} leaves no rotation offsets to evaluate (must be < 2*pi)"
        )
    steps = step_count(angle_step)
    if steps == 0:
        raise DegenerateInputError(f"angle_step={angle_step} yields no sample offsets")

    weights = point_set.weight_array
    centroid = weighted_centroid(point_set.xs, point_set.ys, weights)
    directions = direction_angles(point_set.xs, point_set.ys, centroid)

    best_d = math.inf
    best_theta = 0.0
    best_sums = (0.0, 0.0, 0.0, 0.0)
    stagnation = 0
    evaluated = 0

    for k in range(steps):
        theta = k * angle_step
        sums = sector_weights(directions, weights, theta)
        d = imbalance(sums)
        evaluated += 1

        if d < best_d:
            best_d = d
            best_theta = theta
            best_sums = sums
            stagnation = 0
        else:
            stagnation += 1

        if stagnation >= patience:
            break

    logger.debug(f"Aggregate: theta={best_theta:.4f}, D={best_d:.6f}, "
                 f"{evaluated}/{steps} offsets evaluated")

    return RotatingPartition(
        angle_offset=best_theta,
        imbalance=best_d,
        sector_weights=best_sums,
        centroid=centroid,
        steps_evaluated=evaluated,
        step_count=steps
    )


def compare_partitioners(point_set: WeightedPointSet,
                         patience: Optional[int] = None,
                         angle_step: Optional[float] = None) -> PartitionComparison:
    """Run both partitioners on one task and time each of them."""
    rotating_config = Config.SOLVERS['rotating']
    patience = rotating_config['patience'] if patience is None else patience
    angle_step = rotating_config['angle_step'] if angle_step is None else angle_step

    start = time.perf_counter()
    exhaustive = solve_exhaustive(point_set)
    exhaustive_time = time.perf_counter() - start

    start = time.perf_counter()
    rotating = solve_rotating(point_set, patience, angle_step)
    rotating_time = time.perf_counter() - start

    return PartitionComparison(
        exhaustive=exhaustive,
        rotating=rotating,
        exhaustive_time=exhaustive_time,
        rotating_time=rotating_time,
        patience=patience,
        angle_step=angle_step
    )
