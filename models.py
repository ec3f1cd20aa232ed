"""
models.py - Core Data Models for the Quadrant Balancing System
===============================================================
Defines the weighted point set and the result types produced by the
partitioners and the experiment runner.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from utils import DegenerateInputError, InvalidParameterError, ValidationError


@dataclass(frozen=True)
class Point:
    """2D point in the task coordinate system."""
    x: float
    y: float

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple representation."""
        return (self.x, self.y)


@dataclass(frozen=True)
class WeightedPointSet:
    """
    Immutable snapshot of a balancing task: points, their weights and the
    radius of the disk they were generated in.

    The radius is provenance metadata only; loaded points are not checked
    against it.
    """
    count: int
    radius: float
    points: Tuple[Point, ...]
    weights: Tuple[float, ...]

    def __post_init__(self):
        # Normalise to tuples so callers may pass lists
        object.__setattr__(self, 'points', tuple(
            p if isinstance(p, Point) else Point(float(p[0]), float(p[1]))
            for p in self.points
        ))
        object.__setattr__(self, 'weights', tuple(float(w) for w in self.weights))

        if isinstance(self.count, bool) or not isinstance(self.count, (int, np.integer)):
            raise ValidationError(f"count must be an integer, got {self.count!r}")
        if self.count < 1:
            raise ValidationError(f"count must be at least 1, got {self.count}")
        if len(self.points) != self.count or len(self.weights) != self.count:
            raise ValidationError(
                f"count={self.count} but got {len(self.points)} points "
                f"and {len(self.weights)} weights"
            )
        if not (math.isfinite(self.radius) and self.radius > 0):
            raise ValidationError(f"radius must be a positive real, got {self.radius}")
        for i, p in enumerate(self.points):
            if not (math.isfinite(p.x) and math.isfinite(p.y)):
                raise ValidationError(f"point {i + 1} has non-finite coordinates: {p}")
        for i, w in enumerate(self.weights):
            if not math.isfinite(w) or w < 0:
                raise ValidationError(f"weight {i + 1} must be finite and non-negative, got {w}")

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_lists(cls, xs: Sequence[float], ys: Sequence[float],
                   weights: Sequence[float], radius: float = 1.0) -> 'WeightedPointSet':
        """Build a point set from explicit coordinate and weight lists."""
        if len(xs) != len(ys):
            raise ValidationError(f"got {len(xs)} x-coordinates and {len(ys)} y-coordinates")
        points = tuple(Point(float(x), float(y)) for x, y in zip(xs, ys))
        return cls(count=len(points), radius=float(radius), points=points, weights=tuple(weights))

    @classmethod
    def generate(cls, count: int, radius: float, weight_min: float, weight_max: float,
                 rng: Optional[np.random.Generator] = None) -> 'WeightedPointSet':
        """
        Generate a random task by rejection sampling inside a disk.

        Args:
            count: Number of points
            radius: Disk radius, centred at the origin
            weight_min: Lower bound of the uniform weight distribution
            weight_max: Upper bound of the uniform weight distribution
            rng: Random generator; a fresh unseeded one when omitted

        Returns:
            WeightedPointSet with ``count`` points inside the disk
        """
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count < 1:
            raise InvalidParameterError(f"count must be a positive integer, got {count!r}")
        if not radius > 0:
            raise InvalidParameterError(f"radius must be positive, got {radius}")
        if not (0 <= weight_min <= weight_max):
            raise InvalidParameterError(
                f"weight range must satisfy 0 <= min <= max, got [{weight_min}, {weight_max}]"
            )
        rng = rng if rng is not None else np.random.default_rng()

        points: List[Point] = []
        weights: List[float] = []
        while len(points) < count:
            x = rng.random() * 2 * radius - radius
            y = rng.random() * 2 * radius - radius
            if x * x + y * y <= radius * radius:
                points.append(Point(float(x), float(y)))
                weights.append(float(weight_min + rng.random() * (weight_max - weight_min)))

        return cls(count=int(count), radius=float(radius), points=tuple(points), weights=tuple(weights))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeightedPointSet':
        """Build a point set from its dictionary representation."""
        try:
            points = tuple(Point(float(p['x']), float(p['y'])) for p in data['points'])
            return cls(
                count=int(data.get('count', len(points))),
                radius=float(data.get('radius', 1.0)),
                points=points,
                weights=tuple(float(w) for w in data['weights'])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"invalid point set data: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert point set to dictionary representation."""
        return {
            'count': self.count,
            'radius': self.radius,
            'points': [{'x': p.x, 'y': p.y} for p in self.points],
            'weights': list(self.weights)
        }

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def xs(self) -> np.ndarray:
        return np.array([p.x for p in self.points], dtype=float)

    @property
    def ys(self) -> np.ndarray:
        return np.array([p.y for p in self.points], dtype=float)

    @property
    def weight_array(self) -> np.ndarray:
        return np.array(self.weights, dtype=float)

    @property
    def total_weight(self) -> float:
        return float(np.sum(self.weight_array))

    def centroid(self) -> Point:
        """Weighted centroid of the points."""
        total = self.total_weight
        if total == 0:
            raise DegenerateInputError("total weight is zero, centroid is undefined")
        w = self.weight_array
        return Point(float(np.dot(self.xs, w) / total), float(np.dot(self.ys, w) / total))


@dataclass(frozen=True)
class ExhaustivePartition:
    """Best axis-aligned split found by the exhaustive line search."""
    split_x: float
    split_y: float
    imbalance: float
    bin_weights: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'split_x': self.split_x,
            'split_y': self.split_y,
            'imbalance': self.imbalance,
            'bin_weights': list(self.bin_weights)
        }


@dataclass(frozen=True)
class RotatingPartition:
    """Best rotation offset found by the rotating quadrant search."""
    angle_offset: float
    imbalance: float
    sector_weights: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    centroid: Optional[Point] = None
    steps_evaluated: int = 0
    step_count: int = 0

    @property
    def stopped_early(self) -> bool:
        """True when the patience cutoff ended the scan before the last offset."""
        return self.steps_evaluated < self.step_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            'angle_offset': self.angle_offset,
            'imbalance': self.imbalance,
            'sector_weights': list(self.sector_weights),
            'centroid': self.centroid.to_tuple() if self.centroid else None,
            'steps_evaluated': self.steps_evaluated,
            'step_count': self.step_count
        }


@dataclass(frozen=True)
class PartitionComparison:
    """Both partitioners run on the same point set, with timings."""
    exhaustive: ExhaustivePartition
    rotating: RotatingPartition
    exhaustive_time: float
    rotating_time: float
    patience: int
    angle_step: float

    @property
    def imbalance_gap(self) -> float:
        """How much worse the rotating search did than the exhaustive one."""
        return self.rotating.imbalance - self.exhaustive.imbalance

    def to_dict(self) -> Dict[str, Any]:
        return {
            'exhaustive': self.exhaustive.to_dict(),
            'rotating': self.rotating.to_dict(),
            'exhaustive_time': self.exhaustive_time,
            'rotating_time': self.rotating_time,
            'patience': self.patience,
            'angle_step': self.angle_step,
            'imbalance_gap': self.imbalance_gap
        }


@dataclass
class ExperimentRecord:
    """One solved task within an experiment sweep."""
    experiment: str
    count: int
    patience: int
    angle_step: float
    weight_min: float
    weight_max: float
    repetition: int
    time_exhaustive: float
    imbalance_exhaustive: float
    time_rotating: float
    imbalance_rotating: float
    steps_evaluated: int = 0

    def to_row(self) -> Dict[str, Any]:
        """Flat row for CSV output and DataFrame construction."""
        return {
            'experiment': self.experiment,
            'count': self.count,
            'patience': self.patience,
            'angle_step': self.angle_step,
            'weight_min': self.weight_min,
            'weight_max': self.weight_max,
            'repetition': self.repetition,
            'time_exhaustive': self.time_exhaustive,
            'imbalance_exhaustive': self.imbalance_exhaustive,
            'time_rotating': self.time_rotating,
            'imbalance_rotating': self.imbalance_rotating,
            'steps_evaluated': self.steps_evaluated,
        }
