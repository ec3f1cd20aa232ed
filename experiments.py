"""
experiments.py - Parameter Sweeps Comparing the Two Partitioners
=================================================================
Each sweep varies one aspect of the problem, solves freshly generated tasks
with both partitioners and records imbalance and running time. Repetitions
are averaged per parameter value.

Sweeps:
    patience    - effect of the stagnation limit (fixed n and angle step)
    angle_step  - effect of the rotation increment (fixed n and patience)
    size        - effect of n and of the weight spread (fixed solver settings)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from config import Config
from models import ExperimentRecord, WeightedPointSet
from partitioners import compare_partitioners
from sector_geometry import TWO_PI
from utils import (
    DegenerateInputError, InvalidParameterError, ProgressTracker,
    require_positive_int, require_positive_real, timer
)

logger = logging.getLogger(__name__)


PARAMETER_COLUMNS: Dict[str, List[str]] = {
    'patience': ['patience'],
    'angle_step': ['angle_step'],
    'size': ['count', 'weight_min', 'weight_max'],
}

METRIC_COLUMNS = ['time_exhaustive', 'imbalance_exhaustive',
                  'time_rotating', 'imbalance_rotating', 'steps_evaluated']


def _check_weight_range(weight_range: Sequence[float]) -> Tuple[float, float]:
    if len(weight_range) != 2:
        raise InvalidParameterError(f"weight range must be a (min, max) pair, got {weight_range!r}")
    low, high = float(weight_range[0]), float(weight_range[1])
    if not (0 <= low <= high):
        raise InvalidParameterError(f"weight range must satisfy 0 <= min <= max, got {weight_range!r}")
    return low, high


def _check_angle_step(angle_step: float) -> float:
    angle_step = require_positive_real("angle_step", angle_step)
    if angle_step >= TWO_PI:
        raise DegenerateInputError(f"angle_step={angle_step} must be below 2*pi")
    return angle_step


def _check_values(name: str, values: Sequence) -> None:
    if not values:
        raise InvalidParameterError(f"{name} must contain at least one value")


@dataclass
class PatienceExperimentConfig:
    """Sweep over patience with n and angle step fixed."""
    count: int
    angle_step: float
    weight_range: Tuple[float, float]
    patience_values: List[int]
    repetitions: int

    def validate(self):
        require_positive_int("count", self.count)
        require_positive_int("repetitions", self.repetitions)
        _check_angle_step(self.angle_step)
        _check_weight_range(self.weight_range)
        _check_values("patience_values", self.patience_values)
        for value in self.patience_values:
            require_positive_int("patience", value)

    @classmethod
    def from_config(cls) -> 'PatienceExperimentConfig':
        settings = Config.EXPERIMENTS['patience']
        return cls(
            count=settings['count'],
            angle_step=settings['angle_step'],
            weight_range=tuple(settings['weight_range']),
            patience_values=list(settings['patience_values']),
            repetitions=Config.EXPERIMENTS['repetitions']
        )


@dataclass
class AngleStepExperimentConfig:
    """Sweep over the rotation increment with n and patience fixed."""
    count: int
    patience: int
    weight_range: Tuple[float, float]
    angle_step_values: List[float]
    repetitions: int

    def validate(self):
        require_positive_int("count", self.count)
        require_positive_int("repetitions", self.repetitions)
        require_positive_int("patience", self.patience)
        _check_weight_range(self.weight_range)
        _check_values("angle_step_values", self.angle_step_values)
        for value in self.angle_step_values:
            _check_angle_step(value)

    @classmethod
    def from_config(cls) -> 'AngleStepExperimentConfig':
        settings = Config.EXPERIMENTS['angle_step']
        return cls(
            count=settings['count'],
            patience=settings['patience'],
            weight_range=tuple(settings['weight_range']),
            angle_step_values=list(settings['angle_step_values']),
            repetitions=Config.EXPERIMENTS['repetitions']
        )


@dataclass
class SizeExperimentConfig:
    """Sweep over n (inclusive range) and over weight ranges."""
    count_range: Tuple[int, int, int]
    weight_ranges: List[Tuple[float, float]]
    patience: int
    angle_step: float
    repetitions: int

    def validate(self):
        if len(self.count_range) != 3:
            raise InvalidParameterError(
                f"count_range must be (min, max, step), got {self.count_range!r}"
            )
        low, high, step = self.count_range
        require_positive_int("count_range min", low)
        require_positive_int("count_range step", step)
        require_positive_int("count_range max", high)
        if high < low:
            raise InvalidParameterError(f"count_range max {high} is below min {low}")
        require_positive_int("repetitions", self.repetitions)
        require_positive_int("patience", self.patience)
        _check_angle_step(self.angle_step)
        _check_values("weight_ranges", self.weight_ranges)
        for weight_range in self.weight_ranges:
            _check_weight_range(weight_range)

    @property
    def counts(self) -> List[int]:
        low, high, step = self.count_range
        return list(range(low, high + 1, step))

    @classmethod
    def from_config(cls) -> 'SizeExperimentConfig':
        settings = Config.EXPERIMENTS['size']
        return cls(
            count_range=tuple(settings['count_range']),
            weight_ranges=[tuple(r) for r in settings['weight_ranges']],
            patience=settings['patience'],
            angle_step=settings['angle_step'],
            repetitions=Config.EXPERIMENTS['repetitions']
        )


@dataclass
class ExperimentResult:
    """Raw records of one sweep plus their per-parameter averages."""
    name: str
    parameters: List[str]
    records: List[ExperimentRecord] = field(default_factory=list)

    @property
    def frame(self) -> pd.DataFrame:
        return records_to_frame(self.records)

    @property
    def summary(self) -> pd.DataFrame:
        return summarize(self.records, self.parameters)


def records_to_frame(records: Sequence[ExperimentRecord]) -> pd.DataFrame:
    """One row per solved task."""
    return pd.DataFrame([r.to_row() for r in records],
                        columns=list(ExperimentRecord.__dataclass_fields__))


def summarize(records: Sequence[ExperimentRecord], by: Sequence[str]) -> pd.DataFrame:
    """Average times and imbalances per parameter value."""
    frame = records_to_frame(records)
    if frame.empty:
        return pd.DataFrame(columns=list(by) + METRIC_COLUMNS + ['tasks'])

    grouped = frame.groupby(list(by), sort=True)
    summary = grouped[METRIC_COLUMNS].mean()
    summary['tasks'] = grouped.size()
    summary = summary.reset_index()
    summary['imbalance_gap'] = summary['imbalance_rotating'] - summary['imbalance_exhaustive']
    return summary


class ExperimentRunner:
    """Runs the three sweeps on freshly generated tasks."""

    def __init__(self, seed: Optional[int] = None, radius: Optional[float] = None,
                 show_progress: Optional[bool] = None):
        """
        Args:
            seed: Seed for task generation; the configured one when omitted
            radius: Disk radius for generated tasks
            show_progress: Print a progress bar while solving
        """
        self.seed = Config.EXPERIMENTS['seed'] if seed is None else seed
        self.radius = Config.GENERATION['radius'] if radius is None else radius
        self.show_progress = (Config.EXPERIMENTS['show_progress']
                              if show_progress is None else show_progress)
        self.rng = np.random.default_rng(self.seed)

    @timer
    def run_patience(self, cfg: PatienceExperimentConfig) -> ExperimentResult:
        cfg.validate()
        logger.info(f"Patience experiment: n={cfg.count}, angle_step={cfg.angle_step:.4f}, "
                    f"patience={cfg.patience_values}, {cfg.repetitions} tasks each")

        result = ExperimentResult('patience', PARAMETER_COLUMNS['patience'])
        progress = self._progress(len(cfg.patience_values) * cfg.repetitions, "Patience")
        for patience in cfg.patience_values:
            result.records.extend(self._run_case(
                'patience', cfg.count, cfg.weight_range, patience, cfg.angle_step,
                cfg.repetitions, progress
            ))
        return result

    @timer
    def run_angle_step(self, cfg: AngleStepExperimentConfig) -> ExperimentResult:
        cfg.validate()
        logger.info(f"Angle step experiment: n={cfg.count}, patience={cfg.patience}, "
                    f"{len(cfg.angle_step_values)} steps, {cfg.repetitions} tasks each")

        result = ExperimentResult('angle_step', PARAMETER_COLUMNS['angle_step'])
        progress = self._progress(len(cfg.angle_step_values) * cfg.repetitions, "Angle step")
        for angle_step in cfg.angle_step_values:
            result.records.extend(self._run_case(
                'angle_step', cfg.count, cfg.weight_range, cfg.patience, angle_step,
                cfg.repetitions, progress
            ))
        return result

    @timer
    def run_size(self, cfg: SizeExperimentConfig) -> ExperimentResult:
        cfg.validate()
        counts = cfg.counts
        logger.info(f"Size experiment: n={counts}, weight ranges={cfg.weight_ranges}, "
                    f"{cfg.repetitions} tasks each")

        result = ExperimentResult('size', PARAMETER_COLUMNS['size'])
        progress = self._progress(len(counts) * len(cfg.weight_ranges) * cfg.repetitions, "Size")
        for count in counts:
            for weight_range in cfg.weight_ranges:
                result.records.extend(self._run_case(
                    'size', count, weight_range, cfg.patience, cfg.angle_step,
                    cfg.repetitions, progress
                ))
        return result

    def _run_case(self, experiment: str, count: int, weight_range: Tuple[float, float],
                  patience: int, angle_step: float, repetitions: int,
                  progress: Optional[ProgressTracker]) -> List[ExperimentRecord]:
        """Solve ``repetitions`` independent tasks for one parameter combination."""
        weight_min, weight_max = _check_weight_range(weight_range)
        records = []
        for repetition in range(repetitions):
            point_set = WeightedPointSet.generate(count, self.radius, weight_min, weight_max,
                                                  rng=self.rng)
            comparison = compare_partitioners(point_set, patience, angle_step)
            records.append(ExperimentRecord(
                experiment=experiment,
                count=count,
                patience=patience,
                angle_step=angle_step,
                weight_min=weight_min,
                weight_max=weight_max,
                repetition=repetition,
                time_exhaustive=comparison.exhaustive_time,
                imbalance_exhaustive=comparison.exhaustive.imbalance,
                time_rotating=comparison.rotating_time,
                imbalance_rotating=comparison.rotating.imbalance,
                steps_evaluated=comparison.rotating.steps_evaluated
            ))
            if progress:
                progress.update()

        logger.debug(f"{experiment}: n={count}, w=[{weight_min}, {weight_max}], "
                     f"patience={patience}, angle_step={angle_step:.4f} done")
        return records

    def _progress(self, total: int, description: str) -> Optional[ProgressTracker]:
        return ProgressTracker(total, description) if self.show_progress else None
