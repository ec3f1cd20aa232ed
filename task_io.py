"""
task_io.py - Task File Loading and Saving
==========================================
Reads and writes weighted point sets.

Text format::

    <n> <R>
    <x_1> <y_1> <w_1>
    ...
    <x_n> <y_n> <w_n>

Fields are separated by whitespace. JSON files (``.json``) hold the
dictionary produced by ``WeightedPointSet.to_dict``.
"""

import logging
from pathlib import Path
from typing import List, Union

from models import Point, WeightedPointSet
from utils import ValidationError, ensure_directory, load_json, save_json

logger = logging.getLogger(__name__)


def parse_task(text: str) -> WeightedPointSet:
    """Parse the text task format."""
    lines = [line.strip() for line in text.strip().splitlines()]
    if not lines or not lines[0]:
        raise ValidationError("task file is empty")

    header = lines[0].split()
    if len(header) < 2:
        raise ValidationError(f"line 1: expected '<n> <R>', got {lines[0]!r}")
    try:
        count = int(header[0])
        radius = float(header[1])
    except ValueError:
        raise ValidationError(f"line 1: expected '<n> <R>', got {lines[0]!r}") from None
    if count < 1:
        raise ValidationError(f"line 1: point count must be positive, got {count}")
    if not radius > 0:
        raise ValidationError(f"line 1: radius must be positive, got {header[1]}")

    if len(lines) - 1 < count:
        raise ValidationError(f"expected {count} point lines, found {len(lines) - 1}")

    points: List[Point] = []
    weights: List[float] = []
    for line_no in range(2, count + 2):
        fields = lines[line_no - 1].split()
        if len(fields) < 3:
            raise ValidationError(f"line {line_no}: expected '<x> <y> <w>', got {lines[line_no - 1]!r}")
        try:
            x, y, w = (float(v) for v in fields[:3])
        except ValueError:
            raise ValidationError(
                f"line {line_no}: non-numeric value in {lines[line_no - 1]!r}"
            ) from None
        points.append(Point(x, y))
        weights.append(w)

    return WeightedPointSet(count=count, radius=radius, points=tuple(points), weights=tuple(weights))


def format_task(point_set: WeightedPointSet) -> str:
    """Render a point set in the text task format."""
    lines = [f"{point_set.count} {point_set.radius!r}"]
    for point, weight in zip(point_set.points, point_set.weights):
        lines.append(f"{point.x!r} {point.y!r} {weight!r}")
    return "\n".join(lines)


def load_task(filepath: Union[str, Path]) -> WeightedPointSet:
    """Load a point set from a text task file."""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Task file not found: {filepath}")

    point_set = parse_task(filepath.read_text(encoding='utf-8'))
    logger.info(f"Loaded task with {point_set.count} points from {filepath}")
    return point_set


def save_task(point_set: WeightedPointSet, filepath: Union[str, Path]):
    """Save a point set as a text task file."""
    filepath = Path(filepath)
    ensure_directory(filepath.parent)
    filepath.write_text(format_task(point_set), encoding='utf-8')
    logger.info(f"Saved task with {point_set.count} points to {filepath}")


def load_point_set(filepath: Union[str, Path]) -> WeightedPointSet:
    """Load a point set, choosing the format from the file suffix."""
    filepath = Path(filepath)
    if filepath.suffix.lower() == '.json':
        point_set = WeightedPointSet.from_dict(load_json(filepath))
        logger.info(f"Loaded task with {point_set.count} points from {filepath}")
        return point_set
    return load_task(filepath)


def save_point_set(point_set: WeightedPointSet, filepath: Union[str, Path]):
    """Save a point set, choosing the format from the file suffix."""
    filepath = Path(filepath)
    if filepath.suffix.lower() == '.json':
        save_json(point_set.to_dict(), filepath)
        logger.info(f"Saved task with {point_set.count} points to {filepath}")
    else:
        save_task(point_set, filepath)
