import copy
import logging

import matplotlib

matplotlib.use("Agg")

import pytest

from config import Config
from models import WeightedPointSet


@pytest.fixture(autouse=True)
def restore_config():
    """Config is class-level state; undo whatever a test changed."""
    saved = copy.deepcopy(Config.to_dict())
    yield
    for key, value in saved.items():
        setattr(Config, key, value)


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; drop its handlers afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def unit_square():
    return WeightedPointSet.from_lists([1, -1, -1, 1], [1, 1, -1, -1], [1, 1, 1, 1])
