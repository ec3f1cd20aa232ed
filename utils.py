"""
utils.py - Utility Functions and Helpers
=========================================
Common utility functions and the error types used throughout the system.
"""

import json
import logging
import time
from datetime import timedelta
from functools import wraps
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np


logger = logging.getLogger(__name__)


# ============================================================================
# FILE OPERATIONS
# ============================================================================

def ensure_directory(path: Union[str, Path]) -> Path:
    """Ensure directory exists, create if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(data: Dict, filepath: Union[str, Path], indent: int = 2):
    """Save data to JSON file."""
    filepath = Path(filepath)
    ensure_directory(filepath.parent)

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=indent, default=str)

    logger.debug(f"Saved JSON to {filepath}")


def load_json(filepath: Union[str, Path]) -> Dict:
    """Load data from JSON file."""
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"JSON file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    logger.debug(f"Loaded JSON from {filepath}")
    return data


# ============================================================================
# PERFORMANCE UTILITIES
# ============================================================================

def timer(func):
    """Decorator to time function execution."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        end = time.perf_counter()
        logger.debug(f"{func.__name__} took {end - start:.4f} seconds")
        return result
    return wrapper


class ProgressTracker:
    """Track and display progress for long operations."""

    def __init__(self, total: int, description: str = "Processing"):
        self.total = total
        self.current = 0
        self.description = description
        self.start_time = time.time()

    def update(self, increment: int = 1):
        """Update progress."""
        self.current += increment
        self._display()

    def _display(self):
        """Display progress bar."""
        percent = (self.current / self.total) * 100 if self.total > 0 else 0
        elapsed = time.time() - self.start_time

        if self.current > 0:
            eta = (elapsed / self.current) * (self.total - self.current)
            eta_str = str(timedelta(seconds=int(eta)))
        else:
            eta_str = "N/A"

        bar_length = 40
        filled = int(bar_length * self.current / self.total) if self.total > 0 else bar_length
        bar = '█' * filled + '░' * (bar_length - filled)

        print(f"\r{self.description}: [{bar}] {percent:.1f}% - ETA: {eta_str}",
              end='', flush=True)

        if self.current >= self.total:
            print()


# ============================================================================
# LOGGING UTILITIES
# ============================================================================

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Setup logging configuration."""
    from config import Config

    log_config = Config.LOGGING

    level = getattr(logging, log_level.upper(), logging.INFO)

    formatter = logging.Formatter(
        log_config['format'],
        datefmt=log_config['date_format']
    )

    handlers = []

    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File logging is opt-in: either passed explicitly or set in the config
    if log_file or log_config.get('file'):
        file_path = log_file or log_config['file']
        ensure_directory(Path(file_path).parent)

        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=log_config.get('max_bytes', 10*1024*1024),
            backupCount=log_config.get('backup_count', 5)
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True
    )

    logger.info(f"Logging configured: level={log_level}")


# ============================================================================
# STATISTICS UTILITIES
# ============================================================================

def calculate_statistics(values: List[float]) -> Dict[str, float]:
    """Calculate basic statistics for a list of values."""
    if not values:
        return {
            'count': 0,
            'min': 0,
            'max': 0,
            'mean': 0,
            'median': 0,
            'std': 0,
            'sum': 0
        }

    return {
        'count': len(values),
        'min': float(min(values)),
        'max': float(max(values)),
        'mean': float(np.mean(values)),
        'median': float(np.median(values)),
        'std': float(np.std(values)),
        'sum': float(sum(values))
    }


def safe_divide(numerator: float, denominator: float,
                default: float = 0) -> float:
    """Safe division with default value for division by zero."""
    if denominator == 0:
        return default
    return numerator / denominator


# ============================================================================
# VALIDATION AND ERROR HANDLING
# ============================================================================

class ValidationError(Exception):
    """Raised for malformed point sets and task files."""
    pass


class InvalidParameterError(ValidationError):
    """A caller-supplied parameter is out of its allowed range."""
    pass


class DegenerateInputError(ValidationError):
    """The input admits no well-defined partition (zero total weight, no angular samples)."""
    pass


def require_positive_int(name: str, value: Any) -> int:
    """Return value if it is an int >= 1, raise InvalidParameterError otherwise."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {value}")
    return int(value)


def require_positive_real(name: str, value: Any) -> float:
    """Return value as float if it is > 0, raise InvalidParameterError otherwise."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}") from None
    # NaN fails this comparison too
    if not number > 0:
        raise InvalidParameterError(f"{name} must be positive, got {value}")
    return number
