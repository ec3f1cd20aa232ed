"""
config.py - System Configuration Settings
==========================================
Central configuration for the quadrant balancing system.
"""

import math
from pathlib import Path
from typing import Dict, Any


def _merge_settings(target: Dict[str, Any], overrides: Dict[str, Any]):
    """Recursively merge overrides into a settings dict in place."""
    for key, value in overrides.items():
        if isinstance(target.get(key), dict) and isinstance(value, dict):
            _merge_settings(target[key], value)
        else:
            target[key] = value


class Config:
    """System-wide configuration settings."""

    # ============================================================================
    # PATH CONFIGURATION
    # ============================================================================

    BASE_DIR = Path(__file__).parent

    DATA_DIR = BASE_DIR / "data"
    OUTPUT_DIR = DATA_DIR / "output"

    # ============================================================================
    # TASK GENERATION CONFIGURATION
    # ============================================================================

    GENERATION = {
        'count': 100,
        'radius': 1.0,
        'weight_min': 1.0,
        'weight_max': 10.0,
        'seed': None
    }

    # ============================================================================
    # SOLVER CONFIGURATION
    # ============================================================================

    SOLVERS = {
        'exhaustive': {
            'name': 'Greedy',
        },
        'rotating': {
            'name': 'Aggregate',
            'patience': 5,
            'angle_step': math.pi / 8
        }
    }

    # ============================================================================
    # EXPERIMENT CONFIGURATION
    # ============================================================================

    EXPERIMENTS = {
        'repetitions': 10,
        'seed': 2024,
        'show_progress': False,
        'patience': {
            'count': 50,
            'angle_step': math.pi / 16,
            'weight_range': (1.0, 10.0),
            'patience_values': [1, 2, 3, 5, 8, 13]
        },
        'angle_step': {
            'count': 50,
            'patience': 5,
            'weight_range': (1.0, 10.0),
            'angle_step_values': [math.pi / 2, math.pi / 4, math.pi / 8,
                                  math.pi / 16, math.pi / 32]
        },
        'size': {
            'count_range': (10, 50, 10),
            'weight_ranges': [(1.0, 3.0), (3.0, 5.0), (5.0, 10.0)],
            'patience': 5,
            'angle_step': math.pi / 16
        }
    }

    # ============================================================================
    # VISUALIZATION CONFIGURATION
    # ============================================================================

    VISUALIZATION = {
        'colors': {
            'algorithms': {
                'Greedy': '#1976D2',      # Blue
                'Aggregate': '#F57C00'    # Orange
            },
            'bins': ['#1B5E20', '#388E3C', '#FBC02D', '#D32F2F'],
            'disk': '#757575',
            'centroid': '#000000'
        },
        'figure_size': (12, 6),
        'dpi': 150,
        'grid_alpha': 0.3,
        'point_alpha': 0.7,
        'point_scale': 12.0,
        'font_size': {
            'title': 14,
            'label': 10,
            'annotation': 8
        }
    }

    # ============================================================================
    # REPORTING CONFIGURATION
    # ============================================================================

    REPORTING = {
        'decimal_places': 4,
        'date_format': '%Y-%m-%d %H:%M:%S'
    }

    # ============================================================================
    # LOGGING CONFIGURATION
    # ============================================================================

    LOGGING = {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'date_format': '%Y-%m-%d %H:%M:%S',
        'file': None,
        'max_bytes': 10 * 1024 * 1024,  # 10 MB
        'backup_count': 5,
        'console_output': True
    }

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key."""
        keys = key.split('.')
        value = cls

        for k in keys:
            if isinstance(value, dict):
                if k not in value:
                    return default
                value = value[k]
            elif hasattr(value, k):
                value = getattr(value, k)
            else:
                return default

        return value

    @classmethod
    def set(cls, key: str, value: Any):
        """Set configuration value by dot-notation key."""
        keys = key.split('.')
        target = cls

        for k in keys[:-1]:
            if isinstance(target, dict) and k in target:
                target = target[k]
            elif hasattr(target, k):
                target = getattr(target, k)
            else:
                raise KeyError(f"Configuration key not found: {key}")

        final_key = keys[-1]
        if isinstance(target, dict):
            target[final_key] = value
        elif hasattr(target, final_key):
            setattr(target, final_key, value)
        else:
            raise KeyError(f"Cannot set configuration key: {key}")

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result = {}

        for attr in dir(cls):
            if not attr.startswith('_') and attr.isupper():
                value = getattr(cls, attr)
                if not callable(value):
                    result[attr] = value

        return result

    @classmethod
    def from_file(cls, filepath: str):
        """Load configuration from JSON or YAML file.

        Top-level sections are merged key by key so a file only needs to carry
        the settings it overrides.
        """
        import json

        filepath = str(filepath)
        with open(filepath, 'r') as f:
            if filepath.endswith('.json'):
                config_data = json.load(f)
            elif filepath.endswith(('.yml', '.yaml')):
                import yaml
                config_data = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")

        for key, value in config_data.items():
            if not hasattr(cls, key):
                continue
            current = getattr(cls, key)
            if isinstance(current, dict) and isinstance(value, dict):
                _merge_settings(current, value)
            else:
                setattr(cls, key, value)

    @classmethod
    def save_to_file(cls, filepath: str):
        """Save configuration to JSON or YAML file."""
        import json

        filepath = str(filepath)
        config_data = cls.to_dict()

        with open(filepath, 'w') as f:
            if filepath.endswith('.json'):
                json.dump(config_data, f, indent=2, default=str)
            elif filepath.endswith(('.yml', '.yaml')):
                import yaml
                yaml.safe_dump(
                    json.loads(json.dumps(config_data, default=str)),
                    f, default_flow_style=False
                )
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")
