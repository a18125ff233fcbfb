"""
Default settings for puzzle generation, solving and logging.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

# Generator limits
MIN_WIDTH = 4
MAX_WIDTH = 25
MIN_HEIGHT = 4
MAX_HEIGHT = 25
MIN_ISLANDS = 2
ISLAND_DENSITY_DIVISOR = 5  # at most width * height // 5 islands
GENERATOR_MAX_ATTEMPTS = 1000
DOUBLE_BRIDGE_PROBABILITY = 0.5

# Solver parameters
SOLVER_STEP_DELAY = 2.0  # seconds between automatic moves
SOLVER_MAX_ITERATIONS = 10000
SOLVER_TIME_LIMIT = 60.0  # seconds

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

DEFAULT_SETTINGS: Dict[str, Dict[str, Any]] = {
    'generator': {
        'min_width': MIN_WIDTH,
        'max_width': MAX_WIDTH,
        'min_height': MIN_HEIGHT,
        'max_height': MAX_HEIGHT,
        'min_islands': MIN_ISLANDS,
        'max_attempts': GENERATOR_MAX_ATTEMPTS,
        'double_bridge_probability': DOUBLE_BRIDGE_PROBABILITY,
        'random_seed': None,
    },
    'solver': {
        'step_delay': SOLVER_STEP_DELAY,
        'max_iterations': SOLVER_MAX_ITERATIONS,
        'time_limit': SOLVER_TIME_LIMIT,
    },
    'logging': {
        'level': LOG_LEVEL,
    },
}


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_settings(path: Optional[Union[str, Path]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load settings, overriding the defaults with a YAML file if given.

    Args:
        path: Optional YAML file with 'generator', 'solver' and 'logging' sections

    Returns:
        Nested settings dictionary
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    if path is None:
        return settings
    with open(path, 'r') as f:
        overrides = yaml.safe_load(f) or {}
    if not isinstance(overrides, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return _merge(settings, overrides)
