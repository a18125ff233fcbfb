"""
Utility functions for Hashiwokakero puzzles.
"""

import logging
import os
import time
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import psutil

from .. import config
from .puzzle import PuzzleGrid


def setup_logger(name: str, log_file: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Args:
        name: Logger name
        log_file: Optional log file path
        level: Logging level (defaults to config.LOG_LEVEL)

    Returns:
        Configured logger
    """
    level = (level or config.LOG_LEVEL).upper()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level))

    # Remove existing handlers
    logger.handlers = []

    formatter = logging.Formatter(config.LOG_FORMAT, datefmt=config.LOG_DATEFMT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(getattr(logging, level))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def timer(func):
    """Decorator to time function execution"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        result = func(*args, **kwargs)
        execution_time = time.time() - start_time

        # Log through the instance logger when there is one
        if args and hasattr(args[0], 'logger'):
            args[0].logger.debug(f"{func.__name__} took {execution_time:.3f} seconds")

        return result
    return wrapper


def memory_usage() -> float:
    """Get current memory usage in MB"""
    process = psutil.Process(os.getpid())
    return process.memory_info().rss / 1024 / 1024


class PuzzleConverter:
    """Convert puzzles between grid and array representations"""

    @staticmethod
    def to_grid(puzzle: PuzzleGrid) -> np.ndarray:
        """
        Convert puzzle to 2D array indexed [row, column].
        0: empty or bridge, 1-8: island with that many required bridges
        """
        grid = np.zeros((puzzle.height, puzzle.width), dtype=int)
        for island in puzzle.islands:
            grid[island.y, island.x] = island.required_bridges
        return grid

    @staticmethod
    def from_grid(grid: np.ndarray) -> PuzzleGrid:
        """Create a puzzle (without bridges) from a 2D array indexed [row, column]"""
        height, width = grid.shape
        puzzle = PuzzleGrid(width, height)
        for y, x in zip(*np.nonzero(grid)):
            puzzle.add_island(int(x), int(y), int(grid[y, x]))
        return puzzle

    @staticmethod
    def bridge_units(puzzle: PuzzleGrid) -> np.ndarray:
        """2D array of bridge units per cell (0, 1 or 2)"""
        units = np.zeros((puzzle.height, puzzle.width), dtype=int)
        for bridge in puzzle.bridges:
            for coords in bridge.cells():
                units[coords.y, coords.x] = bridge.units
        return units


def calculate_solution_stats(puzzle: PuzzleGrid) -> Dict[str, Any]:
    """Calculate statistics for the bridges currently placed"""
    bridges = puzzle.bridges
    stats = {
        'total_bridges': sum(b.units for b in bridges),
        'single_bridges': sum(1 for b in bridges if not b.is_double),
        'double_bridges': sum(1 for b in bridges if b.is_double),
        'saturated_islands': sum(1 for i in puzzle.islands if puzzle.missing_bridges(i) == 0),
    }

    if bridges:
        lengths = [b.start.distance_to(b.end) for b in bridges]
        stats['avg_bridge_length'] = sum(lengths) / len(lengths)
        stats['max_bridge_length'] = max(lengths)
        stats['min_bridge_length'] = min(lengths)
    else:
        stats['avg_bridge_length'] = 0
        stats['max_bridge_length'] = 0
        stats['min_bridge_length'] = 0

    return stats
