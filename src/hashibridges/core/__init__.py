# src/hashibridges/core/__init__.py
"""
Core data structures and utilities for Hashiwokakero puzzles.
"""

from .errors import (
    HashiError, AmbiguousDirection, PositionInvalid, IslandTooClose,
    CellOccupiedByBridge, IslandNotFound, NotNeighbors, BridgeAlreadyExists,
    ConfigurationInvalid, GenerationFailed,
    PuzzleFormatError, PuzzleSyntaxError, PuzzleSemanticError
)
from .geometry import Coordinates, Direction
from .puzzle import PuzzleGrid, Island, Bridge, Cell, CellKind, PuzzleState
from .validator import StateEvaluator, PuzzleValidator, ValidationResult
from .persistence import PuzzleLoader, PuzzleSaver, load_puzzle, save_puzzle, loads, dumps
from .utils import (
    setup_logger, timer, memory_usage,
    PuzzleConverter, calculate_solution_stats
)

__all__ = [
    # Errors
    'HashiError', 'AmbiguousDirection', 'PositionInvalid', 'IslandTooClose',
    'CellOccupiedByBridge', 'IslandNotFound', 'NotNeighbors', 'BridgeAlreadyExists',
    'ConfigurationInvalid', 'GenerationFailed',
    'PuzzleFormatError', 'PuzzleSyntaxError', 'PuzzleSemanticError',

    # Data structures
    'Coordinates', 'Direction',
    'PuzzleGrid', 'Island', 'Bridge', 'Cell', 'CellKind', 'PuzzleState',

    # Evaluation and validation
    'StateEvaluator', 'PuzzleValidator', 'ValidationResult',

    # Persistence
    'PuzzleLoader', 'PuzzleSaver', 'load_puzzle', 'save_puzzle', 'loads', 'dumps',

    # Utilities
    'setup_logger', 'timer', 'memory_usage',
    'PuzzleConverter', 'calculate_solution_stats'
]
