"""
Hashiwokakero ("Bridges") puzzles: model, state evaluation, deductive
solving and generation.
"""

__version__ = "1.0.0"

from .core import (
    Coordinates, Direction, PuzzleGrid, Island, Bridge, PuzzleState,
    StateEvaluator, PuzzleValidator, HashiError, load_puzzle, save_puzzle
)
from .solvers import DeductiveSolver, SolverConfig, SolverResult, AutoSolver
from .generators import PuzzleGenerator, PuzzleGeneratorConfig
from .controller import PuzzleController

__all__ = [
    'Coordinates', 'Direction', 'PuzzleGrid', 'Island', 'Bridge', 'PuzzleState',
    'StateEvaluator', 'PuzzleValidator', 'HashiError', 'load_puzzle', 'save_puzzle',
    'DeductiveSolver', 'SolverConfig', 'SolverResult', 'AutoSolver',
    'PuzzleGenerator', 'PuzzleGeneratorConfig',
    'PuzzleController',
]
