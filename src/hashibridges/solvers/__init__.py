"""
Solvers for Hashiwokakero puzzles.
"""

from .deductive_solver import DeductiveSolver, NeighborAnalysis, SolverConfig, SolverResult
from .auto_solver import AutoSolver, EventKind, SolverEvent, SolverState

__all__ = [
    # Forced-move solver
    'DeductiveSolver',
    'NeighborAnalysis',
    'SolverConfig',
    'SolverResult',

    # Background solving
    'AutoSolver',
    'EventKind',
    'SolverEvent',
    'SolverState',
]
