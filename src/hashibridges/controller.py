"""
Entry points for an interactive front end: manual moves, hints, automatic
solving, restarting, loading, saving and generating puzzles.
"""

import threading
from pathlib import Path
from typing import List, Optional, Union

from . import config
from .core.geometry import Direction
from .core.persistence import load_puzzle, save_puzzle
from .core.puzzle import IslandLike, PuzzleGrid, PuzzleState
from .core.utils import setup_logger
from .core.validator import StateEvaluator
from .generators.puzzle_generator import PuzzleGenerator
from .solvers.auto_solver import AutoSolver, SolverEvent
from .solvers.deductive_solver import DeductiveSolver, SolverConfig


class PuzzleController:
    """
    Owns the current puzzle and the components working on it.

    All grid mutations happen under one lock shared with the background
    solver. Manual moves and hints are ignored while the auto solver runs;
    replacing or clearing the puzzle stops it first.
    """

    def __init__(self, grid: Optional[PuzzleGrid] = None,
                 generator: Optional[PuzzleGenerator] = None,
                 step_delay: float = config.SOLVER_STEP_DELAY,
                 solver_config: Optional[SolverConfig] = None):
        self.logger = setup_logger(self.__class__.__name__)
        self.generator = generator or PuzzleGenerator()
        self.step_delay = step_delay
        self.solver_config = solver_config
        self.lock = threading.RLock()
        self._events: List[SolverEvent] = []

        self.grid: PuzzleGrid
        self.evaluator: StateEvaluator
        self.solver: DeductiveSolver
        self.auto_solver: AutoSolver
        self._set_grid(grid if grid is not None else self.generator.generate())

    def _set_grid(self, grid: PuzzleGrid):
        with self.lock:
            self.grid = grid
            self.evaluator = StateEvaluator(grid)
            self.evaluator.refresh()
            self.solver = DeductiveSolver(grid, self.evaluator, self.solver_config)
            self.auto_solver = AutoSolver(self.solver, self.lock, self.step_delay)

    @property
    def puzzle_state(self) -> PuzzleState:
        return self.grid.puzzle_state

    def is_solving(self) -> bool:
        return self.auto_solver.is_running()

    def _stop_solving(self):
        if self.auto_solver.is_running():
            self.auto_solver.stop(wait=True)
        self._events.extend(self.auto_solver.drain_events())

    def make_move(self, island: IslandLike, direction: Direction, add_bridge: bool):
        """Add or remove one bridge unit towards the neighbor of `island` in `direction`."""
        if self.is_solving():
            self.logger.debug("Move ignored while solving automatically")
            return
        with self.lock:
            neighbor = self.grid.get_neighbor_island(island, direction)
            if neighbor is not None:
                if add_bridge:
                    self.grid.add_bridge_between(island, neighbor)
                else:
                    self.grid.remove_bridge_between(island, neighbor)
            self.evaluator.refresh()

    def add_next_bridge(self) -> bool:
        """Apply one forced move; False if none exists or the auto solver is running."""
        if self.is_solving():
            return False
        with self.lock:
            moved = self.solver.make_sure_move()
            self.evaluator.refresh()
        return moved

    def start_stop_solving(self):
        """Start the auto solver, or stop it if it is running."""
        if self.is_solving():
            self.logger.info("Stopping automatic solving")
            self.auto_solver.stop(wait=False)
        else:
            self.logger.info("Starting automatic solving")
            self._events.extend(self.auto_solver.drain_events())
            self.auto_solver = AutoSolver(self.solver, self.lock, self.step_delay)
            self.auto_solver.start()

    def restart_puzzle(self):
        """Remove every bridge."""
        self._stop_solving()
        with self.lock:
            self.grid.remove_all_bridges()
            self.evaluator.refresh()
        self.logger.info("Puzzle restarted")

    def load_puzzle(self, filepath: Union[str, Path]):
        self._stop_solving()
        self._set_grid(load_puzzle(filepath))
        self.logger.info(f"Loaded puzzle from {filepath}")

    def save_puzzle(self, filepath: Union[str, Path]):
        self._stop_solving()
        with self.lock:
            save_puzzle(self.grid, filepath)
        self.logger.info(f"Saved puzzle to {filepath}")

    def generate_puzzle(self, width: Optional[int] = None, height: Optional[int] = None,
                        num_islands: Optional[int] = None):
        self._stop_solving()
        self._set_grid(self.generator.generate(width, height, num_islands))

    def drain_events(self) -> List[SolverEvent]:
        """Events of the current and any stopped auto solver, oldest first."""
        events = self._events + self.auto_solver.drain_events()
        self._events = []
        return events
