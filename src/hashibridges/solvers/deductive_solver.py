"""
Rule-based solver for Hashiwokakero puzzles.

The solver only makes moves that are forced by the current configuration.
It never guesses or backtracks, so it can stall on puzzles that need
lookahead.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .. import config
from ..core.geometry import Direction
from ..core.puzzle import Bridge, Island, PuzzleGrid, PuzzleState
from ..core.utils import memory_usage, setup_logger
from ..core.validator import StateEvaluator


@dataclass
class SolverConfig:
    """Configuration for the deductive solver"""
    time_limit: float = config.SOLVER_TIME_LIMIT  # seconds
    max_iterations: int = config.SOLVER_MAX_ITERATIONS
    verbose: bool = False
    log_file: Optional[Path] = None
    log_level: Optional[str] = None  # defaults to config.LOG_LEVEL


@dataclass
class SolverResult:
    """Result of draining all forced moves"""
    success: bool
    final_state: PuzzleState
    moves: List[Bridge] = field(default_factory=list)
    solve_time: float = 0.0
    iterations: int = 0
    memory_used: float = 0.0  # MB
    message: str = ""

    def __repr__(self):
        status = "Success" if self.success else "Failed"
        return f"SolverResult({status}, {self.final_state.name}, moves={len(self.moves)}, time={self.solve_time:.2f}s)"


@dataclass
class NeighborAnalysis:
    """Neighbors of one island, grouped by how they can still be connected"""
    neighbors: List[Island] = field(default_factory=list)
    buildable: List[Island] = field(default_factory=list)
    double_buildable: List[Island] = field(default_factory=list)
    requiring_more_than_one: List[Island] = field(default_factory=list)
    requiring_more_than_two: List[Island] = field(default_factory=list)

    @property
    def buildable_units(self) -> int:
        return len(self.buildable) + len(self.double_buildable)


class DeductiveSolver:
    """
    Finds and applies bridges that every solution must contain.

    Islands are scanned in ascending coordinate order and the first island
    with a forced bridge gets it; one move is made per call to
    make_sure_move().
    """

    def __init__(self, grid: PuzzleGrid, evaluator: Optional[StateEvaluator] = None,
                 config: Optional[SolverConfig] = None):
        self.grid = grid
        self.evaluator = evaluator or StateEvaluator(grid)
        self.config = config or SolverConfig()
        self.logger = setup_logger(
            self.__class__.__name__,
            self.config.log_file,
            "DEBUG" if self.config.verbose else self.config.log_level
        )

        # Callbacks for monitoring progress
        self._progress_callbacks: List[Callable] = []

    def add_progress_callback(self, callback: Callable):
        """Add a callback called as callback(moves_made, bridge, state) after each move."""
        self._progress_callbacks.append(callback)

    def _call_progress_callbacks(self, moves_made: int, bridge: Bridge, state: PuzzleState):
        for callback in self._progress_callbacks:
            callback(moves_made, bridge, state)

    def make_sure_move(self) -> bool:
        """
        Add one bridge that is forced by the current configuration.

        Returns:
            True if a bridge was added; False if the puzzle is not in the
            NOT_YET_SOLVED state or no forced bridge exists
        """
        if self.evaluator.refresh() != PuzzleState.NOT_YET_SOLVED:
            return False
        move = self.find_forced_move()
        if move is None:
            return False
        island, neighbor = move
        self.grid.add_bridge_between(island, neighbor)
        state = self.evaluator.refresh()
        self.logger.debug(f"Forced bridge {island.coords} -> {neighbor.coords}, state {state.name}")
        return True

    def find_forced_move(self) -> Optional[Tuple[Island, Island]]:
        """First (island, neighbor) pair that must receive a bridge, without applying it"""
        for island in self.grid.islands:
            if self.grid.missing_bridges(island) <= 0:
                continue
            neighbor = self._neighbor_to_connect(island, self._analyze_neighbors(island))
            if neighbor is not None:
                return island, neighbor
        return None

    def solve(self) -> SolverResult:
        """Apply forced moves until none is left or a limit is reached."""
        self.logger.info(f"Solving {self.grid!r}")
        start_time = time.time()
        initial_memory = memory_usage()
        moves: List[Bridge] = []
        message = "No forced move left"

        while True:
            if len(moves) >= self.config.max_iterations:
                message = f"Maximum iterations ({self.config.max_iterations}) reached"
                break
            if time.time() - start_time > self.config.time_limit:
                message = f"Time limit ({self.config.time_limit}s) reached"
                break
            if not self.make_sure_move():
                break
            bridge = self.grid.last_inserted_bridge
            moves.append(bridge)
            self._call_progress_callbacks(len(moves), bridge, self.grid.puzzle_state)

        state = self.grid.puzzle_state
        result = SolverResult(
            success=state == PuzzleState.SOLVED,
            final_state=state,
            moves=moves,
            solve_time=time.time() - start_time,
            iterations=len(moves),
            memory_used=memory_usage() - initial_memory,
            message="Puzzle solved" if state == PuzzleState.SOLVED else message
        )

        if result.success:
            self.logger.info(f"Solved in {result.solve_time:.2f}s with {result.iterations} moves")
        else:
            self.logger.info(f"Stopped after {result.iterations} moves in state {state.name}: {result.message}")
        return result

    def _buildable_units(self, island: Island, neighbor: Island) -> int:
        """Bridge units that can still be added between island and neighbor (0, 1 or 2)"""
        bridge = self.grid.get_bridge_between(island, neighbor)
        neighbor_missing = self.grid.missing_bridges(neighbor)
        if bridge is None and neighbor_missing > 1:
            return 2
        if (bridge is None or not bridge.is_double) and neighbor_missing > 0:
            return 1
        return 0

    def _analyze_neighbors(self, island: Island) -> NeighborAnalysis:
        analysis = NeighborAnalysis()
        for direction in Direction:
            neighbor = self.grid.get_neighbor_island(island, direction)
            if neighbor is None:
                continue
            analysis.neighbors.append(neighbor)
            units = self._buildable_units(island, neighbor)
            if units == 0:
                continue
            analysis.buildable.append(neighbor)
            if units > 1:
                analysis.double_buildable.append(neighbor)
            if neighbor.required_bridges > 1:
                analysis.requiring_more_than_one.append(neighbor)
            if neighbor.required_bridges > 2:
                analysis.requiring_more_than_two.append(neighbor)
        return analysis

    def _neighbor_to_connect(self, island: Island, analysis: NeighborAnalysis) -> Optional[Island]:
        """Neighbor that must receive a bridge from island, or None"""
        if not analysis.buildable:
            return None
        required = island.required_bridges
        missing = self.grid.missing_bridges(island)
        units = analysis.buildable_units

        # Every neighbor needs at least one bridge
        if 2 * len(analysis.neighbors) <= required or missing == units:
            return analysis.buildable[0]

        # Every neighbor that can take a double bridge needs a second one
        if (2 * len(analysis.neighbors) - 1 <= required or missing == units - 1) \
                and analysis.double_buildable:
            return analysis.double_buildable[0]

        # Only one neighbor can take more than one bridge
        if len(analysis.requiring_more_than_one) == 1 and (
                required == 1 or (required == 2 and missing == 2)):
            return analysis.requiring_more_than_one[0]

        # Two single neighbors, but only one of them can take the second bridge
        if required == 2 and missing == 2 and len(analysis.buildable) == 2 \
                and len(analysis.requiring_more_than_two) == 1:
            return analysis.requiring_more_than_two[0]

        return None
