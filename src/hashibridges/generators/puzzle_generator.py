"""
Puzzle generator for Hashiwokakero.

Puzzles are grown from a single island: each step picks an island that can
still take a bridge and places a new island in one of its free directions,
connected by a random single or double bridge. A new island placed on an
existing bridge splits that bridge in two. Required counts always equal the
placed bridge units, so the grown configuration is a solution; the bridges
are removed before the puzzle is handed out.
"""

import random
from typing import List, Optional, Tuple

from .. import config
from ..core.errors import ConfigurationInvalid, GenerationFailed
from ..core.geometry import Coordinates, Direction
from ..core.puzzle import Island, PuzzleGrid
from ..core.utils import setup_logger, timer

SolutionBridge = Tuple[Coordinates, Coordinates, bool]


class PuzzleGeneratorConfig:
    """Configuration for puzzle generator"""

    def __init__(self, **kwargs):
        self.min_width: int = kwargs.get('min_width', config.MIN_WIDTH)
        self.max_width: int = kwargs.get('max_width', config.MAX_WIDTH)
        self.min_height: int = kwargs.get('min_height', config.MIN_HEIGHT)
        self.max_height: int = kwargs.get('max_height', config.MAX_HEIGHT)
        self.min_islands: int = kwargs.get('min_islands', config.MIN_ISLANDS)
        self.max_attempts: int = kwargs.get('max_attempts', config.GENERATOR_MAX_ATTEMPTS)
        self.double_bridge_probability: float = kwargs.get(
            'double_bridge_probability', config.DOUBLE_BRIDGE_PROBABILITY
        )
        self.random_seed: Optional[int] = kwargs.get('random_seed', None)
        self.log_level: Optional[str] = kwargs.get('log_level', None)

    def max_islands(self, width: int, height: int) -> int:
        return width * height // config.ISLAND_DENSITY_DIVISOR


class PuzzleGenerator:
    """Generate solvable Hashiwokakero puzzles"""

    def __init__(self, config: Optional[PuzzleGeneratorConfig] = None):
        self.config = config or PuzzleGeneratorConfig()
        self.logger = setup_logger(self.__class__.__name__, level=self.config.log_level)
        self.random = random.Random(self.config.random_seed)

        # Islands from which a bridge to a new island may still be built
        self._bridgeable: List[Island] = []

    def generate(self, width: Optional[int] = None, height: Optional[int] = None,
                 num_islands: Optional[int] = None) -> PuzzleGrid:
        """
        Generate a puzzle without bridges.

        Args:
            width: Puzzle width (random in [min_width, max_width] if None)
            height: Puzzle height (random in [min_height, max_height] if None)
            num_islands: Number of islands (random if None)

        Returns:
            Generated puzzle

        Raises:
            ConfigurationInvalid: if an explicit value is out of range
            GenerationFailed: if no puzzle was found within max_attempts
        """
        grid, _ = self.generate_with_solution(width, height, num_islands)
        return grid

    @timer
    def generate_with_solution(self, width: Optional[int] = None, height: Optional[int] = None,
                               num_islands: Optional[int] = None) -> Tuple[PuzzleGrid, List[SolutionBridge]]:
        """Generate a puzzle and return it with the bridges of the grown solution."""
        width, height, num_islands = self._resolve_dimensions(width, height, num_islands)
        self.logger.info(f"Generating {width}x{height} puzzle with {num_islands} islands")

        for attempt in range(self.config.max_attempts):
            grid = self._grow_solved_grid(width, height, num_islands)
            if grid.island_count == num_islands:
                solution = [(b.start, b.end, b.is_double) for b in grid.bridges]
                grid.remove_all_bridges()
                self.logger.info(f"Successfully generated puzzle on attempt {attempt + 1}")
                return grid, solution
            self.logger.debug(
                f"Attempt {attempt + 1} stalled at {grid.island_count}/{num_islands} islands, restarting"
            )

        self.logger.error(f"Failed to generate puzzle after {self.config.max_attempts} attempts")
        raise GenerationFailed(
            f"No {width}x{height} puzzle with {num_islands} islands found in {self.config.max_attempts} attempts"
        )

    def _resolve_dimensions(self, width: Optional[int], height: Optional[int],
                            num_islands: Optional[int]) -> Tuple[int, int, int]:
        cfg = self.config
        if width is None:
            width = self.random.randint(cfg.min_width, cfg.max_width)
        if height is None:
            height = self.random.randint(cfg.min_height, cfg.max_height)
        if not (cfg.min_width <= width <= cfg.max_width and cfg.min_height <= height <= cfg.max_height):
            raise ConfigurationInvalid(
                f"Board configuration is not valid for generating a puzzle: width must be in "
                f"[{cfg.min_width}, {cfg.max_width}] and height in [{cfg.min_height}, {cfg.max_height}]"
            )

        max_islands = cfg.max_islands(width, height)
        if num_islands is None:
            # 4x4 boards allow fewer islands than their shorter side
            min_islands = min(min(width, height), max_islands)
            num_islands = self.random.randint(min_islands, max_islands)
        if not cfg.min_islands <= num_islands <= max_islands:
            raise ConfigurationInvalid(
                f"Board configuration is not valid for generating a puzzle: number of islands must be in "
                f"[{cfg.min_islands}, {max_islands}]"
            )
        return width, height, num_islands

    def _grow_solved_grid(self, width: int, height: int, num_islands: int) -> PuzzleGrid:
        grid = PuzzleGrid(width, height)
        self._bridgeable = []
        self._add_island(grid, self.random.randrange(width), self.random.randrange(height))
        while grid.island_count < num_islands and self._bridgeable:
            self._extend(grid)
        return grid

    def _add_island(self, grid: PuzzleGrid, x: int, y: int) -> Island:
        island = grid.add_island(x, y)
        self._bridgeable.append(island)
        return island

    def _extend(self, grid: PuzzleGrid):
        index = self.random.randrange(len(self._bridgeable))
        existing = self._bridgeable[index]
        candidates = self._candidate_positions(grid, existing)
        if not candidates:
            del self._bridgeable[index]
            return

        coords = self.random.choice(candidates)
        if grid.has_bridge_at(coords.x, coords.y):
            self._add_island_splitting_bridge(grid, existing, coords)
        else:
            self._add_island_with_bridge(grid, existing, coords)

    def _add_island_with_bridge(self, grid: PuzzleGrid, existing: Island, coords: Coordinates) -> Island:
        new_island = self._add_island(grid, coords.x, coords.y)
        is_double = self.random.random() < self.config.double_bridge_probability
        grid.add_bridge_and_adjust_required(existing, new_island, is_double)
        return new_island

    def _add_island_splitting_bridge(self, grid: PuzzleGrid, existing: Island, coords: Coordinates):
        old_bridge = grid.bridge_at(coords.x, coords.y)
        grid.remove_bridge_and_adjust_required(old_bridge, True)
        new_island = self._add_island_with_bridge(grid, existing, coords)
        grid.add_bridge_and_adjust_required(old_bridge.start, new_island, old_bridge.is_double)
        grid.add_bridge_and_adjust_required(old_bridge.end, new_island, old_bridge.is_double)

    def _candidate_positions(self, grid: PuzzleGrid, existing: Island) -> List[Coordinates]:
        """
        Positions for a new neighbor of `existing`, all in one randomly chosen
        direction without a bridge; empty if no direction has any.
        """
        directions = [d for d in Direction if grid.get_bridge(existing, d) is None]
        self.random.shuffle(directions)
        for direction in directions:
            candidates = self._candidate_positions_in(grid, existing, direction)
            if candidates:
                return candidates
        return []

    @staticmethod
    def _candidate_positions_in(grid: PuzzleGrid, existing: Island, direction: Direction) -> List[Coordinates]:
        # A crossing bridge cell may itself be a candidate (the bridge gets split)
        # but nothing beyond it is.
        candidates = []
        coords = existing.coords.next_in(direction)
        while grid.is_valid_position(coords.x, coords.y) and not grid.has_island_at(coords.x, coords.y):
            if grid.is_valid_island_position(coords.x, coords.y):
                candidates.append(coords)
            if grid.has_bridge_at(coords.x, coords.y):
                break
            coords = coords.next_in(direction)
        return candidates
