"""
Reading and writing puzzles in the .bgs text format.

    FIELD
    7 x 7 | 3
    ISLANDS
    ( 0, 0 | 2 )
    ...
    BRIDGES
    ( 0, 1 | false )
    ...

Whitespace is insignificant and lines starting with '#' are comments.
Island indices in the BRIDGES section refer to the ISLANDS list, which is
written in ascending coordinate order.
"""

import re
from pathlib import Path
from typing import List, Union

from .errors import HashiError, PuzzleFormatError, PuzzleSemanticError, PuzzleSyntaxError
from .geometry import Direction
from .puzzle import MAX_REQUIRED_BRIDGES, MIN_REQUIRED_BRIDGES, Island, PuzzleGrid
from .utils import setup_logger

FILE_SUFFIX = ".bgs"

FIELD_PATTERN = re.compile(r"(-?\d+)x(-?\d+)\|(-?\d+)")
ISLAND_PATTERN = re.compile(r"\((\d+),(\d+)\|(-?\d+)\)")
BRIDGE_PATTERN = re.compile(r"\((\d+),(\d+)\|(true|false)\)")

SECTIONS = ("FIELD", "ISLANDS", "BRIDGES")


class PuzzleLoader:
    """Parses .bgs text into a PuzzleGrid. The loaded puzzle may be unsolvable."""

    def __init__(self):
        self.logger = setup_logger(self.__class__.__name__)
        self._remaining = ""

    def loads(self, text: str) -> PuzzleGrid:
        lines = [line for line in text.splitlines() if not line.lstrip().startswith("#")]
        self._remaining = re.sub(r"\s+", "", "".join(lines))

        grid, expected_islands = self._load_field()
        self._load_islands(grid, expected_islands)
        self._load_bridges(grid)
        self.logger.debug(f"Loaded {grid!r}")
        return grid

    def load(self, filepath: Union[str, Path]) -> PuzzleGrid:
        filepath = Path(filepath)
        if filepath.suffix != FILE_SUFFIX:
            raise PuzzleFormatError(f"Puzzle could not be loaded from {filepath}: file type must be {FILE_SUFFIX}")
        with open(filepath, 'r', encoding='utf-8') as f:
            return self.loads(f.read())

    def _expect_section(self, name: str):
        if not self._remaining.startswith(name):
            raise PuzzleSyntaxError(
                f"Section {name} not found: keyword missing or sections not in order {', '.join(SECTIONS)}"
            )
        self._remaining = self._remaining[len(name):]

    def _match(self, pattern: re.Pattern, what: str) -> re.Match:
        match = pattern.match(self._remaining)
        if match is None:
            raise PuzzleSyntaxError(f"Invalid {what} entry at: {self._remaining[:40]!r}")
        self._remaining = self._remaining[match.end():]
        return match

    def _load_field(self):
        self._expect_section("FIELD")
        match = self._match(FIELD_PATTERN, "FIELD")
        width, height, num_islands = (int(g) for g in match.groups())
        if width < 0 or height < 0 or num_islands < 0:
            raise PuzzleSemanticError(
                f"Invalid puzzle configuration ({width} x {height} | {num_islands}): "
                f"width, height and number of islands must not be negative"
            )
        return PuzzleGrid(width, height), num_islands

    def _load_islands(self, grid: PuzzleGrid, expected_islands: int):
        self._expect_section("ISLANDS")
        while self._remaining and not self._remaining.startswith("BRIDGES"):
            match = self._match(ISLAND_PATTERN, "ISLANDS")
            x, y, required = (int(g) for g in match.groups())
            if not MIN_REQUIRED_BRIDGES <= required <= MAX_REQUIRED_BRIDGES:
                raise PuzzleSemanticError(f"Island at ({x}, {y}) requires {required} bridges")
            try:
                grid.add_island(x, y, required)
            except HashiError as e:
                raise PuzzleSemanticError(str(e)) from e

        if grid.island_count != expected_islands:
            raise PuzzleSemanticError(
                f"Number of islands in the ISLANDS section ({grid.island_count}) does not match "
                f"the number declared in the FIELD section ({expected_islands})"
            )

        for island in grid.islands:
            neighbor_total = sum(n.required_bridges for n in grid.get_neighbor_islands(island))
            if island.required_bridges > neighbor_total:
                raise PuzzleSemanticError(
                    f"{island} requires too many bridges: its neighbors only require {neighbor_total}"
                )

    def _load_bridges(self, grid: PuzzleGrid):
        if not self._remaining:
            return
        self._expect_section("BRIDGES")
        islands = grid.islands
        while self._remaining:
            match = self._match(BRIDGE_PATTERN, "BRIDGES")
            start, end = int(match.group(1)), int(match.group(2))
            is_double = match.group(3) == "true"
            if start >= len(islands) or end >= len(islands):
                raise PuzzleSemanticError(f"Bridge ({start}, {end}) refers to a missing island")
            try:
                grid.add_bridge_between(islands[start], islands[end], is_double)
            except HashiError as e:
                raise PuzzleSemanticError(str(e)) from e


class PuzzleSaver:
    """Writes the current state of a PuzzleGrid as .bgs text."""

    BRIDGE_DIRECTIONS = (Direction.EAST, Direction.SOUTH)

    def dumps(self, grid: PuzzleGrid) -> str:
        islands = grid.islands
        lines = ["FIELD", f"{grid.width} x {grid.height} | {grid.island_count}", "", "ISLANDS"]
        lines.extend(self._island_line(island) for island in islands)
        lines.extend(["", "BRIDGES"])
        lines.extend(self._bridge_lines(grid, islands))
        return "\n".join(lines) + "\n"

    def save(self, grid: PuzzleGrid, filepath: Union[str, Path]):
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self.dumps(grid))

    @staticmethod
    def _island_line(island: Island) -> str:
        return f"( {island.x}, {island.y} | {island.required_bridges} )"

    def _bridge_lines(self, grid: PuzzleGrid, islands: List[Island]) -> List[str]:
        index = {island.coords: i for i, island in enumerate(islands)}
        lines = []
        for start_index, island in enumerate(islands):
            for direction in self.BRIDGE_DIRECTIONS:
                bridge = grid.get_bridge(island, direction)
                if bridge is not None:
                    end_index = index[bridge.other_end(island.coords)]
                    lines.append(f"( {start_index}, {end_index} | {str(bridge.is_double).lower()} )")
        return lines


def loads(text: str) -> PuzzleGrid:
    return PuzzleLoader().loads(text)


def dumps(grid: PuzzleGrid) -> str:
    return PuzzleSaver().dumps(grid)


def load_puzzle(filepath: Union[str, Path]) -> PuzzleGrid:
    """Load a puzzle from a .bgs file"""
    return PuzzleLoader().load(filepath)


def save_puzzle(grid: PuzzleGrid, filepath: Union[str, Path]):
    """Save a puzzle (including its bridges) to a .bgs file"""
    PuzzleSaver().save(grid, filepath)
