"""
Core data structure for Hashiwokakero puzzles.

The grid owns every island and bridge. Islands and bridges are immutable
records stored in arenas keyed by coordinates (islands) and by the ordered
endpoint pair (bridges); cells reference them by key. All mutation goes
through PuzzleGrid methods.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import total_ordering
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .errors import (
    AmbiguousDirection, BridgeAlreadyExists, CellOccupiedByBridge,
    ConfigurationInvalid, IslandNotFound, IslandTooClose, NotNeighbors,
    PositionInvalid
)
from .geometry import Coordinates, Direction

MIN_REQUIRED_BRIDGES = 1
MAX_REQUIRED_BRIDGES = 8

BridgeKey = Tuple[Coordinates, Coordinates]


class PuzzleState(Enum):
    """Classification of a grid configuration"""
    NOT_YET_SOLVED = "not_yet_solved"
    CONTAINS_ERROR = "contains_error"
    UNSOLVABLE = "unsolvable"
    SOLVED = "solved"


class CellKind(Enum):
    EMPTY = "empty"
    ISLAND = "island"
    BRIDGE = "bridge"


@dataclass(frozen=True)
class Cell:
    """Content of one grid position; `ref` is an island's coordinates or a bridge key"""
    kind: CellKind
    ref: Union[Coordinates, BridgeKey, None] = None


EMPTY_CELL = Cell(CellKind.EMPTY)


@total_ordering
@dataclass(frozen=True, eq=False)
class Island:
    """An island of the puzzle, identified by its coordinates"""
    coords: Coordinates
    required_bridges: int = 0

    @property
    def x(self) -> int:
        return self.coords.x

    @property
    def y(self) -> int:
        return self.coords.y

    def __hash__(self):
        return hash(self.coords)

    def __eq__(self, other):
        if isinstance(other, Island):
            return self.coords == other.coords
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, Island):
            return self.coords < other.coords
        return NotImplemented

    def __repr__(self):
        return f"Island({self.x}, {self.y}, bridges={self.required_bridges})"


@dataclass(frozen=True)
class Bridge:
    """
    A single or double bridge between two neighboring islands.

    `start` is the smaller endpoint (west or north), `end` the other one.
    `seq` orders bridges by insertion; `single_seq` remembers the number the
    bridge had before it was doubled.
    """
    start: Coordinates
    end: Coordinates
    is_double: bool = False
    seq: int = 0
    single_seq: int = field(default=0, compare=False)

    @property
    def key(self) -> BridgeKey:
        return (self.start, self.end)

    @property
    def is_vertical(self) -> bool:
        return self.start.x == self.end.x

    @property
    def units(self) -> int:
        """Number of bridge units (1 for single, 2 for double)"""
        return 2 if self.is_double else 1

    def connects(self, coords: Coordinates) -> bool:
        return coords == self.start or coords == self.end

    def other_end(self, coords: Coordinates) -> Coordinates:
        """Coordinates of the endpoint opposite to `coords`"""
        if coords == self.start:
            return self.end
        if coords == self.end:
            return self.start
        raise ValueError(f"{coords} is neither start nor end of {self}")

    def cells(self) -> Iterator[Coordinates]:
        """Coordinates strictly between the two endpoints"""
        direction = self.start.direction_to(self.end)
        coords = self.start.next_in(direction)
        while coords != self.end:
            yield coords
            coords = coords.next_in(direction)

    def __repr__(self):
        kind = "double" if self.is_double else "single"
        return f"Bridge({self.start}<->{self.end}, {kind})"


IslandLike = Union[Island, Coordinates]


class PuzzleGrid:
    """Main puzzle class for Hashiwokakero"""

    def __init__(self, width: int, height: int):
        """
        Initialize an empty puzzle grid.

        Args:
            width: Number of columns
            height: Number of rows
        """
        if width < 0 or height < 0:
            raise ConfigurationInvalid(f"Invalid grid dimensions {width}x{height}")
        self._width = width
        self._height = height
        self._cells: List[List[Cell]] = [[EMPTY_CELL] * width for _ in range(height)]
        self._islands: Dict[Coordinates, Island] = {}
        self._bridges: Dict[BridgeKey, Bridge] = {}
        self._bridge_counter = 0
        self._last_inserted: Optional[BridgeKey] = None
        self.puzzle_state = PuzzleState.NOT_YET_SOLVED

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def island_count(self) -> int:
        return len(self._islands)

    def is_solved(self) -> bool:
        return self.puzzle_state == PuzzleState.SOLVED

    def is_not_yet_solved(self) -> bool:
        return self.puzzle_state == PuzzleState.NOT_YET_SOLVED

    def is_unsolvable(self) -> bool:
        return self.puzzle_state == PuzzleState.UNSOLVABLE

    def contains_error(self) -> bool:
        return self.puzzle_state == PuzzleState.CONTAINS_ERROR

    # Cell queries

    def is_valid_position(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def cell_at(self, x: int, y: int) -> Cell:
        if not self.is_valid_position(x, y):
            raise PositionInvalid(
                f"({x}, {y}) is not on the grid; x must be in [0, {self._width - 1}], "
                f"y in [0, {self._height - 1}]"
            )
        return self._cells[y][x]

    def has_island_at(self, x: int, y: int) -> bool:
        return self.cell_at(x, y).kind == CellKind.ISLAND

    def has_bridge_at(self, x: int, y: int) -> bool:
        return self.cell_at(x, y).kind == CellKind.BRIDGE

    def is_empty(self, x: int, y: int) -> bool:
        return self.cell_at(x, y).kind == CellKind.EMPTY

    def island_at(self, x: int, y: int) -> Optional[Island]:
        cell = self.cell_at(x, y)
        if cell.kind != CellKind.ISLAND:
            return None
        return self._islands[cell.ref]

    def bridge_at(self, x: int, y: int) -> Optional[Bridge]:
        cell = self.cell_at(x, y)
        if cell.kind != CellKind.BRIDGE:
            return None
        return self._bridges[cell.ref]

    def is_valid_island_position(self, x: int, y: int) -> bool:
        """True if (x, y) is on the grid and neither it nor an orthogonal neighbor holds an island"""
        if not self.is_valid_position(x, y):
            return False
        for nx, ny in ((x, y), (x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
            if self.is_valid_position(nx, ny) and self._cells[ny][nx].kind == CellKind.ISLAND:
                return False
        return True

    # Islands

    @property
    def islands(self) -> List[Island]:
        """All islands in ascending coordinate order (column first, then row)"""
        return [self._islands[coords] for coords in sorted(self._islands)]

    @property
    def bridges(self) -> List[Bridge]:
        """All bridges ordered by their endpoints"""
        return [self._bridges[key] for key in sorted(self._bridges)]

    def island(self, island: IslandLike) -> Island:
        """Current record of the island at the given coordinates"""
        coords = island.coords if isinstance(island, Island) else island
        try:
            return self._islands[coords]
        except KeyError:
            raise IslandNotFound(f"There is no island at {coords}") from None

    def add_island(self, x: int, y: int, required_bridges: int = 0) -> Island:
        """
        Add an island at (x, y).

        Raises:
            PositionInvalid: if (x, y) is off the grid
            IslandTooClose: if (x, y) or an orthogonal neighbor already holds an island
            CellOccupiedByBridge: if a bridge spans (x, y)
        """
        self.cell_at(x, y)
        if not self.is_valid_island_position(x, y):
            raise IslandTooClose(
                f"Island cannot be added at ({x}, {y}): distance to existing islands must be greater than 1"
            )
        if self._cells[y][x].kind == CellKind.BRIDGE:
            raise CellOccupiedByBridge(f"Island cannot be added at ({x}, {y}): a bridge spans this cell")
        coords = Coordinates(x, y)
        island = Island(coords, required_bridges)
        self._islands[coords] = island
        self._cells[y][x] = Cell(CellKind.ISLAND, coords)
        return island

    def _set_required(self, coords: Coordinates, required_bridges: int):
        self._islands[coords] = replace(self._islands[coords], required_bridges=required_bridges)

    def missing_bridges(self, island: IslandLike) -> int:
        """Required bridges minus bridge units already attached (negative if over-supplied)"""
        island = self.island(island)
        missing = island.required_bridges
        for direction in Direction:
            bridge = self.get_bridge(island, direction)
            if bridge is not None:
                missing -= bridge.units
        return missing

    # Neighborhood

    def get_bridge(self, island: IslandLike, direction: Direction) -> Optional[Bridge]:
        """Bridge attached to `island` in `direction`, or None"""
        origin = self.island(island).coords
        coords = origin.next_in(direction)
        if not self.is_valid_position(coords.x, coords.y):
            return None
        bridge = self.bridge_at(coords.x, coords.y)
        if bridge is not None and bridge.connects(origin):
            return bridge
        return None

    def get_neighbor_island(self, island: IslandLike, direction: Direction) -> Optional[Island]:
        """
        First island met when stepping from `island` in `direction`.

        An own bridge is followed to its other end; a crossing bridge or the
        grid border ends the search and yields None.
        """
        island = self.island(island)
        bridge = self.get_bridge(island, direction)
        if bridge is not None:
            return self._islands[bridge.other_end(island.coords)]
        coords = island.coords.next_in(direction)
        while self.is_valid_position(coords.x, coords.y) and self.is_empty(coords.x, coords.y):
            coords = coords.next_in(direction)
        if self.is_valid_position(coords.x, coords.y):
            return self.island_at(coords.x, coords.y)
        return None

    def get_neighbor_islands(self, island: IslandLike) -> List[Island]:
        """Neighbor islands in NORTH, EAST, SOUTH, WEST order"""
        neighbors = []
        for direction in Direction:
            neighbor = self.get_neighbor_island(island, direction)
            if neighbor is not None:
                neighbors.append(neighbor)
        return neighbors

    def _direction_between(self, island: Island, other: Island) -> Direction:
        try:
            direction = island.coords.direction_to(other.coords)
        except AmbiguousDirection as e:
            raise NotNeighbors(f"{island} and {other} are not on a common row or column") from e
        if self.get_neighbor_island(island, direction) != other:
            raise NotNeighbors(f"{island} and {other} are not neighbors: an island or bridge lies in between")
        return direction

    def get_bridge_between(self, island: IslandLike, other: IslandLike) -> Optional[Bridge]:
        """
        Bridge connecting two neighboring islands, or None.

        Raises:
            NotNeighbors: if the islands are not direct neighbors
        """
        island, other = self.island(island), self.island(other)
        direction = self._direction_between(island, other)
        return self.get_bridge(island, direction)

    @property
    def last_inserted_bridge(self) -> Optional[Bridge]:
        if self._last_inserted is None:
            return None
        return self._bridges[self._last_inserted]

    # Bridge mutation

    def _next_seq(self) -> int:
        self._bridge_counter += 1
        return self._bridge_counter

    def _store_bridge(self, bridge: Bridge):
        self._bridges[bridge.key] = bridge
        for coords in bridge.cells():
            self._cells[coords.y][coords.x] = Cell(CellKind.BRIDGE, bridge.key)

    def add_bridge(self, island: IslandLike, direction: Direction) -> bool:
        """Add one bridge unit towards the neighbor in `direction`."""
        neighbor = self.get_neighbor_island(island, direction)
        if neighbor is None:
            raise NotNeighbors(f"There is no neighbor {direction.name} of {self.island(island)}")
        return self.add_bridge_between(island, neighbor)

    def add_bridge_between(self, island: IslandLike, other: IslandLike,
                           is_double: Optional[bool] = None) -> bool:
        """
        Connect two neighboring islands.

        With `is_double` given, a new bridge of that kind is created and an
        existing bridge is an error. Without it, a missing bridge is created
        single and an existing single bridge is upgraded to double.

        Returns:
            False only when upgrading a bridge that is already double

        Raises:
            NotNeighbors: if the islands are not direct neighbors
            BridgeAlreadyExists: if `is_double` is given and a bridge is present
        """
        island, other = self.island(island), self.island(other)
        direction = self._direction_between(island, other)
        existing = self.get_bridge(island, direction)
        if is_double is None:
            if existing is None:
                is_double = False
            elif existing.is_double:
                return False
            else:
                upgraded = replace(existing, is_double=True, seq=self._next_seq(),
                                   single_seq=existing.seq)
                self._bridges[upgraded.key] = upgraded
                self._last_inserted = upgraded.key
                return True
        elif existing is not None:
            raise BridgeAlreadyExists(f"A bridge between {island} and {other} already exists")

        start, end = sorted((island.coords, other.coords))
        seq = self._next_seq()
        bridge = Bridge(start, end, is_double, seq, seq)
        self._store_bridge(bridge)
        self._last_inserted = bridge.key
        return True

    def add_bridge_and_adjust_required(self, existing: IslandLike, new: IslandLike, is_double: bool):
        """Add a new bridge and raise both endpoints' required counts by its units."""
        self.add_bridge_between(existing, new, is_double)
        units = 2 if is_double else 1
        for coords in (self.island(existing).coords, self.island(new).coords):
            self._set_required(coords, self._islands[coords].required_bridges + units)

    def remove_bridge(self, island: IslandLike, direction: Direction) -> bool:
        neighbor = self.get_neighbor_island(island, direction)
        if neighbor is None:
            raise NotNeighbors(f"There is no neighbor {direction.name} of {self.island(island)}")
        return self.remove_bridge_between(island, neighbor)

    def remove_bridge_between(self, island: IslandLike, other: IslandLike,
                              remove_double: bool = False) -> bool:
        """
        Remove one unit of the bridge between two islands, or all of it.

        A double bridge is downgraded to single unless `remove_double` is set.

        Returns:
            False if there is no bridge between the islands
        """
        bridge = self.get_bridge_between(island, other)
        if bridge is None:
            return False
        if bridge.is_double and not remove_double:
            self._bridges[bridge.key] = replace(bridge, is_double=False, seq=bridge.single_seq)
        else:
            del self._bridges[bridge.key]
            for coords in bridge.cells():
                self._cells[coords.y][coords.x] = EMPTY_CELL
        if bridge.key == self._last_inserted:
            self._update_last_inserted()
        return True

    def remove_bridge_and_adjust_required(self, bridge: Bridge, remove_double: bool) -> bool:
        """Remove a bridge and lower both endpoints' required counts by the removed units."""
        units = 2 if bridge.is_double and remove_double else 1
        removed = self.remove_bridge_between(bridge.start, bridge.end, remove_double)
        if removed:
            for coords in (bridge.start, bridge.end):
                self._set_required(coords, self._islands[coords].required_bridges - units)
        return removed

    def _update_last_inserted(self):
        self._last_inserted = None
        if self._bridges:
            self._last_inserted = max(self._bridges.values(), key=lambda b: b.seq).key

    def remove_all_bridges(self):
        """Remove every bridge from the grid."""
        for bridge in list(self._bridges.values()):
            for coords in bridge.cells():
                self._cells[coords.y][coords.x] = EMPTY_CELL
        self._bridges.clear()
        self._last_inserted = None

    # Copying and serialization

    def copy(self) -> 'PuzzleGrid':
        """Create an independent copy (including bridges and state)"""
        new_grid = PuzzleGrid(self._width, self._height)
        new_grid._cells = [list(row) for row in self._cells]
        new_grid._islands = dict(self._islands)
        new_grid._bridges = dict(self._bridges)
        new_grid._bridge_counter = self._bridge_counter
        new_grid._last_inserted = self._last_inserted
        new_grid.puzzle_state = self.puzzle_state
        return new_grid

    def to_dict(self) -> dict:
        """Convert grid to dictionary for serialization"""
        islands = self.islands
        index = {island.coords: i for i, island in enumerate(islands)}
        return {
            'width': self._width,
            'height': self._height,
            'islands': [
                {'x': i.x, 'y': i.y, 'required_bridges': i.required_bridges}
                for i in islands
            ],
            'bridges': [
                {'start': index[b.start], 'end': index[b.end], 'is_double': b.is_double}
                for b in self.bridges
            ]
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'PuzzleGrid':
        """Create grid from dictionary"""
        grid = cls(data['width'], data['height'])
        for island_data in data['islands']:
            grid.add_island(island_data['x'], island_data['y'], island_data['required_bridges'])
        islands = grid.islands
        for bridge_data in data.get('bridges', []):
            grid.add_bridge_between(
                islands[bridge_data['start']],
                islands[bridge_data['end']],
                bridge_data['is_double']
            )
        return grid

    def __str__(self):
        """Text board: required counts, '-'/'=' and '|'/'‖' for bridges, '.' for empty cells"""
        rows = []
        for y in range(self._height):
            row = []
            for x in range(self._width):
                cell = self._cells[y][x]
                if cell.kind == CellKind.ISLAND:
                    row.append(str(self._islands[cell.ref].required_bridges))
                elif cell.kind == CellKind.BRIDGE:
                    bridge = self._bridges[cell.ref]
                    if bridge.is_vertical:
                        row.append('‖' if bridge.is_double else '|')
                    else:
                        row.append('=' if bridge.is_double else '-')
                else:
                    row.append('.')
            rows.append(''.join(row))
        return '\n'.join(rows)

    def __repr__(self):
        return (f"PuzzleGrid({self._width}x{self._height}, {self.island_count} islands, "
                f"{len(self._bridges)} bridges)")
