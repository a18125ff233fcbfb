"""
Grid coordinates and cardinal directions.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import AmbiguousDirection


class Direction(Enum):
    """The four cardinal directions. Rows grow towards SOUTH."""
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def is_vertical(self) -> bool:
        return self.dx == 0

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    def __repr__(self):
        return f"Direction.{self.name}"


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.EAST: Direction.WEST,
    Direction.SOUTH: Direction.NORTH,
    Direction.WEST: Direction.EAST,
}


@dataclass(frozen=True, order=True)
class Coordinates:
    """Position on the grid: x is the column, y the row (ordered by x, then y)"""
    x: int
    y: int

    def next_in(self, direction: Direction, steps: int = 1) -> 'Coordinates':
        """Coordinates reached by taking `steps` steps in `direction`."""
        return Coordinates(self.x + direction.dx * steps, self.y + direction.dy * steps)

    def direction_to(self, other: 'Coordinates') -> Direction:
        """
        Direction in which `other` lies as seen from these coordinates.

        Raises:
            AmbiguousDirection: if `other` is not on the same row or column,
                or equals these coordinates
        """
        if self.x == other.x:
            if self.y < other.y:
                return Direction.SOUTH
            if self.y > other.y:
                return Direction.NORTH
        elif self.y == other.y:
            if self.x < other.x:
                return Direction.EAST
            return Direction.WEST
        raise AmbiguousDirection(f"No unique direction from {self} to {other}")

    def distance_to(self, other: 'Coordinates') -> int:
        """Manhattan distance"""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def __str__(self):
        return f"({self.x}, {self.y})"
