"""
State evaluation and structural validation for Hashiwokakero grids.
"""

from collections import deque
from typing import List, Set

import networkx as nx

from .geometry import Coordinates, Direction
from .puzzle import (
    MAX_REQUIRED_BRIDGES, MIN_REQUIRED_BRIDGES, Island, PuzzleGrid, PuzzleState
)


class StateEvaluator:
    """
    Classifies a grid as solved, unsolvable, erroneous or not yet solved.

    The classification is recomputed from scratch on every call.
    """

    def __init__(self, grid: PuzzleGrid):
        self.grid = grid

    def refresh(self) -> PuzzleState:
        """Evaluate and store the state on the grid."""
        state = self.evaluate()
        self.grid.puzzle_state = state
        return state

    def evaluate(self) -> PuzzleState:
        islands = self.grid.islands
        missing = {island.coords: self.grid.missing_bridges(island) for island in islands}

        if any(count < 0 for count in missing.values()):
            return PuzzleState.CONTAINS_ERROR

        # Islands already assigned to a bridge component during this evaluation
        checked: Set[Coordinates] = set()
        for island in islands:
            if missing[island.coords] == 0:
                isolated_size = self._isolated_component_size(island, missing, checked)
                if isolated_size > 0:
                    if isolated_size == len(islands):
                        return PuzzleState.SOLVED
                    return PuzzleState.UNSOLVABLE
            elif not self._required_bridges_can_be_built(island, missing):
                return PuzzleState.UNSOLVABLE
        return PuzzleState.NOT_YET_SOLVED

    def _isolated_component_size(self, island: Island, missing: dict, checked: Set[Coordinates]) -> int:
        """
        Size of the bridge component containing `island` if every member is
        saturated, otherwise 0. Members are marked as checked either way.
        """
        if island.coords in checked:
            return 0
        queue = deque([island.coords])
        size = 0
        unsaturated_found = False
        while queue:
            coords = queue.popleft()
            if coords in checked:
                continue
            checked.add(coords)
            if missing[coords] == 0:
                size += 1
            else:
                unsaturated_found = True
            for direction in Direction:
                bridge = self.grid.get_bridge(coords, direction)
                if bridge is not None:
                    queue.append(bridge.other_end(coords))
        return 0 if unsaturated_found else size

    def _required_bridges_can_be_built(self, island: Island, missing: dict) -> bool:
        buildable = 0
        for direction in Direction:
            neighbor = self.grid.get_neighbor_island(island, direction)
            if neighbor is None or missing[neighbor.coords] <= 0:
                continue
            bridge = self.grid.get_bridge(island, direction)
            if bridge is None and missing[neighbor.coords] > 1:
                buildable += 2
            elif bridge is None or not bridge.is_double:
                buildable += 1
        return missing[island.coords] <= buildable


class ValidationResult:
    """Result of puzzle validation"""

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def add_error(self, error: str):
        """Add an error message"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str):
        """Add a warning message"""
        self.warnings.append(warning)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        status = "Valid" if self.is_valid else "Invalid"
        return f"ValidationResult({status}, {len(self.errors)} errors, {len(self.warnings)} warnings)"


class PuzzleValidator:
    """Validates Hashiwokakero puzzle constraints"""

    @staticmethod
    def validate_puzzle_structure(grid: PuzzleGrid) -> ValidationResult:
        """Validate dimensions, island requirements and spacing"""
        result = ValidationResult()

        if grid.width <= 0 or grid.height <= 0:
            result.add_error("Invalid puzzle dimensions")

        if not grid.islands:
            result.add_error("Puzzle has no islands")

        for island in grid.islands:
            if not (MIN_REQUIRED_BRIDGES <= island.required_bridges <= MAX_REQUIRED_BRIDGES):
                result.add_error(f"{island} has invalid bridge requirement: {island.required_bridges}")

            for direction in Direction:
                coords = island.coords.next_in(direction)
                if grid.is_valid_position(coords.x, coords.y) and grid.has_island_at(coords.x, coords.y):
                    result.add_error(f"{island} is adjacent to another island at {coords}")

            neighbor_total = sum(n.required_bridges for n in grid.get_neighbor_islands(island))
            if island.required_bridges > neighbor_total:
                result.add_error(
                    f"{island} requires {island.required_bridges} bridges but its neighbors "
                    f"only require {neighbor_total}"
                )

        total = sum(island.required_bridges for island in grid.islands)
        if total % 2 != 0:
            result.add_warning(f"Total bridge requirements ({total}) is odd - impossible to solve")

        return result

    @staticmethod
    def bridge_graph(grid: PuzzleGrid) -> nx.Graph:
        """Graph with one node per island and one edge per placed bridge (weight = units)"""
        graph = nx.Graph()
        graph.add_nodes_from(island.coords for island in grid.islands)
        for bridge in grid.bridges:
            graph.add_edge(bridge.start, bridge.end, weight=bridge.units)
        return graph

    @staticmethod
    def validate_solution(grid: PuzzleGrid) -> ValidationResult:
        """Validate that every island is saturated and all islands are connected"""
        result = ValidationResult()

        for island in grid.islands:
            missing = grid.missing_bridges(island)
            if missing != 0:
                placed = island.required_bridges - missing
                result.add_error(f"{island} has {placed} bridges, requires {island.required_bridges}")

        graph = PuzzleValidator.bridge_graph(grid)
        if graph.number_of_nodes() > 0 and not nx.is_connected(graph):
            components = nx.number_connected_components(graph)
            result.add_error(f"Islands form {components} separate groups")

        return result

    @staticmethod
    def get_puzzle_statistics(grid: PuzzleGrid) -> dict:
        """Get various statistics about the puzzle"""
        islands = grid.islands
        graph = PuzzleValidator.bridge_graph(grid)
        stats = {
            'width': grid.width,
            'height': grid.height,
            'num_islands': len(islands),
            'num_bridges': len(grid.bridges),
            'total_bridge_requirements': sum(i.required_bridges for i in islands),
            'avg_bridges_per_island': sum(i.required_bridges for i in islands) / len(islands) if islands else 0,
            'density': len(islands) / (grid.width * grid.height) if grid.width and grid.height else 0,
            'components': nx.number_connected_components(graph) if islands else 0,
        }

        degree_dist = {}
        for island in islands:
            degree_dist[island.required_bridges] = degree_dist.get(island.required_bridges, 0) + 1
        stats['degree_distribution'] = degree_dist

        if islands:
            stats['avg_possible_connections'] = sum(
                len(grid.get_neighbor_islands(i)) for i in islands
            ) / len(islands)

        return stats
