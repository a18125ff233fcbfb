import logging

from hashibridges.core.geometry import Coordinates
from hashibridges.core.puzzle import PuzzleGrid, PuzzleState
from hashibridges.core.validator import StateEvaluator
from hashibridges.generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig
from hashibridges.solvers.deductive_solver import DeductiveSolver, SolverConfig


class TestMakeSureMove:
    def test_row_is_solved_in_two_moves(self, row_grid):
        solver = DeductiveSolver(row_grid)

        assert solver.make_sure_move()
        first = row_grid.last_inserted_bridge
        assert first.key == (Coordinates(0, 0), Coordinates(2, 0))
        assert not first.is_double
        assert row_grid.puzzle_state == PuzzleState.NOT_YET_SOLVED

        assert solver.make_sure_move()
        assert row_grid.last_inserted_bridge.key == (Coordinates(2, 0), Coordinates(4, 0))
        assert row_grid.is_solved()

        assert not solver.make_sure_move()
        assert len(row_grid.bridges) == 2

    def test_pair_needing_double(self):
        grid = PuzzleGrid(3, 1)
        grid.add_island(0, 0, 2)
        grid.add_island(2, 0, 2)
        solver = DeductiveSolver(grid)
        assert solver.make_sure_move()
        assert solver.make_sure_move()
        assert grid.bridges[0].is_double
        assert grid.is_solved()

    def test_island_with_all_neighbors_needed(self):
        grid = PuzzleGrid(5, 5)
        grid.add_island(2, 2, 8)
        for x, y in ((2, 0), (4, 2), (2, 4), (0, 2)):
            grid.add_island(x, y, 2)
        result = DeductiveSolver(grid).solve()
        assert result.success
        assert all(bridge.is_double for bridge in grid.bridges)

    def test_no_move_without_forced_bridge(self, square_grid):
        solver = DeductiveSolver(square_grid)
        assert solver.find_forced_move() is None
        assert not solver.make_sure_move()
        assert square_grid.bridges == []
        assert square_grid.is_not_yet_solved()

    def test_no_move_on_erroneous_grid(self, pair_grid):
        pair_grid.add_bridge_between(Coordinates(0, 0), Coordinates(2, 0), True)
        solver = DeductiveSolver(pair_grid)
        assert not solver.make_sure_move()
        assert pair_grid.contains_error()

    def test_no_move_on_solved_grid(self, pair_grid):
        pair_grid.add_bridge_between(Coordinates(0, 0), Coordinates(2, 0))
        assert not DeductiveSolver(pair_grid).make_sure_move()
        assert pair_grid.is_solved()

    def test_find_forced_move_does_not_mutate(self, row_grid):
        solver = DeductiveSolver(row_grid)
        island, neighbor = solver.find_forced_move()
        assert (island.coords, neighbor.coords) == (Coordinates(0, 0), Coordinates(2, 0))
        assert row_grid.bridges == []

    def test_forced_moves_never_create_errors(self):
        generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=7))
        for _ in range(20):
            grid = generator.generate(8, 8)
            solver = DeductiveSolver(grid)
            units = 0
            while solver.make_sure_move():
                assert not grid.contains_error()
                placed = sum(bridge.units for bridge in grid.bridges)
                assert placed > units
                units = placed
            assert grid.puzzle_state in (PuzzleState.SOLVED, PuzzleState.NOT_YET_SOLVED)

    def test_single_neighbor_taking_more_than_one(self):
        grid = PuzzleGrid(3, 3)
        grid.add_island(0, 0, 1)
        grid.add_island(2, 0, 2)
        grid.add_island(0, 2, 1)
        grid.add_island(2, 2, 2)
        solver = DeductiveSolver(grid)
        assert StateEvaluator(grid).evaluate() == PuzzleState.NOT_YET_SOLVED

        island, neighbor = solver.find_forced_move()
        assert (island.coords, neighbor.coords) == (Coordinates(0, 0), Coordinates(2, 0))
        assert solver.make_sure_move()
        assert grid.last_inserted_bridge.key == (Coordinates(0, 0), Coordinates(2, 0))
        assert not grid.last_inserted_bridge.is_double

    def test_two_needing_only_one_can_take_three(self):
        grid = PuzzleGrid(3, 3)
        grid.add_island(0, 0, 2)
        grid.add_island(2, 0, 3)
        grid.add_island(0, 2, 2)
        grid.add_island(2, 2, 3)
        solver = DeductiveSolver(grid)
        assert StateEvaluator(grid).evaluate() == PuzzleState.NOT_YET_SOLVED

        island, neighbor = solver.find_forced_move()
        assert (island.coords, neighbor.coords) == (Coordinates(0, 0), Coordinates(2, 0))
        assert solver.make_sure_move()
        assert grid.last_inserted_bridge.key == (Coordinates(0, 0), Coordinates(2, 0))
        assert not grid.last_inserted_bridge.is_double

    def test_oversaturated_island_is_skipped(self):
        grid = PuzzleGrid(3, 3)
        grid.add_island(0, 0, 1)
        grid.add_island(2, 0, 1)
        grid.add_island(0, 2, 3)
        grid.add_bridge_between(Coordinates(0, 0), Coordinates(2, 0))
        grid.add_bridge_between(Coordinates(0, 0), Coordinates(0, 2))
        assert grid.missing_bridges(Coordinates(0, 0)) == -1

        assert DeductiveSolver(grid).find_forced_move() is None
        assert len(grid.bridges) == 2


class TestSolve:
    def test_solve_reports_moves(self, row_grid):
        calls = []
        solver = DeductiveSolver(row_grid)
        solver.add_progress_callback(lambda moves, bridge, state: calls.append((moves, state)))
        result = solver.solve()

        assert result.success
        assert result.final_state == PuzzleState.SOLVED
        assert result.iterations == 2
        assert [b.key for b in result.moves] == [
            (Coordinates(0, 0), Coordinates(2, 0)),
            (Coordinates(2, 0), Coordinates(4, 0)),
        ]
        assert calls == [(1, PuzzleState.NOT_YET_SOLVED), (2, PuzzleState.SOLVED)]
        assert result.message == "Puzzle solved"

    def test_iteration_limit(self, row_grid):
        result = DeductiveSolver(row_grid, config=SolverConfig(max_iterations=1)).solve()
        assert not result.success
        assert result.iterations == 1
        assert "Maximum iterations" in result.message

    def test_stalled_solve(self, square_grid):
        result = DeductiveSolver(square_grid).solve()
        assert not result.success
        assert result.final_state == PuzzleState.NOT_YET_SOLVED
        assert result.moves == []

    def test_shared_evaluator(self, row_grid):
        evaluator = StateEvaluator(row_grid)
        solver = DeductiveSolver(row_grid, evaluator)
        solver.solve()
        assert evaluator.evaluate() == PuzzleState.SOLVED

    def test_log_level_from_config(self, row_grid):
        solver = DeductiveSolver(row_grid, config=SolverConfig(log_level="WARNING"))
        assert solver.logger.level == logging.WARNING
        verbose = DeductiveSolver(row_grid, config=SolverConfig(log_level="WARNING", verbose=True))
        assert verbose.logger.level == logging.DEBUG
