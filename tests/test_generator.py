import logging
import random

import pytest

from hashibridges.core.errors import ConfigurationInvalid, GenerationFailed
from hashibridges.core.puzzle import PuzzleGrid, PuzzleState
from hashibridges.core.validator import PuzzleValidator, StateEvaluator
from hashibridges.generators.puzzle_generator import PuzzleGenerator, PuzzleGeneratorConfig


def restore_solution(grid, solution):
    solved = grid.copy()
    for start, end, is_double in solution:
        solved.add_bridge_between(start, end, is_double)
    return solved


@pytest.fixture
def generator():
    return PuzzleGenerator(PuzzleGeneratorConfig(random_seed=42))


class TestGenerate:
    def test_requested_dimensions(self, generator):
        grid = generator.generate(10, 8, 12)
        assert (grid.width, grid.height, grid.island_count) == (10, 8, 12)
        assert grid.bridges == []

    def test_random_dimensions_within_limits(self):
        generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=1, max_width=12, max_height=15))
        for _ in range(10):
            grid = generator.generate()
            assert 4 <= grid.width <= 12
            assert 4 <= grid.height <= 15
            max_islands = grid.width * grid.height // 5
            assert min(grid.width, grid.height, max_islands) <= grid.island_count <= max_islands

    def test_smallest_board(self, generator):
        grid = generator.generate(4, 4)
        assert grid.island_count == 3

    def test_generated_puzzles_are_valid(self):
        rng = random.Random(2024)
        generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=2024))
        for _ in range(100):
            width, height = rng.randint(4, 12), rng.randint(4, 12)
            grid, solution = generator.generate_with_solution(width, height)

            assert grid.bridges == []
            assert StateEvaluator(grid).evaluate() == PuzzleState.NOT_YET_SOLVED
            for island in grid.islands:
                assert 1 <= island.required_bridges <= 8
                assert not any(
                    grid.is_valid_position(x, y) and grid.has_island_at(x, y)
                    for x, y in ((island.x + 1, island.y), (island.x, island.y + 1))
                )

            solved = restore_solution(grid, solution)
            assert StateEvaluator(solved).evaluate() == PuzzleState.SOLVED
            assert PuzzleValidator.validate_solution(solved)

    def test_log_level_from_config(self):
        generator = PuzzleGenerator(PuzzleGeneratorConfig(log_level="WARNING"))
        assert generator.logger.level == logging.WARNING

    def test_same_seed_same_puzzle(self):
        first = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=5)).generate(9, 9)
        second = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=5)).generate(9, 9)
        assert first.to_dict() == second.to_dict()

    def test_single_bridges_only(self):
        generator = PuzzleGenerator(PuzzleGeneratorConfig(random_seed=3, double_bridge_probability=0.0))
        _, solution = generator.generate_with_solution(8, 8, 10)
        assert not any(is_double for _, _, is_double in solution)


class TestInvalidConfiguration:
    @pytest.mark.parametrize("width, height", [(3, 10), (10, 3), (26, 10), (10, 26)])
    def test_dimensions_out_of_range(self, generator, width, height):
        with pytest.raises(ConfigurationInvalid):
            generator.generate(width, height)

    @pytest.mark.parametrize("num_islands", [0, 1, 21])
    def test_island_count_out_of_range(self, generator, num_islands):
        with pytest.raises(ConfigurationInvalid):
            generator.generate(10, 10, num_islands)

    def test_attempts_exhausted(self, generator, monkeypatch):
        monkeypatch.setattr(generator, '_grow_solved_grid', lambda width, height, num_islands: PuzzleGrid(width, height))
        generator.config.max_attempts = 3
        with pytest.raises(GenerationFailed):
            generator.generate(6, 6, 4)
