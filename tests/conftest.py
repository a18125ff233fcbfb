import pytest

from hashibridges.core.puzzle import PuzzleGrid


@pytest.fixture
def pair_grid():
    """Two islands requiring one bridge each, two columns apart."""
    grid = PuzzleGrid(3, 1)
    grid.add_island(0, 0, 1)
    grid.add_island(2, 0, 1)
    return grid


@pytest.fixture
def row_grid():
    """(0,0) needs 1, (2,0) needs 2, (4,0) needs 1: solvable by forced moves alone."""
    grid = PuzzleGrid(5, 1)
    grid.add_island(0, 0, 1)
    grid.add_island(2, 0, 2)
    grid.add_island(4, 0, 1)
    return grid


@pytest.fixture
def square_grid():
    """Four islands requiring two bridges each: two solutions, no forced move."""
    grid = PuzzleGrid(3, 3)
    for x, y in ((0, 0), (2, 0), (0, 2), (2, 2)):
        grid.add_island(x, y, 2)
    return grid


@pytest.fixture
def row_puzzle_text():
    return (
        "# three islands on one row\n"
        "FIELD\n"
        "5 x 1 | 3\n"
        "\n"
        "ISLANDS\n"
        "( 0, 0 | 1 )\n"
        "( 2, 0 | 2 )\n"
        "( 4, 0 | 1 )\n"
    )


@pytest.fixture
def row_puzzle_file(tmp_path, row_puzzle_text):
    path = tmp_path / "row.bgs"
    path.write_text(row_puzzle_text, encoding="utf-8")
    return path
