import pytest

from hashibridges.core.errors import PuzzleFormatError, PuzzleSemanticError, PuzzleSyntaxError
from hashibridges.core.geometry import Coordinates
from hashibridges.core.persistence import dumps, load_puzzle, loads, save_puzzle
from hashibridges.core.puzzle import PuzzleGrid


def test_load_without_bridges(row_puzzle_text):
    grid = loads(row_puzzle_text)
    assert (grid.width, grid.height, grid.island_count) == (5, 1, 3)
    assert [i.required_bridges for i in grid.islands] == [1, 2, 1]
    assert grid.bridges == []


def test_dump_format(row_grid):
    row_grid.add_bridge_between(Coordinates(0, 0), Coordinates(2, 0))
    row_grid.add_bridge_between(Coordinates(4, 0), Coordinates(2, 0))
    assert dumps(row_grid) == (
        "FIELD\n"
        "5 x 1 | 3\n"
        "\n"
        "ISLANDS\n"
        "( 0, 0 | 1 )\n"
        "( 2, 0 | 2 )\n"
        "( 4, 0 | 1 )\n"
        "\n"
        "BRIDGES\n"
        "( 0, 1 | false )\n"
        "( 1, 2 | false )\n"
    )


def test_vertical_and_double_bridges_round_trip():
    grid = PuzzleGrid(5, 5)
    grid.add_island(0, 0, 3)
    grid.add_island(4, 0, 2)
    grid.add_island(0, 4, 1)
    grid.add_bridge_between(Coordinates(0, 0), Coordinates(4, 0), True)
    grid.add_bridge_between(Coordinates(0, 0), Coordinates(0, 4))

    text = dumps(grid)
    assert "( 0, 2 | true )" in text
    assert "( 0, 1 | false )" in text
    assert loads(text).to_dict() == grid.to_dict()


def test_file_round_trip(tmp_path, row_grid):
    row_grid.add_bridge_between(Coordinates(0, 0), Coordinates(2, 0))
    path = tmp_path / "saved.bgs"
    save_puzzle(row_grid, path)
    assert load_puzzle(path).to_dict() == row_grid.to_dict()


def test_whitespace_and_comment_lines_are_ignored():
    text = "FIELD\n3x1|2\n# a comment line\nISLANDS(0,0|1)\n  ( 2 ,0|1)\nBRIDGES\n(0, 1|false)"
    grid = loads(text)
    assert len(grid.bridges) == 1


def test_trailing_comment_is_not_a_comment():
    with pytest.raises(PuzzleSyntaxError):
        loads("FIELD 3x1|2 # trailing\nISLANDS(0,0|1)\n(2,0|1)\n")


def test_wrong_suffix(tmp_path, row_puzzle_text):
    path = tmp_path / "row.txt"
    path.write_text(row_puzzle_text)
    with pytest.raises(PuzzleFormatError):
        load_puzzle(path)


@pytest.mark.parametrize("text", [
    "ISLANDS\n(0,0|1)\n",
    "FIELD\n3 x 1\nISLANDS\n",
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0,1)\n(2,0|1)\n",
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|1)\n(2,0|1)\nBRIDGES\n(0,1|yes)\n",
    "FIELD\n3 x 1 | 2\nBRIDGES\nISLANDS\n(0,0|1)\n(2,0|1)\n",
])
def test_syntax_errors(text):
    with pytest.raises(PuzzleSyntaxError):
        loads(text)


@pytest.mark.parametrize("text", [
    # negative width
    "FIELD\n-3 x 1 | 0\nISLANDS\n",
    # fewer islands than declared
    "FIELD\n3 x 1 | 3\nISLANDS\n(0,0|1)\n(2,0|1)\n",
    # required count out of range
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|9)\n(2,0|1)\n",
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|0)\n(2,0|1)\n",
    # island off the grid
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|1)\n(3,0|1)\n",
    # adjacent islands
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|1)\n(1,0|1)\n",
    # more bridges required than the neighbors need
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|3)\n(2,0|1)\n",
    # bridge to a missing island
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|1)\n(2,0|1)\nBRIDGES\n(0,2|false)\n",
    # duplicate bridge
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|1)\n(2,0|1)\nBRIDGES\n(0,1|false)\n(1,0|false)\n",
    # bridge from an island to itself
    "FIELD\n3 x 1 | 2\nISLANDS\n(0,0|1)\n(2,0|1)\nBRIDGES\n(0,0|false)\n",
])
def test_semantic_errors(text):
    with pytest.raises(PuzzleSemanticError):
        loads(text)


def test_semantic_error_is_chained():
    with pytest.raises(PuzzleSemanticError) as excinfo:
        loads("FIELD\n3 x 1 | 2\nISLANDS\n(0,0|1)\n(1,0|1)\n")
    assert excinfo.value.__cause__ is not None
