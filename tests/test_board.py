import pytest

from mineprob.board import BoardModel, CellState, get_neighborhoods
from mineprob.errors import MalformedBoard


def test_from_rows_parses_states():
    board = BoardModel.from_rows(["1F.", "2.."], mines_count=3)

    assert (board.width, board.height) == (3, 2)
    assert board.cell(0, 0).state is CellState.REVEALED
    assert board.cell(0, 0).count == 1
    assert board.cell(1, 0).state is CellState.FLAGGED
    assert board.cell(2, 0).state is CellState.UNKNOWN
    assert board.cell(2, 0).count is None
    assert board.unknown_cells() == [(2, 0), (1, 1), (2, 1)]
    assert board.flagged_cells() == [(1, 0)]
    assert [c.pos for c in board.revealed_cells()] == [(0, 0), (0, 1)]
    assert board.remaining_mines == 2


def test_grid_accepts_ints_and_none():
    board = BoardModel(2, 1, 1, [[1, None]])

    assert board.cell(0, 0).count == 1
    assert board.cell(1, 0).state is CellState.UNKNOWN


def test_neighbors_respect_edges():
    board = BoardModel.from_rows(["...", "...", "..."], mines_count=1)

    assert len(board.neighbors(0, 0)) == 3
    assert len(board.neighbors(1, 0)) == 5
    assert len(board.neighbors(1, 1)) == 8
    assert (1, 1) not in board.neighbors(1, 1)


def test_neighborhoods_are_cached():
    assert get_neighborhoods(4, 3) is get_neighborhoods(4, 3)
    with pytest.raises(ValueError):
        get_neighborhoods(0, 3)


@pytest.mark.parametrize(
    "rows",
    [
        ["1x."],
        ["12", "1"],
        ["9."],
    ],
)
def test_invalid_grids_raise(rows):
    with pytest.raises(MalformedBoard):
        BoardModel.from_rows(rows, mines_count=1)


def test_invalid_dimensions_raise():
    with pytest.raises(MalformedBoard):
        BoardModel(0, 1, 0, [])
    with pytest.raises(MalformedBoard):
        BoardModel(2, 1, 3, [[".", "."]])
    with pytest.raises(MalformedBoard):
        BoardModel(2, 2, 1, [[".", "."]])


def test_with_cell_returns_new_board():
    board = BoardModel.from_rows(["1.", ".."], mines_count=1)
    updated = board.with_cell(1, 1, "F")

    assert board.cell(1, 1).state is CellState.UNKNOWN
    assert updated.cell(1, 1).state is CellState.FLAGGED
    assert updated.to_rows() == ["1.", ".F"]
    assert updated != board
    assert board.with_cell(1, 1, ".") == board


def test_cell_out_of_bounds():
    board = BoardModel.from_rows(["."], mines_count=0)
    with pytest.raises(IndexError):
        board.cell(1, 0)
