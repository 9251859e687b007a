import pytest

from mineprob.board import BoardModel
from mineprob.constraints import build_constraint_graph
from mineprob.errors import MalformedBoard


def test_targets_subtract_flagged_neighbors():
    board = BoardModel.from_rows(["2F", ".."], mines_count=2)
    graph = build_constraint_graph(board)

    assert len(graph.constraints) == 1
    constraint = graph.constraints[0]
    assert constraint.source == (0, 0)
    assert constraint.target == 1
    assert constraint.cells == ((0, 1), (1, 1))
    assert graph.touches == {(0, 1): (0,), (1, 1): (0,)}
    assert graph.contradictions == ()


def test_fully_explained_clue_produces_no_constraint():
    board = BoardModel.from_rows(["00", "00"], mines_count=0)
    graph = build_constraint_graph(board)

    assert graph.constraints == ()
    assert graph.touches == {}


def test_shared_cells_touch_every_constraint():
    board = BoardModel.from_rows(["1.1", "..."], mines_count=1)
    graph = build_constraint_graph(board)

    assert len(graph.constraints) == 2
    assert graph.degree((1, 0)) == 2
    assert graph.degree((1, 1)) == 2
    assert graph.degree((0, 1)) == 1
    assert graph.degree((2, 1)) == 1


def test_count_exceeding_neighbors_is_malformed():
    board = BoardModel.from_rows(["4.", ".."], mines_count=3)
    with pytest.raises(MalformedBoard):
        build_constraint_graph(board)


def test_contradictions_recorded():
    too_many_flags = BoardModel.from_rows(["1F", "F."], mines_count=2)
    graph = build_constraint_graph(too_many_flags)
    assert graph.contradictions[0][0] == (0, 0)

    unexplained = BoardModel.from_rows(["1", "1"], mines_count=0)
    assert len(build_constraint_graph(unexplained).contradictions) == 2

    too_few_cells = BoardModel.from_rows(["3.", "11"], mines_count=3)
    assert build_constraint_graph(too_few_cells).contradictions[0][0] == (0, 0)
