import itertools

import pytest

from mineprob.board import BoardModel
from mineprob.cancellation import CancelToken
from mineprob.consistency import Consistency, check_assignment
from mineprob.constraints import build_constraint_graph
from mineprob.engine import Minesweeper
from mineprob.enumerator import enumerate_island
from mineprob.errors import Cancelled, IslandTooLarge
from mineprob.islands import partition_islands


def _islands(board):
    graph = build_constraint_graph(board)
    return graph, partition_islands(graph, board.unknown_cells())


def test_single_clue_histogram():
    graph, partition = _islands(BoardModel.from_rows(["...", ".1.", "..."], mines_count=1))
    (island,) = partition.islands

    result = enumerate_island(island, graph.constraints)

    assert list(result.histogram) == [0, 8, 0, 0, 0, 0, 0, 0, 0]
    assert result.total == 8
    assert result.mine_range == (1, 1)
    assert result.cell_mine_counts.shape == (8, 9)
    assert all(result.cell_mine_counts[i, 1] == 1 for i in range(8))
    assert sum(result.cell_mine_counts[:, 0]) == 0


def test_two_mines_among_eight():
    graph, partition = _islands(BoardModel.from_rows(["...", ".2.", "..."], mines_count=2))
    result = enumerate_island(partition.islands[0], graph.constraints)

    assert result.histogram[2] == 28
    assert result.total == 28
    assert all(result.cell_mine_counts[i, 2] == 7 for i in range(8))


def test_max_mines_prunes_assignments():
    graph, partition = _islands(BoardModel.from_rows(["...", ".2.", "..."], mines_count=2))
    result = enumerate_island(partition.islands[0], graph.constraints, max_mines=1)

    assert result.total == 0
    assert result.mine_range == (0, -1)


def test_island_too_large():
    graph, partition = _islands(BoardModel.from_rows(["...", ".1.", "..."], mines_count=1))

    with pytest.raises(IslandTooLarge) as excinfo:
        enumerate_island(partition.islands[0], graph.constraints, limit=7)

    assert excinfo.value.island_index == 0
    assert excinfo.value.size == 8
    assert excinfo.value.limit == 7


def test_cancelled_token_stops_search():
    graph, partition = _islands(BoardModel.from_rows(["...", ".1.", "..."], mines_count=1))
    token = CancelToken()
    token.cancel()

    with pytest.raises(Cancelled):
        enumerate_island(partition.islands[0], graph.constraints, cancel=token)


def test_mixed_histogram_over_chain():
    # Clues 1 and 1 sharing the middle column: either the shared cells hold the
    # single mine or each side holds one.
    board = BoardModel.from_rows(["1.1", "..."], mines_count=2)
    graph, partition = _islands(board)
    result = enumerate_island(partition.islands[0], graph.constraints)

    # Cells: (0,1), (1,0), (1,1), (2,1).
    assert list(result.histogram) == [0, 2, 1, 0, 0]
    assert list(result.cell_mine_counts[0]) == [0, 0, 1, 0, 0]
    assert list(result.cell_mine_counts[1]) == [0, 1, 0, 0, 0]


@pytest.mark.parametrize("seed", range(6))
def test_matches_brute_force_count(seed):
    game = Minesweeper(7, 7, 9, seed=seed)
    game.reveal(3, 3)
    board = game.snapshot()
    graph, partition = _islands(board)

    for island in partition.islands:
        if len(island) > 14:
            continue
        constraints = [graph.constraints[c] for c in island.constraint_ids]
        histogram = [0] * (len(island) + 1)
        for values in itertools.product((False, True), repeat=len(island)):
            assignment = dict(zip(island.cells, values))
            if check_assignment(constraints, assignment) is Consistency.CONSISTENT:
                histogram[sum(values)] += 1

        result = enumerate_island(island, graph.constraints)
        assert list(result.histogram) == histogram


def test_cancellation_is_polled_during_search(poll_every_node, cancel_after):
    graph, partition = _islands(BoardModel.from_rows(["...", ".1.", "..."], mines_count=1))
    token = cancel_after(3)

    with pytest.raises(Cancelled):
        enumerate_island(partition.islands[0], graph.constraints, cancel=token)

    # One check before the search starts, then one per node until the fourth fails.
    assert token.seen == 4


def test_long_corridor_needs_no_recursion(corridor_board):
    graph, partition = _islands(corridor_board)
    (island,) = partition.islands

    result = enumerate_island(island, graph.constraints, limit=len(island))

    assert len(island) == 1500
    assert result.total == 1
    assert result.histogram[500] == 1
    mined = [cell for i, cell in enumerate(island.cells) if result.cell_mine_counts[i, 500]]
    assert mined == [(x, 1) for x in range(1, 1500, 3)]
