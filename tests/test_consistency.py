from mineprob.board import BoardModel
from mineprob.consistency import (
    Consistency,
    check_assignment,
    constraint_status,
    is_consistent_board,
)
from mineprob.constraints import Constraint

A = (0, 0)
B = (1, 0)
ONE_OF_TWO = Constraint(source=(0, 1), target=1, cells=(A, B))


def test_constraint_status():
    assert constraint_status(1, 0, 2) is Consistency.INCOMPLETE
    assert constraint_status(1, 1, 0) is Consistency.CONSISTENT
    assert constraint_status(1, 2, 0) is Consistency.INFEASIBLE
    assert constraint_status(2, 0, 1) is Consistency.INFEASIBLE


def test_partial_and_full_assignments():
    assert check_assignment([ONE_OF_TWO], {}) is Consistency.INCOMPLETE
    assert check_assignment([ONE_OF_TWO], {A: True}) is Consistency.INCOMPLETE
    assert check_assignment([ONE_OF_TWO], {A: True, B: False}) is Consistency.CONSISTENT
    assert check_assignment([ONE_OF_TWO], {A: True, B: True}) is Consistency.INFEASIBLE
    assert check_assignment([ONE_OF_TWO], {A: False, B: False}) is Consistency.INFEASIBLE


def test_infeasible_wins_over_incomplete():
    other = Constraint(source=(3, 3), target=0, cells=((5, 5), (6, 6)))
    assignment = {A: True, B: True}
    assert check_assignment([other, ONE_OF_TWO], assignment) is Consistency.INFEASIBLE


def test_global_budget():
    done = {A: True, B: False}
    assert check_assignment([ONE_OF_TWO], done, mine_budget=1) is Consistency.CONSISTENT
    assert check_assignment([ONE_OF_TWO], done, mine_budget=2) is Consistency.INFEASIBLE
    assert (
        check_assignment([ONE_OF_TWO], done, mine_budget=2, free_cells=1)
        is Consistency.INCOMPLETE
    )
    assert check_assignment([ONE_OF_TWO], done, mine_budget=0) is Consistency.INFEASIBLE


def test_is_consistent_board():
    board = BoardModel.from_rows(["1.", "F."], mines_count=2)

    assert is_consistent_board(board, {(0, 1), (1, 1)}) is False  # clue sees two mines
    assert is_consistent_board(board, {(0, 1), (1, 0)}) is False
    board = BoardModel.from_rows(["2.", "F."], mines_count=2)
    assert is_consistent_board(board, {(0, 1), (1, 0)}) is True
    assert is_consistent_board(board, {(1, 0), (1, 1)}) is False  # flag not a mine
    assert is_consistent_board(board, {(0, 1)}) is False  # wrong mine total
    assert is_consistent_board(board, {(0, 1), (0, 0)}) is False  # mine on a clue
