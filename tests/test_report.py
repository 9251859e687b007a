from mineprob import BoardModel, solve
from mineprob.report import Action, Event, ProbabilityReport, suggest_move


def test_safe_cells_are_clicked_first():
    board = BoardModel.from_rows(["1...", "....", "....", "...."], mines_count=1)
    report = solve(board)

    assert len(report.safe) == 12
    event = suggest_move(report)
    assert event == Event(Action.CLICK, min(report.safe))


def test_provable_mines_are_flagged():
    board = BoardModel.from_rows(["...", ".8.", "..."], mines_count=8)
    assert suggest_move(solve(board)) == Event(Action.FLAG, (0, 0))


def test_lowest_probability_cell_is_clicked():
    board = BoardModel.from_rows(["...", ".1.", "..."], mines_count=1)
    report = solve(board)

    assert report.safest_cells() == sorted(board.unknown_cells())
    assert suggest_move(report) == Event(Action.CLICK, (0, 0))


def test_unconstrained_guess_prefers_frontier_neighbors():
    board = BoardModel.from_rows(["1...", "....", "....", "...."], mines_count=3)
    report = solve(board)

    # Frontier cells are 1/3, unconstrained cells 1/6.
    assert set(report.safest_cells()) == set(report.unconstrained)
    event = suggest_move(report, board)
    assert event.action is Action.CLICK
    assert event.pos == (0, 2)
    assert suggest_move(report).pos == (0, 2)


def test_empty_report_has_no_move():
    assert suggest_move(ProbabilityReport()) is None
    assert ProbabilityReport().safest_cells() == []
