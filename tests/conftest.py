import matplotlib
import pytest

from mineprob import enumerator
from mineprob.board import BoardModel
from mineprob.cancellation import CancelToken

matplotlib.use("Agg")

CORRIDOR_WIDTH = 1500


class CancelAfterPolls(CancelToken):
    """Token that cancels itself once it has been polled ``polls`` times."""

    def __init__(self, polls):
        super().__init__()
        self.polls = polls
        self.seen = 0

    @property
    def cancelled(self):
        self.seen += 1
        if self.seen > self.polls:
            self.cancel()
        return super().cancelled


@pytest.fixture
def cancel_after():
    return CancelAfterPolls


@pytest.fixture
def poll_every_node(monkeypatch):
    monkeypatch.setattr(enumerator, "CANCEL_POLL_INTERVAL", 1)


@pytest.fixture
def corridor_board():
    """
    Two-row board: clues on top, unknowns below with mines at ``x % 3 == 1``.

    The clues admit only that layout, and the island is longer than the
    interpreter's default recursion limit.
    """
    top = "".join(
        str(sum(1 for nx in (x - 1, x, x + 1) if 0 <= nx < CORRIDOR_WIDTH and nx % 3 == 1))
        for x in range(CORRIDOR_WIDTH)
    )
    mines = sum(1 for x in range(CORRIDOR_WIDTH) if x % 3 == 1)
    return BoardModel.from_rows([top, "." * CORRIDOR_WIDTH], mines_count=mines)
