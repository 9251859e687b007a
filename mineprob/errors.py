"""Error taxonomy raised by the probability solver."""

from typing import Optional, Sequence, Tuple


class SolveError(Exception):
    """Base class for every failure surfaced by ``solve``."""


class MalformedBoard(SolveError, ValueError):
    """The board snapshot is structurally impossible (upstream data corruption)."""


class IslandTooLarge(SolveError):
    """
    An island has more unknown cells than the configured enumeration limit.

    ``island_index`` and ``size`` describe the first such island; ``oversized``
    lists ``(island_index, size)`` for every island of the board over the limit.
    """

    def __init__(
        self,
        island_index: int,
        size: int,
        limit: int,
        oversized: Optional[Sequence[Tuple[int, int]]] = None,
    ) -> None:
        self.oversized: Tuple[Tuple[int, int], ...] = (
            tuple(oversized) if oversized else ((island_index, size),)
        )
        message = f"Island {island_index} has {size} unknown cells; enumeration limit is {limit}."
        if len(self.oversized) > 1:
            message += f" {len(self.oversized)} islands are over the limit."
        super().__init__(message)
        self.island_index = island_index
        self.size = size
        self.limit = limit


class NoConsistentSolution(SolveError, RuntimeError):
    """No mine placement satisfies the revealed clues and the mine budget."""

    def __init__(self, message: str, island_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.island_index = island_index


class Cancelled(SolveError):
    """The solve was cancelled or ran past its deadline; no report is produced."""
