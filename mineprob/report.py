"""Per-cell mine probabilities and the move they suggest."""

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from .board import BoardModel, Coord
from .enumerator import EnumerationResult
from .errors import IslandTooLarge
from .reconciler import Reconciliation


@dataclass(frozen=True)
class ProbabilityReport:
    """
    Outcome of a solve.

    Attributes:
        probabilities: Unknown cell -> probability that it holds a mine.
        safe: Cells with probability exactly 0 (provably safe).
        mines: Cells with probability exactly 1 (provably mined).
        flagged: Flagged cells, assumed to be mines and not re-estimated.
        unconstrained: Unknown cells touching no revealed clue.
        unconstrained_probability: Shared probability of those cells, or None.
        expected_mines: Expected number of mines over ``probabilities``.
        configurations: Number of globally consistent configurations.
        island_count: Islands found, including skipped ones.
        skipped_islands: Oversized islands left out of the report.
    """

    probabilities: Dict[Coord, float] = field(default_factory=dict)
    safe: FrozenSet[Coord] = frozenset()
    mines: FrozenSet[Coord] = frozenset()
    flagged: FrozenSet[Coord] = frozenset()
    unconstrained: Tuple[Coord, ...] = ()
    unconstrained_probability: Optional[float] = None
    expected_mines: float = 0.0
    configurations: int = 0
    island_count: int = 0
    skipped_islands: Tuple[IslandTooLarge, ...] = ()

    @property
    def exact(self) -> bool:
        """False when oversized islands were skipped and the weighting ignores their clues."""
        return not self.skipped_islands

    def __getitem__(self, cell: Coord) -> float:
        return self.probabilities[cell]

    def __contains__(self, cell: object) -> bool:
        return cell in self.probabilities

    def __iter__(self) -> Iterator[Coord]:
        return iter(self.probabilities)

    def __len__(self) -> int:
        return len(self.probabilities)

    def safest_cells(self) -> List[Coord]:
        """All cells sharing the lowest mine probability, sorted."""
        if not self.probabilities:
            return []
        low = min(self.probabilities.values())
        return sorted(c for c, p in self.probabilities.items() if p == low)


def aggregate_probabilities(
    results: Sequence[EnumerationResult],
    reconciliation: Reconciliation,
    unconstrained: Sequence[Coord],
    *,
    flagged: Iterable[Coord] = (),
    skipped: Sequence[IslandTooLarge] = (),
) -> ProbabilityReport:
    """
    Turn reconciled weights into per-cell probabilities.

    An island cell's probability is the weight of the global configurations
    in which it is a mine divided by the weight of all of them. Probabilities
    are computed as exact fractions so 0 and 1 are only reported when provable.
    """
    total = reconciliation.total
    exact: Dict[Coord, Fraction] = {}

    for res, outside in zip(results, reconciliation.outside):
        for i, cell in enumerate(res.island.cells):
            numerator = int(sum(res.cell_mine_counts[i] * outside))
            exact[cell] = Fraction(numerator, total)

    shared: Optional[Fraction] = None
    if unconstrained:
        shared = reconciliation.unconstrained_probability
        for cell in unconstrained:
            exact[cell] = shared

    return ProbabilityReport(
        probabilities={cell: float(p) for cell, p in sorted(exact.items())},
        safe=frozenset(c for c, p in exact.items() if p == 0),
        mines=frozenset(c for c, p in exact.items() if p == 1),
        flagged=frozenset(flagged),
        unconstrained=tuple(unconstrained),
        unconstrained_probability=float(shared) if shared is not None else None,
        expected_mines=float(sum(exact.values(), Fraction(0))),
        configurations=total,
        island_count=len(results) + len(skipped),
        skipped_islands=tuple(skipped),
    )


# -----------------------------------------------------------------------------
# Move suggestion
# -----------------------------------------------------------------------------


class Action(Enum):
    CLICK = "click"
    FLAG = "flag"


@dataclass(frozen=True)
class Event:
    action: Action
    pos: Coord


def suggest_move(
    report: ProbabilityReport, board: Optional[BoardModel] = None
) -> Optional[Event]:
    """
    Pick the next move a player should make from a report.

    Provably safe cells are clicked first, then provable mines are flagged.
    Otherwise the lowest-probability cell is clicked. When that is an
    unconstrained cell and ``board`` is given, the unconstrained cell with the
    most frontier neighbors is preferred, since revealing it is most likely
    to produce a useful clue.

    Returns:
        The suggested Event, or None if the report has no cells.
    """
    if report.safe:
        return Event(Action.CLICK, min(report.safe))
    if report.mines:
        return Event(Action.FLAG, min(report.mines))

    candidates = report.safest_cells()
    if not candidates:
        return None

    unconstrained = set(report.unconstrained)
    constrained = [c for c in candidates if c not in unconstrained]
    if constrained:
        return Event(Action.CLICK, constrained[0])

    if board is not None:
        frontier = set(report.probabilities) - unconstrained
        frontier_counts: Dict[Coord, int] = {
            c: sum(1 for n in board.neighbors(*c) if n in frontier) for c in candidates
        }
        # max() keeps the first of equal counts, i.e. the smallest coordinate.
        best = max(candidates, key=lambda c: frontier_counts[c])
        return Event(Action.CLICK, best)

    return Event(Action.CLICK, candidates[0])
