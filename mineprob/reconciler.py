"""Combine per-island enumeration results under the global mine budget."""

import logging
from dataclasses import dataclass
from fractions import Fraction
from math import comb
from typing import FrozenSet, List, Sequence, Tuple

import numpy as np

from .board import Coord
from .enumerator import EnumerationResult
from .errors import NoConsistentSolution

logger = logging.getLogger(__name__)


def _binom(n: int, k: int) -> int:
    if k < 0 or k > n:
        return 0
    return comb(n, k)


def _convolve(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Exact-integer convolution of two mine-count histograms."""
    out = np.zeros(len(a) + len(b) - 1, dtype=object)
    for i, x in enumerate(a):
        if x:
            out[i : i + len(b)] += x * b
    return out


def _unit() -> np.ndarray:
    arr = np.zeros(1, dtype=object)
    arr[0] = 1
    return arr


@dataclass(frozen=True)
class Reconciliation:
    """
    Global weighting of island hypotheses.

    Every count is the number of complete board configurations (island
    hypotheses combined with a placement of the leftover mines among the
    unconstrained cells) that match the global mine budget.

    Attributes:
        total: Number of globally consistent configurations.
        outside: Per island, ``outside[m]`` is the number of ways to complete
            the rest of the board when the island holds ``m`` mines.
        weights: Per island, re-weighted histogram ``histogram[m] * outside[m]``.
        unconstrained_count: Cells handled by counting rather than enumeration.
        unconstrained_mine_weight: Configurations in which one given
            unconstrained cell is a mine.
        expected_unconstrained_mines: Exact expected mines among them.
    """

    total: int
    outside: Tuple[np.ndarray, ...]
    weights: Tuple[np.ndarray, ...]
    unconstrained_count: int
    unconstrained_mine_weight: int
    expected_unconstrained_mines: Fraction
    remaining_mines: int

    @property
    def unconstrained_probability(self) -> Fraction:
        if self.unconstrained_count == 0:
            return Fraction(0)
        return Fraction(self.unconstrained_mine_weight, self.total)


def reconcile(
    results: Sequence[EnumerationResult],
    unconstrained_count: int,
    remaining_mines: int,
) -> Reconciliation:
    """
    Weight island hypotheses so the total mine count equals ``remaining_mines``.

    The islands' histograms are convolved into the distribution of mines on
    the constrained frontier; a frontier total ``s`` is then completed in
    ``C(u, remaining_mines - s)`` ways on the ``u`` unconstrained cells.
    Prefix and suffix convolutions give each island the weight of everything
    outside it without re-convolving.

    Raises:
        NoConsistentSolution: If no combination of island totals fits the budget.
    """
    if remaining_mines < 0:
        raise NoConsistentSolution(
            f"More cells are flagged than the board has mines ({-remaining_mines} extra)."
        )

    u = unconstrained_count
    n = len(results)

    prefix: List[np.ndarray] = [_unit()]
    for res in results:
        prefix.append(_convolve(prefix[-1], res.histogram))
    suffix: List[np.ndarray] = [_unit()]
    for res in reversed(results):
        suffix.append(_convolve(res.histogram, suffix[-1]))
    suffix.reverse()

    frontier = prefix[n]
    completions = np.zeros(len(frontier), dtype=object)
    completions[:] = [_binom(u, remaining_mines - s) for s in range(len(frontier))]
    total = int(sum(frontier * completions))

    if total == 0:
        raise NoConsistentSolution(
            f"No placement of {remaining_mines} remaining mines satisfies the revealed clues."
        )

    outside: List[np.ndarray] = []
    weights: List[np.ndarray] = []
    for i, res in enumerate(results):
        others = _convolve(prefix[i], suffix[i + 1])
        k = len(res.histogram) - 1
        out_i = np.zeros(k + 1, dtype=object)
        for m in range(k + 1):
            out_i[m] = sum(
                int(w) * _binom(u, remaining_mines - m - s)
                for s, w in enumerate(others)
                if w
            )
        outside.append(out_i)
        weights.append(res.histogram * out_i)

    mine_weight = 0
    expected_numerator = 0
    if u:
        for s, w in enumerate(frontier):
            if w:
                left = remaining_mines - s
                mine_weight += int(w) * _binom(u - 1, left - 1)
                expected_numerator += int(w) * _binom(u, left) * max(left, 0)

    logger.debug(
        "Reconciled %d islands with %d unconstrained cells and %d remaining mines: "
        "%d global configurations.",
        n,
        u,
        remaining_mines,
        total,
    )
    return Reconciliation(
        total=total,
        outside=tuple(outside),
        weights=tuple(weights),
        unconstrained_count=u,
        unconstrained_mine_weight=mine_weight,
        expected_unconstrained_mines=Fraction(expected_numerator, total),
        remaining_mines=remaining_mines,
    )


def combined_witness(
    results: Sequence[EnumerationResult],
    unconstrained: Sequence[Coord],
    remaining_mines: int,
) -> FrozenSet[Coord]:
    """
    One complete mine layout assembled from the islands' witness assignments.

    Picks a frontier total the unconstrained cells can complete, then walks the
    prefix convolutions backwards so every island gets a mine count that some
    layout of the earlier islands can make up to that total.

    Raises:
        NoConsistentSolution: If no combination of island totals fits the budget.
    """
    u = len(unconstrained)
    prefix: List[np.ndarray] = [_unit()]
    for res in results:
        prefix.append(_convolve(prefix[-1], res.histogram))

    totals = [s for s, w in enumerate(prefix[-1]) if w and 0 <= remaining_mines - s <= u]
    if not totals:
        raise NoConsistentSolution(
            f"No placement of {remaining_mines} remaining mines satisfies the revealed clues."
        )

    s = totals[0]
    mines = set(unconstrained[: remaining_mines - s])
    for i in range(len(results) - 1, -1, -1):
        res = results[i]
        m = next(
            m
            for m, n in enumerate(res.histogram)
            if n and 0 <= s - m < len(prefix[i]) and prefix[i][s - m]
        )
        mines.update(res.witnesses[m])
        s -= m
    return frozenset(mines)
