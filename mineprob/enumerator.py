"""Exhaustive enumeration of valid mine placements inside one island."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .board import Coord
from .cancellation import CancelToken
from .config import DEFAULT_ENUMERATION_LIMIT
from .consistency import Consistency, constraint_status
from .constraints import Constraint
from .errors import IslandTooLarge
from .islands import Island

logger = logging.getLogger(__name__)

# Search nodes visited between two cancellation polls.
CANCEL_POLL_INTERVAL = 1024


@dataclass(frozen=True)
class EnumerationResult:
    """
    Valid hypotheses of one island, counted by number of mines placed.

    Attributes:
        island: The enumerated island.
        histogram: ``histogram[m]`` is the number of valid assignments placing
            exactly ``m`` mines. Object array of exact ints, length ``k + 1``.
        cell_mine_counts: ``cell_mine_counts[i, m]`` is how many of those
            assignments put a mine on ``island.cells[i]``. Shape ``(k, k + 1)``.
        nodes: Search nodes visited.
        witnesses: ``witnesses[m]`` is the first valid assignment found with
            ``m`` mines, as the mined cells. Present for every ``m`` the
            histogram counts.
    """

    island: Island
    histogram: np.ndarray
    cell_mine_counts: np.ndarray
    nodes: int = 0
    witnesses: Mapping[int, Tuple[Coord, ...]] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return int(sum(self.histogram))

    @property
    def mine_range(self) -> Tuple[int, int]:
        """Smallest and largest mine count of any valid assignment."""
        counts = [m for m, n in enumerate(self.histogram) if n]
        if not counts:
            return (0, -1)
        return (counts[0], counts[-1])


def _search_order(degrees: Sequence[int], cell_constraints: Sequence[Sequence[int]],
                  constraint_cells: Sequence[Sequence[int]]) -> List[int]:
    """
    Order cells for backtracking: start at the highest-degree cell, then walk
    breadth-first through shared constraints, preferring high-degree cells.
    """
    k = len(degrees)
    by_degree = sorted(range(k), key=lambda i: (-degrees[i], i))
    seen = [False] * k
    order: List[int] = []

    for start in by_degree:
        if seen[start]:
            continue
        seen[start] = True
        queue: Deque[int] = deque([start])
        while queue:
            i = queue.popleft()
            order.append(i)
            nbrs = {j for c in cell_constraints[i] for j in constraint_cells[c] if not seen[j]}
            for j in sorted(nbrs, key=lambda j: (-degrees[j], j)):
                seen[j] = True
                queue.append(j)

    return order


def enumerate_island(
    island: Island,
    constraints: Sequence[Constraint],
    *,
    limit: int = DEFAULT_ENUMERATION_LIMIT,
    max_mines: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
) -> EnumerationResult:
    """
    Count every mine/safe assignment of an island that satisfies its constraints.

    Args:
        island: Island to enumerate.
        constraints: All constraints of the graph, indexed by constraint id.
        limit: Maximum island size accepted for exhaustive search.
        max_mines: Optional cap on mines per assignment (the global budget);
            branches exceeding it are pruned.
        cancel: Token polled during the search.

    Raises:
        IslandTooLarge: If the island has more than ``limit`` cells.
        Cancelled: If ``cancel`` fires during the search.
    """
    k = len(island.cells)
    if k > limit:
        raise IslandTooLarge(island.index, k, limit)

    local = {cell: i for i, cell in enumerate(island.cells)}
    targets: List[int] = []
    constraint_cells: List[List[int]] = []
    cell_constraints: List[List[int]] = [[] for _ in range(k)]
    for cid in island.constraint_ids:
        c = len(targets)
        targets.append(constraints[cid].target)
        members = [local[cell] for cell in constraints[cid].cells]
        constraint_cells.append(members)
        for i in members:
            cell_constraints[i].append(c)

    order = _search_order(
        [len(cs) for cs in cell_constraints], cell_constraints, constraint_cells
    )

    # Running counters per local constraint, updated on assign and undone on backtrack.
    mines = [0] * len(targets)
    unassigned = [len(cells) for cells in constraint_cells]

    histogram = [0] * (k + 1)
    cell_counts = [[0] * (k + 1) for _ in range(k)]
    mine_stack: List[int] = []
    witnesses: Dict[int, Tuple[Coord, ...]] = {}
    budget = k if max_mines is None else min(k, max_mines)

    def assign(i: int, is_mine: bool) -> bool:
        """Apply a decision to the touched constraints; report whether they stay feasible."""
        feasible = True
        for c in cell_constraints[i]:
            unassigned[c] -= 1
            if is_mine:
                mines[c] += 1
            if constraint_status(targets[c], mines[c], unassigned[c]) is Consistency.INFEASIBLE:
                feasible = False
        return feasible

    def undo(i: int, is_mine: bool) -> None:
        for c in cell_constraints[i]:
            unassigned[c] += 1
            if is_mine:
                mines[c] -= 1

    # Explicit stack: branch[pos] is the next decision to try at depth pos
    # (0 safe, 1 mine, 2 exhausted); applied[pos] is the decision in force.
    branch = [0] * k
    applied: List[Optional[bool]] = [None] * k

    if cancel is not None:
        cancel.check()

    pos = 0
    nodes = 1
    while pos >= 0:
        if pos == k:
            placed = len(mine_stack)
            histogram[placed] += 1
            for i in mine_stack:
                cell_counts[i][placed] += 1
            if placed not in witnesses:
                witnesses[placed] = tuple(island.cells[i] for i in mine_stack)
            pos -= 1
            continue

        i = order[pos]
        previous = applied[pos]
        if previous is not None:
            undo(i, previous)
            if previous:
                mine_stack.pop()
            applied[pos] = None

        if branch[pos] == 2:
            branch[pos] = 0
            pos -= 1
            continue

        is_mine = branch[pos] == 1
        branch[pos] += 1
        if is_mine and len(mine_stack) >= budget:
            continue
        if not assign(i, is_mine):
            undo(i, is_mine)
            continue

        applied[pos] = is_mine
        if is_mine:
            mine_stack.append(i)
        pos += 1
        nodes += 1
        if cancel is not None and nodes % CANCEL_POLL_INTERVAL == 0:
            cancel.check()

    hist_arr = np.zeros(k + 1, dtype=object)
    hist_arr[:] = histogram
    counts_arr = np.zeros((k, k + 1), dtype=object)
    for i in range(k):
        counts_arr[i, :] = cell_counts[i]

    result = EnumerationResult(island, hist_arr, counts_arr, nodes, witnesses)
    logger.debug(
        "Island %d: %d cells, %d constraints, %d valid assignments, %d nodes.",
        island.index,
        k,
        len(targets),
        result.total,
        nodes,
    )
    return result
