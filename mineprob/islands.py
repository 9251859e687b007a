"""Partition unknown cells into independently solvable islands."""

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Tuple

from .board import Coord
from .constraints import ConstraintGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Island:
    """
    A maximal group of unknown cells linked through shared constraints.

    Attributes:
        index: Position of the island in its Partition.
        cells: Island cells in sorted order; a cell's position is its local index.
        constraint_ids: Indices into ConstraintGraph.constraints, sorted.
    """

    index: int
    cells: Tuple[Coord, ...]
    constraint_ids: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def cell_set(self) -> FrozenSet[Coord]:
        return frozenset(self.cells)


@dataclass(frozen=True)
class Partition:
    islands: Tuple[Island, ...]
    unconstrained: Tuple[Coord, ...]


def _find(parent: Dict[Coord, Coord], c: Coord) -> Coord:
    root = c
    while parent[root] != root:
        root = parent[root]
    while parent[c] != root:
        parent[c], c = root, parent[c]
    return root


def partition_islands(graph: ConstraintGraph, unknown_cells: Iterable[Coord]) -> Partition:
    """
    Group unknown cells into islands using union-find over shared constraints.

    Two unknown cells share an island iff a chain of constraints connects them.
    Unknown cells referenced by no constraint are returned separately as
    ``unconstrained``. Islands are ordered by their smallest cell and cells are
    sorted inside each island, so the result does not depend on the iteration
    order of ``unknown_cells``.
    """
    unknown = set(unknown_cells)
    parent: Dict[Coord, Coord] = {c: c for c in graph.touches}

    for constraint in graph.constraints:
        first = constraint.cells[0]
        root = _find(parent, first)
        for other in constraint.cells[1:]:
            other_root = _find(parent, other)
            if other_root != root:
                # Union by smaller coordinate keeps roots deterministic.
                if other_root < root:
                    parent[root] = other_root
                    root = other_root
                else:
                    parent[other_root] = root

    members: Dict[Coord, List[Coord]] = {}
    for c in parent:
        members.setdefault(_find(parent, c), []).append(c)

    groups = sorted(sorted(cells) for cells in members.values())
    islands: List[Island] = []
    for idx, cells in enumerate(groups):
        constraint_ids = sorted({cid for c in cells for cid in graph.touches[c]})
        islands.append(Island(idx, tuple(cells), tuple(constraint_ids)))

    unconstrained = tuple(sorted(c for c in unknown if c not in graph.touches))

    logger.debug(
        "Partitioned %d unknown cells into %d islands (sizes %s) and %d unconstrained cells.",
        len(unknown),
        len(islands),
        [len(i) for i in islands],
        len(unconstrained),
    )
    return Partition(tuple(islands), unconstrained)
