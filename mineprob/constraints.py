"""Numeric clue constraints derived from a board snapshot."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .board import BoardModel, CellState, Coord
from .errors import MalformedBoard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Constraint:
    """
    A revealed clue restricted to its unknown neighbors.

    ``target`` is the clue count minus the flagged neighbors, i.e. the number
    of mines that must lie among ``cells``.
    """

    source: Coord
    target: int
    cells: Tuple[Coord, ...]


@dataclass(frozen=True)
class ConstraintGraph:
    """
    Bipartite view of the clue system, addressed by integer index.

    Attributes:
        constraints: Flat list of constraints; a constraint's index is its id.
        touches: Unknown cell -> indices of the constraints referencing it.
            Unknown cells with no adjacent clue are absent.
        contradictions: Clues already impossible from flags alone, with a
            description of the violation.
    """

    constraints: Tuple[Constraint, ...]
    touches: Dict[Coord, Tuple[int, ...]]
    contradictions: Tuple[Tuple[Coord, str], ...] = ()

    def degree(self, cell: Coord) -> int:
        return len(self.touches.get(cell, ()))


def build_constraint_graph(board: BoardModel) -> ConstraintGraph:
    """
    Derive one constraint per revealed cell that still borders an unknown cell.

    Raises:
        MalformedBoard: If a revealed count exceeds the number of neighbors
            of its cell.
    """
    constraints: List[Constraint] = []
    touches: Dict[Coord, List[int]] = {}
    contradictions: List[Tuple[Coord, str]] = []

    for cell in board.revealed_cells():
        nbrs = board.neighbors(cell.x, cell.y)
        count = cell.count if cell.count is not None else 0
        if count > len(nbrs):
            raise MalformedBoard(
                f"Cell {cell.pos} shows {count} but has only {len(nbrs)} neighbors."
            )

        unknown: List[Coord] = []
        flagged = 0
        for nx, ny in nbrs:
            state = board.cell(nx, ny).state
            if state is CellState.UNKNOWN:
                unknown.append((nx, ny))
            elif state is CellState.FLAGGED:
                flagged += 1

        target = count - flagged
        if target < 0:
            contradictions.append(
                (cell.pos, f"{flagged} flagged neighbors exceed count {count}")
            )
            continue
        if not unknown:
            if target != 0:
                contradictions.append(
                    (cell.pos, f"needs {target} more mines but has no unknown neighbors")
                )
            continue
        if target > len(unknown):
            contradictions.append(
                (cell.pos, f"needs {target} mines among {len(unknown)} unknown neighbors")
            )
            continue

        idx = len(constraints)
        cells = tuple(sorted(unknown))
        constraints.append(Constraint(cell.pos, target, cells))
        for u in cells:
            touches.setdefault(u, []).append(idx)

    logger.debug(
        "Built %d constraints over %d frontier cells (%d contradictions).",
        len(constraints),
        len(touches),
        len(contradictions),
    )
    return ConstraintGraph(
        constraints=tuple(constraints),
        touches={cell: tuple(idx) for cell, idx in touches.items()},
        contradictions=tuple(contradictions),
    )
