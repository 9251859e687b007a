"""Consistency checks for full or partial mine assignments."""

from enum import Enum
from typing import AbstractSet, Iterable, Mapping, Optional

from .board import BoardModel, CellState, Coord
from .constraints import Constraint


class Consistency(Enum):
    CONSISTENT = "consistent"
    INFEASIBLE = "infeasible"
    INCOMPLETE = "incomplete"


def constraint_status(target: int, mines: int, unassigned: int) -> Consistency:
    """
    Classify one constraint from its running counters.

    Args:
        target: Mines required among the constraint's cells.
        mines: Cells assigned as mines so far.
        unassigned: Cells not yet assigned.
    """
    if mines > target or mines + unassigned < target:
        return Consistency.INFEASIBLE
    if unassigned:
        return Consistency.INCOMPLETE
    return Consistency.CONSISTENT


def check_assignment(
    constraints: Iterable[Constraint],
    assignment: Mapping[Coord, bool],
    *,
    mine_budget: Optional[int] = None,
    free_cells: int = 0,
) -> Consistency:
    """
    Check an assignment (cell -> is_mine) against a set of constraints.

    Fully assigned constraints must hold exactly; partially assigned ones must
    still be satisfiable. Cells missing from ``assignment`` are unassigned.

    Args:
        constraints: Constraints to verify.
        assignment: Mine/safe decisions made so far.
        mine_budget: If given, the total number of mines that must be placed
            across the assigned cells, the unassigned constrained cells and
            ``free_cells``.
        free_cells: Cells outside every constraint that may absorb mines.

    Returns:
        INFEASIBLE if any check fails, INCOMPLETE if nothing fails but some
        constraint (or the budget) still depends on unassigned cells,
        otherwise CONSISTENT.
    """
    result = Consistency.CONSISTENT
    open_cells = set()

    for constraint in constraints:
        mines = 0
        unassigned = 0
        for cell in constraint.cells:
            value = assignment.get(cell)
            if value is None:
                unassigned += 1
                open_cells.add(cell)
            elif value:
                mines += 1

        status = constraint_status(constraint.target, mines, unassigned)
        if status is Consistency.INFEASIBLE:
            return status
        if status is Consistency.INCOMPLETE:
            result = status

    if mine_budget is not None:
        placed = sum(1 for v in assignment.values() if v)
        status = constraint_status(mine_budget, placed, len(open_cells) + free_cells)
        if status is Consistency.INFEASIBLE:
            return status
        if status is Consistency.INCOMPLETE:
            result = status

    return result


def is_consistent_board(board: BoardModel, mines: AbstractSet[Coord]) -> bool:
    """
    Validate a complete hypothetical mine layout against a board snapshot.

    ``mines`` lists every mine position on the board. Flagged cells must be
    in it, revealed cells must not, every revealed count must equal its number
    of adjacent mines, and the layout must place exactly ``mines_count`` mines.
    """
    if len(mines) != board.mines_count:
        return False

    for cell in board.cells():
        if cell.state is CellState.FLAGGED and cell.pos not in mines:
            return False
        if cell.state is CellState.REVEALED:
            if cell.pos in mines:
                return False
            adjacent = sum(1 for n in board.neighbors(cell.x, cell.y) if n in mines)
            if adjacent != cell.count:
                return False

    return all(0 <= x < board.width and 0 <= y < board.height for x, y in mines)
