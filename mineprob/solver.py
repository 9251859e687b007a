"""Entry point: exact mine probabilities for a board snapshot."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from .board import BoardModel, Coord
from .cancellation import CancelToken
from .config import SolverOptions
from .consistency import is_consistent_board
from .constraints import Constraint, build_constraint_graph
from .enumerator import EnumerationResult, enumerate_island
from .errors import IslandTooLarge, NoConsistentSolution
from .islands import Island, partition_islands
from .reconciler import combined_witness, reconcile
from .report import ProbabilityReport, aggregate_probabilities

logger = logging.getLogger(__name__)


class ProbabilitySolver:
    """
    Stateless solver bound to one set of options.

    Each ``solve`` call builds its own constraint graph, islands and
    enumeration state from the board and discards them afterwards.

    The pipeline is:
    1. Constraint graph: one constraint per clue bordering unknown cells
    2. Islands: unknown cells grouped by shared constraints
    3. Enumeration: every valid assignment per island, on a thread pool
    4. Reconciliation: island totals weighted against the global mine budget
    5. Aggregation: per-cell probabilities
    """

    def __init__(self, options: Optional[SolverOptions] = None) -> None:
        self.options: SolverOptions = options if options is not None else SolverOptions()

    def solve(
        self, board: BoardModel, *, cancel: Optional[CancelToken] = None
    ) -> ProbabilityReport:
        """
        Compute the probability that each unknown cell of ``board`` is a mine.

        Args:
            board: Snapshot to analyse.
            cancel: Optional caller token; cancelling it aborts the solve.

        Returns:
            The ProbabilityReport for every unknown cell (minus skipped islands).

        Raises:
            MalformedBoard: If a clue exceeds its cell's neighbor count.
            IslandTooLarge: If islands exceed the enumeration limit and
                ``skip_oversized_islands`` is off; lists every such island.
            NoConsistentSolution: If the clues and mine budget are contradictory.
            Cancelled: If the deadline passes or ``cancel`` fires.
        """
        started = time.perf_counter()
        token = CancelToken(timeout=self.options.deadline, parent=cancel)
        token.check()

        graph = build_constraint_graph(board)
        if graph.contradictions:
            pos, reason = graph.contradictions[0]
            raise NoConsistentSolution(f"Clue at {pos} is contradictory: {reason}.")

        remaining = board.remaining_mines
        if remaining < 0:
            raise NoConsistentSolution(
                f"{len(board.flagged_cells())} cells are flagged but the board "
                f"has only {board.mines_count} mines."
            )

        flagged = board.flagged_cells()
        unknown = board.unknown_cells()
        if not unknown:
            return ProbabilityReport(flagged=frozenset(flagged))

        partition = partition_islands(graph, unknown)
        islands, skipped = self._select_islands(partition.islands)

        results = self._enumerate_all(islands, graph.constraints, remaining, token)
        for res in results:
            if res.total == 0:
                raise self._empty_island_error(res.island, graph.constraints, remaining, token)

        token.check()
        free_cells = len(partition.unconstrained) + sum(err.size for err in skipped)
        reconciliation = reconcile(results, free_cells, remaining)
        if not skipped and logger.isEnabledFor(logging.DEBUG):
            self._check_witness(board, results, partition.unconstrained, remaining)
        report = aggregate_probabilities(
            results,
            reconciliation,
            partition.unconstrained,
            flagged=flagged,
            skipped=skipped,
        )

        logger.debug(
            "Solved %dx%d board: %d islands (%d skipped), %d cells reported, "
            "%d safe, %d mines in %.3fs.",
            board.width,
            board.height,
            report.island_count,
            len(skipped),
            len(report),
            len(report.safe),
            len(report.mines),
            time.perf_counter() - started,
        )
        return report

    def _select_islands(
        self, islands: Sequence[Island]
    ) -> Tuple[List[Island], List[IslandTooLarge]]:
        """Split islands into those to enumerate and those over the limit."""
        limit = self.options.enumeration_limit
        kept = [island for island in islands if len(island) <= limit]
        oversized = [(island.index, len(island)) for island in islands if len(island) > limit]
        if not oversized:
            return kept, []

        if not self.options.skip_oversized_islands:
            index, size = oversized[0]
            raise IslandTooLarge(index, size, limit, oversized)

        skipped: List[IslandTooLarge] = []
        for index, size in oversized:
            error = IslandTooLarge(index, size, limit)
            logger.warning("Skipping island %d: %s", index, error)
            skipped.append(error)
        return kept, skipped

    def _check_witness(
        self,
        board: BoardModel,
        results: Sequence[EnumerationResult],
        unconstrained: Sequence[Coord],
        remaining: int,
    ) -> None:
        """Verify one combined island layout against every clue of the board."""
        layout = combined_witness(results, unconstrained, remaining)
        if not is_consistent_board(board, layout | set(board.flagged_cells())):
            raise RuntimeError(
                f"Combined layout of {len(results)} islands violates the board's clues."
            )
        logger.debug("Combined layout with %d mines verified against every clue.", len(layout))

    def _empty_island_error(
        self,
        island: Island,
        constraints: Sequence[Constraint],
        budget: int,
        token: CancelToken,
    ) -> NoConsistentSolution:
        """
        Explain an island with no valid assignment under the mine budget.

        The island is blamed only when its clues are contradictory on their
        own; if they are satisfiable with more mines than remain, the budget
        is at fault and no island index is attached.
        """
        if budget < len(island):
            unbounded = enumerate_island(
                island, constraints, limit=self.options.enumeration_limit, cancel=token
            )
            if unbounded.total:
                fewest, _ = unbounded.mine_range
                return NoConsistentSolution(
                    f"Island {island.index} needs at least {fewest} mines "
                    f"but only {budget} remain."
                )
        return NoConsistentSolution(
            f"Island {island.index} has no assignment satisfying its clues.",
            island_index=island.index,
        )

    def _enumerate_all(
        self,
        islands: Sequence[Island],
        constraints: Sequence[Constraint],
        budget: int,
        token: CancelToken,
    ) -> List[EnumerationResult]:
        """Enumerate islands independently; results keep island order."""
        limit = self.options.enumeration_limit

        if len(islands) <= 1 or self.options.max_workers == 1:
            return [
                enumerate_island(island, constraints, limit=limit, max_mines=budget, cancel=token)
                for island in islands
            ]

        with ThreadPoolExecutor(max_workers=self.options.max_workers) as pool:
            futures = [
                pool.submit(
                    enumerate_island,
                    island,
                    constraints,
                    limit=limit,
                    max_mines=budget,
                    cancel=token,
                )
                for island in islands
            ]
            try:
                return [f.result() for f in futures]
            except BaseException:
                # Stop the other searches before the pool waits on them.
                token.cancel()
                raise


def solve(
    board: BoardModel,
    options: Optional[SolverOptions] = None,
    *,
    cancel: Optional[CancelToken] = None,
) -> ProbabilityReport:
    """Solve ``board`` with ``options``; see ProbabilitySolver.solve."""
    return ProbabilitySolver(options).solve(board, cancel=cancel)
