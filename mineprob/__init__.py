"""
Minesweeper Mine Probabilities

An exact mine-probability solver for partially revealed Minesweeper boards:
- Constraint graph: revealed clues as target counts over unknown neighbors
- Islands: unknown cells split into independently solvable groups
- Enumeration: every valid mine placement per island, counted by mine total
- Reconciliation: island totals weighted against the global mine budget
"""

from .board import BoardModel, Cell, CellState
from .cancellation import CancelToken
from .config import SolverOptions
from .consistency import Consistency, check_assignment, is_consistent_board
from .constraints import Constraint, ConstraintGraph, build_constraint_graph
from .engine import Minesweeper
from .enumerator import EnumerationResult, enumerate_island
from .errors import (
    Cancelled,
    IslandTooLarge,
    MalformedBoard,
    NoConsistentSolution,
    SolveError,
)
from .islands import Island, Partition, partition_islands
from .reconciler import Reconciliation, combined_witness, reconcile
from .report import (
    Action,
    Event,
    ProbabilityReport,
    aggregate_probabilities,
    suggest_move,
)
from .solver import ProbabilitySolver, solve
from .analysis import (
    format_probability_report,
    plot_probability_heatmap,
    run_solver_benchmark,
    run_solver_expert_level_analysis,
    run_solver_single_game,
)

__version__ = "1.0.0"

__all__ = [
    # Core entry points
    "solve",
    "ProbabilitySolver",
    "SolverOptions",
    "CancelToken",
    # Board model
    "BoardModel",
    "Cell",
    "CellState",
    # Pipeline stages
    "Constraint",
    "ConstraintGraph",
    "build_constraint_graph",
    "Island",
    "Partition",
    "partition_islands",
    "EnumerationResult",
    "enumerate_island",
    "Consistency",
    "check_assignment",
    "is_consistent_board",
    "Reconciliation",
    "reconcile",
    "combined_witness",
    "ProbabilityReport",
    "aggregate_probabilities",
    # Moves
    "Action",
    "Event",
    "suggest_move",
    # Errors
    "SolveError",
    "MalformedBoard",
    "IslandTooLarge",
    "NoConsistentSolution",
    "Cancelled",
    # Game engine and analysis
    "Minesweeper",
    "format_probability_report",
    "plot_probability_heatmap",
    "run_solver_single_game",
    "run_solver_benchmark",
    "run_solver_expert_level_analysis",
]
