"""Analysis and benchmarking tools for the probability solver."""

import time
from typing import Any, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .board import BoardModel, CellState
from .config import SolverOptions
from .constraints import build_constraint_graph
from .engine import Minesweeper
from .errors import SolveError
from .islands import partition_islands
from .report import Action, ProbabilityReport, suggest_move
from .solver import ProbabilitySolver


def format_probability_report(
    board: BoardModel, report: ProbabilityReport, *, show_coords: bool = True
) -> str:
    """
    Format a report as a text grid aligned with the board.

    Revealed cells show their count, flagged cells ``F``, provable mines
    ``*``, provably safe cells ``s`` and other unknown cells their mine
    probability in percent. Cells missing from the report (skipped islands)
    show ``?``.
    """

    def cell_str(x: int, y: int) -> str:
        cell = board.cell(x, y)
        if cell.state is CellState.REVEALED:
            return str(cell.count)
        if cell.state is CellState.FLAGGED:
            return "F"
        if (x, y) in report.mines:
            return "*"
        if (x, y) in report.safe:
            return "s"
        if (x, y) not in report:
            return "?"
        return f"{round(report[(x, y)] * 100):d}"

    lines: List[str] = []
    if show_coords:
        lines.append("   " + " ".join(f"{x:3d}" for x in range(board.width)))
        lines.append("   " + "-" * (4 * board.width - 1))

    for y in range(board.height):
        row = " ".join(f"{cell_str(x, y):>3}" for x in range(board.width))
        lines.append(f"{y:2d} |" + row if show_coords else row)

    return "\n".join(lines)


def probability_grid(board: BoardModel, report: ProbabilityReport) -> np.ndarray:
    """
    Return a ``(height, width)`` float array of mine probabilities.

    Flagged cells are 1.0; revealed cells and cells absent from the report
    are NaN.
    """
    grid = np.full((board.height, board.width), np.nan)
    for (x, y), p in report.probabilities.items():
        grid[y, x] = p
    for x, y in report.flagged:
        grid[y, x] = 1.0
    return grid


def plot_probability_heatmap(
    board: BoardModel, report: ProbabilityReport, ax: Optional[Any] = None
) -> Any:
    """
    Draw the report as a heatmap over the board, annotating revealed counts.

    Returns:
        The matplotlib Axes drawn on.
    """
    if ax is None:
        _, ax = plt.subplots()

    grid = probability_grid(board, report)
    image = ax.imshow(grid, cmap="RdYlGn_r", vmin=0.0, vmax=1.0)
    for cell in board.revealed_cells():
        ax.text(cell.x, cell.y, str(cell.count), ha="center", va="center", fontsize=8)
    ax.set_title(f"Mine probabilities ({board.remaining_mines} mines left)")
    ax.figure.colorbar(image, ax=ax)
    return ax


def _largest_island(board: BoardModel) -> int:
    graph = build_constraint_graph(board)
    partition = partition_islands(graph, board.unknown_cells())
    return max((len(i) for i in partition.islands), default=0)


def run_solver_single_game(
    width: int,
    height: int,
    mines_count: int,
    *,
    options: Optional[SolverOptions] = None,
    seed: Optional[int] = None,
    max_moves: int = 10_000,
) -> Dict[str, Any]:
    """
    Play one game by following ``suggest_move`` and record solver statistics.

    Returns:
        Dict with "status" (-1 loss, 1 win, 0 unfinished), "moves",
        "solve_times" (seconds per solve), "largest_islands" and "errors"
        (names of SolveError subclasses raised, which end the game).
    """
    game = Minesweeper(width, height, mines_count, seed=seed)
    solver = ProbabilitySolver(options)

    status = game.reveal(width // 2, height // 2)
    moves = 1
    solve_times: List[float] = []
    largest_islands: List[int] = []
    errors: List[str] = []

    while status == 0 and moves < max_moves:
        board = game.snapshot()
        largest_islands.append(_largest_island(board))

        started = time.perf_counter()
        try:
            report = solver.solve(board)
        except SolveError as exc:
            errors.append(type(exc).__name__)
            break
        solve_times.append(time.perf_counter() - started)

        event = suggest_move(report, board)
        if event is None:
            break
        if event.action is Action.FLAG:
            game.flag(*event.pos)
        else:
            status = game.reveal(*event.pos)
        moves += 1

    return {
        "status": status,
        "moves": moves,
        "solve_times": solve_times,
        "largest_islands": largest_islands,
        "errors": errors,
    }


def run_solver_benchmark(
    width: int,
    height: int,
    mines_count: int,
    runs: int,
    *,
    options: Optional[SolverOptions] = None,
    seed: Optional[int] = None,
) -> Dict[str, float]:
    """
    Play ``runs`` independent games and summarize solver behavior.

    Returns:
        Dict with win_rate, avg_moves, avg_solve_time, p95_solve_time,
        max_solve_time, avg_largest_island, max_largest_island and error_rate.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    wins = 0
    errored = 0
    moves: List[int] = []
    times: List[float] = []
    islands: List[int] = []

    for run in range(runs):
        game_seed = None if seed is None else seed + run
        result = run_solver_single_game(
            width, height, mines_count, options=options, seed=game_seed
        )
        wins += result["status"] == 1
        errored += bool(result["errors"])
        moves.append(result["moves"])
        times.extend(result["solve_times"])
        islands.extend(result["largest_islands"])

    times_arr = np.asarray(times) if times else np.zeros(1)
    islands_arr = np.asarray(islands) if islands else np.zeros(1)

    return {
        "win_rate": wins / runs,
        "error_rate": errored / runs,
        "avg_moves": float(np.mean(moves)),
        "avg_solve_time": float(np.mean(times_arr)),
        "p95_solve_time": float(np.percentile(times_arr, 95)),
        "max_solve_time": float(np.max(times_arr)),
        "avg_largest_island": float(np.mean(islands_arr)),
        "max_largest_island": float(np.max(islands_arr)),
    }


def run_solver_expert_level_analysis(
    runs: int,
    *,
    options: Optional[SolverOptions] = None,
    seed: Optional[int] = None,
    show: bool = True,
) -> Dict[str, Dict[str, float]]:
    """
    Benchmark the standard difficulty levels and plot the summaries.

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 30x16, 99 mines
    """
    levels: Dict[str, Tuple[int, int, int]] = {
        "beginner": (9, 9, 10),
        "intermediate": (16, 16, 40),
        "expert": (30, 16, 99),
    }

    results: Dict[str, Dict[str, float]] = {}
    for level, (w, h, m) in levels.items():
        results[level] = run_solver_benchmark(w, h, m, runs, options=options, seed=seed)

    level_names = list(levels)
    x = np.arange(len(level_names))
    bar_w = 0.35

    fig, (ax_time, ax_win) = plt.subplots(1, 2, figsize=(10, 4))

    ax_time.bar(
        x - bar_w / 2,
        [results[n]["avg_solve_time"] * 1000 for n in level_names],
        width=bar_w,
        label="mean",
    )
    ax_time.bar(
        x + bar_w / 2,
        [results[n]["p95_solve_time"] * 1000 for n in level_names],
        width=bar_w,
        label="p95",
    )
    ax_time.set_xticks(x)
    ax_time.set_xticklabels(level_names)
    ax_time.set_ylabel("Solve time (ms)")
    ax_time.set_title("Solve time per snapshot")
    ax_time.legend()

    ax_win.bar(x, [results[n]["win_rate"] for n in level_names])
    ax_win.set_xticks(x)
    ax_win.set_xticklabels(level_names)
    ax_win.set_ylim(0.0, 1.0)
    ax_win.set_ylabel("Win rate")
    ax_win.set_title("Win rate by difficulty level")

    fig.tight_layout()
    if show:
        plt.show()

    return results
