"""
Quickstart example for the mine probability solver.

This script demonstrates basic usage of the solver.
"""

from mineprob import (
    BoardModel,
    Minesweeper,
    SolverOptions,
    format_probability_report,
    run_solver_benchmark,
    solve,
    suggest_move,
)


def main():
    print("=" * 60)
    print("Mine Probability Solver - Quickstart Example")
    print("=" * 60)

    # Example 1: A hand-written position
    print("\n1. Probabilities for a small hand-written board...")
    print("-" * 60)

    board = BoardModel.from_rows(
        [
            "1.2.",
            "....",
            "1...",
        ],
        mines_count=3,
    )
    report = solve(board)
    print(format_probability_report(board, report))
    print(f"Provably safe: {sorted(report.safe)}")
    print(f"Provable mines: {sorted(report.mines)}")
    print(f"Suggested move: {suggest_move(report, board)}")

    # Example 2: A snapshot from a real game
    print("\n2. Intermediate game (16x16, 40 mines) after the first click...")
    print("-" * 60)

    game = Minesweeper(16, 16, 40, seed=1)
    game.reveal(8, 8)
    board = game.snapshot()
    report = solve(board, SolverOptions(enumeration_limit=40, skip_oversized_islands=True))
    print(format_probability_report(board, report))
    print(f"Islands: {report.island_count} (skipped: {len(report.skipped_islands)})")
    print(f"Unconstrained cell probability: {report.unconstrained_probability}")

    # Example 3: Play games by following the solver's suggestions
    print("\n3. Playing 20 Beginner games (9x9, 10 mines)...")
    print("-" * 60)

    stats = run_solver_benchmark(9, 9, 10, runs=20, seed=0)
    print(f"Win rate: {stats['win_rate']*100:.1f}%")
    print(f"Average moves per game: {stats['avg_moves']:.1f}")
    print(f"Average solve time: {stats['avg_solve_time']*1000:.2f} ms")
    print(f"Largest island seen: {stats['max_largest_island']:.0f} cells")

    print("\n" + "=" * 60)
    print("Done! See DESIGN.md for how the solver is put together.")
    print("=" * 60)


if __name__ == "__main__":
    main()
