"""Minimal Minesweeper game used to produce board snapshots for the solver."""

import random
from collections import deque
from typing import Deque, Dict, FrozenSet, List, Optional, Set, Tuple

from .board import BoardModel, Coord, get_neighborhoods


class Minesweeper:
    """
    Minesweeper game with first-click safety and seeded mine placement.

    The game owns the true board; ``snapshot()`` exposes only what a player
    sees, as a BoardModel ready for the solver.
    """

    def __init__(
        self,
        width: int,
        height: int,
        mines_count: int,
        *,
        safe_neighborhood: bool = True,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize a game.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mines_count: Total number of mines to place, must be >= 0.
            safe_neighborhood: If True, the first click and its neighbors are
                mine-free (the first reveal opens an area); otherwise only the
                first clicked cell is guaranteed safe.
            seed: Seed for the mine placement RNG.

        Raises:
            ValueError: If dimensions are invalid or too many mines are requested.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if mines_count < 0:
            raise ValueError("mines_count must be non-negative.")

        reserved = 9 if safe_neighborhood else 1
        if mines_count > width * height - reserved:
            raise ValueError("Cannot place enough safe cells for the first move.")

        self.width: int = width
        self.height: int = height
        self.mines_count: int = mines_count
        self.safe_neighborhood: bool = safe_neighborhood
        self._rng = random.Random(seed)

        self.mines: FrozenSet[Coord] = frozenset()
        self.counts: List[List[int]] = [[0] * width for _ in range(height)]
        self.revealed: List[List[bool]] = [[False] * width for _ in range(height)]
        self.flagged: Set[Coord] = set()
        self.first_move: bool = True
        self.game_over: bool = False
        self.unrevealed_count: int = width * height - mines_count

        self._neighborhoods: Dict[Coord, Tuple[Coord, ...]] = get_neighborhoods(width, height)

    def neighbors(self, x: int, y: int) -> Tuple[Coord, ...]:
        return self._neighborhoods[(x, y)]

    def place_mines(self, first_x: int, first_y: int) -> None:
        """Place all mines (once), keeping the first click's safe zone clear."""
        safe: Set[Coord] = {(first_x, first_y)}
        if self.safe_neighborhood:
            safe.update(self.neighbors(first_x, first_y))

        eligible = [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if (x, y) not in safe
        ]
        self.mines = frozenset(self._rng.sample(eligible, self.mines_count))

        for y in range(self.height):
            for x in range(self.width):
                self.counts[y][x] = sum(1 for n in self.neighbors(x, y) if n in self.mines)

    def flood_fill(self, x: int, y: int) -> List[Coord]:
        """Reveal the region opened from (x, y); zero cells propagate to their neighbors."""
        frontier: Deque[Coord] = deque([(x, y)])
        visited: Set[Coord] = {(x, y)}
        revealed_cells: List[Coord] = []

        while frontier:
            cx, cy = frontier.popleft()
            if self.revealed[cy][cx] or (cx, cy) in self.flagged:
                continue

            self.revealed[cy][cx] = True
            self.unrevealed_count -= 1
            revealed_cells.append((cx, cy))

            if self.counts[cy][cx] == 0:
                for n in self.neighbors(cx, cy):
                    if n in visited:
                        continue
                    visited.add(n)
                    frontier.append(n)

        return revealed_cells

    def reveal(self, x: int, y: int) -> int:
        """
        Reveal a cell.

        Returns:
            -1 if a mine was hit (loss), 1 if every safe cell is now revealed
            (win), 0 otherwise (including no-op reveals).

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        self._check_bounds(x, y)
        if self.game_over or self.revealed[y][x]:
            return 0

        if self.first_move:
            self.place_mines(x, y)
            self.first_move = False

        if (x, y) in self.mines:
            self.revealed[y][x] = True
            self.game_over = True
            return -1

        self.flood_fill(x, y)
        if self.unrevealed_count == 0:
            self.game_over = True
            return 1
        return 0

    def flag(self, x: int, y: int) -> None:
        """Toggle a flag on an unrevealed cell."""
        self._check_bounds(x, y)
        if self.revealed[y][x]:
            return
        self.flagged.symmetric_difference_update({(x, y)})

    def snapshot(self) -> BoardModel:
        """Return the player's view of the board as an immutable BoardModel."""
        grid: List[List[str]] = []
        for y in range(self.height):
            row: List[str] = []
            for x in range(self.width):
                if (x, y) in self.flagged:
                    row.append("F")
                elif self.revealed[y][x] and (x, y) not in self.mines:
                    row.append(str(self.counts[y][x]))
                else:
                    row.append(".")
            grid.append(row)
        return BoardModel(self.width, self.height, self.mines_count, grid)

    def _check_bounds(self, x: int, y: int) -> None:
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            raise ValueError("Cell coordinates are outside the board.")
