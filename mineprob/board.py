"""Immutable snapshot of a partially revealed Minesweeper board."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import MalformedBoard

Coord = Tuple[int, int]
Token = Union[str, int, None]

# Module-level cache: (width, height) -> {(x,y): ((nx,ny), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Dict[Coord, Tuple[Coord, ...]]] = {}


def get_neighborhoods(width: int, height: int) -> Dict[Coord, Tuple[Coord, ...]]:
    """
    Return cached 8-connected neighbor coordinates for every cell of a grid.

    Edge and corner cells get fewer than 8 neighbors. The returned mapping is
    shared between callers and must not be mutated.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    key = (width, height)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Coord, Tuple[Coord, ...]] = {}
    for y in range(height):
        for x in range(width):
            neighborhoods[(x, y)] = tuple(
                (x + dx, y + dy)
                for dy in (-1, 0, 1)
                for dx in (-1, 0, 1)
                if (dx or dy) and 0 <= x + dx < width and 0 <= y + dy < height
            )

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


class CellState(Enum):
    REVEALED = "revealed"
    UNKNOWN = "unknown"
    FLAGGED = "flagged"


@dataclass(frozen=True)
class Cell:
    """One board position. ``count`` is set only for revealed cells."""

    x: int
    y: int
    state: CellState
    count: Optional[int] = None

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)


UNKNOWN_TOKENS = (".", "?", " ")
FLAG_TOKENS = ("F", "f", "M")


def _parse_token(token: Token, x: int, y: int) -> Cell:
    if token is None:
        return Cell(x, y, CellState.UNKNOWN)
    if isinstance(token, bool):
        raise MalformedBoard(f"Invalid cell token {token!r} at ({x}, {y}).")
    if isinstance(token, int):
        count = token
    elif token in UNKNOWN_TOKENS:
        return Cell(x, y, CellState.UNKNOWN)
    elif token in FLAG_TOKENS:
        return Cell(x, y, CellState.FLAGGED)
    elif isinstance(token, str) and len(token) == 1 and token in "0123456789":
        count = int(token)
    else:
        raise MalformedBoard(f"Invalid cell token {token!r} at ({x}, {y}).")

    if not 0 <= count <= 8:
        raise MalformedBoard(f"Revealed count {count} at ({x}, {y}) is out of range 0..8.")
    return Cell(x, y, CellState.REVEALED, count)


class BoardModel:
    """
    Read-only width x height grid of cells plus the game's total mine count.

    The grid is indexed ``grid[y][x]``; tokens are ``"."``/``None`` for
    unknown, ``"F"`` for flagged and ``"0"``-``"8"`` (or ints) for revealed
    counts. Boards are never mutated: ``with_cell`` returns a new snapshot.
    """

    def __init__(
        self,
        width: int,
        height: int,
        mines_count: int,
        grid: Sequence[Sequence[Token]],
    ) -> None:
        if width <= 0 or height <= 0:
            raise MalformedBoard("Width and height must be positive.")
        if mines_count < 0:
            raise MalformedBoard("mines_count must be non-negative.")
        if mines_count > width * height:
            raise MalformedBoard("mines_count exceeds the number of cells.")
        if len(grid) != height:
            raise MalformedBoard(f"Expected {height} rows, got {len(grid)}.")

        rows: List[Tuple[Cell, ...]] = []
        for y, row in enumerate(grid):
            if len(row) != width:
                raise MalformedBoard(
                    f"Row {y} has {len(row)} cells; expected {width}."
                )
            rows.append(tuple(_parse_token(tok, x, y) for x, tok in enumerate(row)))

        self.width: int = width
        self.height: int = height
        self.mines_count: int = mines_count
        self._cells: Tuple[Tuple[Cell, ...], ...] = tuple(rows)
        self._neighborhoods = get_neighborhoods(width, height)

    @classmethod
    def from_rows(cls, rows: Sequence[str], mines_count: int) -> "BoardModel":
        """Build a board from one string per row, e.g. ``["1F..", "12.."]``."""
        if not rows:
            raise MalformedBoard("A board needs at least one row.")
        return cls(len(rows[0]), len(rows), mines_count, [list(r) for r in rows])

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def cell(self, x: int, y: int) -> Cell:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Cell ({x}, {y}) is outside the board.")
        return self._cells[y][x]

    def neighbors(self, x: int, y: int) -> Tuple[Coord, ...]:
        """Return the coordinates of the (up to 8) cells adjacent to (x, y)."""
        return self._neighborhoods[(x, y)]

    def cells(self) -> Iterable[Cell]:
        for row in self._cells:
            yield from row

    def _positions(self, state: CellState) -> List[Coord]:
        return [c.pos for c in self.cells() if c.state is state]

    def unknown_cells(self) -> List[Coord]:
        return self._positions(CellState.UNKNOWN)

    def flagged_cells(self) -> List[Coord]:
        return self._positions(CellState.FLAGGED)

    def revealed_cells(self) -> List[Cell]:
        return [c for c in self.cells() if c.state is CellState.REVEALED]

    @property
    def remaining_mines(self) -> int:
        """Total mines minus flagged cells: the global budget for unknown cells."""
        return self.mines_count - len(self.flagged_cells())

    # -------------------------------------------------------------------------
    # Derivation / display
    # -------------------------------------------------------------------------

    def token(self, x: int, y: int) -> str:
        c = self.cell(x, y)
        if c.state is CellState.UNKNOWN:
            return "."
        if c.state is CellState.FLAGGED:
            return "F"
        return str(c.count)

    def with_cell(self, x: int, y: int, token: Token) -> "BoardModel":
        """Return a new board identical to this one except for cell (x, y)."""
        self.cell(x, y)
        grid: List[List[Token]] = [
            [self.token(cx, cy) for cx in range(self.width)]
            for cy in range(self.height)
        ]
        grid[y][x] = token
        return BoardModel(self.width, self.height, self.mines_count, grid)

    def to_rows(self) -> List[str]:
        return [
            "".join(self.token(x, y) for x in range(self.width))
            for y in range(self.height)
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoardModel):
            return NotImplemented
        return (
            self.mines_count == other.mines_count
            and self._cells == other._cells
        )

    def __hash__(self) -> int:
        return hash((self.mines_count, self._cells))

    def __repr__(self) -> str:
        return (
            f"BoardModel({self.width}x{self.height}, mines={self.mines_count}, "
            f"rows={self.to_rows()!r})"
        )
