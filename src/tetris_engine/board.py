"""Board representation for the playfield.

The grid is ``HEIGHT`` rows by ``WIDTH`` columns.  Column ``0``, column
``WIDTH - 1`` and row ``HEIGHT - 1`` are permanent walls; everything inside is
the playfield.  Row ``0`` is the spawn buffer: pieces may occupy it but it is
never scanned for completed lines.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np
from numpy.typing import NDArray

from .tetromino import Cell, Piece, TetrominoType


# Dimensions of the bordered board.
WIDTH = 12
HEIGHT = 22

Grid = NDArray[np.uint8]

EMPTY = 0
WALL = 8

# Mapping from ``TetrominoType`` to the integer stored in the grid.
PIECE_VALUES = {t: i + 1 for i, t in enumerate(TetrominoType)}
VALUE_PIECES = {v: t for t, v in PIECE_VALUES.items()}

# First row scanned by ``clear_completed_rows``.
FIRST_CLEAR_ROW = 1


def create_empty_grid() -> Grid:
    """Return a new grid with walls on the sides and bottom."""

    grid = np.zeros((HEIGHT, WIDTH), dtype=np.uint8)
    grid[:, 0] = WALL
    grid[:, WIDTH - 1] = WALL
    grid[HEIGHT - 1, :] = WALL
    return grid


def _empty_rows(count: int) -> Grid:
    rows = np.zeros((count, WIDTH), dtype=np.uint8)
    rows[:, 0] = WALL
    rows[:, WIDTH - 1] = WALL
    return rows


class Board:
    """Grid of cells holding the border and the locked stack."""

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(self) -> None:
        self.grid: Grid = create_empty_grid()

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    @staticmethod
    def in_playfield(row: int, col: int) -> bool:
        """Return ``True`` for coordinates inside the walls."""

        return 0 <= row < HEIGHT - 1 and 1 <= col < WIDTH - 1

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the value at ``(row, col)``.

        Walls cannot be overwritten.

        Raises:
            IndexError: If the coordinates are outside the playfield.
        """
        if not self.in_playfield(row, col):
            raise IndexError("Cell outside the playfield")
        self.grid[row, col] = np.uint8(value)

    def is_occupied(self, row: int, col: int) -> bool:
        """Return ``True`` if ``(row, col)`` holds a block or a wall.

        Coordinates outside the grid are treated as occupied.
        """

        if 0 <= row < self.height and 0 <= col < self.width:
            return bool(self.grid[row, col] != EMPTY)
        return True

    def interior(self) -> Grid:
        """Return a view of the playfield without the walls."""

        return self.grid[: HEIGHT - 1, 1 : WIDTH - 1]

    def copy_grid(self) -> Grid:
        """Return a read-only copy of the full grid."""

        grid = self.grid.copy()
        grid.setflags(write=False)
        return grid

    # ------------------------------------------------------------------
    # Collision
    # ------------------------------------------------------------------
    def fits(self, cells: Iterable[Cell], x: int, y: int) -> bool:
        """Return ``True`` if box ``cells`` placed at ``(x, y)`` are all free."""

        for r, c in cells:
            row = y + r
            col = x + c
            if not self.in_playfield(row, col):
                return False
            if self.grid[row, col] != EMPTY:
                return False
        return True

    def can_place(self, piece: Piece, dx: int = 0, dy: int = 0) -> bool:
        """Return ``True`` if ``piece`` offset by ``(dx, dy)`` fits the board."""

        return self.fits(piece.cells(), piece.x + dx, piece.y + dy)

    def ghost_row(self, piece: Piece) -> int:
        """Return the row ``piece`` would land on if hard-dropped now."""

        dy = 0
        while self.can_place(piece, 0, dy + 1):
            dy += 1
        return piece.y + dy

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def commit(self, piece: Piece) -> None:
        """Lock the piece's blocks into the board grid.

        Raises:
            ValueError: If the piece does not fit where it is.  Callers must
                check :meth:`can_place` first.
        """

        if not self.can_place(piece):
            raise ValueError("Cannot commit a piece to an occupied position")
        value = np.uint8(PIECE_VALUES[piece.identity])
        for row, col in piece.blocks():
            self.grid[row, col] = value

    def full_rows(self) -> List[int]:
        """Return indices of completed rows, bottom-most first."""

        scanned = self.grid[FIRST_CLEAR_ROW : HEIGHT - 1, 1 : WIDTH - 1]
        full = np.all(scanned != EMPTY, axis=1)
        rows = (np.flatnonzero(full) + FIRST_CLEAR_ROW).tolist()
        return sorted(rows, reverse=True)

    def clear_completed_rows(self) -> Tuple[int, List[int]]:
        """Remove completed rows and shift the stack above them down.

        Returns the number of cleared rows and their original indices.
        """

        rows = self.full_rows()
        if not rows:
            return 0, []
        region = self.grid[FIRST_CLEAR_ROW : HEIGHT - 1]
        keep = np.ones(len(region), dtype=bool)
        keep[[row - FIRST_CLEAR_ROW for row in rows]] = False
        self.grid[FIRST_CLEAR_ROW : HEIGHT - 1] = np.vstack(
            (_empty_rows(len(rows)), region[keep])
        )
        return len(rows), rows

    def is_clear(self) -> bool:
        """Return ``True`` when no block is left in the clearable rows.

        The spawn buffer row is ignored since it is never cleared.
        """

        scanned = self.grid[FIRST_CLEAR_ROW : HEIGHT - 1, 1 : WIDTH - 1]
        return bool(np.all(scanned == EMPTY))


__all__ = [
    "Board",
    "EMPTY",
    "WALL",
    "PIECE_VALUES",
    "VALUE_PIECES",
    "WIDTH",
    "HEIGHT",
    "create_empty_grid",
]
