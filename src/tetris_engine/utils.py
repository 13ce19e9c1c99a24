"""Utility helpers for the gameplay engine."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from .board import EMPTY, PIECE_VALUES, WALL, Board, Grid
from .config import DEFAULT_CONFIG
from .tetromino import Piece

GRAVITY_STEP = DEFAULT_CONFIG.gravity_step
MIN_GRAVITY = DEFAULT_CONFIG.min_gravity

GHOST_VALUE = 9


def gravity_interval(
    base: float,
    level: int,
    *,
    step: float = GRAVITY_STEP,
    floor: float = MIN_GRAVITY,
) -> float:
    """Return the seconds-per-row fall interval for ``level``.

    Every level shaves ``step`` off ``base`` but the interval never drops
    below ``floor``.
    """

    if level < 0:
        raise ValueError("level must not be negative")
    return max(floor, base - step * level)


def render_grid(
    board: Board,
    active: Optional[Piece] = None,
    *,
    ghost_row: Optional[int] = None,
) -> Grid:
    """Return a copy of the board grid with the active piece overlaid.

    When ``ghost_row`` is given the piece's landing cells are marked with
    :data:`GHOST_VALUE` wherever they do not overlap the piece itself.  The
    board is never mutated.
    """

    grid = board.grid.copy()
    if active is None:
        return grid
    if ghost_row is not None:
        for r, c in active.cells():
            row, col = ghost_row + r, active.x + c
            if board.in_playfield(row, col) and grid[row, col] == EMPTY:
                grid[row, col] = GHOST_VALUE
    value = PIECE_VALUES[active.identity]
    for row, col in active.blocks():
        if 0 <= row < board.height and 0 <= col < board.width:
            grid[row, col] = value
    return grid


def grid_to_text(grid: Sequence[Sequence[int]]) -> str:
    """Return ``grid`` as text, one character per cell."""

    symbols = {EMPTY: ".", WALL: "#", GHOST_VALUE: ":"}
    lines: List[str] = []
    for row in np.asarray(grid):
        lines.append("".join(symbols.get(int(cell), "@") for cell in row))
    return "\n".join(lines)


__all__ = ["GHOST_VALUE", "gravity_interval", "grid_to_text", "render_grid"]
