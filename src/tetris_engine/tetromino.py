"""Tetromino definitions and piece behaviour.

Every piece lives in a 4x4 box.  The geometry of each rotation state is held
in static tables indexed by ``(identity, rotation)``; pieces only carry their
identity tag, the current state index and their board offset.

* ``I``, ``S``, ``Z``, ``J`` and ``L`` derive their four states from the spawn
  template by repeatedly applying the clockwise transpose-and-reverse
  ``(row, col) -> (col, 3 - row)``.
* ``O`` has a single state, so rotating it never does anything.
* ``T`` uses an explicit Up/Right/Down/Left table in which every state keeps
  the pivot at ``(2, 1)``.  T-spin detection relies on that pivot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Tuple

import numpy as np
from numpy.typing import NDArray

from .config import DEFAULT_CONFIG

if TYPE_CHECKING:  # pragma: no cover - imported for annotations only
    from .board import Board

Cell = Tuple[int, int]  # (row, col) inside the 4x4 box
RotationState = Tuple[Cell, ...]

BOX_SIZE = 4

# Horizontal offsets tried, in order, when a rotation collides.
KICKS: Tuple[int, ...] = (0, -1, 1, -2, 2)

SPAWN_X = DEFAULT_CONFIG.spawn_x
SPAWN_Y = DEFAULT_CONFIG.spawn_y


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    O = "O"
    T = "T"
    S = "S"
    Z = "Z"
    J = "J"
    L = "L"


def _normalise(cells) -> RotationState:
    return tuple(sorted(cells))


def _rotate(state: RotationState) -> RotationState:
    """Return ``state`` rotated 90 degrees clockwise inside the 4x4 box."""

    return _normalise((c, BOX_SIZE - 1 - r) for r, c in state)


def _generate_rotations(state: RotationState) -> List[RotationState]:
    """Generate the four rotation states for a piece starting from ``state``."""

    rotations = [state]
    for _ in range(3):
        state = _rotate(state)
        rotations.append(state)
    return rotations


# Spawn orientation of each tetromino inside its 4x4 box.
_BASE_SHAPES: Dict[TetrominoType, RotationState] = {
    TetrominoType.I: _normalise([(0, 1), (1, 1), (2, 1), (3, 1)]),
    TetrominoType.O: _normalise([(1, 1), (1, 2), (2, 1), (2, 2)]),
    TetrominoType.T: _normalise([(1, 1), (2, 0), (2, 1), (2, 2)]),
    TetrominoType.S: _normalise([(1, 1), (1, 2), (2, 0), (2, 1)]),
    TetrominoType.Z: _normalise([(1, 0), (1, 1), (2, 1), (2, 2)]),
    TetrominoType.J: _normalise([(1, 0), (2, 0), (2, 1), (2, 2)]),
    TetrominoType.L: _normalise([(1, 2), (2, 0), (2, 1), (2, 2)]),
}

T_PIVOT: Cell = (2, 1)

# Up, Right, Down, Left.  Each state is the pivot plus three arms.
_T_STATES: List[RotationState] = [
    _normalise([(1, 1), (2, 0), (2, 1), (2, 2)]),
    _normalise([(1, 1), (2, 1), (2, 2), (3, 1)]),
    _normalise([(2, 0), (2, 1), (2, 2), (3, 1)]),
    _normalise([(1, 1), (2, 0), (2, 1), (3, 1)]),
]


def _build_tables() -> Dict[TetrominoType, List[RotationState]]:
    tables: Dict[TetrominoType, List[RotationState]] = {}
    for shape, base in _BASE_SHAPES.items():
        if shape is TetrominoType.O:
            tables[shape] = [base]
        elif shape is TetrominoType.T:
            tables[shape] = list(_T_STATES)
        else:
            tables[shape] = _generate_rotations(base)
    return tables


TETROMINO_SHAPES: Dict[TetrominoType, List[RotationState]] = _build_tables()


def shape_blocks(shape: TetrominoType, rotation: int) -> RotationState:
    """Return the box cells for ``shape`` at ``rotation``.

    Parameters
    ----------
    shape:
        The :class:`TetrominoType` to query.
    rotation:
        Index of the desired rotation state.  Values are wrapped so any integer
        is accepted.
    """

    states = TETROMINO_SHAPES[shape]
    return states[rotation % len(states)]


def shape_mask(shape: TetrominoType, rotation: int = 0) -> NDArray[np.bool_]:
    """Return the 4x4 occupancy mask of ``shape`` at ``rotation``."""

    mask = np.zeros((BOX_SIZE, BOX_SIZE), dtype=bool)
    for r, c in shape_blocks(shape, rotation):
        mask[r, c] = True
    return mask


@dataclass
class Piece:
    """Active falling piece in the game."""

    identity: TetrominoType
    rotation: int = 0
    x: int = SPAWN_X
    y: int = SPAWN_Y
    last_action_rotate: bool = False

    def cells(self) -> RotationState:
        """Return the occupied cells of the current state, box-relative."""

        return shape_blocks(self.identity, self.rotation)

    def blocks(self) -> List[Cell]:
        """Return the board coordinates ``(row, col)`` of this piece."""

        return [(self.y + r, self.x + c) for r, c in self.cells()]

    def mask(self) -> NDArray[np.bool_]:
        return shape_mask(self.identity, self.rotation)

    def pivot(self) -> Cell:
        """Board coordinates of the T pivot.

        Raises:
            ValueError: If the piece is not a ``T``.
        """

        if self.identity is not TetrominoType.T:
            raise ValueError("Only the T piece has a tracked pivot")
        return (self.y + T_PIVOT[0], self.x + T_PIVOT[1])

    def move(self, dx: int, dy: int) -> None:
        """Translate the piece without any collision check.

        Any translation means the last action was no longer a rotation.
        """

        self.x += dx
        self.y += dy
        self.last_action_rotate = False

    def rotate(self, board: "Board") -> bool:
        """Rotate clockwise on ``board`` using the wall-kick search.

        The offsets in :data:`KICKS` are tried in order and the first one
        where the rotated state fits is applied.  Returns ``False`` and leaves
        the piece untouched when every candidate collides (or for ``O``).
        """

        states = TETROMINO_SHAPES[self.identity]
        if len(states) == 1:
            return False
        rotation = (self.rotation + 1) % len(states)
        cells = states[rotation]
        for kick in KICKS:
            if board.fits(cells, self.x + kick, self.y):
                self.rotation = rotation
                self.x += kick
                self.last_action_rotate = True
                return True
        return False


def spawn(identity: TetrominoType, x: int = SPAWN_X, y: int = SPAWN_Y) -> Piece:
    """Return ``identity`` in its default orientation at the spawn offset.

    Whether the spawn position is free is for the caller to check.
    """

    return Piece(TetrominoType(identity), x=x, y=y)


__all__ = [
    "KICKS",
    "Piece",
    "T_PIVOT",
    "TETROMINO_SHAPES",
    "TetrominoType",
    "shape_blocks",
    "shape_mask",
    "spawn",
]
