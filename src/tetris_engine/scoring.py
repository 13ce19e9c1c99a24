"""Line-clear scoring: combos, back-to-back, T-spins and perfect clears."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Tuple

from .board import Board
from .config import DEFAULT_CONFIG
from .tetromino import Piece, TetrominoType

LOGGER = logging.getLogger(__name__)

LINE_SCORES = {1: 100, 2: 300, 3: 500, 4: 800}
T_SPIN_SCORES = {1: 800, 2: 1200, 3: 1600}
PERFECT_CLEAR_BONUS = 3000
COMBO_STEP = 0.5
BACK_TO_BACK_MULTIPLIER = 1.5
LINES_PER_LEVEL = DEFAULT_CONFIG.lines_per_level

_CLEAR_NAMES = {1: "SINGLE", 2: "DOUBLE", 3: "TRIPLE", 4: "TETRIS"}

_DIAGONALS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def is_t_spin(board: Board, piece: Piece) -> bool:
    """Return ``True`` if locking ``piece`` now counts as a T-spin.

    The piece must be a ``T`` whose last action was a rotation, and at least
    three of the four cells diagonal to its pivot must be blocks or walls.
    """

    if piece.identity is not TetrominoType.T or not piece.last_action_rotate:
        return False
    row, col = piece.pivot()
    corners = sum(board.is_occupied(row + dr, col + dc) for dr, dc in _DIAGONALS)
    return corners >= 3


def base_score(lines: int, t_spin: bool = False) -> int:
    """Return the table value for clearing ``lines`` rows.

    A T-spin clearing four rows has no entry of its own and scores as a
    T-spin triple.
    """

    if lines <= 0:
        return 0
    if t_spin:
        return T_SPIN_SCORES[min(lines, 3)]
    return LINE_SCORES[min(lines, 4)]


@dataclass(frozen=True)
class ClearEvent:
    """Outcome of one piece lock."""

    lines: int
    rows: Tuple[int, ...] = ()
    t_spin: bool = False
    perfect_clear: bool = False
    back_to_back: bool = False
    combo: int = 0
    score_delta: int = 0
    level_up: bool = False

    @property
    def label(self) -> str:
        """Short description for display, empty when nothing notable happened."""

        parts = []
        if self.t_spin:
            name = _CLEAR_NAMES.get(min(self.lines, 3))
            parts.append("T-SPIN" if name is None else f"T-SPIN {name}")
        elif self.lines == 4:
            parts.append("TETRIS")
        if self.back_to_back:
            parts.append("B2B")
        if self.perfect_clear:
            parts.append("PERFECT CLEAR")
        return " ".join(parts)


@dataclass
class ScoreState:
    score: int = 0
    lines: int = 0
    level: int = 0
    combo: int = 0
    back_to_back: bool = False
    tetris_count: int = 0
    t_spin_count: int = 0


@dataclass
class ScoringEngine:
    """Apply the scoring rules to lock events."""

    state: ScoreState = field(default_factory=ScoreState)
    lines_per_level: int = LINES_PER_LEVEL

    def reset(self) -> None:
        self.state = ScoreState()

    def add_drop_points(self, rows: int, per_row: int) -> int:
        """Award ``per_row`` points for each of ``rows`` dropped rows."""

        if rows <= 0:
            return 0
        points = rows * per_row
        self.state.score += points
        return points

    def apply_lock(
        self,
        lines: int,
        *,
        t_spin: bool = False,
        perfect_clear: bool = False,
        rows: Tuple[int, ...] = (),
    ) -> ClearEvent:
        """Update the score state for a lock that cleared ``lines`` rows."""

        if not 0 <= lines <= 4:
            raise ValueError(f"Invalid number of cleared lines: {lines}")
        state = self.state
        if lines == 0:
            state.combo = 0
            # Only a T-spin keeps the back-to-back chain alive without a clear.
            if not t_spin:
                state.back_to_back = False
            return ClearEvent(lines=0, t_spin=t_spin)

        if t_spin:
            state.t_spin_count += 1

        difficult = lines == 4 or t_spin
        combo_multiplier = 1.0 + COMBO_STEP * state.combo
        b2b_applied = difficult and state.back_to_back
        b2b_multiplier = BACK_TO_BACK_MULTIPLIER if b2b_applied else 1.0

        delta = math.floor(base_score(lines, t_spin) * combo_multiplier * b2b_multiplier)
        if perfect_clear:
            delta += PERFECT_CLEAR_BONUS

        combo_before = state.combo
        state.score += delta
        state.combo += 1
        state.back_to_back = difficult
        if lines == 4 and not t_spin:
            state.tetris_count += 1

        state.lines += lines
        level = state.lines // self.lines_per_level
        level_up = level > state.level
        state.level = level

        event = ClearEvent(
            lines=lines,
            rows=tuple(rows),
            t_spin=t_spin,
            perfect_clear=perfect_clear,
            back_to_back=b2b_applied,
            combo=combo_before,
            score_delta=delta,
            level_up=level_up,
        )
        LOGGER.info(
            "Cleared %d line(s)%s for %d points (score %d)",
            lines,
            f" [{event.label}]" if event.label else "",
            delta,
            state.score,
        )
        if level_up:
            LOGGER.info("Level up: %d", level)
        return event


__all__ = [
    "ClearEvent",
    "LINE_SCORES",
    "PERFECT_CLEAR_BONUS",
    "ScoreState",
    "ScoringEngine",
    "T_SPIN_SCORES",
    "base_score",
    "is_t_spin",
]
