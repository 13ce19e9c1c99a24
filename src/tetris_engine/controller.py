"""Gravity and lock-delay state machine.

A piece is either *falling* (gravity pulls it down one row each time the
accumulator passes the gravity interval) or *grounded* (it rests on the stack
and the lock-delay timer runs).  Moving or rotating a grounded piece restarts
the timer, up to ``max_resets`` times.  The piece locks when the timer passes
``lock_delay`` or the resets run out.
"""

from __future__ import annotations

from enum import Enum

from .board import Board
from .config import DEFAULT_CONFIG
from .tetromino import Piece

LOCK_DELAY = DEFAULT_CONFIG.lock_delay
MAX_LOCK_RESETS = DEFAULT_CONFIG.max_lock_resets


class LockState(str, Enum):
    FALLING = "falling"
    GROUNDED = "grounded"
    LOCKED = "locked"


class LockController:
    """Timers deciding when the active piece falls and when it locks."""

    def __init__(
        self,
        gravity_interval: float,
        *,
        lock_delay: float = LOCK_DELAY,
        max_resets: int = MAX_LOCK_RESETS,
    ) -> None:
        self.gravity_interval = gravity_interval
        self.lock_delay = lock_delay
        self.max_resets = max_resets
        self.state = LockState.FALLING
        self.gravity_accum = 0.0
        self.lock_timer = 0.0
        self.resets = 0

    @property
    def grounded(self) -> bool:
        return self.state is LockState.GROUNDED

    def reset(self) -> None:
        """Start over for a freshly spawned piece.

        The gravity interval is left alone; it follows the level.
        """

        self.state = LockState.FALLING
        self.gravity_accum = 0.0
        self.lock_timer = 0.0
        self.resets = 0

    def register_move(self) -> None:
        """Note a successful move or rotation of the active piece."""

        if self.state is not LockState.GROUNDED:
            return
        if self.resets < self.max_resets:
            self.lock_timer = 0.0
            self.resets += 1

    def force_lock(self) -> None:
        self.state = LockState.LOCKED

    def _enter_falling(self) -> None:
        self.state = LockState.FALLING
        self.lock_timer = 0.0
        self.resets = 0

    def update(self, dt: float, board: Board, piece: Piece) -> bool:
        """Advance the timers by ``dt`` seconds.

        Moves ``piece`` down when gravity fires.  Returns ``True`` when the
        piece must lock this tick.
        """

        if self.state is LockState.LOCKED:
            return True

        if board.can_place(piece, 0, 1):
            if self.state is LockState.GROUNDED:
                self._enter_falling()
            self.gravity_accum += dt
            if self.gravity_accum > self.gravity_interval:
                piece.move(0, 1)
                self.gravity_accum = 0.0
            return False

        if self.state is LockState.FALLING:
            self.state = LockState.GROUNDED
            self.lock_timer = 0.0
            self.resets = 0
        else:
            self.lock_timer += dt

        if self.lock_timer > self.lock_delay or self.resets >= self.max_resets:
            self.state = LockState.LOCKED
            return True
        return False


__all__ = ["LockController", "LockState", "LOCK_DELAY", "MAX_LOCK_RESETS"]
