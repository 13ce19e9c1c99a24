"""Delayed auto-shift / auto-repeat for held intents.

A fresh press produces one immediate step (emitted by the caller).  Once the
intent has been held for ``delay`` seconds the first repeat fires, and from
then on one more step every ``rate`` seconds.  A ``rate`` of zero repeats
without limit, i.e. the piece slides as far as it can.
"""

from __future__ import annotations

import sys
from typing import List, Tuple

from .config import DEFAULT_CONFIG

DAS_DELAY = DEFAULT_CONFIG.das_delay
ARR_RATE = DEFAULT_CONFIG.arr_rate

UNLIMITED = sys.maxsize

LEFT = -1
RIGHT = 1


class AutoRepeat:
    """Repeat timer for a single held intent."""

    def __init__(self, delay: float = DAS_DELAY, rate: float = ARR_RATE) -> None:
        self.delay = delay
        self.rate = rate
        self.held = False
        self.held_time = 0.0
        self.repeat_accum = 0.0
        self.charged = False

    def _restart(self) -> None:
        self.held_time = 0.0
        self.repeat_accum = 0.0
        self.charged = False

    def press(self) -> bool:
        """Start holding.  Returns ``True`` if this is a fresh press."""

        if self.held:
            return False
        self.held = True
        self._restart()
        return True

    def release(self) -> None:
        self.held = False
        self._restart()

    def update(self, dt: float) -> int:
        """Advance by ``dt`` and return how many steps to emit."""

        if not self.held:
            return 0
        if not self.charged:
            self.held_time += dt
            if self.held_time < self.delay:
                return 0
            self.charged = True
            self.repeat_accum = self.held_time - self.delay
            if self.rate <= 0:
                return UNLIMITED
            steps = 1 + int(self.repeat_accum // self.rate)
            self.repeat_accum -= (steps - 1) * self.rate
            return steps
        if self.rate <= 0:
            return UNLIMITED
        self.repeat_accum += dt
        steps = int(self.repeat_accum // self.rate)
        self.repeat_accum -= steps * self.rate
        return steps


class ShiftRepeat:
    """Left/right auto-repeat where the latest held direction wins."""

    def __init__(self, delay: float = DAS_DELAY, rate: float = ARR_RATE) -> None:
        self._timer = AutoRepeat(delay, rate)
        self._held: List[int] = []

    @property
    def direction(self) -> int:
        """Currently active direction, ``0`` when nothing is held."""

        return self._held[-1] if self._held else 0

    def press(self, direction: int) -> bool:
        """Hold ``direction``.  Returns ``True`` if it became the active one."""

        if direction not in (LEFT, RIGHT):
            raise ValueError(f"Invalid direction: {direction}")
        if direction in self._held:
            return False
        self._held.append(direction)
        self._timer.release()
        self._timer.press()
        return True

    def release(self, direction: int) -> None:
        if direction not in self._held:
            return
        was_active = direction == self.direction
        self._held.remove(direction)
        if not was_active:
            return
        self._timer.release()
        if self._held:
            # The other direction takes over and charges from scratch.
            self._timer.press()

    def release_all(self) -> None:
        self._held.clear()
        self._timer.release()

    def update(self, dt: float) -> Tuple[int, int]:
        """Return ``(direction, steps)`` to emit this tick."""

        direction = self.direction
        if not direction:
            return 0, 0
        return direction, self._timer.update(dt)


__all__ = ["ARR_RATE", "AutoRepeat", "DAS_DELAY", "LEFT", "RIGHT", "ShiftRepeat", "UNLIMITED"]
