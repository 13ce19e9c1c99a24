"""7-bag piece randomizer."""

from __future__ import annotations

import random
from collections import deque
from typing import Deque, List, Optional

from .tetromino import TetrominoType


class SevenBag:
    """Deal piece identities in shuffled batches of all seven shapes.

    Within each batch every identity appears exactly once.  Batches are only
    ever appended whole, so peeking ahead with :meth:`preview` never shifts
    the bag boundaries.
    """

    def __init__(self, seed: Optional[int] = None, *, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random(seed)
        self._queue: Deque[TetrominoType] = deque()
        self.bags_dealt = 0

    def reset(self, seed: Optional[int] = None) -> None:
        """Drop queued pieces and optionally reseed."""

        if seed is not None:
            self._rng.seed(seed)
        self._queue.clear()
        self.bags_dealt = 0

    def _refill(self) -> None:
        bag = list(TetrominoType)
        self._rng.shuffle(bag)
        self._queue.extend(bag)
        self.bags_dealt += 1

    def next(self) -> TetrominoType:
        """Pop and return the next identity, refilling when empty."""

        if not self._queue:
            self._refill()
        return self._queue.popleft()

    def preview(self, count: int) -> List[TetrominoType]:
        """Return the next ``count`` identities without consuming them."""

        if count < 0:
            raise ValueError("count must not be negative")
        while len(self._queue) < count:
            self._refill()
        return [self._queue[i] for i in range(count)]

    def __len__(self) -> int:
        return len(self._queue)


__all__ = ["SevenBag"]
