"""One game attempt: board, active piece, queue, hold slot and scoring.

The session is driven by :meth:`Session.advance`, called once per frame with
the elapsed time and the logical intents of that frame.  All state changes
happen inside that call; callers render from the returned :class:`Snapshot`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .board import Board, Grid
from .config import DEFAULT_CONFIG, Difficulty, EngineConfig
from .controller import LockController
from .randomizer import SevenBag
from .repeat import LEFT, RIGHT, AutoRepeat, ShiftRepeat
from .scoring import ClearEvent, ScoreState, ScoringEngine, is_t_spin
from .tetromino import Cell, Piece, TetrominoType, spawn
from .utils import gravity_interval

LOGGER = logging.getLogger(__name__)


class Intent(str, Enum):
    """Logical player intents.

    ``MOVE_LEFT``, ``MOVE_RIGHT`` and ``SOFT_DROP`` are press edges: the
    intent stays held, and auto-repeats, until the matching ``RELEASE_*``
    intent arrives.
    """

    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    SOFT_DROP = "soft_drop"
    RELEASE_LEFT = "release_left"
    RELEASE_RIGHT = "release_right"
    RELEASE_SOFT_DROP = "release_soft_drop"
    HARD_DROP = "hard_drop"
    ROTATE = "rotate"
    HOLD = "hold"
    PAUSE_TOGGLE = "pause_toggle"
    NONE = "none"


_RELEASES = (Intent.RELEASE_LEFT, Intent.RELEASE_RIGHT, Intent.RELEASE_SOFT_DROP)


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Immutable view of a session at the end of a tick."""

    grid: Grid
    piece: Optional[TetrominoType]
    piece_cells: Tuple[Cell, ...]
    piece_x: int
    piece_y: int
    rotation: int
    ghost_row: Optional[int]
    next_piece: Optional[TetrominoType]
    next_queue: Tuple[TetrominoType, ...]
    held: Optional[TetrominoType]
    hold_available: bool
    score: int
    level: int
    lines: int
    combo: int
    back_to_back: bool
    game_over: bool
    paused: bool
    high_score: int = 0
    last_clear: Optional[ClearEvent] = None
    pieces: int = 0
    piece_counts: Dict[TetrominoType, int] = field(default_factory=dict)
    play_time: float = 0.0


class Session:
    """Mutable state for a single game."""

    def __init__(
        self,
        difficulty: Union[Difficulty, int, str] = Difficulty.NORMAL,
        *,
        config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
        high_score: int = 0,
    ) -> None:
        self.difficulty = Difficulty.parse(difficulty)
        self.config = config or DEFAULT_CONFIG
        self.board = Board()
        self.bag = SevenBag(seed)
        self.scoring = ScoringEngine(lines_per_level=self.config.lines_per_level)
        self.controller = LockController(
            self.difficulty.base_gravity,
            lock_delay=self.config.lock_delay,
            max_resets=self.config.max_lock_resets,
        )
        self.shift = ShiftRepeat(self.config.das_delay, self.config.arr_rate)
        self.soft_drop = AutoRepeat(self.config.soft_drop_delay, self.config.soft_drop_rate)
        self.high_score = high_score
        self.active: Optional[Piece] = None
        self.held: Optional[TetrominoType] = None
        self.hold_available = True
        self.game_over = False
        self.paused = False
        self.last_clear: Optional[ClearEvent] = None
        self.pieces = 0
        self.piece_counts: Dict[TetrominoType, int] = {t: 0 for t in TetrominoType}
        self.play_time = 0.0
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self, *, seed: Optional[int] = None) -> None:
        """Start a fresh game, keeping difficulty, config and high score."""

        self.board = Board()
        self.bag.reset(seed)
        self.scoring.reset()
        self.controller.gravity_interval = self.difficulty.base_gravity
        self.shift.release_all()
        self.soft_drop.release()
        self.held = None
        self.hold_available = True
        self.game_over = False
        self.paused = False
        self.last_clear = None
        self.pieces = 0
        self.piece_counts = {t: 0 for t in TetrominoType}
        self.play_time = 0.0
        self._spawn(self.bag.next())

    @property
    def score_state(self) -> ScoreState:
        return self.scoring.state

    @property
    def score(self) -> int:
        return self.scoring.state.score

    @property
    def level(self) -> int:
        return self.scoring.state.level

    @property
    def lines(self) -> int:
        return self.scoring.state.lines

    @property
    def next_piece(self) -> TetrominoType:
        return self.bag.preview(1)[0]

    @property
    def next_queue(self) -> List[TetrominoType]:
        """Identities after :attr:`next_piece`, ``preview_size`` of them."""

        return self.bag.preview(1 + self.config.preview_size)[1:]

    def _spawn(self, identity: TetrominoType) -> None:
        piece = spawn(identity, self.config.spawn_x, self.config.spawn_y)
        self.active = piece
        self.controller.reset()
        if not self.board.can_place(piece):
            self._end_game()
            return
        LOGGER.debug("Spawned %s", identity.value)

    def _end_game(self) -> None:
        self.game_over = True
        self.shift.release_all()
        self.soft_drop.release()
        self._update_high_score()
        LOGGER.info("Game over. Score: %d, lines: %d", self.score, self.lines)

    def _update_high_score(self) -> None:
        if self.score > self.high_score:
            self.high_score = self.score

    def _playable(self) -> bool:
        return self.active is not None and not self.game_over and not self.paused

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------
    def move(self, dx: int) -> bool:
        """Shift the active piece horizontally by ``dx`` if it fits."""

        if not self._playable() or not self.board.can_place(self.active, dx, 0):
            return False
        self.active.move(dx, 0)
        self.controller.register_move()
        return True

    def rotate(self) -> bool:
        if not self._playable() or not self.active.rotate(self.board):
            return False
        self.controller.register_move()
        return True

    def soft_drop_step(self) -> bool:
        """Move the piece down one row, awarding soft-drop points."""

        if not self._playable() or not self.board.can_place(self.active, 0, 1):
            return False
        self.active.move(0, 1)
        self.scoring.add_drop_points(1, self.config.soft_drop_points)
        return True

    def hard_drop(self) -> Optional[ClearEvent]:
        """Drop the piece to its landing row and lock it immediately."""

        if not self._playable():
            return None
        distance = self.board.ghost_row(self.active) - self.active.y
        if distance:
            self.active.move(0, distance)
            self.scoring.add_drop_points(distance, self.config.hard_drop_points)
        self.controller.force_lock()
        return self._lock()

    def hold(self) -> bool:
        """Swap the active piece with the hold slot, once per piece life."""

        if not self._playable() or not self.hold_available:
            return False
        current = self.active.identity
        if self.held is None:
            self.held = current
            self._spawn(self.bag.next())
        else:
            swapped, self.held = self.held, current
            self._spawn(swapped)
        self.hold_available = False
        LOGGER.debug("Held %s", current.value)
        return True

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------
    def _lock(self) -> ClearEvent:
        piece = self.active
        assert piece is not None, "No active piece to lock"
        t_spin = is_t_spin(self.board, piece)
        self.board.commit(piece)
        count, rows = self.board.clear_completed_rows()
        perfect = count > 0 and self.board.is_clear()
        event = self.scoring.apply_lock(
            count, t_spin=t_spin, perfect_clear=perfect, rows=tuple(rows)
        )
        if event.level_up:
            self.controller.gravity_interval = gravity_interval(
                self.difficulty.base_gravity,
                self.level,
                step=self.config.gravity_step,
                floor=self.config.min_gravity,
            )
        self.pieces += 1
        self.piece_counts[piece.identity] += 1
        self.last_clear = event
        self.hold_available = True
        self._update_high_score()
        LOGGER.debug("Locked %s at (%d, %d)", piece.identity.value, piece.x, piece.y)
        self._spawn(self.bag.next())
        return event

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def _release(self, intent: Intent) -> None:
        if intent is Intent.RELEASE_LEFT:
            self.shift.release(LEFT)
        elif intent is Intent.RELEASE_RIGHT:
            self.shift.release(RIGHT)
        elif intent is Intent.RELEASE_SOFT_DROP:
            self.soft_drop.release()

    def _apply(self, intent: Intent) -> bool:
        """Apply one intent.  Returns ``True`` if the piece was locked."""

        if intent is Intent.MOVE_LEFT:
            if self.shift.press(LEFT):
                self.move(-1)
        elif intent is Intent.MOVE_RIGHT:
            if self.shift.press(RIGHT):
                self.move(1)
        elif intent is Intent.SOFT_DROP:
            if self.soft_drop.press():
                self.soft_drop_step()
        elif intent is Intent.ROTATE:
            self.rotate()
        elif intent is Intent.HOLD:
            self.hold()
        elif intent is Intent.HARD_DROP:
            return self.hard_drop() is not None
        else:
            self._release(intent)
        return False

    def advance(self, dt: float, intents: Iterable[Intent] = ()) -> Snapshot:
        """Run one tick of ``dt`` seconds and return the resulting snapshot.

        Intents are applied in order, then held directions auto-repeat, then
        gravity and lock delay run.  A hard drop locks within the same tick
        and skips the remaining phases.
        """

        if dt < 0:
            raise ValueError("dt must not be negative")
        intents = [Intent(intent) for intent in intents]

        if not self.game_over:
            for _ in range(intents.count(Intent.PAUSE_TOGGLE)):
                self.paused = not self.paused
                LOGGER.debug("Paused" if self.paused else "Resumed")

        if self.paused or self.game_over:
            for intent in intents:
                self._release(intent)
            return self.snapshot()

        self.play_time += dt
        locked = False
        for intent in intents:
            if intent is Intent.PAUSE_TOGGLE:
                continue
            if locked or self.game_over:
                self._release(intent)
                continue
            locked = self._apply(intent)

        if locked or self.game_over:
            return self.snapshot()

        direction, steps = self.shift.update(dt)
        while steps > 0 and self.move(direction):
            steps -= 1
        steps = self.soft_drop.update(dt)
        while steps > 0 and self.soft_drop_step():
            steps -= 1

        if self.controller.update(dt, self.board, self.active):
            self._lock()
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        """Return an immutable view of the current state."""

        piece = self.active
        state = self.scoring.state
        ghost = None
        if piece is not None and not self.game_over:
            ghost = self.board.ghost_row(piece)
        return Snapshot(
            grid=self.board.copy_grid(),
            piece=piece.identity if piece else None,
            piece_cells=piece.cells() if piece else (),
            piece_x=piece.x if piece else 0,
            piece_y=piece.y if piece else 0,
            rotation=piece.rotation if piece else 0,
            ghost_row=ghost,
            next_piece=self.next_piece,
            next_queue=tuple(self.next_queue),
            held=self.held,
            hold_available=self.hold_available,
            score=state.score,
            level=state.level,
            lines=state.lines,
            combo=state.combo,
            back_to_back=state.back_to_back,
            game_over=self.game_over,
            paused=self.paused,
            high_score=self.high_score,
            last_clear=self.last_clear,
            pieces=self.pieces,
            piece_counts=dict(self.piece_counts),
            play_time=self.play_time,
        )


__all__ = ["Intent", "Session", "Snapshot"]
