"""Gymnasium-compatible wrapper driving a :class:`Session` frame by frame.

Each ``step`` advances the session by one frame (``1/60`` s by default) with
a tapped intent: the press and its release arrive in the same frame, so held
auto-repeat never kicks in.

Observation is a flat ``float32`` vector:
  - playfield occupancy including the active piece (21x10=210)
  - active piece one-hot (7)
  - next piece one-hot (7)
  - held piece one-hot (7, all zero when the slot is empty)

Reward is the score gained during the frame.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import EMPTY, HEIGHT, WIDTH
from .config import Difficulty, EngineConfig
from .session import Intent, Session, Snapshot
from .tetromino import TetrominoType
from .utils import grid_to_text, render_grid

FRAME_DT = 1.0 / 60.0

# Intents sent for each discrete action.
ACTIONS: Tuple[Tuple[Intent, ...], ...] = (
    (Intent.NONE,),
    (Intent.MOVE_LEFT, Intent.RELEASE_LEFT),
    (Intent.MOVE_RIGHT, Intent.RELEASE_RIGHT),
    (Intent.ROTATE,),
    (Intent.SOFT_DROP, Intent.RELEASE_SOFT_DROP),
    (Intent.HARD_DROP,),
    (Intent.HOLD,),
)

PLAYFIELD_CELLS = (HEIGHT - 1) * (WIDTH - 2)
_TYPES: List[TetrominoType] = list(TetrominoType)


def _one_hot(identity: Optional[TetrominoType]) -> np.ndarray:
    out = np.zeros((len(_TYPES),), dtype=np.float32)
    if identity is not None:
        out[_TYPES.index(identity)] = 1.0
    return out


class TetrisEnv(gym.Env):
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 60,
    }

    def __init__(
        self,
        *,
        difficulty: Difficulty = Difficulty.NORMAL,
        config: Optional[EngineConfig] = None,
        frame_dt: float = FRAME_DT,
        max_steps: Optional[int] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self._session = Session(difficulty, config=config)
        self.frame_dt = frame_dt
        self.render_mode = render_mode
        self.action_space = spaces.Discrete(len(ACTIONS))
        self._obs_size = PLAYFIELD_CELLS + 3 * len(_TYPES)
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(self._obs_size,), dtype=np.float32
        )
        self._steps = 0
        self._max_steps = max_steps

    @property
    def session(self) -> Session:
        return self._session

    # ----------------------- Env API -----------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        self._session.reset(seed=seed)
        self._steps = 0
        snapshot = self._session.snapshot()
        return self._convert_obs(), self._convert_info(snapshot)

    def step(self, action: int):
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action: {action!r}")
        score_before = self._session.score
        snapshot = self._session.advance(self.frame_dt, ACTIONS[int(action)])
        self._steps += 1
        reward = float(snapshot.score - score_before)
        terminated = snapshot.game_over
        truncated = self._max_steps is not None and self._steps >= self._max_steps
        return self._convert_obs(), reward, terminated, truncated, self._convert_info(snapshot)

    def render(self):
        session = self._session
        grid = render_grid(session.board, session.active)
        return grid_to_text(grid)

    def close(self):
        return None

    # -------------------- Helpers -------------------------
    def _convert_obs(self) -> np.ndarray:
        session = self._session
        grid = render_grid(session.board, session.active)
        playfield = (grid[: HEIGHT - 1, 1 : WIDTH - 1] != EMPTY).astype(np.float32)
        active = session.active.identity if session.active else None
        parts = [
            playfield.reshape(-1),
            _one_hot(active),
            _one_hot(session.next_piece),
            _one_hot(session.held),
        ]
        return np.concatenate(parts, dtype=np.float32)

    def _convert_info(self, snapshot: Snapshot) -> Dict:
        return {
            "score": snapshot.score,
            "lines": snapshot.lines,
            "level": snapshot.level,
            "pieces": snapshot.pieces,
            "hold_available": snapshot.hold_available,
        }


__all__ = ["ACTIONS", "FRAME_DT", "TetrisEnv"]
