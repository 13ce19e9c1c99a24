"""Gameplay simulation engine for a falling-block puzzle."""

from .board import Board
from .config import Difficulty, EngineConfig
from .controller import LockController, LockState
from .gym_env import TetrisEnv
from .randomizer import SevenBag
from .repeat import AutoRepeat, ShiftRepeat
from .scoring import ClearEvent, ScoreState, ScoringEngine, is_t_spin
from .session import Intent, Session, Snapshot
from .tetromino import Piece, TetrominoType, shape_blocks, spawn
from .utils import gravity_interval, render_grid

__all__ = [
    "AutoRepeat",
    "Board",
    "ClearEvent",
    "Difficulty",
    "EngineConfig",
    "Intent",
    "LockController",
    "LockState",
    "Piece",
    "ScoreState",
    "ScoringEngine",
    "Session",
    "SevenBag",
    "ShiftRepeat",
    "Snapshot",
    "TetrisEnv",
    "TetrominoType",
    "gravity_interval",
    "is_t_spin",
    "render_grid",
    "shape_blocks",
    "spawn",
]
