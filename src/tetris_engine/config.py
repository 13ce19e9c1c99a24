"""Tunable constants for the gameplay engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class Difficulty(IntEnum):
    """Starting difficulty, selecting the initial gravity interval.

    The integer values match the ``difficulty=`` entry written by the
    settings collaborator.
    """

    EASY = 0
    NORMAL = 1
    HARD = 2

    @property
    def base_gravity(self) -> float:
        """Seconds per row before any level-based speed-up."""

        return _BASE_GRAVITY[self]

    @classmethod
    def parse(cls, value: Union[int, str, "Difficulty"]) -> "Difficulty":
        """Return the difficulty for a persisted setting value.

        Accepts the stored integer (also as a string) or a member name in any
        case.

        Raises:
            ValueError: If ``value`` names no difficulty.
        """

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip("-").isdigit():
                value = int(text)
            else:
                try:
                    return cls[text.upper()]
                except KeyError:
                    raise ValueError(f"Unknown difficulty: {value!r}") from None
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r}") from None


_BASE_GRAVITY = {
    Difficulty.EASY: 1.0,
    Difficulty.NORMAL: 0.8,
    Difficulty.HARD: 0.5,
}


@dataclass(frozen=True)
class EngineConfig:
    """Timing and scoring constants.  All durations are in seconds."""

    das_delay: float = 0.133
    arr_rate: float = 0.0
    soft_drop_delay: float = 0.05
    soft_drop_rate: float = 0.05
    lock_delay: float = 0.5
    max_lock_resets: int = 15
    gravity_step: float = 0.08
    min_gravity: float = 0.1
    lines_per_level: int = 10
    preview_size: int = 4
    soft_drop_points: int = 1
    hard_drop_points: int = 2
    spawn_x: int = 4
    spawn_y: int = 0

    def __post_init__(self) -> None:
        for name in (
            "das_delay",
            "arr_rate",
            "soft_drop_delay",
            "soft_drop_rate",
            "lock_delay",
            "gravity_step",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.min_gravity <= 0:
            raise ValueError("min_gravity must be positive")
        if self.max_lock_resets < 1:
            raise ValueError("max_lock_resets must be at least 1")
        if self.lines_per_level < 1:
            raise ValueError("lines_per_level must be at least 1")
        if self.preview_size < 0:
            raise ValueError("preview_size must not be negative")


DEFAULT_CONFIG = EngineConfig()


__all__ = ["Difficulty", "EngineConfig", "DEFAULT_CONFIG"]
