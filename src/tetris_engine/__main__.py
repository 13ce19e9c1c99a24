"""Simple headless demo for the engine.

Run with: `python -m tetris_engine`

Drives a session with random intents for a number of frames, then prints the
final board plus the active piece and logs a short summary.  Useful as a
smoke test that the pieces fall, lock and clear.
"""

from __future__ import annotations

import argparse
import logging
import random

from .config import Difficulty
from .gym_env import FRAME_DT
from .session import Intent, Session
from .utils import grid_to_text, render_grid

LOGGER = logging.getLogger(__name__)

_DEMO_INTENTS = (
    (Intent.NONE,),
    (Intent.MOVE_LEFT, Intent.RELEASE_LEFT),
    (Intent.MOVE_RIGHT, Intent.RELEASE_RIGHT),
    (Intent.ROTATE,),
    (Intent.HARD_DROP,),
    (Intent.HOLD,),
)


def run_demo(session: Session, ticks: int, rng: random.Random) -> int:
    """Advance ``session`` for up to ``ticks`` frames.  Returns frames run."""

    for tick in range(ticks):
        intents = _DEMO_INTENTS[rng.randrange(len(_DEMO_INTENTS))] if tick % 10 == 0 else ()
        snapshot = session.advance(FRAME_DT, intents)
        if snapshot.game_over:
            return tick + 1
    return ticks


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--ticks", type=int, default=3600, help="Frames to simulate.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for pieces and intents.")
    parser.add_argument(
        "--difficulty",
        default="normal",
        help="Starting difficulty (easy, normal, hard or 0-2).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    session = Session(Difficulty.parse(args.difficulty), seed=args.seed)
    frames = run_demo(session, args.ticks, random.Random(args.seed))
    grid = render_grid(session.board, session.active)
    print(grid_to_text(grid))
    LOGGER.info(
        "Ran %d frame(s): score=%d lines=%d level=%d pieces=%d game_over=%s",
        frames,
        session.score,
        session.lines,
        session.level,
        session.pieces,
        session.game_over,
    )


if __name__ == "__main__":
    main()
