import numpy as np
import pytest

from tetris_engine.board import HEIGHT
from tetris_engine.gym_env import ACTIONS, TetrisEnv

HARD_DROP = 5


def test_reset_returns_observation_in_space():
    env = TetrisEnv()
    obs, info = env.reset(seed=0)
    assert obs.shape == (231,)
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert env.action_space.n == len(ACTIONS)
    assert info["score"] == 0
    assert info["hold_available"] is True
    # active piece one-hot
    assert obs[210:217].sum() == 1.0
    assert obs[224:].sum() == 0.0


def test_same_seed_same_observation():
    first, _ = TetrisEnv().reset(seed=5)
    second, _ = TetrisEnv().reset(seed=5)
    assert np.array_equal(first, second)


def test_hard_drop_rewards_drop_points():
    env = TetrisEnv()
    env.reset(seed=1)
    obs, reward, terminated, truncated, info = env.step(HARD_DROP)
    assert reward > 0
    assert reward == info["score"]
    assert info["pieces"] == 1
    assert not terminated
    assert not truncated
    assert env.observation_space.contains(obs)


def test_hold_action_fills_hold_slot():
    env = TetrisEnv()
    env.reset(seed=2)
    obs, _, _, _, info = env.step(len(ACTIONS) - 1)
    assert info["hold_available"] is False
    assert obs[224:].sum() == 1.0


def test_truncates_after_max_steps():
    env = TetrisEnv(max_steps=3)
    env.reset(seed=0)
    results = [env.step(0) for _ in range(3)]
    assert [r[3] for r in results] == [False, False, True]


def test_stacking_in_the_middle_terminates():
    env = TetrisEnv()
    env.reset(seed=3)
    terminated = False
    for _ in range(200):
        _, _, terminated, _, _ = env.step(HARD_DROP)
        if terminated:
            break
    assert terminated
    assert env.session.game_over


def test_invalid_action_raises():
    env = TetrisEnv()
    env.reset(seed=0)
    with pytest.raises(ValueError):
        env.step(len(ACTIONS))


def test_render_returns_text_board():
    env = TetrisEnv(render_mode="ansi")
    env.reset(seed=0)
    text = env.render()
    lines = text.splitlines()
    assert len(lines) == HEIGHT
    assert set(lines[-1]) == {"#"}
    assert "@" in text
