"""Tests for the gymnasium environment."""

import gymnasium as gym
import numpy as np

import falling_blocks.env  # noqa: F401
from falling_blocks.env.falling_blocks_env import Action, FallingBlocksEnv
from falling_blocks.game import PieceFactory, Session


def test_registered_env_reset_and_step():
    env = gym.make("FallingBlocks-10x20-v0")
    obs, info = env.reset(seed=0)
    assert env.observation_space.contains(obs)
    assert obs.shape == (20, 10)
    assert np.count_nonzero(obs) == 4
    assert info["lines_cleared"] == 0

    obs, reward, terminated, truncated, info = env.step(Action.LEFT)
    assert env.observation_space.contains(obs)
    assert reward == 0.0
    assert not terminated and not truncated
    env.close()


def test_same_seed_same_pieces():
    a, b = FallingBlocksEnv(), FallingBlocksEnv()
    obs_a, _ = a.reset(seed=7)
    obs_b, _ = b.reset(seed=7)
    assert np.array_equal(obs_a, obs_b)


def test_reward_is_lines_cleared():
    env = FallingBlocksEnv(width=4, height=6)
    env.reset(seed=0)
    env.session = Session(4, 6, PieceFactory.from_sequence([1]))
    env.session.grid.board[4:, 0] = 3
    env.session.grid.board[4:, 3] = 3

    rewards = [env.step(Action.NONE)[1] for _ in range(5)]
    assert rewards == [0.0, 0.0, 0.0, 0.0, 2.0]
    info = env.step(Action.NONE)[4]
    assert info["lines_cleared"] == 2
    assert info["pieces_locked"] == 1


def test_terminates_when_spawn_is_blocked():
    env = FallingBlocksEnv(width=4, height=4)
    env.reset(seed=0)
    env.session = Session(4, 4, PieceFactory.from_sequence([1]))
    env.session.grid.board[2] = [1, 1, 1, 0]
    _, _, terminated, _, _ = env.step(Action.NONE)
    assert terminated


def test_truncates_at_step_limit():
    env = FallingBlocksEnv(max_episode_steps=3, gravity_every=10)
    env.reset(seed=1)
    flags = [env.step(Action.NONE)[3] for _ in range(3)]
    assert flags == [False, False, True]


def test_gravity_every_controls_descent():
    env = FallingBlocksEnv(gravity_every=2)
    env.reset(seed=3)
    env.step(Action.NONE)
    assert env.session.piece.y == 0
    env.step(Action.NONE)
    assert env.session.piece.y == 1


def test_rgb_render():
    env = FallingBlocksEnv(width=5, height=6, render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (72, 60, 3)
    assert img.dtype == np.uint8
    assert FallingBlocksEnv().render() is None


def test_random_agent_runs(capsys):
    from falling_blocks.rl.random_agent import run_random

    total = run_random(steps=200, seed=0)
    assert total >= 0.0
    assert "Random agent" in capsys.readouterr().out
