"""
Test suite for verifying all observation elements.

Ensures the environment returns correctly shaped and typed observations
that agree with the underlying session.
"""

import numpy as np
import pytest
from algae_race.race_core.env_gym import ACTION_RIGHT, ACTION_STAY, AlgaeRaceEnv
from algae_race.race_core.row_generator import RowCell


class TestObservationAPI:
    """Verify all observation space elements."""

    @pytest.fixture
    def env(self):
        """Create fresh environment for each test."""
        env = AlgaeRaceEnv()
        yield env
        env.close()

    @pytest.fixture
    def obs_after_reset(self, env):
        """Get observation after reset."""
        obs, info = env.reset(seed=42)
        return obs

    @pytest.fixture
    def obs_after_step(self, env):
        """Get observation after one step."""
        env.reset(seed=42)
        obs, _, _, _, _ = env.step(ACTION_STAY)
        return obs

    # =========================================================================
    # Fish
    # =========================================================================

    def test_oxygen(self, obs_after_reset):
        """oxygen should be a float32 scalar starting at 1.0."""
        assert obs_after_reset["oxygen"].dtype == np.float32
        assert obs_after_reset["oxygen"].shape == ()
        assert float(obs_after_reset["oxygen"]) == 1.0

    def test_position(self, obs_after_reset):
        """position should be a float32 scalar starting at 0.5."""
        assert obs_after_reset["position"].dtype == np.float32
        assert obs_after_reset["position"].shape == ()
        assert float(obs_after_reset["position"]) == 0.5

    def test_alive(self, obs_after_reset):
        """alive should be an int8 flag starting at 1."""
        assert obs_after_reset["alive"].dtype == np.int8
        assert int(obs_after_reset["alive"]) == 1

    def test_fish_slot(self, env, obs_after_reset):
        """fish_slot should index the cell under the fish."""
        assert obs_after_reset["fish_slot"].dtype == np.int32
        assert int(obs_after_reset["fish_slot"]) == env.config.cell_count // 2

    def test_oxygen_drops_after_move(self, env):
        """oxygen should drop after a move."""
        env.reset(seed=42)
        obs, _, _, _, _ = env.step(ACTION_RIGHT)

        assert float(obs["oxygen"]) < 1.0

    # =========================================================================
    # Session
    # =========================================================================

    def test_difficulty(self, env, obs_after_step):
        """difficulty should be a float32 matching the game."""
        assert obs_after_step["difficulty"].dtype == np.float32
        assert 0.0 <= float(obs_after_step["difficulty"]) <= 1.0
        assert float(obs_after_step["difficulty"]) == pytest.approx(env.game.difficulty)

    # =========================================================================
    # Rows
    # =========================================================================

    def test_rows_shape(self, env, obs_after_reset):
        """rows should be int8 with one row per buffered row."""
        rows = obs_after_reset["rows"]

        assert rows.dtype == np.int8
        assert rows.shape == (env.config.row_buffer_size, env.config.cell_count)

    def test_rows_values(self, obs_after_step):
        """Cells should only hold water, algae or oxygen."""
        values = set(np.unique(obs_after_step["rows"]).tolist())
        assert values <= {int(RowCell.WATER), int(RowCell.ALGAE), int(RowCell.OXYGEN)}

    def test_rows_at_most_one_bubble(self, env):
        """No observed row should hold more than one bubble."""
        env.reset(seed=42)
        for _ in range(100):
            obs, _, terminated, _, _ = env.step(ACTION_STAY)
            bubbles = (obs["rows"] == RowCell.OXYGEN).sum(axis=1)
            assert np.all(bubbles <= 1)
            if terminated:
                break

    def test_rows_match_game(self, env, obs_after_step):
        """rows should mirror the game's rows, nearest first."""
        for i, row in enumerate(env.game.rows):
            assert obs_after_step["rows"][i].tolist() == [int(c) for c in row]

    def test_rows_are_copies(self, env):
        """Observations must not change when the session advances."""
        obs, _ = env.reset(seed=42)
        before = obs["rows"].copy()

        for _ in range(30):
            env.step(ACTION_STAY)

        assert np.array_equal(obs["rows"], before)
