"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to an Algae Race session.
Reward is always 0.0 - drivers compute their own from info["survival_time"].
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from algae_race.race_core.config_loader import GameConfig, load_config
from algae_race.race_core.game import CoreGame
from algae_race.race_core.rules import TerminationResult
from algae_race.race_core.state_snapshot import GameSnapshot

ACTION_STAY = 0
ACTION_LEFT = 1
ACTION_RIGHT = 2


class AlgaeRaceEnv(gym.Env):
    """
    Algae Race as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = stay, 1 = move left, 2 = move right.
        The move is applied before the tick.

    Observation Space:
        Dict with fish state, difficulty and the visible rows.

    Reward:
        Always 0.0.

    Info:
        Contains survival_time, ticks, difficulty, bubbles_collected, etc.
    """

    metadata = {
        "render_modes": [],
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[GameConfig] = None,
        debug: bool = False,
    ):
        """
        Initialize Algae Race environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            config: Already-built configuration. Takes precedence over config_path.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        self._config = config if config is not None else load_config(config_path)
        self._debug = debug

        self._game = CoreGame(config=self._config)

        self.action_space = spaces.Discrete(3)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] AlgaeRaceEnv initialized")
            print(f"[DEBUG]   Rows: {self._config.row_buffer_size} x {self._config.cell_count} cells")
            print(f"[DEBUG]   Initial difficulty: {self._config.difficulty.initial}")
            print(f"[DEBUG]   Max ticks: {self._config.env.max_episode_ticks}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        return spaces.Dict({
            "oxygen": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),
            "position": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),
            "difficulty": spaces.Box(low=0, high=1, shape=(), dtype=np.float32),
            "alive": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "fish_slot": spaces.Box(low=0, high=self._config.cell_count - 1, shape=(), dtype=np.int32),
            "rows": spaces.Box(
                low=0,
                high=2,
                shape=(self._config.row_buffer_size, self._config.cell_count),
                dtype=np.int8
            ),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.reset(seed=seed)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_oxygen"] = 0.0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 (stay), 1 (left) or 2 (right).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action}, expected 0, 1 or 2")

        oxygen_before = self._game.fish.oxygen_supply

        if action == ACTION_LEFT:
            self._game.move_left()
        elif action == ACTION_RIGHT:
            self._game.move_right()

        result = self._game.tick()

        obs = self._snapshot_to_obs(result.snapshot)
        reward = 0.0

        truncation = TerminationResult.none()
        if not result.ended:
            truncation = self._game.rules.termination.check_truncation(self._game.ticks)

        info = self._game.get_info()
        info["delta_oxygen"] = self._game.fish.oxygen_supply - oxygen_before
        info["bubbles"] = result.bubbles
        info["algae_hits"] = result.algae_hits
        if truncation.truncated:
            info["truncated_reason"] = truncation.reason

        if self._debug:
            print(f"[DEBUG] Step: action={action}, oxygen={info['oxygen']:.3f}, "
                  f"difficulty={info['difficulty']:.3f}, bubbles={result.bubbles}, "
                  f"algae={result.algae_hits}")
            if result.ended:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')} "
                      f"after {info['survival_time']:.2f}s")

        return obs, reward, result.ended, truncation.truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict()

    def close(self) -> None:
        """Clean up resources."""

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
