"""
Game Rules
==========

Difficulty progression, oxygen economy and termination conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from algae_race.race_core.config_loader import GameConfig, get_config


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    truncated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, False, reason)

    @staticmethod
    def truncation(reason: str) -> "TerminationResult":
        return TerminationResult(False, True, reason)


class DifficultyRules:
    """
    Handles difficulty growth.

    Difficulty grows by a constant amount every tick and saturates at the
    configured ceiling.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._initial = config.difficulty.initial
        self._growth_rate = config.difficulty.growth_rate
        self._ceiling = config.difficulty.ceiling

    @property
    def initial(self) -> float:
        """Difficulty at session start."""
        return self._initial

    @property
    def ceiling(self) -> float:
        return self._ceiling

    def next_difficulty(self, difficulty: float) -> float:
        """
        Difficulty after one tick.

        Args:
            difficulty: Current difficulty.

        Returns:
            min(ceiling, difficulty + growth_rate), never below the input.
        """
        if difficulty >= self._ceiling:
            return difficulty
        return min(self._ceiling, difficulty + self._growth_rate)


class OxygenRules:
    """
    Handles oxygen gains and losses that depend on difficulty.

    - Passive decay: shrinks linearly to 0 as difficulty approaches the
      oxygen exhaustion difficulty (the scene darkens).
    - Bubble pickup: fixed gain.
    - Algae contact: competition penalty proportional to difficulty.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._passive_decay_rate = config.oxygen.passive_decay_rate
        self._exhaustion = config.oxygen.oxygen_exhaustion_difficulty
        self._bubble_gain = config.oxygen.oxygen_bubble_gain
        self._algae_cost = config.oxygen.algae_competition_cost

    @property
    def bubble_gain(self) -> float:
        """Oxygen gained from one bubble."""
        return self._bubble_gain

    def passive_decay(self, difficulty: float) -> float:
        """Oxygen lost this tick to passive decay (non-negative)."""
        scale = max(0.0, 1.0 - difficulty / self._exhaustion)
        return self._passive_decay_rate * scale

    def algae_penalty(self, difficulty: float) -> float:
        """Oxygen lost to one algae contact (non-negative)."""
        return self._algae_cost * max(0.0, min(1.0, difficulty))


class TerminationRules:
    """
    Handles session termination.

    The only way a session ends is the fish running out of oxygen. Episode
    tick caps are an environment concern and surface as truncation.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._max_episode_ticks = config.env.max_episode_ticks

    @property
    def max_episode_ticks(self) -> int:
        return self._max_episode_ticks

    def check_termination(self, fish_alive: bool) -> TerminationResult:
        """
        Check whether the session is over.

        Args:
            fish_alive: True if the fish still has oxygen.

        Returns:
            TerminationResult indicating game state.
        """
        if not fish_alive:
            return TerminationResult.game_over("suffocated")
        return TerminationResult.none()

    def check_truncation(self, ticks: int) -> TerminationResult:
        """Check the environment tick cap."""
        if ticks >= self._max_episode_ticks:
            return TerminationResult.truncation("tick_cap")
        return TerminationResult.none()


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self.difficulty = DifficultyRules(config)
        self.oxygen = OxygenRules(config)
        self.termination = TerminationRules(config)
