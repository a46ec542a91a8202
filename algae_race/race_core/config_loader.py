"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
Every option has a default, so a partial (or empty) YAML file is valid.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Play field geometry."""
    cell_unit_size: float        # Width of one row cell as a fraction of the screen
    visible_row_count: int       # Rows visible ahead of the fish

    @property
    def cell_count(self) -> int:
        """Number of cells in a row."""
        return max(1, int(round(1.0 / self.cell_unit_size)))


@dataclass(frozen=True)
class FishConfig:
    """Fish spawn state and movement."""
    initial_oxygen: float
    initial_position: float
    movement_cost: float         # Oxygen spent per move
    movement_step: float         # Position change per move (fraction of width)


@dataclass(frozen=True)
class OxygenConfig:
    """Oxygen economy."""
    passive_decay_rate: float             # Oxygen lost per tick at zero difficulty
    oxygen_exhaustion_difficulty: float   # Difficulty at which passive decay reaches 0
    oxygen_bubble_gain: float             # Oxygen gained from a bubble
    algae_competition_cost: float         # Oxygen lost per algae contact at difficulty 1


@dataclass(frozen=True)
class DifficultyConfig:
    """Difficulty progression."""
    initial: float
    growth_rate: float           # Added every tick
    ceiling: float


@dataclass(frozen=True)
class TimingConfig:
    """Tick timing and scroll speed."""
    dt: float                    # Default tick length in seconds
    scroll_speed: float          # Rows reaching the fish per second


@dataclass(frozen=True)
class EnvConfig:
    """Gymnasium wrapper limits."""
    max_episode_ticks: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    fish: FishConfig
    oxygen: OxygenConfig
    difficulty: DifficultyConfig
    timing: TimingConfig
    env: EnvConfig

    @property
    def cell_count(self) -> int:
        """Number of cells per row."""
        return self.board.cell_count

    @property
    def row_buffer_size(self) -> int:
        """Rows held by a session (visible rows plus the one reaching the fish)."""
        return self.board.visible_row_count + 1


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "board": {
        "cell_unit_size": 0.05,
        "visible_row_count": 8,
    },
    "fish": {
        "initial_oxygen": 1.0,
        "initial_position": 0.5,
        "movement_cost": 0.02,
        "movement_step": 0.05,
    },
    "oxygen": {
        "passive_decay_rate": 0.002,
        "oxygen_exhaustion_difficulty": 1.0,
        "oxygen_bubble_gain": 0.25,
        "algae_competition_cost": 0.1,
    },
    "difficulty": {
        "initial": 0.1,
        "growth_rate": 0.0005,
        "ceiling": 1.0,
    },
    "timing": {
        "dt": 1.0 / 30.0,
        "scroll_speed": 2.0,
    },
    "env": {
        "max_episode_ticks": 20000,
    },
}


def _section(raw: Mapping[str, Any], name: str) -> Dict[str, Any]:
    """Merge a raw YAML section over its defaults."""
    merged = dict(DEFAULTS[name])
    data = raw.get(name) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(data).__name__}")
    for key, value in data.items():
        if key not in merged:
            raise ValueError(f"Unknown option '{name}.{key}'")
        merged[key] = value
    return merged


def _check_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


def _check_non_negative(name: str, value: float) -> None:
    if value < 0.0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if not 0.0 < config.board.cell_unit_size <= 1.0:
        raise ValueError(
            f"board.cell_unit_size must be in (0, 1], got {config.board.cell_unit_size}"
        )
    if config.board.visible_row_count < 1:
        raise ValueError(
            f"board.visible_row_count must be at least 1, got {config.board.visible_row_count}"
        )

    _check_unit("fish.initial_oxygen", config.fish.initial_oxygen)
    _check_unit("fish.initial_position", config.fish.initial_position)
    _check_non_negative("fish.movement_cost", config.fish.movement_cost)
    _check_non_negative("fish.movement_step", config.fish.movement_step)

    _check_non_negative("oxygen.passive_decay_rate", config.oxygen.passive_decay_rate)
    _check_non_negative("oxygen.oxygen_bubble_gain", config.oxygen.oxygen_bubble_gain)
    _check_non_negative("oxygen.algae_competition_cost", config.oxygen.algae_competition_cost)
    if config.oxygen.oxygen_exhaustion_difficulty <= 0.0:
        raise ValueError(
            "oxygen.oxygen_exhaustion_difficulty must be positive, "
            f"got {config.oxygen.oxygen_exhaustion_difficulty}"
        )

    _check_unit("difficulty.initial", config.difficulty.initial)
    _check_unit("difficulty.ceiling", config.difficulty.ceiling)
    _check_non_negative("difficulty.growth_rate", config.difficulty.growth_rate)
    if config.difficulty.initial > config.difficulty.ceiling:
        raise ValueError(
            f"difficulty.initial ({config.difficulty.initial}) exceeds "
            f"difficulty.ceiling ({config.difficulty.ceiling})"
        )

    if config.timing.dt <= 0.0:
        raise ValueError(f"timing.dt must be positive, got {config.timing.dt}")
    _check_non_negative("timing.scroll_speed", config.timing.scroll_speed)

    if config.env.max_episode_ticks < 1:
        raise ValueError(
            f"env.max_episode_ticks must be at least 1, got {config.env.max_episode_ticks}"
        )


def config_from_dict(raw: Optional[Mapping[str, Any]] = None) -> GameConfig:
    """
    Build a validated GameConfig from a nested mapping.

    Args:
        raw: Mapping shaped like game_config.yaml. Missing sections and keys
             fall back to DEFAULTS.

    Returns:
        Validated GameConfig instance.

    Raises:
        ValueError: If an option is unknown or validation fails.
    """
    raw = raw or {}

    board_data = _section(raw, "board")
    board = BoardConfig(
        cell_unit_size=float(board_data["cell_unit_size"]),
        visible_row_count=int(board_data["visible_row_count"])
    )

    fish_data = _section(raw, "fish")
    fish = FishConfig(
        initial_oxygen=float(fish_data["initial_oxygen"]),
        initial_position=float(fish_data["initial_position"]),
        movement_cost=float(fish_data["movement_cost"]),
        movement_step=float(fish_data["movement_step"])
    )

    oxygen_data = _section(raw, "oxygen")
    oxygen = OxygenConfig(
        passive_decay_rate=float(oxygen_data["passive_decay_rate"]),
        oxygen_exhaustion_difficulty=float(oxygen_data["oxygen_exhaustion_difficulty"]),
        oxygen_bubble_gain=float(oxygen_data["oxygen_bubble_gain"]),
        algae_competition_cost=float(oxygen_data["algae_competition_cost"])
    )

    difficulty_data = _section(raw, "difficulty")
    difficulty = DifficultyConfig(
        initial=float(difficulty_data["initial"]),
        growth_rate=float(difficulty_data["growth_rate"]),
        ceiling=float(difficulty_data["ceiling"])
    )

    timing_data = _section(raw, "timing")
    timing = TimingConfig(
        dt=float(timing_data["dt"]),
        scroll_speed=float(timing_data["scroll_speed"])
    )

    env_data = _section(raw, "env")
    env = EnvConfig(
        max_episode_ticks=int(env_data["max_episode_ticks"])
    )

    config = GameConfig(
        board=board,
        fish=fish,
        oxygen=oxygen,
        difficulty=difficulty,
        timing=timing,
        env=env
    )

    _validate_config(config)
    return config


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    if raw is not None and not isinstance(raw, Mapping):
        raise ValueError(f"Config root must be a mapping: {config_path}")

    return config_from_dict(raw)


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
