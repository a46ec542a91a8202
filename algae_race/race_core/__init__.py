"""
Race Core - The session simulation.

Main exports:
- CoreGame: Session controller (tick, move_left, move_right, snapshot)
- Fish: Oxygen/position model
- RowGenerator, Row, RowCell: Probabilistic row content
- AlgaeRaceEnv: Gymnasium environment wrapper
- GameConfig: Configuration loaded from game_config.yaml
"""

from algae_race.race_core.config_loader import GameConfig, config_from_dict, load_config
from algae_race.race_core.row_generator import Row, RowCell, RowGenerator
from algae_race.race_core.fish import Fish
from algae_race.race_core.game import CoreGame, GameEvent, SessionState, TickResult
from algae_race.race_core.state_snapshot import FishSnapshot, GameSnapshot
from algae_race.race_core.env_gym import AlgaeRaceEnv

__all__ = [
    "GameConfig",
    "config_from_dict",
    "load_config",
    "Row",
    "RowCell",
    "RowGenerator",
    "Fish",
    "CoreGame",
    "GameEvent",
    "SessionState",
    "TickResult",
    "FishSnapshot",
    "GameSnapshot",
    "AlgaeRaceEnv",
]
