"""
State Snapshot
==============

Read-only views of the session for renderers and agents. Rows are packed
into a fixed-size numpy array of cell values (no screen positions).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional
import numpy as np

from algae_race.race_core.config_loader import GameConfig, get_config
from algae_race.race_core.row_generator import Row


@dataclass(frozen=True)
class FishSnapshot:
    """Fish state at one instant."""
    oxygen_supply: float
    horizontal_position: float
    alive: bool


@dataclass
class GameSnapshot:
    """
    Complete session state snapshot.

    rows[0] is the row nearest the fish.
    """
    fish: FishSnapshot
    fish_slot: int
    difficulty: float
    elapsed_time: float
    ticks: int
    ended: bool
    rows: np.ndarray                  # (row_buffer_size, cell_count) int8

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "oxygen": np.array(self.fish.oxygen_supply, dtype=np.float32),
            "position": np.array(self.fish.horizontal_position, dtype=np.float32),
            "difficulty": np.array(self.difficulty, dtype=np.float32),
            "alive": np.array(int(self.fish.alive), dtype=np.int8),
            "fish_slot": np.array(self.fish_slot, dtype=np.int32),
            "rows": self.rows,
        }


class SnapshotBuilder:
    """Builds game state snapshots with a pre-allocated row array."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._row_count = config.row_buffer_size
        self._cell_count = config.cell_count
        self._rows = np.zeros((self._row_count, self._cell_count), dtype=np.int8)

    def build(
        self,
        oxygen_supply: float,
        horizontal_position: float,
        alive: bool,
        rows: Iterable[Row],
        difficulty: float,
        elapsed_time: float,
        ticks: int,
        ended: bool
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        self._rows.fill(0)
        for i, row in enumerate(rows):
            if i >= self._row_count:
                break
            self._rows[i, :] = row.cells

        slot = min(self._cell_count - 1, int(max(0.0, min(1.0, horizontal_position)) * self._cell_count))

        return GameSnapshot(
            fish=FishSnapshot(
                oxygen_supply=oxygen_supply,
                horizontal_position=horizontal_position,
                alive=alive
            ),
            fish_slot=slot,
            difficulty=difficulty,
            elapsed_time=elapsed_time,
            ticks=ticks,
            ended=ended,
            rows=self._rows.copy()
        )
