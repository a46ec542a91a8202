"""
Row Generator
=============

Produces the rows of water, algae and oxygen bubbles that scroll toward the
fish. Higher difficulty means fewer bubbles and denser algae; algae density
grows with the square of difficulty to model overpopulation.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional, Protocol, Tuple

from algae_race.race_core.config_loader import GameConfig, get_config


class RowCell(IntEnum):
    """Content of one horizontal slot in a row."""
    WATER = 0
    ALGAE = 1
    OXYGEN = 2


class RandomSource(Protocol):
    """Anything that draws uniform floats in [0, 1)."""

    def random(self) -> float:
        ...


@dataclass(frozen=True)
class Row:
    """One horizontal scan-line of the play field."""
    cells: Tuple[RowCell, ...]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[RowCell]:
        return iter(self.cells)

    def __getitem__(self, index: int) -> RowCell:
        return self.cells[index]

    @property
    def oxygen_index(self) -> Optional[int]:
        """Index of the oxygen bubble, or None if the row has none."""
        for i, cell in enumerate(self.cells):
            if cell == RowCell.OXYGEN:
                return i
        return None

    @property
    def algae_count(self) -> int:
        """Number of algae cells."""
        return sum(1 for cell in self.cells if cell == RowCell.ALGAE)

    def slot_for(self, position: float) -> int:
        """
        Map a horizontal position in [0, 1] to a cell index.

        Args:
            position: Fraction of screen width.

        Returns:
            Cell index in [0, len(row)).
        """
        position = max(0.0, min(1.0, position))
        return min(len(self.cells) - 1, int(position * len(self.cells)))

    def consumed(self, index: int) -> "Row":
        """Copy of this row with the cell at index turned back into water."""
        cells = list(self.cells)
        cells[index] = RowCell.WATER
        return Row(tuple(cells))


class RowGenerator:
    """
    Probabilistic row factory.

    Each row holds at most one oxygen bubble: one is placed when the first
    draw lands below 1 - difficulty. Every other cell turns into algae
    with probability difficulty ** 2.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None
    ):
        """
        Initialize row generator.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
            rng: Injected random source. Overrides seed when given.
        """
        if config is None:
            config = get_config()

        self._cell_count = config.cell_count
        self._injected = rng is not None
        self._rng: RandomSource = rng if rng is not None else random.Random(seed)

    @property
    def cell_count(self) -> int:
        """Number of cells in every generated row."""
        return self._cell_count

    def generate(self, difficulty: float) -> Row:
        """
        Generate one row.

        Args:
            difficulty: Probability in [0, 1]. Values outside are clamped.

        Returns:
            A new immutable Row.
        """
        difficulty = max(0.0, min(1.0, difficulty))
        cells = [RowCell.WATER] * self._cell_count

        oxygen_index = -1
        if self._rng.random() < 1.0 - difficulty:
            oxygen_index = min(
                self._cell_count - 1,
                int(self._rng.random() * self._cell_count)
            )
            cells[oxygen_index] = RowCell.OXYGEN

        algae_chance = difficulty * difficulty
        for i in range(self._cell_count):
            if i == oxygen_index:
                continue
            if self._rng.random() <= algae_chance:
                cells[i] = RowCell.ALGAE

        return Row(tuple(cells))

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reseed the owned random source.

        Injected sources are left alone; their owner controls them.

        Args:
            seed: New random seed. Keeps current stream if None.
        """
        if seed is not None and not self._injected:
            self._rng = random.Random(seed)
