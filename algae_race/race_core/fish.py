"""
Fish Model
==========

Player entity: horizontal position and oxygen supply, both stored as
fractions in [0, 1]. Every oxygen change goes through update_oxygen so the
clamp can never be bypassed.
"""

from __future__ import annotations

from typing import Callable, Optional

OxygenListener = Callable[[float], None]
MovementListener = Callable[[float], None]


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


class Fish:
    """
    The fish at the bottom of the screen.

    Once the oxygen supply reaches 0 the fish is dead for good: further moves
    and oxygen updates are ignored.
    """

    def __init__(
        self,
        oxygen_supply: float = 1.0,
        horizontal_position: float = 0.5,
        movement_cost: float = 0.02,
        oxygen_listener: Optional[OxygenListener] = None,
        movement_listener: Optional[MovementListener] = None
    ):
        """
        Initialize fish.

        Args:
            oxygen_supply: Starting oxygen as a fraction of maximum.
            horizontal_position: Starting position as a fraction of width.
            movement_cost: Oxygen spent on every move.
            oxygen_listener: Called with the new oxygen value after each update.
            movement_listener: Called with the new position after each move.
        """
        self._oxygen_supply = _clamp_unit(oxygen_supply)
        self._horizontal_position = _clamp_unit(horizontal_position)
        self._movement_cost = movement_cost
        self.oxygen_listener = oxygen_listener
        self.movement_listener = movement_listener

    @property
    def oxygen_supply(self) -> float:
        """Oxygen as a fraction of maximum."""
        return self._oxygen_supply

    @property
    def horizontal_position(self) -> float:
        """Position as a fraction of screen width."""
        return self._horizontal_position

    @property
    def movement_cost(self) -> float:
        return self._movement_cost

    @property
    def is_alive(self) -> bool:
        """True while any oxygen is left."""
        return self._oxygen_supply > 0.0

    def move(self, delta: float) -> None:
        """
        Move horizontally and pay the movement cost.

        Args:
            delta: Signed position change; negative is left.
        """
        if not self.is_alive:
            return

        self._horizontal_position = _clamp_unit(self._horizontal_position + delta)
        if self.movement_listener is not None:
            self.movement_listener(self._horizontal_position)

        self.update_oxygen(-self._movement_cost)

    def update_oxygen(self, delta: float) -> None:
        """
        Add delta to the oxygen supply, clamped to [0, 1].

        Args:
            delta: Signed oxygen change.
        """
        if not self.is_alive:
            return

        self._oxygen_supply = _clamp_unit(self._oxygen_supply + delta)
        if self.oxygen_listener is not None:
            self.oxygen_listener(self._oxygen_supply)

    def __repr__(self) -> str:
        return (f"Fish(oxygen={self._oxygen_supply:.3f}, "
                f"position={self._horizontal_position:.3f}, alive={self.is_alive})")
