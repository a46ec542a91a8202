"""
Core Game
=========

Session controller combining the fish, the row generator and the rules.

One tick = passive decay, difficulty growth, row scroll with collisions,
then the death check.
"""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Deque, Dict, Optional, Tuple

from algae_race.race_core.config_loader import GameConfig, get_config
from algae_race.race_core.fish import Fish
from algae_race.race_core.row_generator import RandomSource, Row, RowCell, RowGenerator
from algae_race.race_core.rules import GameRules
from algae_race.race_core.state_snapshot import GameSnapshot, SnapshotBuilder

# Tolerance when turning scroll distance into whole rows
SCROLL_EPSILON = 1e-9


class SessionState(Enum):
    RUNNING = "running"
    ENDED = "ended"


@dataclass(frozen=True)
class GameEvent:
    """Discrete change event sent to the owner's callback."""
    kind: str       # oxygen, movement, bubble, algae, row_spawned, ended
    value: float
    tick: int


@dataclass
class TickResult:
    """Result of a single simulation tick."""
    snapshot: GameSnapshot
    ended: bool
    termination_reason: str
    delta_oxygen: float
    bubbles: int
    algae_hits: int
    rows_passed: int


EventCallback = Callable[[GameEvent], None]


class CoreGame:
    """
    Main session simulation class.

    Orchestrates:
    - Fish state and movement commands
    - Row generation (seeded RNG)
    - Difficulty progression
    - Row scroll and fish/row collisions
    - Termination (the fish suffocating)
    - State snapshots

    The session is driven from outside: call tick() at a fixed rate and
    move_left()/move_right() between ticks.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        event_callback: Optional[EventCallback] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            rng: Injected random source for the row generator.
            event_callback: Optional receiver for GameEvent notifications.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._event_callback = event_callback

        # Initialize subsystems
        self._generator = RowGenerator(config, seed=seed, rng=rng)
        self._rules = GameRules(config)
        self._snapshot_builder = SnapshotBuilder(config)

        self._start_session()

    def _start_session(self) -> None:
        """Put every piece of session state back to its initial value."""
        fish_config = self._config.fish
        self._fish = Fish(
            oxygen_supply=fish_config.initial_oxygen,
            horizontal_position=fish_config.initial_position,
            movement_cost=fish_config.movement_cost,
            oxygen_listener=self._on_oxygen,
            movement_listener=self._on_movement
        )

        self._state = SessionState.RUNNING
        self._termination_reason = ""
        self._difficulty = self._rules.difficulty.initial
        self._ticks = 0
        self._elapsed_time = 0.0
        self._distance = 0.0
        self._rows_passed = 0
        self._bubbles_collected = 0
        self._algae_contacts = 0

        # Oldest (nearest the fish) first; appending to a full buffer evicts it
        buffer_size = self._config.row_buffer_size
        self._rows: Deque[Row] = deque(maxlen=buffer_size)
        for _ in range(buffer_size):
            self._rows.append(self._generator.generate(self._difficulty))

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def fish(self) -> Fish:
        return self._fish

    @property
    def rows(self) -> Tuple[Row, ...]:
        """Visible rows, nearest the fish first."""
        return tuple(self._rows)

    @property
    def difficulty(self) -> float:
        return self._difficulty

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_over(self) -> bool:
        """True if the session has ended."""
        return self._state is SessionState.ENDED

    @property
    def termination_reason(self) -> str:
        """Reason for session end, or empty string."""
        return self._termination_reason

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def elapsed_time(self) -> float:
        """Seconds survived so far."""
        return self._elapsed_time

    @property
    def distance(self) -> float:
        """Rows traveled since session start (fractional)."""
        return self._distance

    @property
    def rows_passed(self) -> int:
        return self._rows_passed

    @property
    def bubbles_collected(self) -> int:
        return self._bubbles_collected

    @property
    def algae_contacts(self) -> int:
        return self._algae_contacts

    @property
    def rules(self) -> GameRules:
        return self._rules

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _emit(self, kind: str, value: float) -> None:
        if self._event_callback is not None:
            self._event_callback(GameEvent(kind=kind, value=value, tick=self._ticks))

    def _on_oxygen(self, oxygen_supply: float) -> None:
        self._emit("oxygen", oxygen_supply)

    def _on_movement(self, position: float) -> None:
        self._emit("movement", position)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Reset to a fresh session.

        Args:
            seed: New random seed. Uses previous if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed
        if self._seed is not None:
            self._generator.reset(self._seed)

        self._start_session()
        return self.snapshot()

    def move_left(self) -> None:
        """Move the fish one step left. No-op once the session has ended."""
        self._move(-self._config.fish.movement_step)

    def move_right(self) -> None:
        """Move the fish one step right. No-op once the session has ended."""
        self._move(self._config.fish.movement_step)

    def _move(self, delta: float) -> None:
        if self.is_over:
            return
        self._fish.move(delta)
        self._check_termination()

    def tick(self, delta_time: Optional[float] = None) -> TickResult:
        """
        Advance the simulation by one tick.

        Args:
            delta_time: Seconds since the previous tick. Uses timing.dt if None.
                Only the row scroll depends on it; decay and difficulty
                growth are applied once per tick.

        Returns:
            TickResult with the new state and what happened this tick.
        """
        if self.is_over:
            return TickResult(
                snapshot=self.snapshot(),
                ended=True,
                termination_reason=self._termination_reason,
                delta_oxygen=0.0,
                bubbles=0,
                algae_hits=0,
                rows_passed=0
            )

        if delta_time is None:
            delta_time = self._config.timing.dt
        delta_time = max(0.0, delta_time)

        oxygen_before = self._fish.oxygen_supply
        bubbles_before = self._bubbles_collected
        algae_before = self._algae_contacts
        passed_before = self._rows_passed

        self._ticks += 1
        self._elapsed_time += delta_time

        # Passive decay
        self._fish.update_oxygen(-self._rules.oxygen.passive_decay(self._difficulty))

        # Difficulty growth
        self._difficulty = self._rules.difficulty.next_difficulty(self._difficulty)

        # Row scroll
        self._distance += self._config.timing.scroll_speed * delta_time
        rows_due = math.floor(self._distance + SCROLL_EPSILON)
        while self._fish.is_alive and self._rows_passed < rows_due:
            self._pass_nearest_row()

        self._check_termination()

        return TickResult(
            snapshot=self.snapshot(),
            ended=self.is_over,
            termination_reason=self._termination_reason,
            delta_oxygen=self._fish.oxygen_supply - oxygen_before,
            bubbles=self._bubbles_collected - bubbles_before,
            algae_hits=self._algae_contacts - algae_before,
            rows_passed=self._rows_passed - passed_before
        )

    def _pass_nearest_row(self) -> None:
        """Resolve the nearest row against the fish, then replace it."""
        row = self._rows[0]
        slot = row.slot_for(self._fish.horizontal_position)
        cell = row[slot]

        if cell == RowCell.OXYGEN:
            self._rows[0] = row.consumed(slot)
            self._bubbles_collected += 1
            self._fish.update_oxygen(self._rules.oxygen.bubble_gain)
            self._emit("bubble", self._fish.oxygen_supply)
        elif cell == RowCell.ALGAE:
            self._algae_contacts += 1
            self._fish.update_oxygen(-self._rules.oxygen.algae_penalty(self._difficulty))
            self._emit("algae", self._fish.oxygen_supply)

        self._rows_passed += 1
        self._rows.append(self._generator.generate(self._difficulty))
        self._emit("row_spawned", self._difficulty)

    def _check_termination(self) -> None:
        """Check all termination conditions."""
        result = self._rules.termination.check_termination(self._fish.is_alive)
        if result.terminated and not self.is_over:
            self._state = SessionState.ENDED
            self._termination_reason = result.reason
            self._emit("ended", self._elapsed_time)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            oxygen_supply=self._fish.oxygen_supply,
            horizontal_position=self._fish.horizontal_position,
            alive=self._fish.is_alive,
            rows=self._rows,
            difficulty=self._difficulty,
            elapsed_time=self._elapsed_time,
            ticks=self._ticks,
            ended=self.is_over
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "survival_time": self._elapsed_time,
            "ticks": self._ticks,
            "difficulty": self._difficulty,
            "oxygen": self._fish.oxygen_supply,
            "position": self._fish.horizontal_position,
            "bubbles_collected": self._bubbles_collected,
            "algae_contacts": self._algae_contacts,
            "rows_passed": self._rows_passed,
            "terminated_reason": self._termination_reason,
        }
