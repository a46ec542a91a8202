"""
Tests for the fish oxygen/position model.
"""

import numpy as np
import pytest

from algae_race.race_core.fish import Fish


@pytest.fixture
def fish():
    return Fish()


class TestFishDefaults:
    """Test spawn state."""

    def test_defaults(self, fish):
        """A new fish has full oxygen and sits mid-screen."""
        assert fish.oxygen_supply == 1.0
        assert fish.horizontal_position == 0.5
        assert fish.is_alive

    def test_initial_values_clamped(self):
        """Out-of-range starting values are clamped."""
        fish = Fish(oxygen_supply=3.0, horizontal_position=-1.0)

        assert fish.oxygen_supply == 1.0
        assert fish.horizontal_position == 0.0


class TestOxygen:
    """Test the oxygen chokepoint."""

    def test_oxygen_clamped_for_random_deltas(self):
        """Oxygen stays in [0, 1] after every update."""
        rng = np.random.default_rng(42)
        fish = Fish()

        for delta in rng.uniform(-0.3, 0.3, size=500):
            fish.update_oxygen(float(delta))
            assert 0.0 <= fish.oxygen_supply <= 1.0

    def test_oxygen_never_exceeds_max(self, fish):
        """Oxygen saturates at 1."""
        fish.update_oxygen(5.0)
        assert fish.oxygen_supply == 1.0

    def test_death_at_zero(self, fish):
        """Draining all oxygen kills the fish."""
        fish.update_oxygen(-2.0)

        assert fish.oxygen_supply == 0.0
        assert not fish.is_alive

    def test_no_resurrection(self, fish):
        """A dead fish stays dead."""
        fish.update_oxygen(-1.0)
        fish.update_oxygen(0.5)
        fish.move(0.1)

        assert fish.oxygen_supply == 0.0
        assert not fish.is_alive

    def test_oxygen_listener(self):
        """The oxygen listener receives the new value."""
        seen = []
        fish = Fish(oxygen_listener=seen.append)

        fish.update_oxygen(-0.25)

        assert seen == [pytest.approx(0.75)]


class TestMovement:
    """Test movement and its oxygen cost."""

    def test_move_right(self, fish):
        """Moving right shifts position and costs oxygen."""
        fish.move(0.05)

        assert fish.horizontal_position == pytest.approx(0.55)
        assert fish.oxygen_supply == pytest.approx(0.98)

    def test_move_left(self, fish):
        """Moving left shifts position and costs oxygen."""
        fish.move(-0.05)

        assert fish.horizontal_position == pytest.approx(0.45)
        assert fish.oxygen_supply == pytest.approx(0.98)

    def test_position_clamped_for_random_moves(self):
        """Position stays in [0, 1] for any sequence of moves."""
        rng = np.random.default_rng(7)
        fish = Fish(movement_cost=0.0)

        for delta in rng.uniform(-0.8, 0.8, size=500):
            fish.move(float(delta))
            assert 0.0 <= fish.horizontal_position <= 1.0

    def test_no_wraparound(self, fish):
        """Position stops at the screen edges."""
        fish.move(10.0)
        assert fish.horizontal_position == 1.0

        fish.move(-10.0)
        assert fish.horizontal_position == 0.0

    def test_blocked_move_still_costs_oxygen(self):
        """Pushing against the wall is still a move."""
        fish = Fish(horizontal_position=1.0)

        fish.move(0.05)

        assert fish.horizontal_position == 1.0
        assert fish.oxygen_supply == pytest.approx(0.98)

    def test_listeners_order(self):
        """Movement is reported before the oxygen cost."""
        events = []
        fish = Fish(
            oxygen_listener=lambda v: events.append(("oxygen", v)),
            movement_listener=lambda p: events.append(("movement", p))
        )

        fish.move(0.1)

        assert [kind for kind, _ in events] == ["movement", "oxygen"]

    def test_moving_until_exhausted(self):
        """Fifty moves at 0.02 each use up a full supply."""
        fish = Fish()

        moves = 0
        while fish.is_alive:
            fish.move(0.01 if moves % 2 else -0.01)
            moves += 1

        assert moves == pytest.approx(50, abs=1)
