"""
Tests for configuration loading and validation.
"""

import pytest

from algae_race.race_core.config_loader import (
    DEFAULTS,
    config_from_dict,
    get_config,
    load_config,
    reload_config,
)


class TestLoadConfig:
    """Test YAML loading."""

    def test_default_file_loads(self):
        """The bundled game_config.yaml loads with its values."""
        config = load_config()

        assert config.cell_count == 20
        assert config.board.visible_row_count == 8
        assert config.fish.movement_cost == 0.02
        assert config.difficulty.ceiling == 1.0

    def test_missing_file(self, tmp_path):
        """A missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_file_uses_defaults(self, tmp_path):
        """An empty file falls back to the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        config = load_config(str(path))

        assert config.oxygen.oxygen_bubble_gain == DEFAULTS["oxygen"]["oxygen_bubble_gain"]
        assert config.timing.scroll_speed == DEFAULTS["timing"]["scroll_speed"]

    def test_partial_file(self, tmp_path):
        """Options left out of a file keep their defaults."""
        path = tmp_path / "partial.yaml"
        path.write_text("board:\n  cell_unit_size: 0.1\n")

        config = load_config(str(path))

        assert config.cell_count == 10
        assert config.board.visible_row_count == DEFAULTS["board"]["visible_row_count"]

    def test_non_mapping_root(self, tmp_path):
        """A YAML root that is not a mapping is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")

        with pytest.raises(ValueError):
            load_config(str(path))

    def test_cached_config(self):
        """get_config caches until reload_config replaces it."""
        assert get_config() is get_config()
        reloaded = reload_config()
        assert get_config() is reloaded


class TestValidation:
    """Test value checks."""

    @pytest.mark.parametrize("raw", [
        {"board": {"cell_unit_size": 0.0}},
        {"board": {"cell_unit_size": 1.5}},
        {"board": {"visible_row_count": 0}},
        {"fish": {"initial_oxygen": 1.2}},
        {"fish": {"movement_cost": -0.1}},
        {"oxygen": {"oxygen_exhaustion_difficulty": 0.0}},
        {"difficulty": {"initial": 0.8, "ceiling": 0.5}},
        {"difficulty": {"growth_rate": -0.001}},
        {"timing": {"dt": 0.0}},
        {"env": {"max_episode_ticks": 0}},
    ])
    def test_invalid_values_rejected(self, raw):
        """Out-of-range values raise ValueError."""
        with pytest.raises(ValueError):
            config_from_dict(raw)

    def test_unknown_option_rejected(self):
        """Misspelled options are reported, not ignored."""
        with pytest.raises(ValueError, match="Unknown option"):
            config_from_dict({"fish": {"speed": 3}})

    def test_section_must_be_mapping(self):
        """A section given as a list is rejected."""
        with pytest.raises(ValueError):
            config_from_dict({"board": [1, 2]})

    def test_cell_count_rounds(self):
        """Cell count is the rounded inverse of the cell width."""
        assert config_from_dict({"board": {"cell_unit_size": 0.3}}).cell_count == 3
        assert config_from_dict({"board": {"cell_unit_size": 1.0}}).cell_count == 1

    def test_row_buffer_size(self):
        """The buffer holds one row more than is visible."""
        config = config_from_dict({"board": {"visible_row_count": 4}})
        assert config.row_buffer_size == 5
