"""
Algae Race
==========

Session simulation for the Algae Race educational game: a fish at the
bottom of the screen survives on oxygen bubbles while algae overpopulate
the water.

- Row generation (seeded, difficulty driven)
- Fish oxygen and position model
- Session progression, collisions and termination

All tunable parameters are in game_config.yaml.
"""
