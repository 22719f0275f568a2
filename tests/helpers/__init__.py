"""Shared test helpers."""

from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.game_builder import GameBuilder, SeededGame
from tests.helpers.scripted_randomness import ScriptedRandomness

__all__ = ["FakeTimeAuthority", "GameBuilder", "ScriptedRandomness", "SeededGame"]
