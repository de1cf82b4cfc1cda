"""Pytest configuration and shared fixtures."""

import os

# Ensure headless pygame for all tests
os.environ['SDL_VIDEODRIVER'] = 'dummy'
os.environ['SDL_AUDIODRIVER'] = 'dummy'

import pytest

from treasure_dash.config import GameConfig
from treasure_dash.driver import GameDriver
from treasure_dash.progression import Progression


@pytest.fixture
def game_config():
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def progression(game_config):
    return Progression(game_config)


@pytest.fixture
def state(progression):
    """Fresh session in the menu."""
    return progression.new_state()


@pytest.fixture
def driver(game_config):
    """Driver with level 1 running."""
    d = GameDriver(game_config)
    d.start_level(1)
    return d
