"""Pytest fixtures for tablegame tests."""
import os

# Headless pygame for the grid and host tests
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pytest

from tablegame.config import GameConfig
from tablegame.details import MemoryDetailsSink
from tablegame.engine import GameEngine
from tablegame.render import MemoryGrid
from tablegame.timers import TimerQueue


@pytest.fixture
def timers():
    return TimerQueue()


@pytest.fixture
def grid():
    return MemoryGrid(10, 6)


@pytest.fixture
def sink():
    return MemoryDetailsSink()


@pytest.fixture
def make_engine(grid, timers, sink):
    """Factory: build an engine on the shared grid/timers/sink fixtures."""

    def _make(**config_kwargs) -> GameEngine:
        return GameEngine(GameConfig(**config_kwargs), grid, timers=timers, details_sink=sink)

    return _make
