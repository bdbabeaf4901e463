"""
tablegame - a small real-time game engine for grid games.

Games are named sprites on a width x height grid of cells, advanced by a
fixed-tick scheduler, redrawn every tick, and driven by keyboard and mouse
input. The bundled pygame host runs the demo games.
"""

from tablegame.config import ConfigError, GameConfig, Palette, TableGameError, load_game_file
from tablegame.engine import GameEngine
from tablegame.flash import FlashPosition
from tablegame.input import InputBindings, InputEvent
from tablegame.render import MemoryGrid, PygameGrid
from tablegame.sprite import PolygonCell, Sprite
from tablegame.timers import TimerQueue

__version__ = "0.1.0"

__all__ = [
    'ConfigError',
    'FlashPosition',
    'GameConfig',
    'GameEngine',
    'InputBindings',
    'InputEvent',
    'MemoryGrid',
    'Palette',
    'PolygonCell',
    'PygameGrid',
    'Sprite',
    'TableGameError',
    'TimerQueue',
    'load_game_file',
]
