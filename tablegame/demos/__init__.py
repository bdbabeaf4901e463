"""
Bundled demo games.

Each demo module provides NAME, DESCRIPTION and ``get_game_config(**overrides)``.
Demos are looked up by slug ('ping_pong') or display name ('Ping Pong').
"""

from types import ModuleType
from typing import Dict, List

from tablegame.config import GameConfig
from tablegame.demos import ping_pong, snake

# Display order is the Tab cycling order in the host
DEMO_GAMES: Dict[str, ModuleType] = {
    'ping_pong': ping_pong,
    'snake': snake,
}


def _slug(name: str) -> str:
    return name.strip().lower().replace(' ', '_').replace('-', '_')


def get_demo(name: str, /, **overrides) -> GameConfig:
    """
    Build the config of a bundled demo.

    Args:
        name: Demo slug or display name
        **overrides: GameConfig fields to replace, ``name`` included

    Raises:
        KeyError: If no demo has that name
    """
    slug = _slug(name)
    if slug not in DEMO_GAMES:
        raise KeyError(f"Unknown demo {name!r}. Available: {', '.join(DEMO_GAMES)}")
    return DEMO_GAMES[slug].get_game_config(**overrides)


def list_demos() -> List[str]:
    """Demo slugs in display order."""
    return list(DEMO_GAMES)
