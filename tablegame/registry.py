"""
Entity registry - named sprites and named global values for one engine.

Both namespaces are plain insertion-ordered dicts. Sprite draw order is
registry order, which is why move_to_top() re-inserts a sprite.
"""

import copy
import re
from typing import Any, Dict, Mapping, Optional, Pattern, Union

from tablegame.logging import get_logger
from tablegame.sprite import DEFAULT_COLOR, Sprite

log = get_logger('registry')

NamePattern = Union[str, Pattern[str]]


def _matching(items: Dict[str, Any], pattern: NamePattern) -> Dict[str, Any]:
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    return {name: value for name, value in items.items() if regex.search(name)}


class EntityRegistry:
    """Owns the live sprite and global-variable tables."""

    def __init__(self, default_color: Any = DEFAULT_COLOR):
        self.default_color = default_color
        self._sprites: Dict[str, Sprite] = {}
        self._globals: Dict[str, Any] = {}

    # =========================================================================
    # Sprites
    # =========================================================================

    def register_sprite(self, name: str, options: Optional[Mapping[str, Any]] = None) -> Sprite:
        """Create a sprite from options, replacing any sprite of the same name."""
        sprite = Sprite.from_options(name, options, self.default_color)
        # Overwriting keeps the old draw-order slot
        self._sprites[name] = sprite
        return sprite

    def unregister_sprite(self, name_or_sprite: Union[str, Sprite]) -> None:
        """Remove a sprite by name or by instance. Missing names are ignored."""
        name = name_or_sprite if isinstance(name_or_sprite, str) else name_or_sprite.name
        self._sprites.pop(name, None)

    def get_sprite(self, name: str) -> Optional[Sprite]:
        return self._sprites.get(name)

    def get_sprites_matching(self, pattern: NamePattern) -> Dict[str, Sprite]:
        """All sprites whose name matches ``pattern`` (regex search)."""
        return _matching(self._sprites, pattern)

    def get_all_sprites(self) -> Dict[str, Sprite]:
        """The live sprite table (not a copy)."""
        return self._sprites

    def move_to_top(self, name: str) -> Optional[Sprite]:
        """Re-register a sprite from a deep copy of itself so it draws last.

        Returns the new sprite instance, or None if the sprite is missing or
        its data cannot be copied (in which case nothing changes).
        """
        sprite = self._sprites.get(name)
        if sprite is None:
            return None
        try:
            options = sprite.to_options()
        except (TypeError, copy.Error) as e:
            log.warning("move_to_top(%s) skipped: %s", name, e)
            return None
        self.unregister_sprite(name)
        return self.register_sprite(name, options)

    # =========================================================================
    # Globals
    # =========================================================================

    def register_global(self, name: str, value: Any) -> None:
        self._globals[name] = value

    def unregister_global(self, name: str) -> None:
        self._globals.pop(name, None)

    def get_global(self, name: str, default: Any = None) -> Any:
        return self._globals.get(name, default)

    def set_global(self, name: str, value: Any) -> None:
        self._globals[name] = value

    def get_globals_matching(self, pattern: NamePattern) -> Dict[str, Any]:
        return _matching(self._globals, pattern)

    def get_all_globals(self) -> Dict[str, Any]:
        return self._globals

    def clear(self) -> None:
        """Drop every sprite and global."""
        self._sprites.clear()
        self._globals.clear()

    def __len__(self) -> int:
        return len(self._sprites)

    def __contains__(self, name: str) -> bool:
        return name in self._sprites
