"""
Sprite - the named, drawable and collidable entity of a grid game.

A sprite is either a single rectangle (x, y, width, height) or, when its
polygon is non-empty, the union of the polygon's unit cells. Velocity is
advisory: the engine never applies it, game update code does.
"""

import copy
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

DEFAULT_COLOR = "#eee"


@dataclass
class PolygonCell:
    """One sub-rectangle of a sprite polygon. ``color`` overrides the sprite's."""
    x: int = 0
    y: int = 0
    width: int = 1
    height: int = 1
    color: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union['PolygonCell', Mapping[str, Any]]) -> 'PolygonCell':
        """Copy a PolygonCell, or build one from a plain mapping of its fields."""
        if isinstance(value, PolygonCell):
            return replace(value)
        return cls(
            x=value.get('x') or 0,
            y=value.get('y') or 0,
            width=_size(value, 'width'),
            height=_size(value, 'height'),
            color=value.get('color') or None,
        )


def _size(options: Mapping[str, Any], key: str) -> int:
    """Width/height default to 1 unless explicitly given (0 included)."""
    value = options.get(key)
    return 1 if value is None else value


@dataclass
class Sprite:
    """A named grid entity."""

    name: str

    # Transform
    x: int = 0
    y: int = 0
    width: int = 1
    height: int = 1

    # Movement (advisory)
    velocity_x: int = 0
    velocity_y: int = 0

    # Visual
    color: Any = DEFAULT_COLOR

    # Shape override: when non-empty, replaces x/y/width/height entirely
    polygon: List[PolygonCell] = field(default_factory=list)

    @classmethod
    def from_options(cls, name: str, options: Optional[Mapping[str, Any]] = None,
                     default_color: Any = DEFAULT_COLOR) -> 'Sprite':
        """Build a sprite by merging ``options`` over the defaults.

        Missing or None values fall back to defaults, an empty colour falls
        back to ``default_color``, and an explicit ``width=0``/``height=0``
        is kept (a zero size draws an edge line).
        """
        options = options or {}
        polygon = options.get('polygon') or []
        return cls(
            name=name,
            x=options.get('x') or 0,
            y=options.get('y') or 0,
            width=_size(options, 'width'),
            height=_size(options, 'height'),
            velocity_x=options.get('velocity_x') or 0,
            velocity_y=options.get('velocity_y') or 0,
            color=options.get('color') or default_color,
            polygon=[PolygonCell.coerce(cell) for cell in polygon],
        )

    def to_options(self) -> Dict[str, Any]:
        """Deep copy of the sprite's field data, suitable for from_options()."""
        options = {f.name: copy.deepcopy(getattr(self, f.name)) for f in fields(self)}
        del options['name']
        return options

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        """Return (x, y, width, height) of the single-rectangle form."""
        return (self.x, self.y, self.width, self.height)

    def shift_polygons(self, key: str, value: Union[Any, Callable[[Any], Any]],
                       replace: bool = False) -> None:
        """Update one field on every polygon cell.

        Args:
            key: PolygonCell field name (e.g. 'x', 'color')
            value: Amount to add, replacement value, or a function of the
                current value returning either
            replace: If True, the value replaces the field instead of being added
        """
        for cell in self.polygon:
            current = getattr(cell, key)
            shift = value(current) if callable(value) else value
            setattr(cell, key, shift if replace else current + shift)
