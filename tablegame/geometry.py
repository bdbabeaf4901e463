"""
Collision geometry for grid entities.

Every test works on "sprite-like" objects: anything with integer ``x``,
``y``, ``width`` and ``height`` attributes. ``velocity_x``/``velocity_y``
default to 0 and ``polygon`` to an empty list when absent, so bare
``PolygonCell`` objects and ad-hoc probes can be tested directly.

Polygon collision is exact cell-set membership: every polygon cell is
treated as 1x1 at its own (x, y).
"""

from typing import Any, Iterable, List, Optional, Set, Tuple

DIRECTIONS = ('left', 'right', 'above', 'below')


def overlaps(ax: int, ay: int, aw: int, ah: int,
             bx: int, by: int, bw: int, bh: int) -> bool:
    """True iff the two axis-aligned rectangles intersect on both axes."""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def _polygon(entity: Any) -> List[Any]:
    return getattr(entity, 'polygon', None) or []


def _rect(entity: Any) -> Tuple[int, int, int, int]:
    return entity.x, entity.y, entity.width, entity.height


def _cells(entity: Any) -> Iterable[Tuple[int, int]]:
    """Cell coordinates of an entity; a plain rectangle contributes its origin."""
    polygon = _polygon(entity)
    if not polygon:
        return [(entity.x, entity.y)]
    return [(cell.x, cell.y) for cell in polygon]


def colliding_polygons(e1: Any, e2: Any) -> bool:
    """True iff the two entities share at least one cell coordinate."""
    occupied: Set[Tuple[int, int]] = set(_cells(e1))
    return any(cell in occupied for cell in _cells(e2))


def colliding_entities(e1: Any, e2: Optional[Any]) -> bool:
    """Collision test between two entities (polygon-aware)."""
    if e2 is None:
        return False
    if _polygon(e1) or _polygon(e2):
        return colliding_polygons(e1, e2)
    return overlaps(*_rect(e1), *_rect(e2))


def _step(velocity: Any) -> int:
    return abs(velocity) if velocity else 1


def approaching_from(direction: str, mover: Any, target: Any) -> bool:
    """
    Predict whether ``mover`` overlaps ``target`` one step ahead.

    The step is ``abs(velocity)`` along the relevant axis, or one cell when
    that velocity is zero. ``direction`` names the side of the target the
    mover comes from: left (moving right), right (moving left), above
    (moving down) or below (moving up).
    """
    x, y, w, h = _rect(mover)
    if direction == 'left':
        x += _step(getattr(mover, 'velocity_x', 0))
    elif direction == 'right':
        x -= _step(getattr(mover, 'velocity_x', 0))
    elif direction == 'above':
        y += _step(getattr(mover, 'velocity_y', 0))
    elif direction == 'below':
        y -= _step(getattr(mover, 'velocity_y', 0))
    else:
        raise ValueError(f"Unknown direction {direction!r}, expected one of {DIRECTIONS}")
    return overlaps(x, y, w, h, *_rect(target))


def colliding_from_left(mover: Any, target: Any) -> bool:
    return approaching_from('left', mover, target)


def colliding_from_right(mover: Any, target: Any) -> bool:
    return approaching_from('right', mover, target)


def colliding_from_above(mover: Any, target: Any) -> bool:
    return approaching_from('above', mover, target)


def colliding_from_below(mover: Any, target: Any) -> bool:
    return approaching_from('below', mover, target)


class _Probe:
    """Stationary copy of a target rectangle, shifted horizontally."""

    velocity_x = 0
    velocity_y = 0

    def __init__(self, target: Any, dx: int):
        self.x = target.x + dx
        self.y = target.y
        self.width = target.width
        self.height = target.height


def adjacent(e1: Any, e2: Any, include_corners: bool = False) -> bool:
    """
    True if ``e1`` is about to touch ``e2`` from any side.

    With ``include_corners`` the four diagonal corners are checked too, via
    probes of the target shifted one cell left and right.
    """
    if abs(e1.x - e2.x) > 1 or abs(e1.y - e2.y) > 1:
        return False

    sides = (
        colliding_from_above(e1, e2)
        or colliding_from_below(e1, e2)
        or colliding_from_left(e1, e2)
        or colliding_from_right(e1, e2)
    )
    if sides or not include_corners:
        return sides

    return (
        colliding_from_below(e1, _Probe(e2, -1))      # bottom left
        or colliding_from_below(e1, _Probe(e2, 1))    # bottom right
        or colliding_from_above(e1, _Probe(e2, -1))   # top left
        or colliding_from_above(e1, _Probe(e2, 1))    # top right
    )
