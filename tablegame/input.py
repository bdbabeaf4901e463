"""
Input events and handler bindings.

Input sources convert host events into InputEvent objects with grid-cell
coordinates. InputBindings holds one callback per event kind; the
underlying listener for a kind is subscribed once, and binding a new game
only swaps the callback.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set

import pygame

from tablegame.logging import get_logger

log = get_logger('input')

INPUT_KINDS = (
    'keydown',
    'keyup',
    'keypress',
    'click',
    'mousedown',
    'mouseup',
    'mousemove',
    'mouseenter',
    'mouseleave',
    'mouseover',
    'mouseout',
    'mousewheel',
    'contextmenu',
)

Handler = Callable[[Any, 'InputEvent'], None]


@dataclass(frozen=True)
class InputEvent:
    """Immutable input event from any source.

    Attributes:
        kind: One of INPUT_KINDS
        key: Key name for keyboard events ('up', 'w', 'space', ...)
        x, y: Grid cell under the pointer for mouse events (None off-grid)
        button: Mouse button number, or wheel direction (+1 up, -1 down)
        timestamp: Seconds, from the monotonic clock
    """
    kind: str
    key: Optional[str] = None
    x: Optional[int] = None
    y: Optional[int] = None
    button: Optional[int] = None
    timestamp: float = 0.0

    def __post_init__(self):
        if self.kind not in INPUT_KINDS:
            raise ValueError(f"Unknown input kind {self.kind!r}")


def _noop(engine: Any, event: InputEvent) -> None:
    pass


class InputBindings:
    """Active input callbacks, one per event kind."""

    def __init__(self, subscribe: Optional[Callable[[str], None]] = None):
        """
        Args:
            subscribe: Called the first time a kind is bound, to attach the
                host listener for it
        """
        self._subscribe = subscribe
        self._subscribed: Set[str] = set()
        self._handlers: Dict[str, Handler] = {}

    def bind(self, kind: str, handler: Optional[Handler]) -> None:
        """Install ``handler`` for ``kind``; None unbinds to a no-op."""
        if kind not in INPUT_KINDS:
            raise ValueError(f"Unknown input kind {kind!r}")

        if handler is None:
            if kind in self._handlers:
                self._handlers[kind] = _noop
            return

        self._handlers[kind] = handler
        if kind not in self._subscribed:
            self._subscribed.add(kind)
            if self._subscribe is not None:
                self._subscribe(kind)
            log.debug("Subscribed to %s", kind)

    def bind_all(self, handlers: Dict[str, Optional[Handler]]) -> None:
        """Bind every kind: kinds missing from ``handlers`` are unbound."""
        for kind in INPUT_KINDS:
            self.bind(kind, handlers.get(kind))

    def is_subscribed(self, kind: str) -> bool:
        return kind in self._subscribed

    def handler(self, kind: str) -> Optional[Handler]:
        return self._handlers.get(kind)

    def dispatch(self, engine: Any, event: InputEvent) -> bool:
        """Call the handler for ``event.kind``. Returns False if none is bound."""
        handler = self._handlers.get(event.kind)
        if handler is None:
            return False
        handler(engine, event)
        return True


class PygameInputSource:
    """Translates pygame events into InputEvents.

    ``cell_at`` maps a pixel position to grid coordinates (or None when the
    pointer is off the grid).
    """

    def __init__(self, cell_at: Callable[[tuple], Optional[tuple]]):
        self._cell_at = cell_at
        self._listening: Set[str] = set()

    def listen(self, kind: str) -> None:
        """Start producing events of ``kind``; usable as an InputBindings subscriber."""
        self._listening.add(kind)

    def _make(self, kind: str, **kwargs) -> Optional[InputEvent]:
        if kind not in self._listening:
            return None
        return InputEvent(kind=kind, timestamp=time.monotonic(), **kwargs)

    def _pointer(self, pos: tuple) -> Dict[str, Optional[int]]:
        cell = self._cell_at(pos)
        if cell is None:
            return {'x': None, 'y': None}
        return {'x': cell[0], 'y': cell[1]}

    def translate(self, event: pygame.event.Event) -> List[InputEvent]:
        """Convert one pygame event into zero or more InputEvents."""
        produced: List[Optional[InputEvent]] = []

        if event.type == pygame.KEYDOWN:
            key = pygame.key.name(event.key)
            produced.append(self._make('keydown', key=key))
            if getattr(event, 'unicode', ''):
                produced.append(self._make('keypress', key=event.unicode))
        elif event.type == pygame.KEYUP:
            produced.append(self._make('keyup', key=pygame.key.name(event.key)))
        elif event.type == pygame.MOUSEBUTTONDOWN:
            pointer = self._pointer(event.pos)
            if event.button == 3:
                produced.append(self._make('contextmenu', button=event.button, **pointer))
            produced.append(self._make('mousedown', button=event.button, **pointer))
        elif event.type == pygame.MOUSEBUTTONUP:
            pointer = self._pointer(event.pos)
            produced.append(self._make('mouseup', button=event.button, **pointer))
            if event.button == 1:
                produced.append(self._make('click', button=event.button, **pointer))
        elif event.type == pygame.MOUSEWHEEL:
            pointer = self._pointer(pygame.mouse.get_pos())
            produced.append(self._make('mousewheel', button=event.y, **pointer))
        elif event.type == pygame.MOUSEMOTION:
            produced.append(self._make('mousemove', **self._pointer(event.pos)))
        elif event.type == pygame.WINDOWENTER:
            produced.append(self._make('mouseenter'))
            produced.append(self._make('mouseover'))
        elif event.type == pygame.WINDOWLEAVE:
            produced.append(self._make('mouseleave'))
            produced.append(self._make('mouseout'))

        return [e for e in produced if e is not None]
