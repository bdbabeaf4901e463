"""
GameEngine - a fixed-tick grid game runtime.

One engine instance owns its sprite/global registry, scoreboard, tick
scheduler, flash choreography and input bindings. Nothing is shared at
module level, so several engines can exist side by side (tests do this);
a host running one game at a time must shutdown() the old engine before
starting the next.

Control flow per live tick: update(engine) -> paint() -> onpaint(engine).
Exceptions from game callbacks are never caught by the engine.
"""

from typing import Any, Callable, Dict, Optional, Union

from tablegame import geometry
from tablegame.config import GameConfig, Palette
from tablegame.details import DetailsSink, Scoreboard
from tablegame.flash import FlashChoreographer, FlashPosition
from tablegame.input import InputBindings, InputEvent
from tablegame.logging import get_logger
from tablegame.registry import EntityRegistry, NamePattern
from tablegame.render import GridRenderer, RenderPass, clear_grid, fill_polygon, fill_rect
from tablegame.scheduler import TickScheduler
from tablegame.sprite import Sprite
from tablegame.timers import TimerGroup, TimerQueue

log = get_logger('engine')


class GameEngine:
    """A grid game: registry + render pass + scheduler + flash + input."""

    def __init__(
        self,
        config: GameConfig,
        grid: GridRenderer,
        timers: Optional[TimerQueue] = None,
        details_sink: Optional[DetailsSink] = None,
        bindings: Optional[InputBindings] = None,
    ):
        self.config = config
        self.grid = grid
        self.timers = timers if timers is not None else TimerQueue()
        self.palette: Palette = config.palette
        self.hide_on_pause = config.hide_on_pause

        self.registry = EntityRegistry(default_color=self.palette.default_color)
        self._render_pass = RenderPass(grid)
        # Everything this engine arms; the queue itself may be shared
        self.own_timers = TimerGroup(self.timers)
        self.scheduler = TickScheduler(self.own_timers, self._on_tick, interval_ms=config.delay)
        self.flash = FlashChoreographer(self.own_timers, self.pause, self.resume, self.paint)

        for name, value in config.globals.items():
            self.registry.register_global(name, value)
        for name, options in config.sprites.items():
            self.registry.register_sprite(name, options)
        self.scoreboard = Scoreboard(config.details, details_sink)

        self.bindings = bindings if bindings is not None else InputBindings()
        self.bindings.bind_all(config.handlers)

        self._started = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> 'GameEngine':
        """Run init(), paint the intro frame, and schedule the first tick."""
        if self._started:
            return self
        self._started = True
        log.info("Starting %s (%dx%d, %dms ticks)", self.config.name,
                 self.screen_width, self.screen_height, self.scheduler.interval_ms)
        self._call(self.config.init)
        self.paint()
        self.scheduler.start(self.config.initial_delay)
        return self

    def shutdown(self) -> None:
        """Stop ticking and drop every pending timer of this engine."""
        self.scheduler.stop()
        self.own_timers.cancel_all()
        log.info("Stopped %s after %d ticks", self.config.name, self.game_time)

    def advance(self, elapsed_ms: float) -> int:
        """Advance the timer queue; returns the number of callbacks fired."""
        return self.timers.advance(elapsed_ms)

    def _call(self, callback: Optional[Callable[[Any], None]]) -> None:
        if callback is not None:
            callback(self)

    def _on_tick(self) -> None:
        self._call(self.config.update)
        self.paint()

    @property
    def game_time(self) -> int:
        """Number of live ticks so far."""
        return self.scheduler.elapsed_ticks

    @property
    def screen_width(self) -> int:
        return self.grid.width

    @property
    def screen_height(self) -> int:
        return self.grid.height

    def __getattr__(self, name: str) -> Any:
        # Palette colours read as engine attributes: engine.red, engine.default_color
        palette = self.__dict__.get('palette')
        if palette is not None and hasattr(palette, name):
            return getattr(palette, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    # =========================================================================
    # Sprites and globals
    # =========================================================================

    def register_sprite(self, name: str, options: Optional[Dict[str, Any]] = None) -> Sprite:
        return self.registry.register_sprite(name, options)

    def unregister_sprite(self, name_or_sprite: Union[str, Sprite]) -> None:
        self.registry.unregister_sprite(name_or_sprite)

    def get_sprite(self, name: str) -> Optional[Sprite]:
        return self.registry.get_sprite(name)

    def get_sprites(self, pattern: Optional[NamePattern] = None) -> Dict[str, Sprite]:
        """All live sprites, or those whose name matches ``pattern``."""
        if pattern is None:
            return self.registry.get_all_sprites()
        return self.registry.get_sprites_matching(pattern)

    def move_to_top(self, name: str) -> Optional[Sprite]:
        return self.registry.move_to_top(name)

    def register_global(self, name: str, value: Any) -> None:
        self.registry.register_global(name, value)

    def unregister_global(self, name: str) -> None:
        self.registry.unregister_global(name)

    def get_global(self, name: str, default: Any = None) -> Any:
        return self.registry.get_global(name, default)

    def get_globals(self, pattern: Optional[NamePattern] = None) -> Dict[str, Any]:
        if pattern is None:
            return self.registry.get_all_globals()
        return self.registry.get_globals_matching(pattern)

    def set_global(self, name: str, value: Any) -> None:
        self.registry.set_global(name, value)

    # =========================================================================
    # Collision
    # =========================================================================

    def colliding(self, a: Any, b: Any) -> bool:
        return geometry.colliding_entities(a, b)

    def colliding_polygons(self, a: Any, b: Any) -> bool:
        return geometry.colliding_polygons(a, b)

    def colliding_from_left(self, mover: Any, target: Any) -> bool:
        return geometry.colliding_from_left(mover, target)

    def colliding_from_right(self, mover: Any, target: Any) -> bool:
        return geometry.colliding_from_right(mover, target)

    def colliding_from_above(self, mover: Any, target: Any) -> bool:
        return geometry.colliding_from_above(mover, target)

    def colliding_from_below(self, mover: Any, target: Any) -> bool:
        return geometry.colliding_from_below(mover, target)

    def touching(self, a: Any, b: Any, include_corners: bool = False) -> bool:
        return geometry.adjacent(a, b, include_corners)

    # =========================================================================
    # Drawing
    # =========================================================================

    def clear(self) -> None:
        clear_grid(self.grid)

    def fill_rect(self, x: int, y: int, width: int, height: int, color: Any = None) -> None:
        fill_rect(self.grid, x, y, width, height, color or self.palette.default_color)

    def fill_polygon(self, polygon, color: Any = None) -> None:
        fill_polygon(self.grid, polygon, color or self.palette.default_color)

    def paint(self) -> None:
        """Redraw every sprite (blank while paused with hide_on_pause), then onpaint."""
        hidden = self.scheduler.paused and self.hide_on_pause
        self._render_pass.paint(self.registry.get_all_sprites().values(), hidden=hidden)
        self._call(self.config.onpaint)

    # =========================================================================
    # Scheduling
    # =========================================================================

    def pause(self) -> None:
        if self.hide_on_pause:
            self.clear()
            self.scoreboard.hide()
        self._call(self.config.onpause)
        self.scheduler.pause()
        log.debug("Paused at tick %d", self.game_time)

    def resume(self) -> None:
        self._call(self.config.onunpause)
        self.scheduler.resume()
        self.scoreboard.show()
        log.debug("Resumed at tick %d", self.game_time)

    # Alias
    unpause = resume

    def is_paused(self) -> bool:
        return self.scheduler.paused

    def get_delay(self) -> int:
        return self.scheduler.interval_ms

    def set_delay(self, interval_ms: int) -> None:
        self.scheduler.set_delay(interval_ms)

    def delay_for(self, delay_ms: int, callback: Optional[Callable[[Any], None]] = None) -> int:
        """Freeze tick effects for ``delay_ms``, then call ``callback(engine)``."""
        return self.scheduler.delay_for(delay_ms, lambda: self._call(callback))

    def is_delayed(self) -> bool:
        return self.scheduler.delayed

    # =========================================================================
    # Flash
    # =========================================================================

    def flash_ending(self, num_flashes: Optional[int] = None,
                     pulse_delay_ms: Optional[float] = None,
                     callback: Optional[Callable[[Any], None]] = None) -> float:
        """Pause/resume pulse sequence, then ``callback(engine)``."""
        return self.flash.flash_ending(num_flashes, pulse_delay_ms, lambda: self._call(callback))

    @property
    def flash_position(self) -> FlashPosition:
        return self.flash.position

    def reset_flash(self) -> None:
        self.flash.reset()

    # =========================================================================
    # Details
    # =========================================================================

    def get_details(self, name: Optional[str] = None) -> Any:
        return self.scoreboard.get(name)

    def set_details(self, name_or_values: Union[str, Dict[str, Any]], value: Any = None) -> None:
        self.scoreboard.set(name_or_values, value)

    # =========================================================================
    # Input
    # =========================================================================

    def dispatch_input(self, event: InputEvent) -> bool:
        """Deliver an input event to the bound handler (exceptions propagate)."""
        return self.bindings.dispatch(self, event)
