"""
Fixed-tick scheduler.

States are Running and Paused, plus an orthogonal Delayed flag. A tick
does nothing unless the scheduler is running and not delayed; a live tick
counts itself and calls ``on_tick`` (game update + render pass). Errors
raised by ``on_tick`` are not caught here.

Only ``_set_interval`` creates or cancels the repeating tick timer, so at
most one tick stream exists per scheduler.
"""

from typing import Callable, Optional, Union

from tablegame.logging import get_logger
from tablegame.timers import TimerGroup, TimerQueue

log = get_logger('scheduler')

DEFAULT_INTERVAL_MS = 50
DEFAULT_INITIAL_DELAY_MS = 20


class TickScheduler:
    """Owns the tick timer, pause state and delay window of one engine."""

    def __init__(self, timers: Union[TimerQueue, TimerGroup], on_tick: Callable[[], None],
                 interval_ms: int = DEFAULT_INTERVAL_MS):
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        self._timers = timers
        self._on_tick = on_tick
        self.interval_ms = interval_ms
        self.paused = False
        self.delayed = False
        self.delay_ms = 0
        self.elapsed_ticks = 0
        self._tick_handle: Optional[int] = None
        self._start_handle: Optional[int] = None

    @property
    def running(self) -> bool:
        """True while a tick timer is active."""
        return self._timers.is_active(self._tick_handle)

    def _set_interval(self, interval_ms: Optional[int]) -> None:
        """Cancel the current tick timer and, unless None, start a new one."""
        self._timers.cancel(self._tick_handle)
        self._tick_handle = None
        if interval_ms is not None:
            self._tick_handle = self._timers.call_every(interval_ms, self.tick)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self, initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS) -> None:
        """Begin ticking after ``initial_delay_ms`` so an intro frame can show."""
        self._timers.cancel(self._start_handle)
        self._start_handle = self._timers.call_later(initial_delay_ms, self._begin)

    def _begin(self) -> None:
        self._start_handle = None
        if self.paused:
            # resume() starts the timer
            return
        self._set_interval(self.interval_ms)
        log.debug("Ticking every %dms", self.interval_ms)

    def stop(self) -> None:
        """Cancel the tick timer and any pending start."""
        self._timers.cancel(self._start_handle)
        self._start_handle = None
        self._set_interval(None)

    def tick(self) -> None:
        if self.paused or self.delayed:
            return
        self.elapsed_ticks += 1
        self._on_tick()

    # =========================================================================
    # Pause / resume
    # =========================================================================

    def pause(self) -> None:
        self.paused = True
        self._set_interval(None)

    def resume(self) -> None:
        self.paused = False
        self._timers.cancel(self._start_handle)
        self._start_handle = None
        self._set_interval(self.interval_ms)

    # =========================================================================
    # Timing
    # =========================================================================

    def set_delay(self, interval_ms: int) -> None:
        """Replace the tick interval; takes effect from the next tick."""
        if interval_ms <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        if not self.paused and self._start_handle is None:
            self._set_interval(interval_ms)
        log.debug("Tick interval set to %dms", interval_ms)

    def delay_for(self, delay_ms: int, callback: Optional[Callable[[], None]] = None) -> int:
        """
        Suppress tick effects for ``delay_ms``, then run ``callback``.

        The tick timer keeps running; ticks falling inside the window are
        skipped, not replayed. A second window started before the first
        ends does not extend it: the first one-shot still clears the flag.
        A zero-length window suppresses nothing (and ends any open window);
        ``callback`` still runs on the next advance.

        Returns:
            Handle of the one-shot timer ending the window
        """
        self.delayed = bool(delay_ms)
        self.delay_ms = delay_ms

        def end_delay() -> None:
            self.delayed = False
            self.delay_ms = 0
            if callback is not None:
                callback()

        return self._timers.call_later(delay_ms, end_delay)
