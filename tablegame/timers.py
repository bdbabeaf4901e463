"""
Millisecond timer queue.

The engine is single-threaded: every tick, delay window and flash pulse is
a callback on this queue, and the host drives it by calling advance() with
the milliseconds elapsed since the last frame. Tests drive it by hand.
"""

import itertools
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

from tablegame.logging import get_logger

log = get_logger('timers')


@dataclass
class ScheduledTimer:
    """A callback due at ``due_ms``; repeating when ``interval_ms`` is set."""
    handle: int
    due_ms: float
    callback: Callable[[], None]
    interval_ms: Optional[float] = None


class TimerQueue:
    """One-shot and repeating timers advanced by an external clock."""

    def __init__(self):
        self._timers: Dict[int, ScheduledTimer] = {}
        self._handles = itertools.count(1)
        self.now_ms: float = 0.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        """Run ``callback`` once, ``delay_ms`` from now. Returns a handle."""
        handle = next(self._handles)
        self._timers[handle] = ScheduledTimer(handle, self.now_ms + max(0, delay_ms), callback)
        log.timer("armed", handle, delay_ms)
        return handle

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> int:
        """Run ``callback`` every ``interval_ms``, first run one interval from now."""
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")
        handle = next(self._handles)
        self._timers[handle] = ScheduledTimer(
            handle, self.now_ms + interval_ms, callback, interval_ms=interval_ms)
        log.timer("armed repeating", handle, interval_ms)
        return handle

    def cancel(self, handle: Optional[int]) -> bool:
        """Cancel a timer. Returns False if it had already fired or was unknown."""
        if handle is None:
            return False
        timer = self._timers.pop(handle, None)
        if timer is None:
            return False
        log.timer("cancelled", handle, timer.due_ms - self.now_ms)
        return True

    def is_active(self, handle: Optional[int]) -> bool:
        return handle in self._timers

    def _next_due(self, until_ms: float) -> Optional[ScheduledTimer]:
        due = [t for t in self._timers.values() if t.due_ms <= until_ms]
        if not due:
            return None
        # Equal due times fire in the order the timers were created
        return min(due, key=lambda t: (t.due_ms, t.handle))

    def advance(self, elapsed_ms: float) -> int:
        """
        Move the clock forward, firing every timer that falls due.

        Callbacks may arm or cancel timers, including their own. Exceptions
        raised by a callback propagate to the caller; the queue is left
        consistent (the failing timer is already removed or re-armed).

        Returns:
            Number of callbacks fired
        """
        target = self.now_ms + elapsed_ms
        fired = 0
        while True:
            timer = self._next_due(target)
            if timer is None:
                break
            self.now_ms = timer.due_ms
            if timer.interval_ms is None:
                del self._timers[timer.handle]
            else:
                timer.due_ms += timer.interval_ms
            log.timer("fired", timer.handle, timer.interval_ms or 0)
            fired += 1
            timer.callback()
        self.now_ms = target
        return fired

    def __len__(self) -> int:
        return len(self._timers)


class TimerGroup:
    """
    The timers one owner armed on a shared TimerQueue.

    Arms and cancels through the queue but remembers its own handles, so
    cancel_all() drops this owner's timers and leaves everyone else's alone.
    """

    def __init__(self, queue: TimerQueue):
        self.queue = queue
        self._handles: Set[int] = set()

    def _track(self, handle: int) -> int:
        self._handles = {h for h in self._handles if self.queue.is_active(h)}
        self._handles.add(handle)
        return handle

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        return self._track(self.queue.call_later(delay_ms, callback))

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> int:
        return self._track(self.queue.call_every(interval_ms, callback))

    def cancel(self, handle: Optional[int]) -> bool:
        self._handles.discard(handle)
        return self.queue.cancel(handle)

    def is_active(self, handle: Optional[int]) -> bool:
        return handle in self._handles and self.queue.is_active(handle)

    def cancel_all(self) -> int:
        """Cancel every pending timer of this group. Returns how many were pending."""
        cancelled = sum(1 for handle in self._handles if self.queue.cancel(handle))
        self._handles.clear()
        return cancelled

    def __len__(self) -> int:
        return sum(1 for handle in self._handles if self.queue.is_active(handle))
