"""
Flash choreography - scripted pause/resume pulses for "game over" and
"level complete" feedback.
"""

from enum import Enum
from typing import Callable, Optional, Union

from tablegame.logging import get_logger
from tablegame.timers import TimerGroup, TimerQueue

log = get_logger('flash')

DEFAULT_NUM_FLASHES = 5
DEFAULT_PULSE_DELAY_MS = 150


class FlashPosition(Enum):
    """Where the flash sequence is; guards against duplicate pulse trains."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"


class FlashChoreographer:
    """Schedules hide/show pulses through the engine's pause and resume.

    The position marker is never reset automatically: once a sequence has
    started, later calls only arm their completion timer until reset() is
    called (e.g. when a level restarts).
    """

    def __init__(self, timers: Union[TimerQueue, TimerGroup], pause: Callable[[], None],
                 resume: Callable[[], None], paint: Callable[[], None]):
        self._timers = timers
        self._pause = pause
        self._resume = resume
        self._paint = paint
        self.position = FlashPosition.NOT_STARTED

    @staticmethod
    def total_duration(num_flashes: int, pulse_delay_ms: float) -> float:
        return (num_flashes * 2 - 1) * pulse_delay_ms

    def flash_ending(self, num_flashes: Optional[int] = None,
                     pulse_delay_ms: Optional[float] = None,
                     callback: Optional[Callable[[], None]] = None) -> float:
        """
        Flash the screen ``num_flashes`` times, then call ``callback``.

        Each flash pauses at ``i * pulse_delay_ms`` and resumes (and repaints)
        one pulse later, for i = 0, 2, 4, ...

        Args:
            num_flashes: Number of on/off pulses (falsy means 5)
            pulse_delay_ms: Milliseconds per half pulse (falsy means 150)
            callback: Called once when the sequence ends

        Returns:
            Total duration of the sequence in milliseconds
        """
        num_flashes = num_flashes or DEFAULT_NUM_FLASHES
        pulse_delay_ms = pulse_delay_ms or DEFAULT_PULSE_DELAY_MS
        total_ms = self.total_duration(num_flashes, pulse_delay_ms)

        if self.position is FlashPosition.NOT_STARTED:
            for i in range(0, num_flashes * 2, 2):
                self._timers.call_later(i * pulse_delay_ms, self._pause)
                self._timers.call_later((i + 1) * pulse_delay_ms, self._show)
            self.position = FlashPosition.RUNNING
            log.debug("Flashing %d times over %gms", num_flashes, total_ms)

        def finish() -> None:
            self.position = FlashPosition.FINISHED
            log.debug("Flash sequence finished")
            if callback is not None:
                callback()

        self._timers.call_later(total_ms, finish)
        return total_ms

    def _show(self) -> None:
        self._resume()
        self._paint()

    def reset(self) -> None:
        """Make the sequence playable again."""
        self.position = FlashPosition.NOT_STARTED
