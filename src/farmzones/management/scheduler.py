"""
Single-slot cancellable timer.

The engine is single-threaded and cooperative: the host event loop calls
``poll()`` on every turn, and the timer fires its callback once the quiet
period has elapsed. Scheduling again before that replaces the pending
callback and restarts the wait, so only the last trigger of a burst runs.
"""

import time
from typing import Callable


class DebounceTimer:
    """
    Parameters
    ----------
    delay_ms:
        Quiet period before the pending callback fires.
    clock:
        Monotonic clock in seconds. Injected in tests.
    """

    def __init__(self, delay_ms: float, clock: Callable[[], float] = time.monotonic) -> None:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        self._delay_s = float(delay_ms) / 1000.0
        self._clock = clock
        self._callback: Callable[[], None] | None = None
        self._due_at: float | None = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    @property
    def due_at(self) -> float | None:
        return self._due_at

    def schedule(self, callback: Callable[[], None]) -> None:
        """Replace any unfired callback and restart the quiet period."""
        self._callback = callback
        self._due_at = self._clock() + self._delay_s

    def cancel(self) -> bool:
        """Drop the pending callback. Returns True if one was pending."""
        was_pending = self._callback is not None
        self._callback = None
        self._due_at = None
        return was_pending

    def poll(self) -> bool:
        """Fire the pending callback if it is due. Returns True if it fired."""
        if self._callback is None or self._clock() < self._due_at:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Fire the pending callback now, regardless of the clock."""
        callback = self._callback
        if callback is None:
            return False
        self._callback = None
        self._due_at = None
        callback()
        return True
