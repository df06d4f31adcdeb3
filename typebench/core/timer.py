from __future__ import annotations

import time
from typing import Callable, Optional

from typebench.core.errors import AlreadyStarted

# Seconds between ticks; the front end polls the session at this cadence.
TICK_INTERVAL = 0.1


class Timer:
    """Elapsed-time tracker for a typing session.

    The timer is polled, never observed: callers ask for :meth:`elapsed` or
    :meth:`remaining` whenever they need a value. ``clock`` returns seconds
    from an arbitrary origin and defaults to :func:`time.monotonic`.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._start: Optional[float] = None
        self._stopped_at: Optional[float] = None

    @property
    def started(self) -> bool:
        return self._start is not None

    @property
    def stopped(self) -> bool:
        return self._stopped_at is not None

    def start(self) -> None:
        """Record the reference instant. Raises AlreadyStarted on a second call."""
        if self._start is not None:
            raise AlreadyStarted("Timer has already been started")
        self._start = self._clock()

    def stop(self) -> None:
        """Freeze elapsed time at its current value. Later calls do nothing."""
        if self._start is None or self._stopped_at is not None:
            return
        self._stopped_at = self._clock()

    def elapsed(self) -> float:
        """Seconds since start, 0.0 before start."""
        if self._start is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return max(0.0, end - self._start)

    def remaining(self, duration: float) -> float:
        """Seconds left of ``duration``, never negative."""
        return max(0.0, duration - self.elapsed())
