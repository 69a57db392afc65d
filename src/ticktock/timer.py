"""Timer - a single tracked span of time.

A ``Timer`` records when a span started and, optionally, how long it was
meant to last.  It answers two questions, both in milliseconds:

- ``taken()``      how much time has elapsed since ``start``
- ``remaining()``  how much of ``duration`` is left

Neither call mutates the timer.  ``reset()`` overwrites ``start`` and/or
``duration`` in place, which is how the registry re-times a live entry
without replacing it.

Examples:
    >>> timer = Timer(duration=100)
    >>> 0 <= timer.taken() < 5
    True
    >>> timer.reset(duration=1000)
    >>> 995 < timer.remaining() <= 1000
    True

Tags:
    ticktock, timer, elapsed, remaining, monotonic
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Process monotonic clock in milliseconds."""
    return time.monotonic() * 1000.0


class Timer:
    """A start instant plus an optional nominal duration.

    Args:
        start: Start instant in clock milliseconds (default: now).
        context: Opaque value carried along, never interpreted.
        duration: Nominal duration in milliseconds. ``None`` for
            immediate-style timers that have no deadline.
        clock: Zero-argument callable returning milliseconds. Registries
            pass their backend's clock so virtual time stays consistent.
    """

    __slots__ = ("start", "context", "duration", "_clock")

    def __init__(
        self,
        start: float | None = None,
        context: Any = None,
        duration: float | None = None,
        *,
        clock: Clock | None = None,
    ) -> None:
        self._clock: Clock = clock or monotonic_ms
        self.start = self._clock() if start is None else start
        self.context = context
        self.duration = duration

    def taken(self) -> float:
        """Milliseconds elapsed since ``start``."""
        return max(0.0, self._clock() - self.start)

    def remaining(self) -> float | None:
        """Milliseconds left until ``duration`` elapses.

        Goes negative once the timer is overdue. Returns ``None`` when the
        timer has no duration.
        """
        if self.duration is None:
            return None
        return self.duration - self.taken()

    def reset(self, start: float | None = None, duration: float | None = None) -> None:
        """Re-time the timer in place.

        ``start`` defaults to now; ``duration`` is only replaced when given.
        """
        self.start = self._clock() if start is None else start
        if duration is not None:
            self.duration = duration

    def __repr__(self) -> str:
        return f"Timer(start={self.start!r}, duration={self.duration!r})"
