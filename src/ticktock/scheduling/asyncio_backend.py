"""asyncio event-loop timer backend.

This is the DEFAULT backend for ticktock.  It maps the three scheduling
primitives onto the event loop:

┌──────────────────────────────────────────────────────────────────────────────┐
│  ASYNCIO BACKEND                                                              │
│                                                                               │
│   schedule_next_turn(fn)      ──►  loop.call_soon(fn)                        │
│   schedule_once(fn, ms)       ──►  loop.call_later(ms / 1000, fn)            │
│   schedule_repeating(fn, ms)  ──►  _Repeater: call_at chain                  │
│                                                                               │
│   _Repeater keeps the original cadence:                                      │
│                                                                               │
│       origin ──┬── period ──┬── period ──┬── period ──► ...                  │
│                fire         fire         fire                                │
│                                                                               │
│   Each slot is origin + n * period.  The next slot is booked before the      │
│   callback runs, so a slow callback does not push later fires back, and a   │
│   callback that cancels its own handle cancels the booked slot.  Slots       │
│   missed while the loop was blocked are skipped, not replayed in a burst.    │
└──────────────────────────────────────────────────────────────────────────────┘

All callbacks run on the loop thread; the registry is never touched
concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any

from ticktock.errors import BackendUnavailableError
from ticktock.timer import monotonic_ms

from .protocol import MIN_INTERVAL_MS, Callback

logger = logging.getLogger(__name__)


class _Repeater:
    """Fixed-cadence repeating call on an event loop."""

    __slots__ = ("_loop", "_fn", "_period", "_next", "_handle", "cancelled")

    def __init__(self, loop: asyncio.AbstractEventLoop, fn: Callback, period_seconds: float) -> None:
        self._loop = loop
        self._fn = fn
        self._period = period_seconds
        self._next = loop.time() + period_seconds
        self._handle = loop.call_at(self._next, self._run)
        self.cancelled = False

    def _run(self) -> None:
        self._next += self._period
        now = self._loop.time()
        if self._next <= now:
            missed = math.floor((now - self._next) / self._period) + 1
            self._next += missed * self._period
        self._handle = self._loop.call_at(self._next, self._run)
        self._fn()

    def cancel(self) -> None:
        self.cancelled = True
        self._handle.cancel()


class AsyncioBackend:
    """asyncio event-loop backend.

    Args:
        loop: Loop to schedule on. Defaults to the loop running at the time
            of each scheduling call.
        min_interval_ms: Floor for repeating periods.

    Example:
        >>> async def main():
        ...     tick = Tick(backend=AsyncioBackend())
        ...     tick.set_timeout("hello", lambda ctx: print("hi"), "10 ms")
        ...     await asyncio.sleep(0.05)
        >>> asyncio.run(main())
        hi
    """

    name = "asyncio"

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        *,
        min_interval_ms: float = MIN_INTERVAL_MS,
    ) -> None:
        self._loop = loop
        self.min_interval_ms = min_interval_ms

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """The loop scheduling calls go to."""
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise BackendUnavailableError(
                self.name,
                "AsyncioBackend needs a running event loop or an explicit loop=",
                cause=e,
            ) from e

    def now(self) -> float:
        return monotonic_ms()

    def schedule_next_turn(self, fn: Callback) -> asyncio.Handle:
        return self.loop.call_soon(fn)

    def cancel_next_turn(self, handle: asyncio.Handle) -> None:
        handle.cancel()

    def schedule_once(self, fn: Callback, ms: float) -> asyncio.TimerHandle:
        return self.loop.call_later(max(ms, 0.0) / 1000.0, fn)

    def cancel_once(self, handle: asyncio.TimerHandle) -> None:
        handle.cancel()

    def schedule_repeating(self, fn: Callback, ms: float) -> _Repeater:
        if ms < self.min_interval_ms:
            logger.debug("Repeating period %sms clamped to %sms", ms, self.min_interval_ms)
            ms = self.min_interval_ms
        return _Repeater(self.loop, fn, ms / 1000.0)

    def cancel_repeating(self, handle: _Repeater) -> None:
        handle.cancel()

    def health(self) -> dict[str, Any]:
        """Return backend health status."""
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
        return {
            "healthy": loop is not None and not loop.is_closed(),
            "backend": self.name,
            "bound_loop": self._loop is not None,
            "min_interval_ms": self.min_interval_ms,
        }
