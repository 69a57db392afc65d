"""Virtual-clock timer backend driven by hand.

Nothing fires on its own.  The owner moves time forward with
:meth:`ManualBackend.advance` and every timer that falls due inside that
window fires, in deadline order, with the virtual clock set to the timer's
own deadline while its callback runs.  That makes timing behavior exactly
reproducible in tests and lets step-driven simulations run timers without a
real event loop.

┌──────────────────────────────────────────────────────────────────────────────┐
│  advance(250)   with an interval of 100 and a timeout of 150 pending        │
│                                                                               │
│   now=0 ──► drain next-turn queue                                            │
│   now=100 ──► interval fires   ──► drain next-turn queue                     │
│   now=150 ──► timeout fires    ──► drain next-turn queue                     │
│   now=200 ──► interval fires   ──► drain next-turn queue                     │
│   now=250   (clock parked at the target)                                     │
└──────────────────────────────────────────────────────────────────────────────┘

Next-turn callbacks are drained in batches: anything queued while a batch
runs waits for the next drain, so a callback that re-queues itself cannot
stall ``advance``.
"""

from __future__ import annotations

import heapq
import itertools
from collections import deque
from typing import Any

from .protocol import MIN_INTERVAL_MS, Callback


class ManualHandle:
    """Handle for work scheduled on a :class:`ManualBackend`."""

    __slots__ = ("fn", "deadline", "period", "cancelled")

    def __init__(self, fn: Callback, deadline: float, period: float | None = None) -> None:
        self.fn = fn
        self.deadline = deadline
        self.period = period
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "live"
        return f"ManualHandle(deadline={self.deadline!r}, period={self.period!r}, {state})"


class ManualBackend:
    """Virtual clock in milliseconds.

    Example:
        >>> backend = ManualBackend()
        >>> tick = Tick(backend=backend)
        >>> tick.set_timeout("t", lambda ctx: print("fired"), 100)
        >>> backend.advance(99)
        0
        >>> backend.advance(1)
        fired
        1
    """

    name = "manual"

    def __init__(self, start: float = 0.0, *, min_interval_ms: float = MIN_INTERVAL_MS) -> None:
        self._now = float(start)
        self.min_interval_ms = min_interval_ms
        self._queue: list[tuple[float, int, ManualHandle]] = []
        self._ready: deque[ManualHandle] = deque()
        self._seq = itertools.count()
        self._fired = 0

    def now(self) -> float:
        return self._now

    # ── Scheduling ───────────────────────────────────────────────

    def schedule_next_turn(self, fn: Callback) -> ManualHandle:
        handle = ManualHandle(fn, self._now)
        self._ready.append(handle)
        return handle

    def cancel_next_turn(self, handle: ManualHandle) -> None:
        handle.cancel()

    def schedule_once(self, fn: Callback, ms: float) -> ManualHandle:
        handle = ManualHandle(fn, self._now + max(ms, 0.0))
        self._push(handle)
        return handle

    def cancel_once(self, handle: ManualHandle) -> None:
        handle.cancel()

    def schedule_repeating(self, fn: Callback, ms: float) -> ManualHandle:
        period = max(ms, self.min_interval_ms)
        handle = ManualHandle(fn, self._now + period, period)
        self._push(handle)
        return handle

    def cancel_repeating(self, handle: ManualHandle) -> None:
        handle.cancel()

    def _push(self, handle: ManualHandle) -> None:
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle))

    # ── Driving time ─────────────────────────────────────────────

    def advance(self, ms: float = 0.0) -> int:
        """Move the clock forward by ``ms`` and fire everything due.

        Returns the number of callbacks fired.  Exceptions raised by a
        callback propagate; timers already rebooked stay scheduled.
        """
        if ms < 0:
            raise ValueError("Cannot advance a clock backwards")

        target = self._now + ms
        fired = self._drain_ready()

        while self._queue and self._queue[0][0] <= target:
            deadline, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = deadline
            if handle.period is not None:
                handle.deadline = deadline + handle.period
                self._push(handle)
            handle.fn()
            fired += 1
            self._fired += 1
            fired += self._drain_ready()

        self._now = target
        return fired

    def run_pending(self) -> int:
        """Fire whatever is due without moving the clock."""
        return self.advance(0.0)

    def _drain_ready(self) -> int:
        fired = 0
        for _ in range(len(self._ready)):
            handle = self._ready.popleft()
            if handle.cancelled:
                continue
            handle.cancelled = True
            handle.fn()
            fired += 1
            self._fired += 1
        return fired

    # ── Introspection ────────────────────────────────────────────

    @property
    def pending(self) -> int:
        """Number of live (not fired, not cancelled) handles."""
        timed = sum(1 for _, _, h in self._queue if not h.cancelled)
        return timed + sum(1 for h in self._ready if not h.cancelled)

    def next_deadline(self) -> float | None:
        """Earliest live deadline, or ``None`` when nothing is booked."""
        if any(not h.cancelled for h in self._ready):
            return self._now
        live = [deadline for deadline, _, h in self._queue if not h.cancelled]
        return min(live) if live else None

    def health(self) -> dict[str, Any]:
        """Return backend health status."""
        return {
            "healthy": True,
            "backend": self.name,
            "now_ms": self._now,
            "pending": self.pending,
            "fired": self._fired,
        }
