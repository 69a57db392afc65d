"""Timer backend protocol.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TIMER BACKEND PROTOCOL                                                       │
│                                                                               │
│  Backends own WHEN callbacks run.  The ``Tick`` registry owns WHAT runs:     │
│  name bookkeeping, merging, adjustment and teardown.                          │
│                                                                               │
│  ┌─────────────────────────────────────────────────────────────────────┐     │
│  │                                                                     │     │
│  │   ┌─────────────────┐  schedule_once      ┌─────────────────┐       │     │
│  │   │  Tick registry  │  schedule_repeating │  Backend        │       │     │
│  │   │                 │ ──────────────────► │  (asyncio,      │       │     │
│  │   │  name → entry   │  schedule_next_turn │   manual)       │       │     │
│  │   │                 │ ◄────────────────── │                 │       │     │
│  │   └─────────────────┘     fire callback   └─────────────────┘       │     │
│  │                                                                     │     │
│  └─────────────────────────────────────────────────────────────────────┘     │
│                                                                               │
│  Contract:                                                                    │
│  - schedule_* return an opaque handle; only the matching cancel_* takes it  │
│  - cancel_* on an already fired / cancelled handle is a no-op               │
│  - callbacks take no arguments                                              │
│  - now() is the clock Timers measure against, in milliseconds               │
│  - schedule_next_turn / cancel_next_turn are optional; without them the     │
│    registry falls back to schedule_once(fn, 0) / cancel_once                │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

Callback = Callable[[], Any]

# Repeating periods below this are clamped up; a zero period would spin.
MIN_INTERVAL_MS = 1.0


@runtime_checkable
class TimerBackend(Protocol):
    """Protocol for pluggable timer backends.

    Implementations:
        - AsyncioBackend: asyncio event loop (default)
        - ManualBackend: virtual clock advanced by hand (tests, simulations)

    Example (custom backend):
        >>> class MyBackend:
        ...     name = "custom"
        ...
        ...     def now(self) -> float:
        ...         return my_clock_ms()
        ...
        ...     def schedule_once(self, fn, ms):
        ...         return my_loop.after(ms, fn)
        ...
        ...     def cancel_once(self, handle):
        ...         handle.cancel()
        ...
        ...     def schedule_repeating(self, fn, ms):
        ...         return my_loop.every(ms, fn)
        ...
        ...     def cancel_repeating(self, handle):
        ...         handle.cancel()
    """

    name: str

    def now(self) -> float:
        """Current time in milliseconds on this backend's clock."""
        ...

    def schedule_once(self, fn: Callback, ms: float) -> Any:
        """Invoke ``fn`` once after ``ms`` milliseconds. Returns a handle."""
        ...

    def cancel_once(self, handle: Any) -> None:
        """Cancel a handle returned by :meth:`schedule_once`."""
        ...

    def schedule_repeating(self, fn: Callback, ms: float) -> Any:
        """Invoke ``fn`` every ``ms`` milliseconds, first after one period."""
        ...

    def cancel_repeating(self, handle: Any) -> None:
        """Cancel a handle returned by :meth:`schedule_repeating`."""
        ...


@runtime_checkable
class NextTurnBackend(TimerBackend, Protocol):
    """A backend that can also defer work to the next loop turn."""

    def schedule_next_turn(self, fn: Callback) -> Any:
        """Invoke ``fn`` on the next turn of the loop."""
        ...

    def cancel_next_turn(self, handle: Any) -> None:
        """Cancel a handle returned by :meth:`schedule_next_turn`."""
        ...
