"""Timer backends for ticktock.

A backend is the scheduling primitive the registry sits on: "call this
once after D", "call this every D", and optionally "call this on the next
turn".  The registry never talks to an event loop directly.

Backends:
    - AsyncioBackend  asyncio event loop (default)
    - ManualBackend   virtual clock, advanced by hand

Tags:
    ticktock, scheduling, backends, asyncio, virtual-clock
"""

from __future__ import annotations

from .asyncio_backend import AsyncioBackend
from .manual_backend import ManualBackend, ManualHandle
from .protocol import MIN_INTERVAL_MS, Callback, NextTurnBackend, TimerBackend

__all__ = [
    # Protocol
    "TimerBackend",
    "NextTurnBackend",
    "Callback",
    "MIN_INTERVAL_MS",
    # Backends
    "AsyncioBackend",
    "ManualBackend",
    "ManualHandle",
]
