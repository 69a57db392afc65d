"""ticktock - named timers over pluggable scheduling backends.

┌──────────────────────────────────────────────────────────────────────────────┐
│  Quick Start:                                                                 │
│  ┌──────────────────────────────────────────────────────────────────────┐   │
│  │   import asyncio                                                     │   │
│  │   from ticktock import Tick                                          │   │
│  │                                                                      │   │
│  │   async def main():                                                  │   │
│  │       tick = Tick()                                                  │   │
│  │       tick.set_interval("heartbeat", send_ping, "1 second")          │   │
│  │       tick.set_timeout("give-up", lambda t: t.end(), "30 seconds")   │   │
│  │       ...                                                            │   │
│  │       tick.adjust("give-up", "60 seconds")                           │   │
│  │                                                                      │   │
│  │   asyncio.run(main())                                                │   │
│  └──────────────────────────────────────────────────────────────────────┘   │
│                                                                               │
│  Modules:                                                                     │
│  - timer       Timer: elapsed / remaining for one span                       │
│  - registry    Tick: name → timer bookkeeping                                │
│  - scheduling  TimerBackend protocol, AsyncioBackend, ManualBackend          │
│  - duration    parse_duration: "10 ms" → 10.0                                │
│  - settings    TickSettings (TICKTOCK_* environment)                         │
│  - errors      TickTockError hierarchy                                       │
│  - logging     structlog setup                                               │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import asyncio
from typing import Any

from .duration import parse_duration
from .errors import (
    BackendUnavailableError,
    ConfigError,
    InvalidConfigError,
    RegistryEndedError,
    TickTockError,
)
from .registry import Tick, TimerEntry, TimerKind
from .scheduling import AsyncioBackend, ManualBackend, NextTurnBackend, TimerBackend
from .settings import BackendKind, TickSettings, get_settings
from .timer import Timer

__version__ = "1.0.0"

__all__ = [
    # Registry
    "Tick",
    "TimerEntry",
    "TimerKind",
    "Timer",
    "create_tick",
    # Backends
    "TimerBackend",
    "NextTurnBackend",
    "AsyncioBackend",
    "ManualBackend",
    # Parsing / settings
    "parse_duration",
    "TickSettings",
    "BackendKind",
    "get_settings",
    # Errors
    "TickTockError",
    "ConfigError",
    "InvalidConfigError",
    "BackendUnavailableError",
    "RegistryEndedError",
]


def create_tick(
    context: Any = None,
    settings: TickSettings | None = None,
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> Tick:
    """Factory function to create a registry on the configured backend.

    Args:
        context: Object passed to callbacks (default: the registry).
        settings: Settings to use (default: :func:`get_settings`).
        loop: Event loop for the asyncio backend (default: the running loop).

    Example:
        >>> tick = create_tick(settings=TickSettings(backend="manual"))
        >>> tick.backend.name
        'manual'
    """
    settings = settings or get_settings()

    backend: TimerBackend
    if settings.backend is BackendKind.MANUAL:
        backend = ManualBackend(min_interval_ms=settings.min_interval_ms)
    else:
        backend = AsyncioBackend(loop, min_interval_ms=settings.min_interval_ms)

    return Tick(context, backend=backend)
