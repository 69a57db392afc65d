"""Named-timer registry.

Manifesto:
    Raw timer handles are easy to lose and awkward to share.  ``Tick``
    keys every timer by a caller-chosen name, so code can ask "is the
    heartbeat running?", push the reconnect back by a second, or tear down
    everything a component scheduled, without holding a single handle.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TICK REGISTRY                                                                │
│                                                                               │
│   set_immediate / set_timeout / set_interval (name, fn, duration)            │
│        │                                                                      │
│        ▼                                                                      │
│   name known? ──yes──► append fn to entry.fns   (no new schedule)            │
│        │ no                                                                   │
│        ▼                                                                      │
│   TimerEntry(name, kind, Timer, fns=[fn]) ──► backend.schedule_*             │
│                                                                               │
│   fire(entry)                                                                 │
│     immediate / timeout: remove entry, then call every fn(context)           │
│     interval:            timer.start = now, then call every fn(context)      │
│                                                                               │
│   adjust(name, d)  cancel ──► timer.reset(now, d) ──► schedule same kind     │
│   clear(*names)    cancel + remove named (or all) entries                    │
│   end()            clear all, mark ended; True once, False after             │
└──────────────────────────────────────────────────────────────────────────────┘

Callbacks take a single positional argument: the registry's ``context``
(the ``Tick`` itself unless another object was given at construction).

Guardrails:
    ❌ Holding on to backend handles and cancelling them yourself
    ✅ ``tick.clear("name")``
    ❌ Expecting a second ``set_timeout`` under a live name to restart it
    ✅ It joins the pending timeout; use ``adjust()`` to re-time it

Examples:
    >>> backend = ManualBackend()
    >>> tick = Tick(backend=backend)
    >>> tick.set_timeout("save", lambda ctx: print("saved"), "100 ms")
    >>> tick.active("save")
    True
    >>> backend.advance(100)
    saved
    1
    >>> tick.active("save")
    False

Tags:
    ticktock, registry, timers, set-timeout, set-interval, set-immediate
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Any

from ticktock.duration import Duration, parse_duration
from ticktock.errors import RegistryEndedError
from ticktock.logging import get_logger
from ticktock.scheduling import AsyncioBackend, NextTurnBackend, TimerBackend
from ticktock.timer import Timer

logger = get_logger(__name__)

TimerCallback = Callable[[Any], Any]


class TimerKind(str, Enum):
    """How a registry entry is scheduled."""

    IMMEDIATE = "immediate"
    TIMEOUT = "timeout"
    INTERVAL = "interval"


@dataclass
class TimerEntry:
    """Live state for one named timer."""

    name: str
    kind: TimerKind
    timer: Timer
    fns: list[TimerCallback] = field(default_factory=list)
    handle: Any = None

    def taken(self) -> float:
        return self.timer.taken()

    def remaining(self) -> float | None:
        return self.timer.remaining()


def _noop() -> None:
    return None


class Tick:
    """Registry of named timers over a :class:`TimerBackend`.

    Args:
        context: Object passed to every callback. Defaults to this registry.
        backend: Scheduling backend. Defaults to :class:`AsyncioBackend`.
        parser: ``number | str -> ms`` duration parser.
    """

    def __init__(
        self,
        context: Any = None,
        *,
        backend: TimerBackend | None = None,
        parser: Callable[[Duration], float] | None = None,
    ) -> None:
        self.context = self if context is None else context
        self.backend = backend if backend is not None else AsyncioBackend()
        self.parser = parser or parse_duration
        self.timers: dict[str, TimerEntry] = {}
        self.ended = False

        if isinstance(self.backend, NextTurnBackend):
            self._defer = self.backend.schedule_next_turn
            self._cancel_defer = self.backend.cancel_next_turn
        else:
            schedule_once = self.backend.schedule_once
            self._defer = lambda fn: schedule_once(fn, 0)
            self._cancel_defer = self.backend.cancel_once

    # ── Registration ─────────────────────────────────────────────

    def set_immediate(self, name: str, fn: TimerCallback) -> Tick:
        """Run ``fn`` on the next turn of the backend."""
        self._check_open(name)
        if name in self.timers:
            return self._merge(name, fn, TimerKind.IMMEDIATE)

        entry = self._entry(name, TimerKind.IMMEDIATE, fn, None)
        entry.handle = self._defer(partial(self._fire, entry))
        self.timers[name] = entry
        self._scheduled(entry)
        return self

    def set_timeout(self, name: str, fn: TimerCallback, duration: Duration = 0) -> Tick:
        """Run ``fn`` once after ``duration``.

        If ``name`` is already pending, ``fn`` joins it and runs at the
        original deadline; ``duration`` is ignored.
        """
        self._check_open(name)
        if name in self.timers:
            return self._merge(name, fn, TimerKind.TIMEOUT)

        ms = self.parser(duration)
        entry = self._entry(name, TimerKind.TIMEOUT, fn, ms)
        entry.handle = self.backend.schedule_once(partial(self._fire, entry), ms)
        self.timers[name] = entry
        self._scheduled(entry)
        return self

    def set_interval(self, name: str, fn: TimerCallback, duration: Duration) -> Tick:
        """Run ``fn`` every ``duration``, first after one period.

        If ``name`` is already running, ``fn`` joins it on the existing
        cadence; ``duration`` is ignored.
        """
        self._check_open(name)
        if name in self.timers:
            return self._merge(name, fn, TimerKind.INTERVAL)

        ms = self.parser(duration)
        entry = self._entry(name, TimerKind.INTERVAL, fn, ms)
        entry.handle = self.backend.schedule_repeating(partial(self._fire, entry), ms)
        self.timers[name] = entry
        self._scheduled(entry)
        return self

    def tock(self, name: str, execute: bool = False) -> Callable[[], None]:
        """Return a zero-argument function that runs ``name``'s callbacks now.

        With ``execute`` falsy the returned function does nothing.  Calling
        it when ``name`` is not registered does nothing either.  A pending
        immediate or timeout is consumed by the call, so it will not fire a
        second time; an interval keeps its schedule.
        """
        if not execute:
            return _noop

        def tocked() -> None:
            entry = self.timers.get(name)
            if entry is None:
                return
            if entry.kind is not TimerKind.INTERVAL:
                self._remove(name)
            self._run(entry)

        return tocked

    # ── Queries ──────────────────────────────────────────────────

    def active(self, name: str) -> bool:
        """Whether a timer is registered under ``name``."""
        return name in self.timers

    def names(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self.timers)

    def __contains__(self, name: object) -> bool:
        return name in self.timers

    # ── Mutation ─────────────────────────────────────────────────

    def adjust(self, name: str, duration: Duration) -> Tick:
        """Re-time ``name`` to fire ``duration`` from now.

        Unknown names are ignored.  Intervals keep repeating on the new
        period; an immediate becomes a timeout.
        """
        entry = self.timers.get(name)
        if entry is None:
            return self

        ms = self.parser(duration)
        self._cancel(entry)
        entry.handle = None
        if entry.kind is TimerKind.IMMEDIATE:
            entry.kind = TimerKind.TIMEOUT
        entry.timer.reset(duration=ms)

        fire = partial(self._fire, entry)
        if entry.kind is TimerKind.INTERVAL:
            entry.handle = self.backend.schedule_repeating(fire, ms)
        else:
            entry.handle = self.backend.schedule_once(fire, ms)

        logger.debug("timer_adjusted", name=name, kind=entry.kind.value, duration_ms=ms)
        return self

    def clear(self, *names: str) -> Tick:
        """Cancel and remove timers.

        ``clear("a", "b")`` and ``clear("a, b")`` clear both names; unknown
        names are ignored.  ``clear()`` clears everything.
        """
        if not names:
            targets = list(self.timers)
        elif len(names) == 1 and isinstance(names[0], str):
            targets = [part.strip() for part in names[0].split(",") if part.strip()]
        else:
            targets = list(names)

        for name in targets:
            self._remove(name)
        return self

    def end(self) -> bool:
        """Clear every timer and shut the registry down.

        Returns True the first time, False on every later call.
        """
        if self.ended:
            return False

        cleared = len(self.timers)
        self.clear()
        self.ended = True
        logger.info("registry_ended", cleared=cleared)
        return True

    destroy = end

    # ── Internals ────────────────────────────────────────────────

    def _check_open(self, name: str) -> None:
        if self.ended:
            raise RegistryEndedError(name)

    def _entry(self, name: str, kind: TimerKind, fn: TimerCallback, ms: float | None) -> TimerEntry:
        timer = Timer(context=self.context, duration=ms, clock=self.backend.now)
        return TimerEntry(name=name, kind=kind, timer=timer, fns=[fn])

    def _scheduled(self, entry: TimerEntry) -> None:
        logger.debug(
            "timer_scheduled",
            name=entry.name,
            kind=entry.kind.value,
            duration_ms=entry.timer.duration,
        )

    def _merge(self, name: str, fn: TimerCallback, kind: TimerKind) -> Tick:
        entry = self.timers[name]
        entry.fns.append(fn)
        entry.timer.context = self.context
        if kind is TimerKind.INTERVAL and entry.kind is TimerKind.INTERVAL:
            entry.timer.reset()
        logger.debug("timer_merged", name=name, kind=entry.kind.value, callbacks=len(entry.fns))
        return self

    def _cancel(self, entry: TimerEntry) -> None:
        if entry.handle is None:
            return
        if entry.kind is TimerKind.IMMEDIATE:
            self._cancel_defer(entry.handle)
        elif entry.kind is TimerKind.TIMEOUT:
            self.backend.cancel_once(entry.handle)
        else:
            self.backend.cancel_repeating(entry.handle)

    def _remove(self, name: str) -> TimerEntry | None:
        entry = self.timers.pop(name, None)
        if entry is not None:
            self._cancel(entry)
            logger.debug("timer_cleared", name=name, kind=entry.kind.value)
        return entry

    def _fire(self, entry: TimerEntry) -> None:
        # A cleared or replaced entry may still have a fire in flight.
        if self.timers.get(entry.name) is not entry:
            return

        if entry.kind is TimerKind.INTERVAL:
            entry.timer.reset()
        else:
            del self.timers[entry.name]

        logger.debug("timer_fired", name=entry.name, kind=entry.kind.value, callbacks=len(entry.fns))
        self._run(entry)

    def _run(self, entry: TimerEntry) -> None:
        for fn in list(entry.fns):
            fn(self.context)

    def __repr__(self) -> str:
        state = "ended" if self.ended else f"{len(self.timers)} timers"
        return f"Tick({self.backend.name}, {state})"


__all__ = ["Tick", "TimerEntry", "TimerKind", "TimerCallback"]
