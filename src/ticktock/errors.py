"""
Structured error types for ticktock.

The registry itself raises very little: unknown names on ``clear`` and
``adjust`` are no-ops and a second ``end()`` just returns False.  What does
raise is gathered here so callers can catch one base class.

Errors coming out of the duration parser (``humanfriendly.InvalidTimespan``)
or a backend's native scheduling call are NOT wrapped; they reach the caller
as raised.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                   TickTockError                       │
        │          (category, context, cause)                   │
        ├──────────────────────────────────────────────────────┤
        │  ConfigError        SchedulingError    LifecycleError │
        │  (CONFIG)           (SCHEDULING)       (LIFECYCLE)    │
        │      │                   │                  │         │
        │  InvalidConfigError  BackendUnavailable  RegistryEnded│
        └──────────────────────────────────────────────────────┘

Examples:
    >>> err = RegistryEndedError("heartbeat")
    >>> err.category.value
    'LIFECYCLE'
    >>> err.to_dict()["context"]
    {'name': 'heartbeat'}

Tags:
    error-handling, exception-hierarchy, ticktock
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    CONFIG = "CONFIG"
    SCHEDULING = "SCHEDULING"
    LIFECYCLE = "LIFECYCLE"
    INTERNAL = "INTERNAL"


class TickTockError(Exception):
    """
    Base exception for all ticktock errors.

    Subclasses set ``default_category``; callers may override it per
    instance.  ``context`` holds free-form metadata (timer name, backend
    name, ...) for logging.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TickTockError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SchedulingError("no loop").with_context(backend="asyncio")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(TickTockError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(
            message or f"Invalid configuration for {key}: {value!r}",
            context={"key": key},
        )


# =============================================================================
# SCHEDULING ERRORS
# =============================================================================


class SchedulingError(TickTockError):
    """A timer backend could not schedule work."""

    default_category = ErrorCategory.SCHEDULING


class BackendUnavailableError(SchedulingError, RuntimeError):
    """The backend has no runtime to schedule on (e.g. no running event loop)."""

    def __init__(self, backend: str, message: str | None = None, *, cause: Exception | None = None):
        self.backend = backend
        super().__init__(
            message or f"Timer backend {backend!r} is not available",
            context={"backend": backend},
            cause=cause,
        )


# =============================================================================
# LIFECYCLE ERRORS
# =============================================================================


class LifecycleError(TickTockError):
    """Operation not allowed in the registry's current lifecycle state."""

    default_category = ErrorCategory.LIFECYCLE


class RegistryEndedError(LifecycleError):
    """A timer was registered on a registry that has already ended."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Cannot register timer {name!r}: registry has ended",
            context={"name": name},
        )


__all__ = [
    "ErrorCategory",
    "TickTockError",
    "ConfigError",
    "InvalidConfigError",
    "SchedulingError",
    "BackendUnavailableError",
    "LifecycleError",
    "RegistryEndedError",
]
