"""Tests for the ticktock error hierarchy."""

import pytest

from ticktock.errors import (
    BackendUnavailableError,
    ConfigError,
    ErrorCategory,
    InvalidConfigError,
    LifecycleError,
    RegistryEndedError,
    SchedulingError,
    TickTockError,
)


class TestTickTockError:
    """Test the base error."""

    def test_default_category(self):
        err = TickTockError("boom")
        assert err.category == ErrorCategory.INTERNAL
        assert str(err) == "boom"

    def test_with_context_is_fluent(self):
        err = TickTockError("boom").with_context(name="heartbeat")
        assert err.context == {"name": "heartbeat"}

    def test_to_dict(self):
        cause = ValueError("inner")
        err = TickTockError("boom", category=ErrorCategory.SCHEDULING, cause=cause)
        data = err.to_dict()
        assert data["error_type"] == "TickTockError"
        assert data["category"] == "SCHEDULING"
        assert data["cause"] == "inner"
        assert err.__cause__ is cause

    def test_repr(self):
        assert repr(ConfigError("bad")) == "ConfigError('bad', category=CONFIG)"


class TestSubclasses:
    """Test concrete error types."""

    def test_invalid_config(self):
        err = InvalidConfigError("backend", "carrier-pigeon")
        assert isinstance(err, ConfigError)
        assert err.key == "backend"
        assert "carrier-pigeon" in err.message
        assert err.category == ErrorCategory.CONFIG

    def test_backend_unavailable_is_runtime_error(self):
        err = BackendUnavailableError("asyncio")
        assert isinstance(err, SchedulingError)
        assert isinstance(err, RuntimeError)
        assert err.to_dict()["context"] == {"backend": "asyncio"}

    def test_registry_ended(self):
        err = RegistryEndedError("heartbeat")
        assert isinstance(err, LifecycleError)
        assert err.category == ErrorCategory.LIFECYCLE
        assert "heartbeat" in str(err)

    def test_catch_all_with_base(self):
        with pytest.raises(TickTockError):
            raise RegistryEndedError("x")
