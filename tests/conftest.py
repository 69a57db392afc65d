"""
Shared pytest fixtures for ticktock tests.

This module provides:
- A ManualBackend + Tick pair on a virtual clock (deterministic timing)
- A callback recorder that notes the virtual time of every call
- Settings cache isolation

Usage:
    def test_something(tick, backend, recorder):
        tick.set_timeout("t", recorder.callback("a"), 100)
        backend.advance(100)
        assert recorder.calls == [("a", 100.0)]
"""

import sys
from pathlib import Path
from typing import Generator

import pytest

# Ensure ticktock package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tests._support.recording import Recorder
from ticktock import ManualBackend, Tick
from ticktock.settings import clear_settings_cache


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture
def backend() -> ManualBackend:
    """Virtual clock starting at 0 ms."""
    return ManualBackend()


@pytest.fixture
def tick(backend: ManualBackend) -> Generator[Tick, None, None]:
    """Registry on the virtual clock, ended after the test."""
    registry = Tick(backend=backend)
    yield registry
    registry.end()


@pytest.fixture
def recorder(backend: ManualBackend) -> Recorder:
    return Recorder(backend)


# =============================================================================
# Settings Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop cached settings and TICKTOCK_* variables around each test."""
    for key in ("TICKTOCK_BACKEND", "TICKTOCK_MIN_INTERVAL_MS", "TICKTOCK_LOG_LEVEL", "TICKTOCK_LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
