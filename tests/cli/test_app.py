"""Tests for the ticktock CLI - parse, config, run, --version."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from ticktock import __version__
from ticktock.cli.app import app

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"ticktock {__version__}" in result.output


class TestParse:
    def test_parses_units(self):
        result = runner.invoke(app, ["parse", "10 ms", "1.5 seconds", "250"])
        assert result.exit_code == 0
        assert "10 ms = 10 ms" in result.output
        assert "1.5 seconds = 1500 ms" in result.output
        assert "250 = 250 ms" in result.output

    def test_invalid_duration_exits_1(self):
        result = runner.invoke(app, ["parse", "10 ms", "whenever"])
        assert result.exit_code == 1
        assert "10 ms = 10 ms" in result.output
        assert "Invalid duration" in result.output


class TestConfig:
    def test_env_format(self, monkeypatch):
        monkeypatch.setenv("TICKTOCK_BACKEND", "manual")

        result = runner.invoke(app, ["config", "--format", "env"])
        assert result.exit_code == 0
        assert "TICKTOCK_BACKEND=manual" in result.output
        assert "TICKTOCK_LOG_LEVEL=INFO" in result.output

    def test_json_format(self):
        result = runner.invoke(app, ["config", "--format", "json"])
        assert result.exit_code == 0
        assert '"backend": "asyncio"' in result.output

    def test_table_format(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "min_interval_ms" in result.output

    def test_invalid_settings_exit_1(self, monkeypatch):
        monkeypatch.setenv("TICKTOCK_MIN_INTERVAL_MS", "0")

        result = runner.invoke(app, ["config"])
        assert result.exit_code == 1
        assert "Configuration Error" in result.output


class TestRun:
    def test_timeout_fires_once(self):
        result = runner.invoke(app, ["run", "beep", "10 ms"])
        assert result.exit_code == 0
        assert "fired #1" in result.output
        assert "beep done after 1 fire(s)" in result.output

    def test_interval_fires_count_times(self):
        result = runner.invoke(app, ["run", "beat", "5ms", "--repeat", "-n", "2"])
        assert result.exit_code == 0
        assert "fired #2" in result.output
        assert "fired #3" not in result.output
        assert "beat done after 2 fire(s)" in result.output

    def test_invalid_duration_exits_1(self):
        result = runner.invoke(app, ["run", "beep", "whenever"])
        assert result.exit_code == 1
        assert "Invalid duration" in result.output


class TestLogLevel:
    @pytest.fixture
    def configured(self, monkeypatch):
        calls = []
        monkeypatch.setattr(
            "ticktock.logging.configure_logging",
            lambda **kwargs: calls.append(kwargs),
        )
        return calls

    def test_logging_left_alone_by_default(self, configured):
        result = runner.invoke(app, ["parse", "10"])
        assert result.exit_code == 0
        assert configured == []

    def test_option_enables_logging(self, configured):
        result = runner.invoke(app, ["--log-level", "debug", "parse", "10"])
        assert result.exit_code == 0
        assert configured == [{"level": "DEBUG", "json_format": False}]

    def test_environment_enables_logging(self, configured, monkeypatch):
        monkeypatch.setenv("TICKTOCK_LOG_LEVEL", "warning")
        monkeypatch.setenv("TICKTOCK_LOG_FORMAT", "json")

        result = runner.invoke(app, ["parse", "10"])
        assert result.exit_code == 0
        assert configured == [{"level": "WARNING", "json_format": True}]

    def test_option_overrides_environment(self, configured, monkeypatch):
        monkeypatch.setenv("TICKTOCK_LOG_LEVEL", "WARNING")

        result = runner.invoke(app, ["--log-level", "ERROR", "parse", "10"])
        assert result.exit_code == 0
        assert configured == [{"level": "ERROR", "json_format": False}]

    def test_unknown_level_is_a_usage_error(self, configured):
        result = runner.invoke(app, ["--log-level", "nope", "parse", "10"])
        assert result.exit_code == 2
        assert not isinstance(result.exception, AttributeError)
        assert configured == []
