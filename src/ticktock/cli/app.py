"""
Root Typer application for the ticktock CLI.

Commands:
    ticktock parse VALUE...                     durations in milliseconds
    ticktock config [--format table|json|env]   resolved settings
    ticktock run NAME DURATION [--repeat] [-n]  run a named timer and watch it fire
"""

from __future__ import annotations

import asyncio

import typer
from humanfriendly import InvalidTimespan
from typer import Typer

from ticktock.cli.utils import console, err_console, print_mapping

app = Typer(
    name="ticktock",
    help="ticktock: named timers over pluggable scheduling backends.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version / logging callback ───────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from ticktock import __version__

        typer.echo(f"ticktock {__version__}")
        raise typer.Exit()


def _log_level_callback(value: str | None) -> str | None:
    from ticktock.settings import LOG_LEVELS

    if value is None:
        return None
    level = value.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"unknown log level {value!r} (choose from {', '.join(LOG_LEVELS)})")
    return level


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Enable structured logging at this level (default: TICKTOCK_LOG_LEVEL when set).",
        callback=_log_level_callback,
    ),
) -> None:
    """ticktock CLI: parse durations, inspect settings and run timers."""
    from ticktock.logging import configure_logging
    from ticktock.settings import LogFormat

    settings = _load_settings()
    if log_level is None and "log_level" in settings.model_fields_set:
        log_level = settings.log_level
    if log_level:
        configure_logging(level=log_level, json_format=settings.log_format is LogFormat.JSON)


def _load_settings():
    from ticktock.errors import ConfigError
    from ticktock.settings import get_settings

    try:
        return get_settings()
    except ConfigError as e:
        err_console.print(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(code=1) from e


# ── parse ────────────────────────────────────────────────────────────────


@app.command("parse")
def parse(
    values: list[str] = typer.Argument(..., help='Durations such as 250, "10 ms", "1.5 seconds".'),
) -> None:
    """Print each duration in milliseconds."""
    from ticktock.duration import parse_duration

    failed = False
    for value in values:
        try:
            ms = parse_duration(value)
        except InvalidTimespan as e:
            err_console.print(f"[red]Invalid duration[/red] {value!r}: {e}")
            failed = True
            continue
        console.print(f"{value} = {ms:g} ms")

    if failed:
        raise typer.Exit(code=1)


# ── config ───────────────────────────────────────────────────────────────


@app.command("config")
def show_config(
    format: str = typer.Option("table", "--format", "-f", help="Output format: table, json, env"),
) -> None:
    """Show the resolved TICKTOCK_* settings."""
    settings = _load_settings()

    if format == "json":
        console.print_json(settings.model_dump_json())
        return

    if format == "env":
        for key, value in sorted(settings.model_dump(mode="json").items()):
            console.print(f"TICKTOCK_{key.upper()}={value}")
        return

    print_mapping(settings.model_dump(), title="ticktock settings")


# ── run ──────────────────────────────────────────────────────────────────


@app.command("run")
def run_timer(
    name: str = typer.Argument(..., help="Timer name."),
    duration: str = typer.Argument(..., help='Delay or period, e.g. "250 ms".'),
    repeat: bool = typer.Option(False, "--repeat", "-r", help="Repeat as an interval."),
    count: int = typer.Option(3, "--count", "-n", min=1, help="Fires to wait for with --repeat."),
) -> None:
    """Schedule a named timer on an asyncio loop and print each firing."""
    from ticktock.duration import parse_duration

    try:
        ms = parse_duration(duration)
    except InvalidTimespan as e:
        err_console.print(f"[red]Invalid duration[/red] {duration!r}: {e}")
        raise typer.Exit(code=1) from e

    fires = asyncio.run(_watch(name, ms, repeat=repeat, count=count if repeat else 1))
    console.print(f"[bold]{name}[/bold] done after {fires} fire(s)")


async def _watch(name: str, ms: float, *, repeat: bool, count: int) -> int:
    from ticktock.registry import Tick
    from ticktock.scheduling import AsyncioBackend

    loop = asyncio.get_running_loop()
    done: asyncio.Future[int] = loop.create_future()
    tick = Tick(backend=AsyncioBackend(loop))
    started = tick.backend.now()
    fires = 0

    def on_fire(registry: Tick) -> None:
        nonlocal fires
        fires += 1
        elapsed = registry.backend.now() - started
        console.print(f"[green]{name}[/green] fired #{fires} at {elapsed:.1f} ms")
        if fires >= count and not done.done():
            done.set_result(fires)

    if repeat:
        tick.set_interval(name, on_fire, ms)
    else:
        tick.set_timeout(name, on_fire, ms)

    try:
        return await done
    finally:
        tick.end()


if __name__ == "__main__":
    app()
