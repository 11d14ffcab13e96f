# src/stashlog/cli.py
"""stashlog Command Line Interface.

Entry point for the stashlog CLI tool.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, TextIO

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from stashlog import __version__
from stashlog.contracts.enums import FATAL_DISABLED, LogLevel, parse_level
from stashlog.core.config import LoggerSettings, dump_settings, load_settings
from stashlog.core.logging import configure_logging
from stashlog.factory import create_logger
from stashlog.logger import StashLogger
from stashlog.sinks.errors import SinkConfigurationError

__all__ = ["app"]

app = typer.Typer(
    name="stashlog",
    help="stashlog: buffering message logger.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"stashlog version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show stashlog's own debug diagnostics on stderr.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit diagnostics as JSON.",
    ),
) -> None:
    """stashlog: buffering message logger."""
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")


def _load_settings_or_exit(settings_path: Path | None) -> LoggerSettings:
    # STASHLOG_* environment overrides apply with or without a file
    try:
        return load_settings(settings_path)
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {settings_path}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings_path}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        _echo_validation_errors(e)
        raise typer.Exit(1) from None


def _echo_validation_errors(error: ValidationError) -> None:
    typer.echo("Configuration errors:", err=True)
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"]) or "settings"
        typer.echo(f"  - {loc}: {item['msg']}", err=True)


def _apply_overrides(settings: LoggerSettings, overrides: dict[str, Any]) -> LoggerSettings:
    """Re-validate settings with command-line overrides applied."""
    if not overrides:
        return settings
    try:
        return LoggerSettings(**{**settings.model_dump(), **overrides})
    except ValidationError as e:
        _echo_validation_errors(e)
        raise typer.Exit(1) from None


def _parse_line(line: str) -> tuple[LogLevel, str]:
    """Split ``LEVEL message`` into its parts.

    Raises:
        ValueError: If the level token names no level
    """
    parts = line.strip().split(None, 1)
    message = parts[1] if len(parts) == 2 else ""
    return parse_level(parts[0]), message


def _pump(log: StashLogger, source: TextIO) -> tuple[int, int]:
    logged = 0
    rejected = 0
    for number, line in enumerate(source, start=1):
        if not line.strip():
            continue
        try:
            level, message = _parse_line(line)
        except ValueError as e:
            typer.echo(f"line {number}: {e}", err=True)
            rejected += 1
            continue
        log.log(message, level)
        logged += 1
    return logged, rejected


@app.command()
def pipe(
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    input_file: Path | None = typer.Option(
        None,
        "--input",
        "-i",
        exists=True,
        dir_okay=False,
        help="Read lines from this file instead of stdin.",
    ),
    threshold: str | None = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Least severe level written immediately (name or number).",
    ),
    fatal: str | None = typer.Option(
        None,
        "--fatal",
        "-f",
        help=f"Level that frames pending output (name, number, or {FATAL_DISABLED} to disable).",
    ),
    skip: bool | None = typer.Option(
        None,
        "--skip/--no-skip",
        help="Hold every message back until the end of input.",
    ),
    replay: bool = typer.Option(
        True,
        "--replay/--no-replay",
        help="Replay pending show-marked messages at end of input.",
    ),
) -> None:
    """Log 'LEVEL message' lines from stdin (or --input) through a stashlog logger."""
    config = _load_settings_or_exit(settings)

    overrides: dict[str, Any] = {}
    if threshold is not None:
        overrides["threshold"] = threshold
    if fatal is not None:
        overrides["fatal_threshold"] = fatal
    if skip is not None:
        overrides["skip_all"] = skip
    config = _apply_overrides(config, overrides)

    try:
        log = create_logger(config)
    except SinkConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if input_file is not None:
        with input_file.open(encoding="utf-8") as source:
            logged, rejected = _pump(log, source)
    else:
        logged, rejected = _pump(log, sys.stdin)

    if not replay:
        log.reset_log()
    log.close()

    if rejected:
        typer.echo(f"{rejected} line(s) rejected, {logged} logged", err=True)
        raise typer.Exit(1)


@app.command()
def levels() -> None:
    """List severity levels, most severe first."""
    for level in LogLevel:
        typer.echo(f"{int(level)}  {level.name}")


@app.command("config")
def show_config(
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
) -> None:
    """Print resolved settings (file, environment and defaults) as YAML."""
    typer.echo(dump_settings(_load_settings_or_exit(settings)), nl=False)


if __name__ == "__main__":
    app()
