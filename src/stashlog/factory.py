# src/stashlog/factory.py
"""Factory for building a StashLogger from settings.

Glue between configuration (LoggerSettings) and the runtime logger:
1. Discovers sink classes via pluggy hooks
2. Builds the logger with the configured levels and toggles
3. Applies the file target and selects the configured sink

Usage:
    from stashlog.core.config import load_settings
    from stashlog.factory import create_logger

    settings = load_settings(Path("stashlog.yaml"))
    log = create_logger(settings)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, TextIO

from stashlog.contracts.entry import utc_now
from stashlog.contracts.enums import SinkKind
from stashlog.core.config import LoggerSettings
from stashlog.core.logging import get_logger
from stashlog.logger import Handler, StashLogger
from stashlog.sinks.errors import SinkConfigurationError
from stashlog.sinks.registry import discover_sink_registry

logger = get_logger(__name__)


def create_logger(
    settings: LoggerSettings | None = None,
    *,
    handler: Handler | None = None,
    stream: TextIO | None = None,
    sink_plugins: Iterable[Any] = (),
    clock: Callable[[], datetime] = utc_now,
) -> StashLogger:
    """Create a StashLogger from validated settings.

    Args:
        settings: Validated settings; defaults when omitted
        handler: Callable for the callback sink. Required when the settings
            select ``callback``; callables are never resolved by name.
        stream: Stream for the console sink instead of ``sys.stdout``
        sink_plugins: Extra plugin objects providing ``stashlog_get_sinks``
        clock: Source of entry timestamps

    Returns:
        Configured logger, deactivated if ``settings.activate`` is false

    Raises:
        SinkRegistryError: If sink discovery fails
        SinkConfigurationError: If the configured sink kind is unknown or
            rejects its options
    """
    settings = settings or LoggerSettings()
    registry = discover_sink_registry(sink_plugins)

    kind = settings.sink.kind
    if kind not in registry:
        raise SinkConfigurationError(kind, f"Unknown sink. Available sinks: {sorted(registry)}")
    if kind == SinkKind.CALLBACK and handler is None:
        raise SinkConfigurationError(kind, "callback sink selected but no handler was supplied")

    log = StashLogger(
        pid=settings.pid,
        skip_all=settings.skip_all,
        threshold=settings.threshold,
        fatal_threshold=settings.fatal_threshold,
        show_time=settings.show_time,
        clear_on_filtered_replay=settings.clear_on_filtered_replay,
        stream=stream,
        sink_registry=registry,
        clock=clock,
    )
    log.set_log_dir(settings.file.log_dir)
    log.set_subdirectory(settings.file.subdirectory)
    log.set_file_name(settings.file.file_name)

    if kind != SinkKind.CONSOLE or settings.sink.options:
        log.set_sink_kind(kind, handler=handler, options=settings.sink.options or None)
        if log.sink_kind != kind:
            raise SinkConfigurationError(kind, "sink rejected its configuration; see warnings above")

    log.set_activate(settings.activate)
    logger.debug(
        "logger_created",
        sink=log.sink_kind,
        threshold=log.threshold,
        fatal_threshold=log.fatal_threshold,
    )
    return log
