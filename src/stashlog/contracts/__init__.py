"""Shared contracts for the engine, sinks and public logger.

This package is a leaf: it imports nothing from engine, sinks or core.
"""

from stashlog.contracts.entry import (
    DEFAULT_OPTIONS,
    FormatOptions,
    LogEntry,
    coerce_options,
    utc_now,
)
from stashlog.contracts.enums import (
    FATAL_DISABLED,
    MAX_LEVEL,
    MIN_LEVEL,
    Decision,
    LogLevel,
    SinkKind,
    parse_level,
)
from stashlog.contracts.renderable import Renderable

__all__ = [
    "DEFAULT_OPTIONS",
    "FATAL_DISABLED",
    "MAX_LEVEL",
    "MIN_LEVEL",
    "Decision",
    "FormatOptions",
    "LogEntry",
    "LogLevel",
    "Renderable",
    "SinkKind",
    "coerce_options",
    "parse_level",
    "utc_now",
]
