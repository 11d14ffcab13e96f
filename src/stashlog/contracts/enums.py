"""Levels, decisions and sink kinds shared across the engine and sinks.

Level numbering is fixed: 0 is the most severe, 6 the least. Every
comparison in the engine relies on "lower number = higher severity".
"""

from enum import IntEnum, StrEnum


class LogLevel(IntEnum):
    """Severity of a log entry.

    The names double as the rendered ``[LEVELNAME]`` segment.
    """

    FATAL = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5
    SYSTEM = 6


# Fatal threshold sentinel: overflow entries are dropped, flushes are never framed.
FATAL_DISABLED = -1

MIN_LEVEL = int(LogLevel.FATAL)
MAX_LEVEL = int(LogLevel.SYSTEM)


class Decision(StrEnum):
    """Outcome of the level policy for one log call."""

    PROCESS = "process"
    BUFFER_ONLY = "buffer_only"
    DROP = "drop"


class SinkKind(StrEnum):
    """Built-in sink kinds selectable through configuration."""

    CONSOLE = "console"
    FILE = "file"
    CALLBACK = "callback"


def parse_level(value: int | str) -> LogLevel:
    """Resolve a level from its number or (case-insensitive) name.

    Raises:
        ValueError: If the value names no level.
    """
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, int):
        return LogLevel(value)
    text = value.strip()
    if text.lstrip("-").isdigit():
        return LogLevel(int(text))
    try:
        return LogLevel[text.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level {value!r}") from None
