"""
stashlog: a buffering message logger.

Low-severity messages are held in a pending buffer and only surface when a
severe message arrives, framed by a banner so the context leading up to the
failure is visible in one block.

Usage:
    from stashlog import LogLevel, StashLogger

    log = StashLogger(pid="import-job")
    log.log("row 17 skipped", LogLevel.INFO)
    log.log("import aborted", LogLevel.FATAL)
"""

__version__ = "0.1.0"

from stashlog.contracts import FATAL_DISABLED, FormatOptions, LogEntry, LogLevel, Renderable, SinkKind
from stashlog.factory import create_logger
from stashlog.logger import StashLogger

__all__ = [
    "FATAL_DISABLED",
    "FormatOptions",
    "LogEntry",
    "LogLevel",
    "Renderable",
    "SinkKind",
    "StashLogger",
    "__version__",
    "create_logger",
]
