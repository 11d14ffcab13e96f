# src/stashlog/core/__init__.py
"""Core infrastructure: Configuration, Logging."""

from stashlog.core.config import (
    FileTargetSettings,
    LoggerSettings,
    SinkSettings,
    dump_settings,
    load_settings,
)
from stashlog.core.logging import configure_logging, get_logger

__all__ = [
    "FileTargetSettings",
    "LoggerSettings",
    "SinkSettings",
    "configure_logging",
    "dump_settings",
    "get_logger",
    "load_settings",
]
