"""Built-in output sinks.

Available sinks:
- ConsoleSink: write to stdout/stderr
- FileSink: append to ``<log_dir>/<subdirectory>/<file_name>.log``
- CallbackSink: pass text to a registered function

Plugin registration:
    Sinks are registered via the stashlog_get_sinks hook.
    BuiltinSinksPlugin in this module registers the built-in sinks.
"""

from stashlog.sinks.callback import CallbackSink
from stashlog.sinks.console import ConsoleSink
from stashlog.sinks.errors import SinkConfigurationError, SinkRegistryError
from stashlog.sinks.file import FileSink, sanitize_subdirectory
from stashlog.sinks.hookspecs import hookimpl
from stashlog.sinks.protocols import SinkProtocol


class BuiltinSinksPlugin:
    """Plugin that registers built-in sinks."""

    @hookimpl
    def stashlog_get_sinks(self) -> list[type]:
        """Return built-in sink classes."""
        return [ConsoleSink, FileSink, CallbackSink]


__all__ = [
    "BuiltinSinksPlugin",
    "CallbackSink",
    "ConsoleSink",
    "FileSink",
    "SinkConfigurationError",
    "SinkProtocol",
    "SinkRegistryError",
    "sanitize_subdirectory",
]
