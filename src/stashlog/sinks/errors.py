# src/stashlog/sinks/errors.py
"""Sink-specific exceptions.

These cover configuration and discovery only. Write failures (permission
denied, disk full) are ordinary OSErrors and propagate untouched.
"""


class SinkConfigurationError(Exception):
    """Raised when a sink rejects its configuration.

    Attributes:
        sink_name: Name of the sink that failed
        message: Human-readable error description
    """

    def __init__(self, sink_name: str, message: str) -> None:
        self.sink_name = sink_name
        self.message = message
        super().__init__(f"Sink '{sink_name}' failed: {message}")


class SinkRegistryError(SinkConfigurationError):
    """Raised when sink plugin discovery finds a malformed or duplicate sink."""
