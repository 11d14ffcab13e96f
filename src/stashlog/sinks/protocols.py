# src/stashlog/sinks/protocols.py
"""Protocol definition for output sinks.

A sink receives fully rendered text blobs from the BufferEngine. One engine
operation produces at most one write call.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SinkProtocol(Protocol):
    """Protocol for output sinks.

    Lifecycle:
        1. Discovery: stashlog_get_sinks hook returns sink classes
        2. Instantiation: the factory or logger creates an instance
        3. Configuration: configure() called with sink-specific options
        4. Operation: write() called with rendered text
        5. Shutdown: close() called when the logger closes or switches sink

    Error handling:
        - configure() MUST raise SinkConfigurationError on invalid options
        - write() lets I/O errors propagate to the caller
        - close() MUST be idempotent
    """

    @property
    def name(self) -> str:
        """Sink name used as the sink kind in configuration."""
        ...

    def configure(self, options: dict[str, Any]) -> None:
        """Apply sink-specific options.

        Raises:
            SinkConfigurationError: If options are invalid
        """
        ...

    def write(self, text: str) -> None:
        """Deliver one rendered text blob."""
        ...

    def close(self) -> None:
        """Release resources. Safe to call more than once."""
        ...
