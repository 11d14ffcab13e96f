# src/stashlog/sinks/callback.py
"""Callback sink: hands rendered text to a caller-supplied function.

The handler is a callable reference given at configuration time. It is
validated once, when registered, never looked up by name.
"""

from collections.abc import Callable
from typing import Any

from stashlog.core.logging import get_logger
from stashlog.sinks.errors import SinkConfigurationError

logger = get_logger(__name__)

Handler = Callable[[str], object]


class CallbackSink:
    """Pass each rendered text blob to a handler.

    Configuration options:
        handler: Callable taking one ``str``; its return value is ignored
    """

    _name = "callback"

    def __init__(self) -> None:
        self._handler: Handler | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def handler(self) -> Handler | None:
        return self._handler

    def configure(self, options: dict[str, Any]) -> None:
        """Register the handler.

        Raises:
            SinkConfigurationError: If no handler is given or it is not callable
        """
        handler = options.get("handler")
        if handler is None:
            raise SinkConfigurationError(self._name, "'handler' is required")
        if not callable(handler):
            raise SinkConfigurationError(
                self._name,
                f"'handler' must be callable, got {type(handler).__name__}",
            )
        self._handler = handler
        logger.debug("Callback sink configured", handler=getattr(handler, "__qualname__", repr(handler)))

    def write(self, text: str) -> None:
        if self._handler is None:
            raise SinkConfigurationError(self._name, "write() called before configure()")
        self._handler(text)

    def close(self) -> None:
        pass
