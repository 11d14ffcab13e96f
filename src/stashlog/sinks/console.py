# src/stashlog/sinks/console.py
"""Console sink: writes rendered text straight to stdout or stderr."""

from __future__ import annotations

import sys
from typing import Any, Literal, TextIO, TypeGuard

from stashlog.core.logging import get_logger
from stashlog.sinks.errors import SinkConfigurationError

logger = get_logger(__name__)


def _is_valid_output(v: str) -> TypeGuard[Literal["stdout", "stderr"]]:
    """TypeGuard for output validation - enables mypy type narrowing."""
    return v in {"stdout", "stderr"}


class ConsoleSink:
    """Write rendered log text to the console.

    Configuration options:
        output: "stdout" (default) or "stderr"
        stream: Any text stream, overriding ``output`` (used by embedders
            and tests)

    The stream named by ``output`` is looked up on every write, so a
    replaced ``sys.stdout`` is honored.
    """

    _name = "console"

    _VALID_OUTPUTS: frozenset[str] = frozenset({"stdout", "stderr"})

    def __init__(self) -> None:
        self._output: Literal["stdout", "stderr"] = "stdout"
        self._stream: TextIO | None = None

    @property
    def name(self) -> str:
        return self._name

    def configure(self, options: dict[str, Any]) -> None:
        """Configure the output stream.

        Raises:
            SinkConfigurationError: If ``output`` is not a valid stream name
                or ``stream`` has no ``write`` method
        """
        stream = options.get("stream")
        if stream is not None:
            if not callable(getattr(stream, "write", None)):
                raise SinkConfigurationError(
                    self._name,
                    f"'stream' must be a writable text stream, got {type(stream).__name__}",
                )
            self._stream = stream

        output_value = options.get("output", "stdout")
        if not isinstance(output_value, str):
            raise SinkConfigurationError(
                self._name,
                f"'output' must be a string, got {type(output_value).__name__}",
            )
        if _is_valid_output(output_value):
            self._output = output_value
        else:
            raise SinkConfigurationError(
                self._name,
                f"Invalid output '{output_value}'. Must be one of: {', '.join(sorted(self._VALID_OUTPUTS))}",
            )

        logger.debug("Console sink configured", output=self._output, injected_stream=stream is not None)

    @property
    def stream(self) -> TextIO:
        if self._stream is not None:
            return self._stream
        return sys.stdout if self._output == "stdout" else sys.stderr

    def write(self, text: str) -> None:
        stream = self.stream
        stream.write(text)
        stream.flush()

    def close(self) -> None:
        """No-op: the console sink does not own its stream."""
        pass
