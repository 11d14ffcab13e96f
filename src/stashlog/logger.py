# src/stashlog/logger.py
"""StashLogger: the public, explicitly constructed buffering logger.

There is no module-level default instance. Construct one at start-up and
pass it to the code that logs.

Configuration semantics:
- Setters return ``self`` so calls can be chained
- Invalid values are ignored and the previous configuration kept; each
  rejection is reported through structlog, never raised
- While deactivated, every operation except ``set_activate`` is a no-op
- Changing where output goes (sink kind, or the file target while the
  file sink is active) first replays pending entries to the old sink

Example:
    >>> log = StashLogger(pid="worker-1").set_threshold(LogLevel.WARN)
    >>> log.log("cache miss", LogLevel.INFO)      # held back
    >>> log.log("db unreachable", LogLevel.FATAL)  # framed with "cache miss"
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any, TextIO

from stashlog.contracts.entry import FormatOptions, LogEntry, coerce_options, utc_now
from stashlog.contracts.enums import Decision, LogLevel, SinkKind, parse_level
from stashlog.core.logging import get_logger
from stashlog.engine.engine import BufferEngine
from stashlog.engine.policy import LevelPolicy
from stashlog.engine.render import Renderer
from stashlog.sinks.errors import SinkConfigurationError
from stashlog.sinks.file import DEFAULT_FILE_NAME, DEFAULT_LOG_DIR, sanitize_subdirectory
from stashlog.sinks.protocols import SinkProtocol
from stashlog.sinks.registry import SinkRegistry, discover_sink_registry

logger = get_logger(__name__)

Handler = Callable[[str], object]


class StashLogger:
    """Buffering logger holding configuration, pending buffer and sink.

    Thread Safety:
        NOT thread-safe. Confine an instance to one thread, or serialize
        access externally.

    Args:
        pid: Process identifier rendered on every line
        skip_all: Start with every accepted entry forced into the buffer
        threshold: Least severe level written immediately
        fatal_threshold: Most permissive level that frames a flush
        show_time: Render timestamps
        activate: Start enabled
        clear_on_filtered_replay: Let ``show_logs(level)`` drain the buffer
        stream: Stream for the console sink instead of ``sys.stdout``
        sink_registry: Sink kind -> class mapping; discovered when omitted
        clock: Source of entry timestamps
    """

    def __init__(
        self,
        pid: str | None = None,
        skip_all: bool = False,
        *,
        threshold: int = LogLevel.WARN,
        fatal_threshold: int = LogLevel.ERROR,
        show_time: bool = True,
        activate: bool = True,
        clear_on_filtered_replay: bool = False,
        stream: TextIO | None = None,
        sink_registry: SinkRegistry | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._registry = sink_registry if sink_registry is not None else discover_sink_registry()
        self._clock = clock
        self._active = True
        self._handler: Handler | None = None
        self._sink_options: dict[str, dict[str, Any]] = {
            SinkKind.CONSOLE: {"stream": stream} if stream is not None else {},
            SinkKind.FILE: {
                "log_dir": DEFAULT_LOG_DIR,
                "subdirectory": "",
                "file_name": DEFAULT_FILE_NAME,
            },
        }

        self._sink_kind = str(SinkKind.CONSOLE)
        console = self._build_sink(self._sink_kind)
        if console is None:
            raise SinkConfigurationError(SinkKind.CONSOLE, "console sink unavailable")

        self._engine = BufferEngine(
            LevelPolicy(),
            Renderer(show_time=show_time),
            console,
            clear_on_filtered_replay=clear_on_filtered_replay,
        )
        self.set_threshold(threshold)
        self.set_fatal_threshold(fatal_threshold)
        self.set_global_skip(skip_all)
        self.set_process_id(pid)
        self._active = bool(activate)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def threshold(self) -> int:
        return self._engine.policy.threshold

    @property
    def fatal_threshold(self) -> int:
        return self._engine.policy.fatal_threshold

    @property
    def skip_all(self) -> bool:
        return self._engine.policy.skip_all

    @property
    def show_time(self) -> bool:
        return self._engine.renderer.show_time

    @property
    def pid(self) -> str | None:
        return self._engine.renderer.pid

    @property
    def clear_on_filtered_replay(self) -> bool:
        return self._engine.clear_on_filtered_replay

    @property
    def sink_kind(self) -> str:
        return self._sink_kind

    @property
    def sink(self) -> SinkProtocol:
        return self._engine.sink

    @property
    def handler(self) -> Handler | None:
        return self._handler

    @property
    def file_path(self) -> Path:
        """Where the file sink writes (or would write, if selected)."""
        options = self._sink_options[SinkKind.FILE]
        directory = Path(options["log_dir"])
        subdirectory = sanitize_subdirectory(options["subdirectory"])
        if subdirectory:
            directory = directory / subdirectory
        return directory / f"{options['file_name']}.log"

    @property
    def pending(self) -> tuple[LogEntry, ...]:
        """Buffered entries, oldest first."""
        return tuple(self._engine.buffer)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_activate(self, active: bool = True) -> StashLogger:
        """Enable or disable the logger. Always applies."""
        self._active = bool(active)
        return self

    def set_process_id(self, pid: str | None) -> StashLogger:
        if not self._active or pid is None or str(pid) == "":
            return self
        self._engine.renderer.pid = str(pid)
        return self

    def set_threshold(self, level: int) -> StashLogger:
        if self._active and _is_int(level):
            self._engine.policy.set_threshold(int(level))
        return self

    def set_fatal_threshold(self, level: int) -> StashLogger:
        if self._active and _is_int(level):
            self._engine.policy.set_fatal_threshold(int(level))
        return self

    def set_global_skip(self, skip: bool = True) -> StashLogger:
        if self._active:
            self._engine.policy.set_skip_all(skip)
        return self

    def set_show_time(self, show: bool = True) -> StashLogger:
        if self._active:
            self._engine.renderer.show_time = bool(show)
        return self

    def set_clear_on_filtered_replay(self, clear: bool = True) -> StashLogger:
        if self._active:
            self._engine.clear_on_filtered_replay = bool(clear)
        return self

    def set_sink_kind(
        self,
        kind: str,
        handler: Handler | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> StashLogger:
        """Select the sink.

        Args:
            kind: Registered sink name ("console", "file", "callback", or a
                plugin sink)
            handler: Callable for the callback sink. When omitted, the
                previously registered handler is reused.
            options: Extra configure() options for plugin sinks

        Pending show-marked entries are replayed to the current sink before
        the switch. Unknown kinds, "callback" without any valid handler, or
        options the sink rejects leave the current sink and the previous
        options in place.
        """
        if not self._active:
            return self
        name = str(kind)
        if name not in self._registry:
            logger.warning("sink_kind_rejected", kind=name, available=sorted(self._registry))
            return self

        if handler is not None:
            if callable(handler):
                self._handler = handler
            else:
                logger.warning("handler_rejected", handler_type=type(handler).__name__)
        previous_options = self._sink_options.get(name)
        if options is not None:
            self._sink_options[name] = {**(previous_options or {}), **options}

        retarget = name == SinkKind.CALLBACK and handler is not None and callable(handler)
        if name == self._sink_kind and not retarget and options is None:
            return self

        sink = self._build_sink(name)
        if sink is None:
            if previous_options is None:
                self._sink_options.pop(name, None)
            else:
                self._sink_options[name] = previous_options
            return self
        self._switch_sink(name, sink)
        return self

    def set_subdirectory(self, path: str) -> StashLogger:
        """Set the file sink subdirectory below the log dir (sanitized)."""
        if not self._active or not isinstance(path, str):
            return self
        cleaned = sanitize_subdirectory(path)
        if cleaned:
            self._retarget_file(subdirectory=cleaned)
        return self

    def set_file_name(self, name: str) -> StashLogger:
        """Set the file sink file name, without the ``.log`` suffix."""
        if not self._active or not isinstance(name, str) or name == "":
            return self
        if "/" in name:
            logger.warning("file_name_rejected", file_name=name)
            return self
        self._retarget_file(file_name=name)
        return self

    def set_log_dir(self, path: str | Path) -> StashLogger:
        """Set the base directory of the file sink."""
        if not self._active or not isinstance(path, str | Path) or str(path) == "":
            return self
        self._retarget_file(log_dir=str(path))
        return self

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def log(
        self,
        payload: Any,
        level: int | str = LogLevel.WARN,
        options: FormatOptions | Mapping[str, Any] | None = None,
    ) -> Decision | None:
        """Log ``payload`` at ``level``.

        Args:
            payload: Message, structure or object to render
            level: Level number or name; outside 0..6 is a caller error
            options: FormatOptions or a dict with separator, one_line
                (or oneLine), replace, skip

        Returns:
            The decision taken, or None while deactivated

        Raises:
            ValueError: If ``level`` names no level
        """
        if not self._active:
            return None
        entry = LogEntry(
            timestamp=self._clock(),
            level=parse_level(level),
            payload=payload,
            options=coerce_options(options),
        )
        return self._engine.process(entry)

    def show_logs(self, level_filter: int | str | None = None) -> None:
        """Replay buffered entries on demand.

        With a level filter (a name, or any integer), every entry at or below
        it is written. Without one, show-marked entries are written, with
        hidden context framed in front of severe ones.
        """
        if not self._active:
            return
        self._engine.replay(None if level_filter is None else _filter_level(level_filter))

    def reset_log(self) -> None:
        """Discard all pending entries."""
        if self._active:
            self._engine.reset()

    def close(self) -> None:
        """Replay pending show-marked entries and close the sink."""
        if self._active:
            self._engine.replay()
        self._engine.sink.close()

    def __enter__(self) -> StashLogger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Sink plumbing
    # ------------------------------------------------------------------

    def _options_for(self, name: str) -> dict[str, Any]:
        if name == SinkKind.CALLBACK:
            return {"handler": self._handler}
        return dict(self._sink_options.get(name, {}))

    def _build_sink(self, name: str) -> SinkProtocol | None:
        sink = self._registry[name]()
        try:
            sink.configure(self._options_for(name))
        except SinkConfigurationError as e:
            logger.warning("sink_configuration_rejected", kind=name, error=e.message)
            return None
        return sink

    def _switch_sink(self, name: str, sink: SinkProtocol) -> None:
        # Pending output belongs to the target it was logged under
        self._engine.replay()
        previous = self._engine.sink
        self._engine.sink = sink
        self._sink_kind = name
        previous.close()
        logger.debug("sink_switched", kind=name)

    def _retarget_file(self, **changes: str) -> None:
        current = self._sink_options[SinkKind.FILE]
        updated = {**current, **changes}
        if updated == current:
            return
        if self._sink_kind != SinkKind.FILE:
            self._sink_options[SinkKind.FILE] = updated
            return

        self._sink_options[SinkKind.FILE] = updated
        sink = self._build_sink(SinkKind.FILE)
        if sink is None:
            self._sink_options[SinkKind.FILE] = current
            return
        self._switch_sink(SinkKind.FILE, sink)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _filter_level(value: int | str) -> int:
    # Integers compare as-is, so 7 shows everything and -1 nothing
    if _is_int(value):
        return int(value)
    return int(parse_level(value))
