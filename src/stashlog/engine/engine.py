# src/stashlog/engine/engine.py
"""BufferEngine: the flush/accumulate state machine behind every log call.

Per call, the engine either drops the entry, appends it to the pending
buffer, or treats it as a flush point. A flush point drains the buffer:

- Framing entry (level <= fatal threshold): banner, every buffered entry,
  the entry itself, closing banner
- Non-framing entry: the show-marked buffered entries, then the entry

Each operation hands the sink at most one write, so a framed block is
never interleaved with other output.
"""

import dataclasses

from stashlog.contracts.entry import LogEntry
from stashlog.contracts.enums import Decision
from stashlog.core.logging import get_logger
from stashlog.engine.buffer import PendingBuffer
from stashlog.engine.policy import LevelPolicy
from stashlog.engine.render import Renderer
from stashlog.sinks.protocols import SinkProtocol

logger = get_logger(__name__)


class BufferEngine:
    """Owns the pending buffer and emits rendered text to the current sink.

    Thread Safety:
        NOT thread-safe. See PendingBuffer.

    Attributes:
        policy: Level policy consulted on every call
        renderer: Formats entries and banners
        sink: Destination of rendered text; swapped by the owning logger
        clear_on_filtered_replay: Whether replay(level_filter) drains the buffer
    """

    def __init__(
        self,
        policy: LevelPolicy,
        renderer: Renderer,
        sink: SinkProtocol,
        *,
        clear_on_filtered_replay: bool = False,
    ) -> None:
        self.policy = policy
        self.renderer = renderer
        self.sink = sink
        self.clear_on_filtered_replay = clear_on_filtered_replay
        self._buffer = PendingBuffer()

    @property
    def buffer(self) -> PendingBuffer:
        return self._buffer

    def process(self, entry: LogEntry) -> Decision:
        """Apply the level policy to ``entry`` and emit whatever it triggers.

        Args:
            entry: The entry for this log call

        Returns:
            The decision taken, for callers that want to observe it
        """
        decision = self.policy.decide(entry.level, entry.options.skip)

        match decision:
            case Decision.DROP:
                return decision
            case Decision.BUFFER_ONLY:
                # Qualifying level but skipped: surface it on replay
                show = entry.level <= self.policy.threshold
                self._buffer.append(dataclasses.replace(entry, show=show) if show else entry)
                return decision

        framed = False
        text = ""
        if self._buffer:
            pending = self._buffer.drain()
            if self.policy.is_framing(entry.level):
                framed = True
                text += self.renderer.banner(entry)
                text += "".join(self.renderer.render(e) for e in pending)
            else:
                text += "".join(self.renderer.render(e) for e in pending if e.show)
            logger.debug(
                "pending_buffer_flushed",
                trigger_level=entry.level.name,
                framed=framed,
                drained=len(pending),
            )

        text += self.renderer.render(entry)
        if framed:
            text += self.renderer.closer()
        self._write(text)
        return decision

    def replay(self, level_filter: int | None = None) -> None:
        """Emit buffered entries on demand.

        With ``level_filter``, every entry at or below that level is
        rendered regardless of its show flag; the buffer is kept unless
        ``clear_on_filtered_replay`` is set.

        Without a filter, show-marked entries are emitted in order. Entries
        without the show flag, and show-marked entries that carry their own
        skip option, collect as hidden context for the next show-marked
        entry. That context is only emitted, framed, when the show-marked
        entry is at or below the fatal threshold. The buffer is drained.
        """
        if not self._buffer:
            return

        if level_filter is not None:
            entries = self._buffer.drain() if self.clear_on_filtered_replay else self._buffer.snapshot()
            self._write("".join(self.renderer.render(e) for e in entries if e.level <= level_filter))
            return

        text = ""
        hidden: list[LogEntry] = []
        for entry in self._buffer.drain():
            if not entry.show or entry.options.skip:
                hidden.append(entry)
                continue
            framed = bool(hidden) and self.policy.is_framing(entry.level)
            if framed:
                text += self.renderer.banner(entry)
                text += "".join(self.renderer.render(e) for e in hidden)
            text += self.renderer.render(entry)
            if framed:
                text += self.renderer.closer()
            hidden = []

        if hidden:
            logger.debug("trailing_context_discarded", count=len(hidden))
        self._write(text)

    def reset(self) -> None:
        """Discard every pending entry."""
        self._buffer.clear()

    def _write(self, text: str) -> None:
        if text:
            self.sink.write(text)
