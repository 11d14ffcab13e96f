# src/stashlog/engine/buffer.py
"""Pending buffer for entries held back from output.

Unlike a ring buffer, nothing is ever evicted: the buffer grows until the
engine drains it on a flush or replay, or the caller resets it. Insertion
order is the replay order.
"""

from collections import deque
from collections.abc import Iterator

from stashlog.contracts.entry import LogEntry
from stashlog.core.logging import get_logger

logger = get_logger(__name__)


class PendingBuffer:
    """Unbounded FIFO of pending log entries.

    Thread Safety:
        NOT thread-safe. The owning logger is confined to one thread;
        callers sharing it must serialize access themselves.

    Example:
        buffer = PendingBuffer()
        buffer.append(entry)
        entries = buffer.drain()
    """

    # Report growth every N entries so a never-flushed buffer is visible
    _LOG_INTERVAL = 1000

    def __init__(self) -> None:
        self._entries: deque[LogEntry] = deque()
        self._last_logged_size = 0

    def append(self, entry: LogEntry) -> None:
        """Append an entry at the tail."""
        self._entries.append(entry)
        if len(self._entries) - self._last_logged_size >= self._LOG_INTERVAL:
            logger.debug("pending_buffer_growing", size=len(self._entries))
            self._last_logged_size = len(self._entries)

    def drain(self) -> list[LogEntry]:
        """Remove and return every entry, oldest first."""
        entries = list(self._entries)
        self.clear()
        return entries

    def snapshot(self) -> list[LogEntry]:
        """Return every entry, oldest first, leaving the buffer untouched."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._last_logged_size = 0

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
