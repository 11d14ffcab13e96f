"""Log entry and per-call formatting options.

Entries are immutable. The engine marks an entry as "show" by storing a
replaced copy, never by mutating the caller's object.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from stashlog.contracts.enums import LogLevel


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Per-call formatting options.

    Attributes:
        separator: Text written before the timestamp
        one_line: Collapse whitespace runs in the payload text to single spaces
        replace: (find, replacement) pair applied to the payload text
        skip: Buffer this entry even when its level qualifies for output
    """

    separator: str = ""
    one_line: bool = False
    replace: tuple[str, str] | None = None
    skip: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "FormatOptions":
        """Build options from a plain dict.

        Accepts ``oneLine`` as an alias of ``one_line``. Unknown keys are
        ignored, and a ``replace`` value that is not exactly two strings is
        dropped.
        """
        one_line = options.get("one_line", options.get("oneLine", False))
        return cls(
            separator=str(options.get("separator") or ""),
            one_line=bool(one_line),
            replace=_coerce_replace(options.get("replace")),
            skip=bool(options.get("skip", False)),
        )


def _coerce_replace(value: Any) -> tuple[str, str] | None:
    if value is None or isinstance(value, str | bytes):
        return None
    if not isinstance(value, Sequence) or len(value) != 2:
        return None
    find, replacement = value
    return (str(find), str(replacement))


DEFAULT_OPTIONS = FormatOptions()


def coerce_options(options: FormatOptions | Mapping[str, Any] | None) -> FormatOptions:
    """Normalize whatever the caller passed as options."""
    if options is None:
        return DEFAULT_OPTIONS
    if isinstance(options, FormatOptions):
        return options
    return FormatOptions.from_mapping(options)


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(tz=UTC).replace(microsecond=0)


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One log call captured for rendering or buffering.

    Attributes:
        timestamp: Capture time (UTC, whole seconds)
        level: Severity of the entry
        payload: Anything the renderer can turn into text
        options: Formatting options supplied with the call
        show: Set when the entry was buffered through the skip path and
            should surface on replay
    """

    timestamp: datetime
    level: LogLevel
    payload: Any
    options: FormatOptions = field(default=DEFAULT_OPTIONS)
    show: bool = False
