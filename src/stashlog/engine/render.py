# src/stashlog/engine/render.py
"""Rendering of log entries into text lines.

Line layout (each bracketed segment optional):

    [separator][timestamp][pid\\t\\t][LEVELNAME] payload\\n

Payload text resolution:
- str: as-is
- other scalars (numbers, bool, bytes, enums, datetimes): str()
- Renderable: to_display_string()
- mappings, sequences, sets, dataclasses, plain objects: structural dump
- anything else: repr()
- None or "": no line is rendered

Rendering never fails because of the payload type.
"""

import dataclasses
import re
from collections.abc import Mapping, Set
from datetime import date, datetime, time
from enum import Enum
from numbers import Number
from types import ModuleType
from typing import Any

from stashlog.contracts.entry import LogEntry
from stashlog.contracts.enums import LogLevel
from stashlog.contracts.renderable import Renderable
from stashlog.core.logging import get_logger

logger = get_logger(__name__)

TIME_FORMAT = "[%d-%m-%Y %H:%M:%S]"
CLOSER = "--------------------------\n\n"

_WHITESPACE = re.compile(r"\s+")
_INDENT = "    "


def _display_string(value: Renderable) -> str:
    try:
        return str(value.to_display_string())
    except Exception as e:
        logger.warning(
            "to_display_string failed, falling back to repr",
            payload_type=type(value).__name__,
            error=str(e),
        )
        return repr(value)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, str | bytes | Number | Enum | date | time) or value is None


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _is_object(value: Any) -> bool:
    if isinstance(value, type | ModuleType) or callable(value):
        return False
    return dataclasses.is_dataclass(value) or hasattr(value, "__dict__")


def _object_fields(value: Any) -> dict[str, Any]:
    if dataclasses.is_dataclass(value):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return {k: v for k, v in vars(value).items() if not k.startswith("_")}


def dump_structure(value: Any, depth: int = 0, _seen: frozenset[int] = frozenset()) -> str:
    """Recursive, indented dump of containers and objects.

    Nested scalars are shown with repr() so strings stay distinguishable
    from numbers. Cycles are cut with ``<recursion>``.
    """
    if isinstance(value, Renderable):
        return _display_string(value)
    if _is_scalar(value):
        return repr(value)
    if id(value) in _seen:
        return "<recursion>"
    seen = _seen | {id(value)}
    pad = _INDENT * (depth + 1)
    close_pad = _INDENT * depth

    if isinstance(value, Mapping):
        items = [f"{pad}{dump_structure(k, depth + 1, seen)}: {dump_structure(v, depth + 1, seen)}" for k, v in value.items()]
        return _wrap(type(value).__name__, "{", "}", items, close_pad)
    if isinstance(value, list | tuple | Set):
        elements = sorted(value, key=repr) if isinstance(value, Set) else value
        items = [f"{pad}{dump_structure(v, depth + 1, seen)}" for v in elements]
        return _wrap(type(value).__name__, "[", "]", items, close_pad)
    if _is_object(value):
        items = [f"{pad}{k}: {dump_structure(v, depth + 1, seen)}" for k, v in _object_fields(value).items()]
        return _wrap(type(value).__name__, "{", "}", items, close_pad)
    return repr(value)


def _wrap(name: str, opener: str, closer: str, items: list[str], close_pad: str) -> str:
    if not items:
        return f"{name} {opener}{closer}"
    body = "\n".join(items)
    return f"{name} {opener}\n{body}\n{close_pad}{closer}"


def payload_to_text(payload: Any) -> str:
    """Convert a payload to display text, before replace/one_line options."""
    if isinstance(payload, Renderable):
        return _display_string(payload)
    if _is_scalar(payload):
        return _scalar_text(payload)
    return dump_structure(payload)


class Renderer:
    """Formats entries, banners and closers.

    Attributes:
        show_time: Include the timestamp segment
        pid: Process identifier segment, omitted when None
    """

    def __init__(self, *, show_time: bool = True, pid: str | None = None) -> None:
        self.show_time = show_time
        self.pid = pid

    def payload_text(self, entry: LogEntry) -> str:
        return self._apply_options(payload_to_text(entry.payload), entry)

    def _apply_options(self, text: str, entry: LogEntry) -> str:
        replace = entry.options.replace
        if replace is not None and len(replace) == 2:
            text = text.replace(replace[0], replace[1])
        if entry.options.one_line:
            text = _WHITESPACE.sub(" ", text)
        return text

    def render(self, entry: LogEntry) -> str:
        """Render one entry as a newline-terminated line.

        An entry whose payload renders to nothing (None, "") produces no line
        at all, whatever its options.
        """
        raw = payload_to_text(entry.payload)
        if not raw:
            return ""
        parts = [entry.options.separator]
        if self.show_time:
            parts.append(entry.timestamp.strftime(TIME_FORMAT))
        if self.pid:
            parts.append(f"[{self.pid}]\t\t")
        parts.append(f"[{LogLevel(entry.level).name}]")
        parts.append(f" {self._apply_options(raw, entry)}\n")
        return "".join(parts)

    def banner(self, entry: LogEntry) -> str:
        """Header opening a framed flush triggered by ``entry``."""
        return f"\n--- {entry.timestamp.strftime(TIME_FORMAT)} - [{LogLevel(entry.level).name}] ---\n"

    def closer(self) -> str:
        """Line closing a framed flush."""
        return CLOSER
