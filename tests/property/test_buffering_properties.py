"""Property-based tests for the buffering state machine.

These tests verify:
1. Entries above the threshold never reach the sink while overflow buffering is on
2. A framing entry with pending output emits exactly one framed block
3. reset_log() leaves nothing for show_logs() to replay
4. Rendered lines parse back into timestamp, level and payload
5. A deactivated logger ignores every call
6. Every operation hands the sink at most one write
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

from hypothesis import assume, given
from hypothesis import strategies as st

from stashlog.contracts.entry import FormatOptions, LogEntry
from stashlog.contracts.enums import FATAL_DISABLED, MAX_LEVEL, MIN_LEVEL, Decision, LogLevel
from stashlog.logger import StashLogger

_NOW = datetime(2026, 1, 30, 12, 0, 0, tzinfo=UTC)
_BANNER = re.compile(r"\n--- \[\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2}\] - \[[A-Z]+\] ---\n")
_CLOSER = "--------------------------\n\n"
_LINE = re.compile(r"^(?P<stamp>\[\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2}\])?\[(?P<level>[A-Z]+)\](?: (?P<text>.*))?$")


class RecordingHandler:
    def __init__(self) -> None:
        self.writes: list[str] = []

    def __call__(self, text: str) -> None:
        self.writes.append(text)


def _clock() -> datetime:
    return _NOW


def _make(handler: RecordingHandler, threshold: int, fatal_threshold: int, **kwargs: object) -> StashLogger:
    log = StashLogger(clock=_clock, threshold=threshold, fatal_threshold=fatal_threshold, **kwargs)  # type: ignore[arg-type]
    return log.set_sink_kind("callback", handler)


# =============================================================================
# Strategies
# =============================================================================

levels = st.sampled_from(list(LogLevel))

# (threshold, fatal_threshold) pairs that the policy accepts
threshold_pairs = st.integers(min_value=MIN_LEVEL + 1, max_value=MAX_LEVEL).flatmap(
    lambda t: st.tuples(st.just(t), st.integers(min_value=MIN_LEVEL, max_value=t - 1))
)

# Single-line printable text without surrounding whitespace
messages = st.text(
    alphabet=st.characters(min_codepoint=0x21, max_codepoint=0x7E),
    min_size=1,
    max_size=40,
)

calls = st.lists(st.tuples(messages, levels, st.booleans()), max_size=30)


# =============================================================================
# Properties
# =============================================================================


class TestOverflowBuffering:
    @given(pair=threshold_pairs, data=st.data())
    def test_overflow_is_never_written(self, pair: tuple[int, int], data: st.DataObject) -> None:
        threshold, fatal = pair
        assume(threshold < MAX_LEVEL)
        level = data.draw(st.integers(min_value=threshold + 1, max_value=MAX_LEVEL))
        handler = RecordingHandler()
        log = _make(handler, threshold, fatal)

        assert log.log("overflow", level) is Decision.BUFFER_ONLY
        assert handler.writes == []
        assert log.pending[-1].payload == "overflow"
        assert log.pending[-1].show is False

    @given(threshold=st.integers(min_value=MIN_LEVEL, max_value=MAX_LEVEL - 1), data=st.data())
    def test_overflow_dropped_when_fatal_disabled(self, threshold: int, data: st.DataObject) -> None:
        level = data.draw(st.integers(min_value=threshold + 1, max_value=MAX_LEVEL))
        handler = RecordingHandler()
        log = _make(handler, threshold, FATAL_DISABLED)

        assert log.log("noise", level) is Decision.DROP
        assert log.pending == ()
        assert handler.writes == []


class TestFraming:
    @given(pair=threshold_pairs, pending=st.lists(messages, min_size=1, max_size=10), data=st.data())
    def test_framing_entry_emits_one_block(self, pair: tuple[int, int], pending: list[str], data: st.DataObject) -> None:
        threshold, fatal = pair
        trigger = data.draw(st.integers(min_value=MIN_LEVEL, max_value=fatal))
        handler = RecordingHandler()
        log = _make(handler, threshold, fatal, show_time=False)
        if threshold < MAX_LEVEL:
            for message in pending:
                log.log(message, threshold + 1)
        else:
            log.set_global_skip(True)
            for message in pending:
                log.log(message, threshold)
            log.set_global_skip(False)

        log.log("trigger", trigger)

        assert len(handler.writes) == 1
        block = handler.writes[0]
        assert len(_BANNER.findall(block)) == 1
        assert block.count(_CLOSER) == 1
        assert block.endswith(f"[{LogLevel(trigger).name}] trigger\n{_CLOSER}")
        assert log.pending == ()

    @given(calls=calls, pair=threshold_pairs)
    def test_each_call_writes_at_most_once(self, calls: list[tuple[str, LogLevel, bool]], pair: tuple[int, int]) -> None:
        threshold, fatal = pair
        handler = RecordingHandler()
        log = _make(handler, threshold, fatal)
        for message, level, skip in calls:
            before = len(handler.writes)
            log.log(message, level, {"skip": skip})
            assert len(handler.writes) - before <= 1

        before = len(handler.writes)
        log.show_logs()
        assert len(handler.writes) - before <= 1
        assert log.pending == ()


class TestReset:
    @given(calls=calls)
    def test_reset_then_show_is_silent(self, calls: list[tuple[str, LogLevel, bool]]) -> None:
        handler = RecordingHandler()
        log = _make(handler, LogLevel.WARN, LogLevel.FATAL, skip_all=True)
        for message, level, skip in calls:
            log.log(message, level, {"skip": skip})

        log.reset_log()
        log.show_logs()
        log.show_logs(LogLevel.SYSTEM)

        assert handler.writes == []


class TestRendering:
    @given(message=messages, level=levels, show_time=st.booleans())
    def test_line_parses_back(self, message: str, level: LogLevel, show_time: bool) -> None:
        handler = RecordingHandler()
        log = _make(handler, MAX_LEVEL, FATAL_DISABLED, show_time=show_time)
        log.log(message, level)

        match = _LINE.match(handler.writes[0].removesuffix("\n"))
        assert match is not None
        assert (match["stamp"] is not None) == show_time
        assert match["level"] == level.name
        assert match["text"] == message

    @given(message=messages, level=levels)
    def test_render_is_deterministic(self, message: str, level: LogLevel) -> None:
        from stashlog.engine.render import Renderer

        renderer = Renderer(pid="p")
        entry = LogEntry(timestamp=_NOW, level=level, payload=message, options=FormatOptions(one_line=True))
        assert renderer.render(entry) == renderer.render(entry)


class TestActivation:
    @given(calls=calls, pair=threshold_pairs)
    def test_inactive_logger_changes_nothing(self, calls: list[tuple[str, LogLevel, bool]], pair: tuple[int, int]) -> None:
        threshold, fatal = pair
        handler = RecordingHandler()
        log = _make(handler, LogLevel.WARN, LogLevel.ERROR).set_activate(False)

        for message, level, skip in calls:
            assert log.log(message, level, {"skip": skip}) is None
        log.set_threshold(threshold).set_fatal_threshold(fatal).set_global_skip(True)
        log.set_show_time(False).set_process_id("p").set_sink_kind("console")
        log.show_logs()

        assert handler.writes == []
        assert log.pending == ()
        assert (log.threshold, log.fatal_threshold) == (LogLevel.WARN, LogLevel.ERROR)
        assert log.skip_all is False
        assert log.show_time is True
        assert log.pid is None
        assert log.sink_kind == "callback"
