"""Tests for engine.policy -- per-call decisions and threshold validation."""

import pytest

from stashlog.contracts.enums import FATAL_DISABLED, Decision, LogLevel
from stashlog.engine.policy import LevelPolicy


@pytest.fixture
def policy() -> LevelPolicy:
    return LevelPolicy(threshold=LogLevel.WARN, fatal_threshold=LogLevel.FATAL)


class TestDecide:
    @pytest.mark.parametrize("level", [LogLevel.FATAL, LogLevel.ERROR, LogLevel.WARN])
    def test_levels_within_threshold_are_processed(self, policy: LevelPolicy, level: LogLevel) -> None:
        assert policy.decide(level) is Decision.PROCESS

    @pytest.mark.parametrize("level", [LogLevel.INFO, LogLevel.DEBUG, LogLevel.SYSTEM])
    def test_levels_above_threshold_are_buffered(self, policy: LevelPolicy, level: LogLevel) -> None:
        assert policy.decide(level) is Decision.BUFFER_ONLY

    def test_levels_above_threshold_dropped_when_fatal_disabled(self, policy: LevelPolicy) -> None:
        policy.set_fatal_threshold(FATAL_DISABLED)
        assert policy.decide(LogLevel.INFO) is Decision.DROP
        assert policy.decide(LogLevel.WARN) is Decision.PROCESS

    def test_per_call_skip_buffers_qualifying_level(self, policy: LevelPolicy) -> None:
        assert policy.decide(LogLevel.ERROR, skip=True) is Decision.BUFFER_ONLY

    def test_global_skip_buffers_qualifying_level(self, policy: LevelPolicy) -> None:
        policy.set_skip_all(True)
        assert policy.decide(LogLevel.FATAL) is Decision.BUFFER_ONLY

    def test_skip_does_not_rescue_dropped_overflow(self, policy: LevelPolicy) -> None:
        policy.set_fatal_threshold(FATAL_DISABLED)
        assert policy.decide(LogLevel.DEBUG, skip=True) is Decision.DROP


class TestFraming:
    def test_is_framing_at_or_below_fatal(self) -> None:
        policy = LevelPolicy(threshold=3, fatal_threshold=1)
        assert policy.is_framing(LogLevel.FATAL)
        assert policy.is_framing(LogLevel.ERROR)
        assert not policy.is_framing(LogLevel.WARN)

    def test_never_framing_when_disabled(self) -> None:
        policy = LevelPolicy(threshold=3, fatal_threshold=FATAL_DISABLED)
        assert not policy.buffers_overflow
        assert not policy.is_framing(LogLevel.FATAL)


class TestSetters:
    def test_defaults(self) -> None:
        policy = LevelPolicy()
        assert policy.threshold == 2
        assert policy.fatal_threshold == 1
        assert policy.skip_all is False

    @pytest.mark.parametrize("level", [0, 3, 6])
    def test_threshold_accepts_table_range(self, policy: LevelPolicy, level: int) -> None:
        assert policy.set_threshold(level) is True
        assert policy.threshold == level

    @pytest.mark.parametrize("level", [-1, 7, 100])
    def test_threshold_out_of_range_keeps_previous(self, policy: LevelPolicy, level: int) -> None:
        assert policy.set_threshold(level) is False
        assert policy.threshold == LogLevel.WARN

    def test_fatal_must_be_more_severe_than_threshold(self, policy: LevelPolicy) -> None:
        assert policy.set_fatal_threshold(LogLevel.WARN) is False
        assert policy.set_fatal_threshold(LogLevel.INFO) is False
        assert policy.fatal_threshold == LogLevel.FATAL
        assert policy.set_fatal_threshold(LogLevel.ERROR) is True
        assert policy.fatal_threshold == LogLevel.ERROR

    def test_fatal_sentinel_is_accepted(self, policy: LevelPolicy) -> None:
        assert policy.set_fatal_threshold(FATAL_DISABLED) is True
        assert policy.fatal_threshold == FATAL_DISABLED

    @pytest.mark.parametrize("level", [-2, 7])
    def test_fatal_out_of_range_keeps_previous(self, policy: LevelPolicy, level: int) -> None:
        assert policy.set_fatal_threshold(level) is False
        assert policy.fatal_threshold == LogLevel.FATAL
