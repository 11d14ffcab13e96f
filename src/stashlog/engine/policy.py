# src/stashlog/engine/policy.py
"""Level policy: decides what happens to a log call before any rendering.

Decision logic:
- level > threshold: buffered silently, or dropped when the fatal threshold
  is disabled
- level <= threshold with skip (global or per call): buffered and marked
  to surface on replay
- level <= threshold otherwise: processed immediately

The policy is pure state plus comparisons. It performs no I/O and never
raises for bad configuration values; setters report acceptance instead.
"""

from stashlog.contracts.enums import FATAL_DISABLED, MAX_LEVEL, MIN_LEVEL, Decision
from stashlog.core.logging import get_logger

logger = get_logger(__name__)


class LevelPolicy:
    """Threshold, fatal threshold and global skip flag.

    Attributes:
        threshold: Entries at or below this level are eligible for output.
        fatal_threshold: Entries at or below this level frame a flush of the
            pending buffer. ``FATAL_DISABLED`` turns off overflow buffering.
        skip_all: Force every accepted entry into the buffer.

    Example:
        >>> policy = LevelPolicy(threshold=2, fatal_threshold=0)
        >>> policy.decide(3)
        <Decision.BUFFER_ONLY: 'buffer_only'>
    """

    def __init__(self, threshold: int = 2, fatal_threshold: int = 1, skip_all: bool = False) -> None:
        self.threshold = threshold
        self.fatal_threshold = fatal_threshold
        self.skip_all = skip_all

    @property
    def buffers_overflow(self) -> bool:
        """Whether entries above the threshold are kept rather than dropped."""
        return self.fatal_threshold != FATAL_DISABLED

    def decide(self, level: int, skip: bool = False) -> Decision:
        """Resolve the decision for one log call.

        Args:
            level: Severity of the entry
            skip: Per-call skip option

        Returns:
            PROCESS, BUFFER_ONLY or DROP
        """
        if level > self.threshold:
            return Decision.BUFFER_ONLY if self.buffers_overflow else Decision.DROP
        if self.skip_all or skip:
            return Decision.BUFFER_ONLY
        return Decision.PROCESS

    def is_framing(self, level: int) -> bool:
        """Whether an entry at ``level`` wraps the flushed buffer in banners."""
        return level <= self.fatal_threshold

    def set_threshold(self, level: int) -> bool:
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            logger.debug("threshold_rejected", level=level, current=self.threshold)
            return False
        self.threshold = level
        return True

    def set_fatal_threshold(self, level: int) -> bool:
        """Accept ``FATAL_DISABLED`` or a level strictly more severe than the threshold."""
        if level != FATAL_DISABLED and not MIN_LEVEL <= level < self.threshold:
            logger.debug(
                "fatal_threshold_rejected",
                level=level,
                threshold=self.threshold,
                current=self.fatal_threshold,
            )
            return False
        self.fatal_threshold = level
        return True

    def set_skip_all(self, skip: bool) -> None:
        self.skip_all = bool(skip)
