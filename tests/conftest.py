# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures:
- fixed_clock: deterministic entry timestamps
- stream: in-memory console sink target
- make_logger: StashLogger factory writing to ``stream`` with ``fixed_clock``
- captured: list collecting text from a callback sink

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from io import StringIO
from typing import Any

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from stashlog.logger import StashLogger

FIXED_TIME = datetime(2026, 1, 30, 12, 0, 0, tzinfo=UTC)
FIXED_STAMP = "[30-01-2026 12:00:00]"


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _restore_logging_state() -> Iterator[None]:
    """Undo configure_logging() calls made during a test.

    configure_logging() replaces the root handlers with one bound to the
    current sys.stderr, which capsys and CliRunner swap per test. Restoring
    root handlers, root level and structlog defaults keeps tests independent
    of execution order.
    """
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def fixed_clock() -> datetime:
    """Clock returning FIXED_TIME."""
    return FIXED_TIME


@pytest.fixture
def fixed_time() -> datetime:
    """Fixed timestamp for deterministic tests."""
    return FIXED_TIME


@pytest.fixture
def stamp() -> str:
    """FIXED_TIME as rendered on a log line."""
    return FIXED_STAMP


@pytest.fixture
def stream() -> StringIO:
    """In-memory console target."""
    return StringIO()


@pytest.fixture
def make_logger(stream: StringIO) -> Callable[..., StashLogger]:
    """Build loggers writing to ``stream`` with deterministic timestamps."""

    def _make(**kwargs: Any) -> StashLogger:
        kwargs.setdefault("stream", stream)
        kwargs.setdefault("clock", fixed_clock)
        return StashLogger(**kwargs)

    return _make


@pytest.fixture
def captured() -> list[str]:
    """Collects text handed to a callback sink."""
    return []
