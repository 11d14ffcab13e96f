# src/stashlog/core/logging.py
"""Diagnostics for stashlog itself.

stashlog reports rejected configuration, sink switches and buffer flushes
through structlog. Those diagnostics are not the log text the package
produces for its callers:

- Every module logger wraps ``logging.getLogger(name)``, so the host
  application's logging configuration decides what is shown and where.
  With no configuration at all, stdlib logging prints warnings and above
  to stderr and drops the rest; nothing ever reaches stdout, where the
  console sink writes.
- ``configure_logging`` is the optional setup used by the CLI: one stderr
  handler rendering structlog and stdlib records the same way.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def _drop_formatter_keys(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    # ProcessorFormatter always adds both keys
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def get_logger(name: str) -> Any:
    """Structured logger for ``name`` backed by ``logging.getLogger(name)``.

    The processor chain is resolved on every call, so loggers created at
    import time pick up a later ``structlog.configure``.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "WARNING",
) -> None:
    """Send diagnostics to stderr at ``level``.

    Replaces the root logger's handlers. Meant for the CLI and for
    applications that have no logging setup of their own.

    Args:
        json_output: Render one JSON object per line instead of key=value text
        level: Stdlib level name (DEBUG, INFO, WARNING, ERROR)
    """
    final: list[Any] = [_drop_formatter_keys]
    if json_output:
        final += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final,
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper()))
