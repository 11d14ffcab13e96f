# src/stashlog/sinks/hookspecs.py
"""pluggy hook specifications for sinks.

Sink plugins implement these hooks to register sink classes. The factory
calls them to build the name -> class registry.

Usage (implementing a sink plugin):
    from stashlog.sinks.hookspecs import hookimpl

    class MySinkPlugin:
        @hookimpl
        def stashlog_get_sinks(self):
            return [MySink]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from stashlog.sinks.protocols import SinkProtocol

PROJECT_NAME = "stashlog"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class StashlogSinkSpec:
    """Hook specifications for sink plugins."""

    @hookspec
    def stashlog_get_sinks(self) -> list[type["SinkProtocol"]]:  # type: ignore[empty-body]
        """Return sink classes (not instances) implementing SinkProtocol."""
