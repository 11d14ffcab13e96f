"""Tests for sinks.registry -- pluggy-based sink discovery."""

from __future__ import annotations

from typing import Any

import pytest

from stashlog.sinks import CallbackSink, ConsoleSink, FileSink
from stashlog.sinks.errors import SinkRegistryError
from stashlog.sinks.hookspecs import hookimpl
from stashlog.sinks.registry import discover_sink_registry


class MemorySink:
    _name = "memory"

    def __init__(self) -> None:
        self.writes: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    def configure(self, options: dict[str, Any]) -> None:
        pass

    def write(self, text: str) -> None:
        self.writes.append(text)

    def close(self) -> None:
        pass


class NamedByInstance:
    """Sink without class-level _name; name resolved from an instance."""

    @property
    def name(self) -> str:
        return "by_instance"

    def configure(self, options: dict[str, Any]) -> None:
        pass

    def write(self, text: str) -> None:
        pass

    def close(self) -> None:
        pass


class MemorySinkPlugin:
    @hookimpl
    def stashlog_get_sinks(self) -> list[type]:
        return [MemorySink, NamedByInstance]


class TestBuiltinDiscovery:
    def test_builtins_registered(self) -> None:
        registry = discover_sink_registry()
        assert registry == {"console": ConsoleSink, "file": FileSink, "callback": CallbackSink}

    def test_extra_plugin_sinks_registered(self) -> None:
        registry = discover_sink_registry([MemorySinkPlugin()])
        assert registry["memory"] is MemorySink
        assert registry["by_instance"] is NamedByInstance
        assert "console" in registry


class TestDiscoveryErrors:
    def test_duplicate_name_rejected(self) -> None:
        class DuplicateConsole(MemorySink):
            _name = "console"

        class DuplicatePlugin:
            @hookimpl
            def stashlog_get_sinks(self) -> list[type]:
                return [DuplicateConsole]

        with pytest.raises(SinkRegistryError, match="Duplicate sink name 'console'"):
            discover_sink_registry([DuplicatePlugin()])

    def test_empty_class_name_rejected(self) -> None:
        class Nameless(MemorySink):
            _name = ""

        class NamelessPlugin:
            @hookimpl
            def stashlog_get_sinks(self) -> list[type]:
                return [Nameless]

        with pytest.raises(SinkRegistryError, match="non-empty string"):
            discover_sink_registry([NamelessPlugin()])

    def test_hook_returning_none_rejected(self) -> None:
        class NonePlugin:
            @hookimpl
            def stashlog_get_sinks(self) -> None:
                return None

        with pytest.raises(SinkRegistryError, match="returned NoneType"):
            discover_sink_registry([NonePlugin()])

    def test_hook_returning_string_rejected(self) -> None:
        class StringPlugin:
            @hookimpl
            def stashlog_get_sinks(self) -> str:
                return "console"

        with pytest.raises(SinkRegistryError, match="returned str"):
            discover_sink_registry([StringPlugin()])

    def test_hook_raising_is_wrapped(self) -> None:
        class RaisingPlugin:
            @hookimpl
            def stashlog_get_sinks(self) -> list[type]:
                raise RuntimeError("plugin broke")

        with pytest.raises(SinkRegistryError, match="plugin broke"):
            discover_sink_registry([RaisingPlugin()])

    def test_unknown_hook_rejected(self) -> None:
        class WrongHookPlugin:
            @hookimpl
            def stashlog_get_sinkz(self) -> list[type]:
                return []

        with pytest.raises(SinkRegistryError, match="Invalid sink plugin"):
            discover_sink_registry([WrongHookPlugin()])

    def test_same_plugin_twice_rejected(self) -> None:
        plugin = MemorySinkPlugin()
        with pytest.raises(SinkRegistryError):
            discover_sink_registry([plugin, plugin])
