# src/stashlog/sinks/registry.py
"""Sink discovery through pluggy hooks.

Builds the name -> class registry the logger uses to resolve sink kinds.
Built-in sinks are always registered; callers may add plugin objects that
implement ``stashlog_get_sinks``.

Usage:
    from stashlog.sinks.registry import discover_sink_registry

    registry = discover_sink_registry([MySinkPlugin()])
    sink = registry["my_sink"]()
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pluggy

from stashlog.core.logging import get_logger
from stashlog.sinks import BuiltinSinksPlugin
from stashlog.sinks.errors import SinkRegistryError
from stashlog.sinks.hookspecs import PROJECT_NAME, StashlogSinkSpec
from stashlog.sinks.protocols import SinkProtocol

logger = get_logger(__name__)

SinkRegistry = dict[str, type[SinkProtocol]]


def _resolve_sink_name(sink_class: type[SinkProtocol]) -> str:
    """Resolve a sink name from the class ``_name`` or a temporary instance.

    Raises:
        SinkRegistryError: If the name is missing, empty or not a string, or
            the class cannot be instantiated to ask for it.
    """
    try:
        class_name = sink_class.__name__
    except AttributeError as e:
        raise SinkRegistryError("sink_plugins", f"Invalid sink declaration without __name__: {sink_class!r}") from e

    # Prefer class-level _name to avoid instantiation
    class_dict = sink_class.__dict__
    if "_name" in class_dict:
        name_hint = class_dict["_name"]
        if type(name_hint) is str and name_hint != "":
            return name_hint
        raise SinkRegistryError(
            class_name,
            f"Sink class attribute _name must be a non-empty string, got {name_hint!r}",
        )

    try:
        instance = sink_class()
    except Exception as e:
        raise SinkRegistryError(class_name, f"Failed to instantiate sink class during discovery: {e}") from e

    resolved = instance.name
    if type(resolved) is not str or resolved == "":
        raise SinkRegistryError(class_name, f"Sink name must be a non-empty string, got {resolved!r}")
    return resolved


def discover_sink_registry(sink_plugins: Iterable[Any] = ()) -> SinkRegistry:
    """Discover sink classes via pluggy hooks.

    Args:
        sink_plugins: Extra plugin objects implementing ``stashlog_get_sinks``

    Returns:
        Mapping of sink name to sink class

    Raises:
        SinkRegistryError: If a plugin fails validation, its hook misbehaves,
            or two sinks share a name
    """
    plugin_manager = pluggy.PluginManager(PROJECT_NAME)
    plugin_manager.add_hookspecs(StashlogSinkSpec)

    for plugin in [BuiltinSinksPlugin(), *list(sink_plugins)]:
        try:
            plugin_manager.register(plugin)
            plugin_manager.check_pending()
        except (pluggy.PluginValidationError, ValueError) as e:
            # PluginValidationError: hook spec mismatch
            # ValueError: duplicate plugin object or name
            if isinstance(e, pluggy.PluginValidationError):
                plugin_manager.unregister(plugin=plugin)
            raise SinkRegistryError(
                "sink_plugins",
                f"Invalid sink plugin {type(plugin).__name__}: {e}",
            ) from e

    registry: SinkRegistry = {}
    for hook_impl in plugin_manager.hook.stashlog_get_sinks.get_hookimpls():
        plugin_name = type(hook_impl.plugin).__name__
        try:
            sink_classes = hook_impl.function()
        except Exception as e:
            raise SinkRegistryError(
                "sink_plugins",
                f"Sink plugin {plugin_name} failed in stashlog_get_sinks: {e}",
            ) from e

        if sink_classes is None or type(sink_classes) in (str, bytes):
            raise SinkRegistryError(
                "sink_plugins",
                f"stashlog_get_sinks in plugin {plugin_name} returned {type(sink_classes).__name__}; "
                "expected iterable of sink classes",
            )
        try:
            sink_iter = iter(sink_classes)
        except TypeError as e:
            raise SinkRegistryError(
                "sink_plugins",
                f"stashlog_get_sinks in plugin {plugin_name} returned {type(sink_classes).__name__}; "
                "expected iterable of sink classes",
            ) from e

        for sink_class in sink_iter:
            sink_name = _resolve_sink_name(sink_class)
            if sink_name in registry:
                raise SinkRegistryError(
                    sink_name,
                    f"Duplicate sink name '{sink_name}' discovered: "
                    f"{registry[sink_name].__name__} and {sink_class.__name__}",
                )
            registry[sink_name] = sink_class

    logger.debug("sink_registry_discovered", sinks=sorted(registry))
    return registry
