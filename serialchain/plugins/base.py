"""Serializer plugin contract."""

from __future__ import annotations

from ..models import SerializerPlugin

ENTRY_POINT_GROUP = "serialchain.plugins"

SERVER_PRELUDE_PLUGIN = "server_prelude"
ENVIRONMENT_VARIABLES_PLUGIN = "environment_variables"

# Installed plugins run in this order ahead of any others, which follow by name.
PRIORITY_ORDER = (SERVER_PRELUDE_PLUGIN, ENVIRONMENT_VARIABLES_PLUGIN)


class PluginLoadError(RuntimeError):
    """Raised when a serializer plugin cannot be loaded or is unknown."""


__all__ = [
    "ENTRY_POINT_GROUP",
    "ENVIRONMENT_VARIABLES_PLUGIN",
    "PRIORITY_ORDER",
    "PluginLoadError",
    "SERVER_PRELUDE_PLUGIN",
    "SerializerPlugin",
]
