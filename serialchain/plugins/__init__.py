"""Serializer plugin discovery and the default plugin chain."""

from __future__ import annotations

from importlib import metadata
from typing import Dict, Iterable, List, Sequence, Set

from ..collaborators import Collaborators
from ..composer import with_serializer_plugins
from ..config import PluginConfig
from ..logging import get_logger
from ..models import BundlerConfig
from .base import (
    ENTRY_POINT_GROUP,
    ENVIRONMENT_VARIABLES_PLUGIN,
    PRIORITY_ORDER,
    SERVER_PRELUDE_PLUGIN,
    PluginLoadError,
    SerializerPlugin,
)

_logger = get_logger("plugins")


def discover_plugins(
    enabled: Sequence[str] | None = None,
    *,
    disable_client_env_vars: bool = False,
) -> List[SerializerPlugin]:
    """Return installed serializer plugins in execution order.

    With ``enabled`` the plugins run in exactly that order and unknown names
    raise :class:`PluginLoadError`; otherwise every installed plugin runs,
    prelude and environment plugins first.
    """
    available: Dict[str, metadata.EntryPoint] = {}
    for entry in _iter_entry_points():
        available.setdefault(entry.name.lower(), entry)

    if enabled is not None:
        names = [name.lower() for name in enabled]
        missing = sorted({name for name in names if name not in available})
        if missing:
            raise PluginLoadError(f"Unknown serializer plugins requested: {', '.join(missing)}")
    else:
        names = sorted(available, key=_priority_key)

    plugins: List[SerializerPlugin] = []
    seen: Set[str] = set()
    for name in names:
        if name in seen:
            continue
        seen.add(name)
        if disable_client_env_vars and name == ENVIRONMENT_VARIABLES_PLUGIN:
            _logger.debug("Client environment variables disabled; skipping %s", name)
            continue
        plugins.append(_load_plugin(available[name]))
        _logger.debug("Loaded serializer plugin %s", name)
    return plugins


def with_default_serializers(
    config: BundlerConfig,
    settings: PluginConfig | None = None,
    *,
    trailing: Sequence[SerializerPlugin] = (),
    collaborators: Collaborators | None = None,
) -> BundlerConfig:
    """Install the discovered plugin chain and terminal serializer on ``config``.

    ``trailing`` plugins run after the discovered ones, immediately before the
    terminal serializer.
    """
    settings = settings or PluginConfig()
    plugins = discover_plugins(
        settings.enabled,
        disable_client_env_vars=settings.disable_client_env_vars,
    )
    return with_serializer_plugins(config, [*plugins, *trailing], collaborators=collaborators)


def _priority_key(name: str) -> tuple[int, str]:
    if name in PRIORITY_ORDER:
        return (PRIORITY_ORDER.index(name), name)
    return (len(PRIORITY_ORDER), name)


def _load_plugin(entry: metadata.EntryPoint) -> SerializerPlugin:
    try:
        loaded = entry.load()
    except Exception as exc:
        raise PluginLoadError(f"Failed to load serializer plugin '{entry.name}': {exc}") from exc
    if not callable(loaded):
        raise PluginLoadError(f"Serializer plugin '{entry.name}' is not callable")
    return loaded


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=ENTRY_POINT_GROUP)


__all__ = [
    "ENTRY_POINT_GROUP",
    "ENVIRONMENT_VARIABLES_PLUGIN",
    "PluginLoadError",
    "SERVER_PRELUDE_PLUGIN",
    "SerializerPlugin",
    "discover_plugins",
    "with_default_serializers",
]
