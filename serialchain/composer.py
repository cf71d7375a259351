"""Plugin chain composition around a single terminal serializer."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from .collaborators import Collaborators
from .dispatcher import get_default_serializer
from .logging import get_logger
from .models import BundlerConfig, SerializationRequest, Serializer, SerializerPlugin, SerializerResult

_logger = get_logger("composer")


def with_serializer_plugins(
    config: BundlerConfig,
    plugins: Sequence[Optional[SerializerPlugin]],
    *,
    collaborators: Collaborators | None = None,
) -> BundlerConfig:
    """Return a copy of ``config`` whose custom serializer runs ``plugins`` first.

    A bundler accepts only one custom serializer, so an existing one is kept
    as the delegate of the new terminal serializer rather than replaced.
    """
    original = config.serializer.custom_serializer
    serializer = create_serializer_from_plugins(
        config, plugins, original, collaborators=collaborators
    )
    return replace(
        config,
        serializer=replace(config.serializer, custom_serializer=serializer),
    )


def create_serializer_from_plugins(
    config: BundlerConfig,
    plugins: Sequence[Optional[SerializerPlugin]],
    original: Serializer | None = None,
    *,
    collaborators: Collaborators | None = None,
) -> Serializer:
    """Compose ``plugins`` (left to right) in front of the terminal serializer.

    ``None`` entries are skipped so callers can build plugin lists with
    conditional members.
    """
    final_serializer = get_default_serializer(config, original, collaborators)
    chain = [plugin for plugin in plugins if plugin is not None]
    _logger.debug("Composed serializer with %d plugins", len(chain))

    async def serialize(request: SerializationRequest) -> SerializerResult:
        for plugin in chain:
            request = plugin(request)
            if not isinstance(request, SerializationRequest):
                raise TypeError(
                    f"Serializer plugin {_plugin_name(plugin)} returned "
                    f"{type(request).__name__}, expected SerializationRequest"
                )
        return await final_serializer(request)

    return serialize


def _plugin_name(plugin: SerializerPlugin) -> str:
    return getattr(plugin, "__qualname__", None) or repr(plugin)


__all__ = ["create_serializer_from_plugins", "with_serializer_plugins"]
