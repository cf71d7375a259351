"""Reference asset collector for modules transformed as static assets."""

from __future__ import annotations

import importlib
import inspect
import os
import posixpath
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..models import Module
from ..naming import hash_string
from .base import AssetRecord


class StaticAssetCollector:
    """Builds asset records for every ``js/module/asset`` module in the graph.

    Each record is passed through the configured asset plugins in order. A
    plugin is either a callable or a ``"package.module:function"`` string; it
    receives the record and returns the (possibly rewritten) record, and may
    be a coroutine function.
    """

    async def collect(
        self,
        dependencies: Mapping[str, Module],
        *,
        process_module_filter: Callable[[Module], bool],
        asset_plugins: Sequence[Any],
        platform: Optional[str],
        project_root: str,
        public_path: str,
    ) -> List[AssetRecord]:
        plugins = [resolve_asset_plugin(plugin) for plugin in asset_plugins]
        records: List[AssetRecord] = []
        for module in dependencies.values():
            if not module.is_asset() or not process_module_filter(module):
                continue
            record = _asset_record(module, platform=platform, project_root=project_root, public_path=public_path)
            for plugin in plugins:
                result = plugin(record)
                if inspect.isawaitable(result):
                    result = await result
                record = result
            records.append(record)
        return records


def resolve_asset_plugin(plugin: Any) -> Callable[[AssetRecord], Any]:
    """Return a callable for an asset plugin given as a callable or import string."""
    if callable(plugin):
        return plugin
    if not isinstance(plugin, str) or ":" not in plugin:
        raise ValueError(f"Asset plugin must be callable or 'module:attribute', got {plugin!r}")
    module_name, _, attribute = plugin.partition(":")
    loaded = getattr(importlib.import_module(module_name), attribute)
    if not callable(loaded):
        raise TypeError(f"Asset plugin '{plugin}' is not callable")
    return loaded


def _asset_record(
    module: Module, *, platform: Optional[str], project_root: str, public_path: str
) -> AssetRecord:
    path = module.path.replace(os.sep, "/")
    directory, filename = posixpath.split(path)
    stem, _, extension = filename.rpartition(".")
    if not stem:
        stem, extension = filename, ""
    # Platform-specific variants (logo.web.png) are served under the plain name.
    if platform and stem.endswith(f".{platform}"):
        stem = stem[: -len(platform) - 1]

    relative_dir = directory
    if project_root:
        relative_dir = os.path.relpath(directory or ".", project_root).replace(os.sep, "/")
    if relative_dir in ("", "."):
        server_location = public_path
    else:
        server_location = posixpath.join(public_path, relative_dir)

    output = module.js_output()
    data = dict(output.data) if output is not None else {}
    return {
        "__packager_asset": True,
        "name": stem,
        "type": extension,
        "fileSystemLocation": directory,
        "httpServerLocation": server_location,
        "files": [module.path],
        "hash": hash_string(module.path + module.source),
        "scales": data.get("scales", [1]),
        "width": data.get("width"),
        "height": data.get("height"),
    }


__all__ = ["StaticAssetCollector", "resolve_asset_plugin"]
