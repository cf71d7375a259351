"""Reference source map generator emitting a version 3 index of module sources."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from ..models import Module, SerializerOptions


class BasicSourceMapGenerator:
    """Lists module sources in bundle order.

    Line mappings are left empty; only the ``sources`` and ``sourcesContent``
    tables are produced. Set ``extras["excludeSource"]`` to omit contents.
    """

    async def generate(self, modules: Sequence[Module], options: SerializerOptions) -> str:
        exclude_source = bool(options.extras.get("excludeSource"))
        sources: List[str] = []
        contents: List[str] = []
        for module in modules:
            if module.js_output() is None or not options.process_module_filter(module):
                continue
            sources.append(module.path)
            contents.append(module.source)

        payload: Dict[str, Any] = {
            "version": 3,
            "sources": sources,
            "names": [],
            "mappings": "",
        }
        if not exclude_source:
            payload["sourcesContent"] = contents
        return json.dumps(payload, separators=(",", ":"))


__all__ = ["BasicSourceMapGenerator"]
