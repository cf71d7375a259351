"""Source map projection onto server-root-relative module paths."""

from __future__ import annotations

import posixpath
from dataclasses import replace
from typing import List

from .collaborators import SourceMapGenerator
from .models import Module, SerializationRequest
from .ordering import get_sorted_modules


def project_modules(request: SerializationRequest) -> List[Module]:
    """Return pre-modules then id-ordered graph modules, with absolute paths made root-relative.

    A map shipped to the browser must not reveal the local filesystem layout,
    so ``/Users/me/app/src/App.js`` under server root ``/Users/me/app``
    becomes ``/src/App.js``. Virtual paths (no leading ``/``) are kept as is.
    """
    options = request.options
    root = options.server_root or options.project_root
    modules = [
        *request.pre_modules,
        *get_sorted_modules(request.graph, options.create_module_id),
    ]
    projected: List[Module] = []
    for module in modules:
        if module.path.startswith("/"):
            relative = posixpath.relpath(module.path, root or "/")
            projected.append(replace(module, path="/" + relative))
        else:
            projected.append(module)
    return projected


async def serialize_to_source_map(
    request: SerializationRequest, generator: SourceMapGenerator
) -> str:
    """Generate the source map for ``request`` from its projected module list."""
    return await generator.generate(project_modules(request), request.options)


__all__ = ["project_modules", "serialize_to_source_map"]
