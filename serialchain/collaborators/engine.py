"""Reference bundle engine that concatenates module code in id order."""

from __future__ import annotations

from typing import List

from ..logging import get_logger
from ..models import SerializationRequest
from ..ordering import get_sorted_modules


class ConcatBundleEngine:
    """Joins pre-modules, graph modules and run statements into one script.

    The layout mirrors the bundler's plain-string output: prelude code first,
    module definitions ordered by module id, then the statement requiring the
    entry point and the trailing ``sourceMappingURL``/``sourceURL`` comments.
    """

    def __init__(self, require_fn: str = "__r") -> None:
        self.require_fn = require_fn
        self.logger = get_logger("engine")

    async def serialize(self, request: SerializationRequest) -> str:
        options = request.options
        pieces: List[str] = []

        for module in request.pre_modules:
            output = module.js_output()
            if output is not None:
                pieces.append(output.code)

        included = 0
        for module in get_sorted_modules(request.graph, options.create_module_id):
            if not options.process_module_filter(module):
                continue
            output = module.js_output()
            if output is None:
                continue
            pieces.append(output.code)
            included += 1

        if options.run_module and request.entry_point in request.graph.dependencies:
            entry_id = options.create_module_id(request.entry_point)
            pieces.append(f"{self.require_fn}({entry_id});")

        if options.source_map_url:
            pieces.append(f"//# sourceMappingURL={options.source_map_url}")
        if options.source_url:
            pieces.append(f"//# sourceURL={options.source_url}")

        self.logger.debug(
            "Concatenated %d pre-modules and %d modules", len(request.pre_modules), included
        )
        return "\n".join(pieces)


__all__ = ["ConcatBundleEngine"]
