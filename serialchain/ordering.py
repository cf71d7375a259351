"""Deterministic module ordering for reproducible bundles and source maps."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .models import Graph, Module


class ModuleIdRegistry:
    """Caller-owned table assigning stable integer ids to module paths.

    Ids are handed out sequentially in first-seen order and never change for
    the lifetime of the registry, so one instance can be shared by every
    serialization call of a bundling session. The registry is not
    synchronised; callers that share it across threads must lock around it.
    """

    def __init__(self, start: int = 0) -> None:
        self._ids: Dict[str, int] = {}
        self._next = start

    def assign_id(self, path: str) -> int:
        """Return the id for ``path``, registering it when unseen."""
        existing = self._ids.get(path)
        if existing is not None:
            return existing
        module_id = self._next
        self._ids[path] = module_id
        self._next += 1
        return module_id

    __call__ = assign_id

    def lookup(self, path: str) -> Optional[int]:
        """Return the id for ``path`` without registering it."""
        return self._ids.get(path)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, path: object) -> bool:
        return path in self._ids


def get_sorted_modules(graph: Graph, create_module_id: Callable[[str], int]) -> List[Module]:
    """Return every graph module ordered by ascending module id."""
    modules = list(graph.dependencies.values())
    # Register ids in graph order before sorting; assignment is lazy.
    for module in modules:
        create_module_id(module.path)
    return sorted(modules, key=lambda module: create_module_id(module.path))


__all__ = ["ModuleIdRegistry", "get_sorted_modules"]
