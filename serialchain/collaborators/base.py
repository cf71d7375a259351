"""Interfaces for the bundler-side collaborators the serializer coordinates."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from ..models import Module, SerialAsset, SerializationRequest, SerializerOptions, SerializerResult

AssetRecord = Dict[str, Any]


class BundleEngine(Protocol):
    """The bundler's default serialization: graph in, bundle code out."""

    async def serialize(self, request: SerializationRequest) -> SerializerResult:
        """Return the bundle for ``request``."""


class CssAssetExtractor(Protocol):
    """Extracts CSS artifacts from transformed modules."""

    async def extract(
        self,
        dependencies: Mapping[str, Module],
        *,
        project_root: str,
        process_module_filter: Callable[[Module], bool],
    ) -> List[SerialAsset]:
        """Return one serial asset per module carrying CSS output."""


class AssetCollector(Protocol):
    """Collects static asset records (images, fonts) referenced by the graph."""

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
        """Return opaque asset records for the manifest."""


class SourceMapGenerator(Protocol):
    """Builds a source map string for an ordered module list."""

    async def generate(self, modules: Sequence[Module], options: SerializerOptions) -> str:
        """Return the serialized source map."""


class SafeUrlCodec(Protocol):
    """Converts between the bundler's engine-safe URL form and normal URLs."""

    def is_encoded(self, url: str) -> bool:
        ...

    def decode(self, url: str) -> str:
        ...


__all__ = [
    "AssetCollector",
    "AssetRecord",
    "BundleEngine",
    "CssAssetExtractor",
    "SafeUrlCodec",
    "SourceMapGenerator",
]
