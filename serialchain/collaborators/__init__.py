"""Bundler collaborators consumed by the serializer, with reference implementations."""

from __future__ import annotations

from dataclasses import dataclass, field

from .assets import StaticAssetCollector, resolve_asset_plugin
from .base import (
    AssetCollector,
    AssetRecord,
    BundleEngine,
    CssAssetExtractor,
    SafeUrlCodec,
    SourceMapGenerator,
)
from .codec import JscSafeUrlCodec
from .css import StaticCssExtractor
from .engine import ConcatBundleEngine
from .source_maps import BasicSourceMapGenerator


@dataclass
class Collaborators:
    """The set of collaborators one terminal serializer talks to."""

    engine: BundleEngine = field(default_factory=ConcatBundleEngine)
    css_extractor: CssAssetExtractor = field(default_factory=StaticCssExtractor)
    asset_collector: AssetCollector = field(default_factory=StaticAssetCollector)
    source_maps: SourceMapGenerator = field(default_factory=BasicSourceMapGenerator)
    url_codec: SafeUrlCodec = field(default_factory=JscSafeUrlCodec)


__all__ = [
    "AssetCollector",
    "AssetRecord",
    "BasicSourceMapGenerator",
    "BundleEngine",
    "Collaborators",
    "ConcatBundleEngine",
    "CssAssetExtractor",
    "JscSafeUrlCodec",
    "SafeUrlCodec",
    "SourceMapGenerator",
    "StaticAssetCollector",
    "StaticCssExtractor",
    "resolve_asset_plugin",
]
