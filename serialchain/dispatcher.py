"""Terminal serializer choosing between pass-through and static web export."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import parse_qs, urljoin, urlsplit

from .collaborators import Collaborators, SafeUrlCodec
from .logging import get_logger
from .models import (
    ArtifactManifest,
    BundleOutput,
    BundlerConfig,
    Graph,
    SerialAsset,
    SerializationRequest,
    Serializer,
    SerializerResult,
)
from .naming import file_name_from_contents
from .sourcemap import serialize_to_source_map

PLACEHOLDER_BASE_URL = "https://expo.dev"
STATIC_JS_DIR = "_expo/static/js/web"
OUTPUT_PARAM = "serializer.output"
MAP_PARAM = "serializer.map"

_HOST_REQUIRED_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})
_FORBIDDEN_HOST_CHARS = frozenset(" \x00<>^|%")

_logger = get_logger("dispatcher")


class SerializerContractError(RuntimeError):
    """Raised when a delegate serializer returns neither a string nor a BundleOutput."""


@dataclass(frozen=True)
class StaticExportRequest:
    """What a request's ``source_url`` asks for, parsed once per call."""

    platform: Optional[str]
    url_path: str
    is_static: bool
    include_source_maps: bool

    @classmethod
    def from_request(
        cls, request: SerializationRequest, codec: SafeUrlCodec
    ) -> Optional["StaticExportRequest"]:
        """Return None when the request carries no source URL."""
        source_url = request.options.source_url
        if not source_url:
            return None
        parts = _parse_source_url(source_url, codec)
        query = parse_qs(parts.query, keep_blank_values=True)
        platform = _graph_platform(request.graph)
        if platform is None:
            platform = _first(query, "platform")
        return cls(
            platform=platform,
            url_path=parts.path or "/",
            is_static=platform == "web" and _first(query, OUTPUT_PARAM) == "static",
            include_source_maps=_first(query, MAP_PARAM) == "true",
        )


def is_static_export(request: SerializationRequest, codec: SafeUrlCodec | None = None) -> bool:
    """Return True when ``request`` would take the static export path."""
    parsed = StaticExportRequest.from_request(request, codec or Collaborators().url_codec)
    return parsed is not None and parsed.is_static


def get_default_serializer(
    config: BundlerConfig,
    fallback: Serializer | None = None,
    collaborators: Collaborators | None = None,
) -> Serializer:
    """Return the terminal serializer for ``config``.

    ``fallback`` is a serializer already installed on the configuration; when
    present it replaces the engine as the delegate for pass-through output and
    for the JavaScript payload of a static export.
    """
    resolved = collaborators or Collaborators()
    delegate: Serializer = fallback if fallback is not None else resolved.engine.serialize

    async def serialize(request: SerializationRequest) -> SerializerResult:
        export = StaticExportRequest.from_request(request, resolved.url_codec)
        if export is None:
            _logger.debug("No source URL for %s; using default serializer", request.entry_point)
            return await delegate(request)
        if not export.is_static:
            _logger.debug(
                "Static output not requested (platform=%s); using default serializer",
                export.platform,
            )
            return await delegate(request)
        return await _serialize_static(config, request, export, delegate, resolved)

    return serialize


async def _serialize_static(
    config: BundlerConfig,
    request: SerializationRequest,
    export: StaticExportRequest,
    delegate: Serializer,
    collaborators: Collaborators,
) -> str:
    options = request.options
    dependencies = request.graph.dependencies
    _logger.debug(
        "Static web export for %s (source maps: %s)", export.url_path, export.include_source_maps
    )

    css_assets = await collaborators.css_extractor.extract(
        dependencies,
        project_root=options.project_root,
        process_module_filter=options.process_module_filter,
    )
    assets = await collaborators.asset_collector.collect(
        dependencies,
        process_module_filter=options.process_module_filter,
        asset_plugins=config.transformer.asset_plugins,
        platform=export.platform,
        project_root=options.project_root,
        public_path=config.transformer.public_path,
    )

    # Without maps, drop the sourceMappingURL reference from the payload.
    js_request = request.with_options(
        source_map_url=options.source_map_url if export.include_source_maps else None
    )
    js_result = await delegate(js_request)
    js_code = _code_of(js_result)
    name = file_name_from_contents(export.url_path, js_code)

    artifacts: List[SerialAsset] = [
        SerialAsset(
            filename="index.js" if options.dev else f"{STATIC_JS_DIR}/{name}.js",
            origin_filename="index.js",
            type="js",
            source=js_code,
        )
    ]

    if export.include_source_maps and options.source_map_url:
        if isinstance(js_result, BundleOutput):
            source_map = js_result.map
        else:
            source_map = await serialize_to_source_map(request, collaborators.source_maps)
        artifacts.append(
            SerialAsset(
                filename="index.map" if options.dev else f"{STATIC_JS_DIR}/{name}.js.map",
                origin_filename="index.map",
                type="map",
                source=source_map,
            )
        )

    artifacts.extend(css_assets)
    manifest = ArtifactManifest(artifacts=artifacts, assets=list(assets))
    _logger.debug(
        "Static export produced %d artifacts and %d assets",
        len(manifest.artifacts),
        len(manifest.assets),
    )
    return manifest.to_json()


def _parse_source_url(source_url: str, codec: SafeUrlCodec):
    normal = codec.decode(source_url) if codec.is_encoded(source_url) else source_url
    resolved = urljoin(PLACEHOLDER_BASE_URL + "/", normal)
    parts = urlsplit(resolved)
    # Accessing the port validates the authority.
    _ = parts.port
    if parts.scheme in _HOST_REQUIRED_SCHEMES:
        host = parts.hostname
        if not host:
            raise ValueError(f"Invalid source URL {source_url!r}: missing host")
        if any(char in _FORBIDDEN_HOST_CHARS for char in host):
            raise ValueError(f"Invalid source URL {source_url!r}: forbidden character in host")
    return parts


def _graph_platform(graph: Graph) -> Optional[str]:
    platform = graph.transform_options.get("platform")
    return str(platform) if platform is not None else None


def _first(query: dict, key: str) -> Optional[str]:
    values = query.get(key)
    return values[0] if values else None


def _code_of(result: object) -> str:
    if isinstance(result, str):
        return result
    if isinstance(result, BundleOutput):
        return result.code
    raise SerializerContractError(
        f"Serializer returned unsupported result type {type(result).__name__}; "
        "expected str or BundleOutput"
    )


__all__ = [
    "MAP_PARAM",
    "OUTPUT_PARAM",
    "PLACEHOLDER_BASE_URL",
    "STATIC_JS_DIR",
    "SerializerContractError",
    "StaticExportRequest",
    "get_default_serializer",
    "is_static_export",
]
