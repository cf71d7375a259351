"""Tests for the terminal serializer's pass-through and static export paths."""

from __future__ import annotations

import asyncio
import json
import re

import pytest

from serialchain.collaborators import ConcatBundleEngine, JscSafeUrlCodec
from serialchain.dispatcher import (
    SerializerContractError,
    StaticExportRequest,
    get_default_serializer,
    is_static_export,
)
from serialchain.models import ArtifactManifest, BundleOutput, BundlerConfig, SerializationRequest
from serialchain.naming import file_name_from_contents
from tests._fixtures.graph_builder import GraphBuilder

STATIC_MAP_URL = "https://x/index.bundle?platform=web&serializer.output=static&serializer.map=true"
STATIC_URL = "https://x/index.bundle?platform=web&serializer.output=static"
MAP_URL = "https://x/index.map?platform=web"


def _serialize(request: SerializationRequest, config: BundlerConfig | None = None, fallback=None):
    serializer = get_default_serializer(config or BundlerConfig(), fallback)
    return asyncio.run(serializer(request))


def _engine_output(request: SerializationRequest) -> str:
    return asyncio.run(ConcatBundleEngine().serialize(request))


def test_missing_source_url_passes_through(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_map_url=MAP_URL, dev=True)

    assert _serialize(request) == _engine_output(request)


@pytest.mark.parametrize(
    "source_url,platform",
    [
        ("https://x/index.bundle?platform=ios&serializer.output=static", "ios"),
        ("https://x/index.bundle?platform=web", "web"),
        ("https://x/index.bundle?platform=web&serializer.output=STATIC", "web"),
        ("/index.bundle?platform=web&serializer.output=dynamic", "web"),
    ],
)
def test_non_static_requests_pass_through(app_builder: GraphBuilder, source_url: str, platform: str) -> None:
    request = app_builder.request(source_url=source_url, source_map_url=MAP_URL, platform=platform)

    result = _serialize(request)

    assert result == _engine_output(request)
    assert "//# sourceMappingURL=" + MAP_URL in result


def test_platform_comes_from_graph_before_url(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url=STATIC_URL, platform="android")

    assert not is_static_export(request)
    assert _serialize(request) == _engine_output(request)


def test_platform_falls_back_to_url_query(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url=STATIC_URL, platform=None)

    export = StaticExportRequest.from_request(request, codec=JscSafeUrlCodec())

    assert export is not None
    assert export.platform == "web"
    assert export.is_static
    assert export.url_path == "/index.bundle"


def test_static_production_export_uses_hashed_names(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url=STATIC_MAP_URL, source_map_url=MAP_URL)

    manifest = ArtifactManifest.from_json(_serialize(request))

    js, source_map, css = manifest.artifacts
    match = re.fullmatch(r"_expo/static/js/web/(index-[0-9a-f]{32})\.js", js.filename)
    assert match is not None
    assert source_map.filename == f"_expo/static/js/web/{match.group(1)}.js.map"
    assert (js.type, source_map.type, css.type) == ("js", "map", "css")
    assert js.origin_filename == "index.js"
    assert source_map.origin_filename == "index.map"
    assert match.group(1) == file_name_from_contents("/index.bundle", js.source)


def test_static_development_export_uses_fixed_names(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url=STATIC_MAP_URL, source_map_url=MAP_URL, dev=True)

    manifest = ArtifactManifest.from_json(_serialize(request))

    assert [artifact.filename for artifact in manifest.artifacts[:2]] == ["index.js", "index.map"]


def test_static_export_keeps_source_map_reference_only_with_maps(app_builder: GraphBuilder) -> None:
    with_maps = ArtifactManifest.from_json(
        _serialize(app_builder.request(source_url=STATIC_MAP_URL, source_map_url=MAP_URL))
    )
    without_maps = ArtifactManifest.from_json(
        _serialize(app_builder.request(source_url=STATIC_URL, source_map_url=MAP_URL))
    )

    assert "sourceMappingURL=" + MAP_URL in with_maps.artifacts[0].source
    assert "sourceMappingURL" not in without_maps.artifacts[0].source
    assert [artifact.type for artifact in without_maps.artifacts] == ["js", "css"]


def test_map_requested_without_source_map_url_skips_map_asset(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url=STATIC_MAP_URL)

    manifest = ArtifactManifest.from_json(_serialize(request))

    assert [artifact.type for artifact in manifest.artifacts] == ["js", "css"]


def test_static_map_is_projected_from_request(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url=STATIC_MAP_URL, source_map_url=MAP_URL)

    manifest = ArtifactManifest.from_json(_serialize(request))

    source_map = json.loads(manifest.artifacts[1].source)
    assert "/index.js" in source_map["sources"]
    assert not any(source.startswith("/Users/") for source in source_map["sources"])


def test_static_export_lists_css_and_assets(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url=STATIC_URL)

    payload = json.loads(_serialize(request))

    css = payload["artifacts"][-1]
    assert css["originFilename"] == "styles.css"
    assert css["source"] == "body { margin: 0; }"
    assert css["filename"].startswith("_expo/static/css/styles-")
    assert [asset["name"] for asset in payload["assets"]] == ["logo"]
    assert payload["assets"][0]["httpServerLocation"] == "/assets/assets"


def test_static_export_reuses_delegate_map(app_builder: GraphBuilder) -> None:
    calls: list[SerializationRequest] = []

    async def delegate(request: SerializationRequest) -> BundleOutput:
        calls.append(request)
        return BundleOutput(code="bundle();", map='{"version":3,"from":"delegate"}')

    request = app_builder.request(source_url=STATIC_MAP_URL, source_map_url=MAP_URL)

    manifest = ArtifactManifest.from_json(_serialize(request, fallback=delegate))

    assert len(calls) == 1
    assert manifest.artifacts[0].source == "bundle();"
    assert manifest.artifacts[1].source == '{"version":3,"from":"delegate"}'


def test_static_export_suppresses_source_map_url_for_delegate(app_builder: GraphBuilder) -> None:
    seen: list[str | None] = []

    async def delegate(request: SerializationRequest) -> str:
        seen.append(request.options.source_map_url)
        return "bundle();"

    _serialize(app_builder.request(source_url=STATIC_URL, source_map_url=MAP_URL), fallback=delegate)
    _serialize(app_builder.request(source_url=STATIC_MAP_URL, source_map_url=MAP_URL), fallback=delegate)

    assert seen == [None, MAP_URL]


def test_pass_through_returns_delegate_result_unmodified(app_builder: GraphBuilder) -> None:
    output = BundleOutput(code="bundle();", map="{}")

    async def delegate(request: SerializationRequest) -> BundleOutput:
        return output

    assert _serialize(app_builder.request(), fallback=delegate) is output


def test_static_export_rejects_unknown_delegate_shape(app_builder: GraphBuilder) -> None:
    async def delegate(request: SerializationRequest):
        return {"code": "bundle();"}

    with pytest.raises(SerializerContractError):
        _serialize(app_builder.request(source_url=STATIC_URL), fallback=delegate)


def test_engine_safe_source_url_is_decoded(app_builder: GraphBuilder) -> None:
    request = app_builder.request(source_url="/index.bundle//&platform=web&serializer.output=static")

    payload = json.loads(_serialize(request))

    assert payload["artifacts"][0]["type"] == "js"


@pytest.mark.parametrize(
    "source_url",
    [
        "http://[::1/index.bundle?platform=web",
        "http://",
        "http://exa mple.com/index.bundle?platform=web",
        "http://local|host/index.bundle?platform=web",
    ],
)
def test_malformed_source_url_raises(app_builder: GraphBuilder, source_url: str) -> None:
    request = app_builder.request(source_url=source_url)

    with pytest.raises(ValueError):
        _serialize(request)


def test_collaborator_failures_propagate(app_builder: GraphBuilder) -> None:
    async def delegate(request: SerializationRequest) -> str:
        raise OSError("engine crashed")

    with pytest.raises(OSError, match="engine crashed"):
        _serialize(app_builder.request(source_url=STATIC_URL), fallback=delegate)
