"""Core data models shared across serialchain components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
)

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .ordering import ModuleIdRegistry


ASSET_OUTPUT_TYPE = "js/module/asset"


@dataclass(frozen=True)
class ModuleOutput:
    """One transformed output of a module (a module may carry js and css outputs)."""

    type: str
    code: str = ""
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Module:
    """A resolved module in the dependency graph."""

    path: str
    output: Tuple[ModuleOutput, ...] = ()
    dependencies: Tuple[str, ...] = ()
    source: str = ""

    def js_output(self) -> Optional[ModuleOutput]:
        """Return the first JavaScript output, if any."""
        for output in self.output:
            if output.type.startswith("js/"):
                return output
        return None

    def is_asset(self) -> bool:
        output = self.js_output()
        return output is not None and output.type == ASSET_OUTPUT_TYPE


@dataclass
class Graph:
    """Resolved set of modules for one bundling pass, keyed by path."""

    dependencies: Dict[str, Module] = field(default_factory=dict)
    entry_points: Tuple[str, ...] = ()
    transform_options: Dict[str, Any] = field(default_factory=dict)

    def missing_dependencies(self) -> List[str]:
        """Return dependency paths referenced by modules but absent from the graph."""
        missing: List[str] = []
        for module in self.dependencies.values():
            for dependency in module.dependencies:
                if dependency not in self.dependencies and dependency not in missing:
                    missing.append(dependency)
        return missing


def _include_all(module: Module) -> bool:
    return True


def _new_id_registry() -> "ModuleIdRegistry":
    from .ordering import ModuleIdRegistry

    return ModuleIdRegistry()


@dataclass(frozen=True)
class SerializerOptions:
    """Options the bundler hands to its terminal serializer."""

    source_url: Optional[str] = None
    source_map_url: Optional[str] = None
    dev: bool = False
    project_root: str = ""
    server_root: Optional[str] = None
    run_module: bool = True
    process_module_filter: Callable[[Module], bool] = _include_all
    create_module_id: Callable[[str], int] = field(default_factory=_new_id_registry)
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SerializationRequest:
    """The (entry point, pre-modules, graph, options) unit passed through plugins."""

    entry_point: str
    pre_modules: Tuple[Module, ...]
    graph: Graph
    options: SerializerOptions

    def with_options(self, **changes: Any) -> "SerializationRequest":
        """Return a new request with the given option fields replaced."""
        return replace(self, options=replace(self.options, **changes))


@dataclass(frozen=True)
class BundleOutput:
    """Code plus source map, as returned by some delegate serializers."""

    code: str
    map: str


SerializerResult = Union[str, BundleOutput]
Serializer = Callable[[SerializationRequest], Awaitable[SerializerResult]]
SerializerPlugin = Callable[[SerializationRequest], SerializationRequest]


@dataclass
class SerialAsset:
    """A named, typed artifact in a static export manifest."""

    filename: str
    origin_filename: str
    type: str
    source: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "originFilename": self.origin_filename,
            "type": self.type,
            "metadata": dict(self.metadata),
            "source": self.source,
        }


@dataclass
class ArtifactManifest:
    """Final output of the static export path."""

    artifacts: List[SerialAsset] = field(default_factory=list)
    assets: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "artifacts": [artifact.to_dict() for artifact in self.artifacts],
            "assets": list(self.assets),
        }

    def to_json(self) -> str:
        """Serialise compactly, matching the bundler's JSON.stringify output."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "ArtifactManifest":
        data = json.loads(text)
        artifacts = [
            SerialAsset(
                filename=item["filename"],
                origin_filename=item["originFilename"],
                type=item["type"],
                source=item["source"],
                metadata=dict(item.get("metadata") or {}),
            )
            for item in data.get("artifacts", [])
        ]
        return cls(artifacts=artifacts, assets=list(data.get("assets", [])))


@dataclass(frozen=True)
class SerializerSection:
    """Serializer settings of a bundler configuration."""

    custom_serializer: Optional[Serializer] = None


@dataclass(frozen=True)
class TransformerSection:
    """Transformer settings consulted by asset collection."""

    asset_plugins: Tuple[Any, ...] = ()
    public_path: str = "/assets"


@dataclass(frozen=True)
class BundlerConfig:
    """Subset of the bundler configuration this package reads and rewrites."""

    project_root: str = ""
    serializer: SerializerSection = field(default_factory=SerializerSection)
    transformer: TransformerSection = field(default_factory=TransformerSection)


__all__ = [
    "ASSET_OUTPUT_TYPE",
    "ArtifactManifest",
    "BundleOutput",
    "BundlerConfig",
    "Graph",
    "Module",
    "ModuleOutput",
    "SerialAsset",
    "SerializationRequest",
    "Serializer",
    "SerializerOptions",
    "SerializerPlugin",
    "SerializerResult",
    "SerializerSection",
    "TransformerSection",
]
