"""Composable serialization pipeline for bundler output and static web exports."""

from .composer import create_serializer_from_plugins, with_serializer_plugins
from .dispatcher import SerializerContractError, StaticExportRequest, get_default_serializer
from .models import (
    ArtifactManifest,
    BundleOutput,
    BundlerConfig,
    Graph,
    Module,
    ModuleOutput,
    SerialAsset,
    SerializationRequest,
    SerializerOptions,
)
from .naming import file_name_from_contents
from .ordering import ModuleIdRegistry, get_sorted_modules
from .sourcemap import project_modules, serialize_to_source_map

__version__ = "0.1.0"

__all__ = [
    "ArtifactManifest",
    "BundleOutput",
    "BundlerConfig",
    "Graph",
    "Module",
    "ModuleIdRegistry",
    "ModuleOutput",
    "SerialAsset",
    "SerializationRequest",
    "SerializerContractError",
    "SerializerOptions",
    "StaticExportRequest",
    "create_serializer_from_plugins",
    "file_name_from_contents",
    "get_default_serializer",
    "get_sorted_modules",
    "project_modules",
    "serialize_to_source_map",
    "with_serializer_plugins",
]
