"""Configuration loading for serialchain (.serialchain.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .models import BundlerConfig, TransformerSection

CONFIG_FILENAME = ".serialchain.yml"
ENV_NO_CLIENT_ENV_VARS = "SERIALCHAIN_NO_CLIENT_ENV_VARS"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class TransformerConfig:
    """Asset settings forwarded to the asset collector."""

    asset_plugins: List[str] = field(default_factory=list)
    public_path: str = "/assets"


@dataclass
class PluginConfig:
    """Serializer plugin enablement."""

    enabled: Optional[List[str]] = None
    disable_client_env_vars: bool = False


@dataclass
class SerialChainConfig:
    """Represents the settings defined in .serialchain.yml."""

    root: Path
    project_root: Path
    server_root: Optional[Path] = None
    transformer: TransformerConfig = field(default_factory=TransformerConfig)
    plugins: PluginConfig = field(default_factory=PluginConfig)

    def to_bundler_config(self) -> BundlerConfig:
        """Build the bundler configuration consumed by the serializer composer."""
        return BundlerConfig(
            project_root=str(self.project_root),
            transformer=TransformerSection(
                asset_plugins=tuple(self.transformer.asset_plugins),
                public_path=self.transformer.public_path,
            ),
        )

    def request_defaults(self) -> Dict[str, Optional[str]]:
        """Option values used when a request description omits its roots."""
        return {
            "project_root": str(self.project_root),
            "server_root": str(self.server_root) if self.server_root else None,
        }


def load_config(
    config_path: Path, *, environ: Mapping[str, str] | None = None
) -> SerialChainConfig:
    """Load configuration from disk, applying environment overrides."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    project_root_str = _as_str(data.get("project_root"))
    project_root = (root / project_root_str).resolve() if project_root_str else root
    server_root_str = _as_str(data.get("server_root"))
    server_root = (root / server_root_str).resolve() if server_root_str else None

    transformer = TransformerConfig()
    asset_plugins = data.get("asset_plugins")
    if asset_plugins is not None:
        transformer.asset_plugins = _as_str_list(asset_plugins)
    public_path = _as_str(data.get("public_path"))
    if public_path:
        transformer.public_path = public_path

    plugins = PluginConfig()
    plugin_data = _as_dict(data.get("plugins"))
    if plugin_data:
        if "enabled" in plugin_data:
            plugins.enabled = _as_str_list(plugin_data.get("enabled"))
        plugins.disable_client_env_vars = bool(
            _as_bool(plugin_data.get("disable_client_env_vars"))
        )
    env_override = _as_bool(env.get(ENV_NO_CLIENT_ENV_VARS))
    if env_override is not None:
        plugins.disable_client_env_vars = env_override

    return SerialChainConfig(
        root=root,
        project_root=project_root,
        server_root=server_root,
        transformer=transformer,
        plugins=plugins,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0", ""}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "PluginConfig",
    "SerialChainConfig",
    "TransformerConfig",
    "load_config",
]
