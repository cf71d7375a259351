"""Tests for serialchain.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from serialchain.config import ConfigError, PluginConfig, SerialChainConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, SerialChainConfig)
    assert config.root == tmp_path.resolve()
    assert config.project_root == tmp_path.resolve()
    assert config.server_root is None
    assert config.transformer.asset_plugins == []
    assert config.transformer.public_path == "/assets"
    assert config.plugins == PluginConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".serialchain.yml"
    config_file.write_text(
        """
project_root: "app"
server_root: "."
public_path: "/static/assets"
asset_plugins:
  - "my_assets.plugins:hash_assets"
plugins:
  enabled: [server_prelude, environment_variables]
  disable_client_env_vars: true
""",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={})

    assert config.project_root == (tmp_path / "app").resolve()
    assert config.server_root == tmp_path.resolve()
    assert config.transformer.public_path == "/static/assets"
    assert config.transformer.asset_plugins == ["my_assets.plugins:hash_assets"]
    assert config.plugins.enabled == ["server_prelude", "environment_variables"]
    assert config.plugins.disable_client_env_vars is True


def test_environment_overrides_client_env_vars_switch(tmp_path: Path) -> None:
    (tmp_path / ".serialchain.yml").write_text("plugins:\n  disable_client_env_vars: false\n", encoding="utf-8")

    config = load_config(tmp_path, environ={"SERIALCHAIN_NO_CLIENT_ENV_VARS": "1"})

    assert config.plugins.disable_client_env_vars is True
    assert config.plugins.enabled is None


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".serialchain.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".serialchain.yml").write_text("plugins: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path, environ={})


def test_to_bundler_config_carries_transformer_settings(tmp_path: Path) -> None:
    (tmp_path / ".serialchain.yml").write_text(
        "public_path: /cdn\nasset_plugins: ['copy:deepcopy']\n", encoding="utf-8"
    )

    bundler_config = load_config(tmp_path, environ={}).to_bundler_config()

    assert bundler_config.project_root == str(tmp_path.resolve())
    assert bundler_config.transformer.public_path == "/cdn"
    assert bundler_config.transformer.asset_plugins == ("copy:deepcopy",)
    assert bundler_config.serializer.custom_serializer is None


def test_request_defaults_use_resolved_roots(tmp_path: Path) -> None:
    (tmp_path / ".serialchain.yml").write_text('project_root: "app"\nserver_root: "."\n', encoding="utf-8")

    defaults = load_config(tmp_path, environ={}).request_defaults()

    assert defaults == {
        "project_root": str((tmp_path / "app").resolve()),
        "server_root": str(tmp_path.resolve()),
    }
    assert load_config(tmp_path / "missing", environ={}).request_defaults()["server_root"] is None
