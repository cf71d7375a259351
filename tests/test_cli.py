"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from serialchain.cli import _build_parser, main, run_serialize

REQUEST = {
    "entryPoint": "/app/index.js",
    "graph": {
        "transformOptions": {"platform": "web"},
        "dependencies": [
            {"path": "/app/index.js", "output": [{"type": "js/module", "code": "__d(0);"}]},
        ],
    },
    "options": {"projectRoot": "/app"},
}


@pytest.fixture
def request_file(tmp_path: Path) -> Path:
    path = tmp_path / "request.json"
    path.write_text(json.dumps(REQUEST), encoding="utf-8")
    return path


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "serialize", "r.json"]).verbose is True
    assert parser.parse_args(["serialize", "r.json", "--verbose"]).verbose is True


def test_cli_serialize_flags() -> None:
    args = _build_parser().parse_args(
        ["serialize", "r.json", "--dev", "--source-url", "/index.bundle", "-o", "out.json"]
    )

    assert args.command == "serialize"
    assert args.dev is True
    assert args.source_url == "/index.bundle"
    assert args.output == "out.json"
    assert args.source_map_url is None


def test_cli_serve_accepts_config() -> None:
    args = _build_parser().parse_args(["serve", "--config", "conf/.serialchain.yml", "--port", "9000"])

    assert args.command == "serve"
    assert args.config == "conf/.serialchain.yml"
    assert args.port == 9000


def test_cli_dev_defaults_to_request_value() -> None:
    args = _build_parser().parse_args(["serialize", "r.json"])

    assert args.dev is None


def test_run_serialize_plain_bundle(request_file: Path) -> None:
    output = run_serialize(request_file)

    assert output == "__d(0);\n__r(0);"


def test_run_serialize_static_export(request_file: Path) -> None:
    output = run_serialize(
        request_file,
        source_url="/index.bundle?platform=web&serializer.output=static",
        dev=True,
    )

    payload = json.loads(output)
    assert payload["artifacts"][0]["filename"] == "index.js"
    assert payload["assets"] == []


def test_run_serialize_missing_request(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        run_serialize(tmp_path / "missing.json")


def test_main_writes_output_file(request_file: Path, tmp_path: Path) -> None:
    target = tmp_path / "dist" / "bundle.js"

    main(["serialize", str(request_file), "--output", str(target)])

    assert target.read_text(encoding="utf-8") == "__d(0);\n__r(0);"


def test_main_exits_on_malformed_request(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "request.json"
    path.write_text(json.dumps({"graph": {}}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["serialize", str(path)])

    assert excinfo.value.code == 1
    assert "entryPoint" in capsys.readouterr().err
