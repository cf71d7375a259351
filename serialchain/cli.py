"""CLI entrypoints for serialchain commands."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict

from .config import ConfigError, load_config
from .graph_io import GraphFormatError, load_request
from .logging import configure_logging, get_logger
from .models import BundleOutput
from .plugins import PluginLoadError, with_default_serializers


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serialchain",
        description="Serialize a resolved module graph into a bundle or static web export.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    serialize_parser = subparsers.add_parser(
        "serialize",
        help="Run the serializer chain over a JSON request description.",
    )
    _add_verbose_option(serialize_parser, suppress_default=True)
    serialize_parser.add_argument("request", help="Path to the JSON request description.")
    serialize_parser.add_argument(
        "--source-url",
        default=None,
        help="Override options.sourceUrl (add serializer.output=static for a static export).",
    )
    serialize_parser.add_argument(
        "--source-map-url",
        default=None,
        help="Override options.sourceMapUrl.",
    )
    serialize_parser.add_argument(
        "--dev",
        action="store_true",
        default=None,
        help="Serialize in development mode.",
    )
    serialize_parser.add_argument(
        "--config",
        default=None,
        help="Path to .serialchain.yml or its directory (defaults to the request's directory).",
    )
    serialize_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the result to this file instead of stdout.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing the serializer.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument(
        "--config",
        default=None,
        help="Path to .serialchain.yml or its directory (defaults to the working directory).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for serialchain commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")

    if args.command == "serialize":
        try:
            output = run_serialize(
                Path(args.request),
                source_url=args.source_url,
                source_map_url=args.source_map_url,
                dev=args.dev,
                config_path=Path(args.config) if args.config else None,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, GraphFormatError, PluginLoadError) as exc:
            parser.exit(1, f"serialchain serialize failed: {exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            logger.debug("Serialization failed", exc_info=True)
            parser.exit(1, f"serialchain serialize failed: {exc}\nRun with --verbose for more details.\n")
        if args.output:
            target = Path(args.output)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(output, encoding="utf-8")
            logger.info("Wrote %d characters to %s", len(output), target)
        else:
            sys.stdout.write(output)
            if not output.endswith("\n"):
                sys.stdout.write("\n")
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        try:
            config = load_config(Path(args.config) if args.config else Path.cwd())
        except ConfigError as exc:
            parser.exit(1, f"serialchain serve failed: {exc}\n")
        run_service(config, host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def run_serialize(
    request_path: Path,
    *,
    source_url: str | None = None,
    source_map_url: str | None = None,
    dev: bool | None = None,
    config_path: Path | None = None,
) -> str:
    """Load a request description and run it through the configured serializer chain."""
    request_path = request_path.expanduser().resolve()
    if not request_path.exists():
        raise FileNotFoundError(f"Request description not found: {request_path}")

    config = load_config(config_path or request_path.parent)
    request = load_request(request_path, defaults=config.request_defaults())

    overrides: Dict[str, Any] = {}
    if source_url is not None:
        overrides["source_url"] = source_url
    if source_map_url is not None:
        overrides["source_map_url"] = source_map_url
    if dev is not None:
        overrides["dev"] = dev
    if overrides:
        request = request.with_options(**overrides)

    bundler_config = with_default_serializers(config.to_bundler_config(), config.plugins)
    serializer = bundler_config.serializer.custom_serializer
    assert serializer is not None
    result = asyncio.run(serializer(request))
    return result.code if isinstance(result, BundleOutput) else result


__all__ = ["main", "run_serialize"]
