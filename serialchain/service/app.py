"""FastAPI application exposing the serializer chain over HTTP."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import SerialChainConfig, load_config
from ..dispatcher import is_static_export
from ..graph_io import load_request
from ..logging import get_logger
from ..models import BundleOutput, SerializationRequest, Serializer, SerializerPlugin
from ..plugins import with_default_serializers

_logger = get_logger("service")


class SerializeRequest(BaseModel):
    request: Dict[str, Any]
    source_url: Optional[str] = None
    source_map_url: Optional[str] = None
    dev: Optional[bool] = None


class SerializeResponse(BaseModel):
    output: str
    static: bool
    map: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


SerializerFactory = Callable[[SerialChainConfig, Sequence[SerializerPlugin]], Serializer]


def build_serializer(
    config: SerialChainConfig | None = None,
    trailing: Sequence[SerializerPlugin] = (),
) -> Serializer:
    """Return the plugin-wrapped terminal serializer for ``config``.

    Without ``config`` the settings are read from ``.serialchain.yml`` in the
    working directory.
    """
    if config is None:
        config = load_config(Path.cwd())
    bundler_config = with_default_serializers(
        config.to_bundler_config(), config.plugins, trailing=trailing
    )
    serializer = bundler_config.serializer.custom_serializer
    assert serializer is not None
    return serializer


@dataclass
class _SerializeSession:
    serializer: Serializer
    final_requests: List[SerializationRequest] = field(default_factory=list)

    def final_request(self, fallback: SerializationRequest) -> SerializationRequest:
        return self.final_requests[-1] if self.final_requests else fallback


def create_app(
    config: SerialChainConfig | None = None,
    serializer_factory: SerializerFactory = build_serializer,
) -> FastAPI:
    """Create the FastAPI application exposing serialization.

    ``serializer_factory`` receives the configuration and the plugins that
    must run last in the chain; the service uses one of them to see the
    request the terminal serializer dispatches on.
    """

    settings = config if config is not None else load_config(Path.cwd())
    app = FastAPI(title="serialchain", version="0.1.0")

    async def get_session() -> _SerializeSession:
        # One serializer per request; the module id table lives on the request options.
        final_requests: List[SerializationRequest] = []

        def capture(request: SerializationRequest) -> SerializationRequest:
            final_requests.append(request)
            return request

        return _SerializeSession(
            serializer=serializer_factory(settings, (capture,)),
            final_requests=final_requests,
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/serialize", response_model=SerializeResponse)
    async def serialize(
        payload: SerializeRequest,
        session: _SerializeSession = Depends(get_session),
    ) -> SerializeResponse:
        request = load_request(payload.request, defaults=settings.request_defaults())
        overrides: Dict[str, Any] = {}
        if payload.source_url is not None:
            overrides["source_url"] = payload.source_url
        if payload.source_map_url is not None:
            overrides["source_map_url"] = payload.source_map_url
        if payload.dev is not None:
            overrides["dev"] = payload.dev
        if overrides:
            request = request.with_options(**overrides)

        result = await session.serializer(request)
        static = is_static_export(session.final_request(request))
        if isinstance(result, BundleOutput):
            return SerializeResponse(output=result.code, map=result.map, static=static)
        return SerializeResponse(output=result, static=static)

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        _logger.info("Rejected serialize request: %s", exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        _logger.error("Serialization failed: %s", exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(
    config: SerialChainConfig | None = None, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "build_serializer", "run_service"]
