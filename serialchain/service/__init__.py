"""HTTP service mode for serialchain."""

from .app import build_serializer, create_app, run_service

__all__ = ["build_serializer", "create_app", "run_service"]
