"""Server module for FastAPI application."""

from .main import app, create_app, start_server

__all__ = ["app", "create_app", "start_server"]
