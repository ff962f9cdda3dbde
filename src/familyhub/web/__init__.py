"""Web interface for familyhub."""

from .app import create_app

__all__ = ["create_app"]
