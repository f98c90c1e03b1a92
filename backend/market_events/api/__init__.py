"""REST API for market events."""

from .server import create_app

__all__ = ["create_app"]
