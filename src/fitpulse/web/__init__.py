"""Web API for fitpulse."""

from .app import create_app

__all__ = ["create_app"]
