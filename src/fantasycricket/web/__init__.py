"""HTTP entrypoints for the assistant."""

from .api import create_api_app

__all__ = ["create_api_app"]
