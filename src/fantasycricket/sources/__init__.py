"""Data sources consulted by the acquisition pipeline."""

from .base import (
    DEFAULT_ALTERNATIVE_ENDPOINTS,
    DEFAULT_SOURCES,
    DataSource,
    HTTPDataSource,
    SourceDefinition,
    SourceRegistry,
    StaticSource,
)
from .common import AsyncHTTPClient, default_headers

__all__ = [
    "AsyncHTTPClient",
    "DEFAULT_ALTERNATIVE_ENDPOINTS",
    "DEFAULT_SOURCES",
    "DataSource",
    "HTTPDataSource",
    "SourceDefinition",
    "SourceRegistry",
    "StaticSource",
    "default_headers",
]
