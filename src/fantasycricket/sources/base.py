"""Data source interfaces and the ordered source registry.

A source is an endpoint plus a list of mirror endpoints that are tried when
the primary is unreachable.  Sources know nothing about the canonical
schema; they hand decoded bodies to the pipeline, which decides what counts
as usable.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, List, Mapping, Sequence

from ..errors import TransportError
from .common import AsyncHTTPClient, deep_copy_payload

logger = logging.getLogger(__name__)

DEFAULT_ALTERNATIVE_ENDPOINTS: Sequence[str] = (
    "https://cricapi.com/api/matches",
    "https://api.cricapi.com/v1/matches",
    "https://cricket-api.com/api/v1/matches",
    "https://raw.githubusercontent.com/cricket-data/api/main/matches.json",
    "https://api.cricket-data.org/matches/today",
)


@dataclasses.dataclass(frozen=True, slots=True)
class SourceDefinition:
    """Static description of a source: name, primary endpoint, kind."""

    name: str
    endpoint: str
    kind: str = "public"
    alternatives: Sequence[str] = DEFAULT_ALTERNATIVE_ENDPOINTS


DEFAULT_SOURCES: Sequence[SourceDefinition] = (
    SourceDefinition("CricAPI_Free", "https://cricapi.com/api/cricket", "public"),
    SourceDefinition(
        "ESPN_CricInfo",
        "https://site.api.espn.com/apis/site/v2/sports/cricket/8048/scoreboard",
        "public",
    ),
    SourceDefinition(
        "GitHub_Cricket_Data",
        "https://raw.githubusercontent.com/sanwebinfo/cricket-api/main/api/matches.json",
        "github",
    ),
    SourceDefinition(
        "Cricket_Scores_API", "https://api.cricapi.com/v1/currentMatches", "free"
    ),
    SourceDefinition(
        "Live_Cricket_Web",
        "https://www.cricbuzz.com/api/cricket-match/live-scores",
        "web_scrape",
    ),
)


class DataSource(ABC):
    """Base class for sources with a bounded per-call timeout."""

    name: str = "generic"
    kind: str = "public"
    timeout_seconds: float = 10.0

    def __init__(self, definition: SourceDefinition) -> None:
        self.definition = definition
        self.name = definition.name
        self.kind = definition.kind

    @property
    def endpoint(self) -> str:
        return self.definition.endpoint

    @property
    def alternatives(self) -> List[str]:
        return list(self.definition.alternatives)

    async def fetch(self, endpoint: str) -> Any:
        """Fetch and decode ``endpoint``; timeouts become :class:`TransportError`."""

        try:
            return await asyncio.wait_for(
                self._fetch_impl(endpoint), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as err:
            raise TransportError(
                endpoint, f"timed out after {self.timeout_seconds}s"
            ) from err

    @abstractmethod
    async def _fetch_impl(self, endpoint: str) -> Any:
        """Implementation hook for subclasses."""


class HTTPDataSource(DataSource):
    """Source backed by a JSON HTTP endpoint."""

    def __init__(
        self,
        definition: SourceDefinition,
        *,
        client: AsyncHTTPClient | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(definition)
        if timeout_seconds is not None:
            self.timeout_seconds = timeout_seconds
        self._client = client or AsyncHTTPClient(timeout=self.timeout_seconds)

    async def _fetch_impl(self, endpoint: str) -> Any:
        logger.debug("Requesting %s for source %s", endpoint, self.name)
        return await self._client.get_json(endpoint)


class StaticSource(DataSource):
    """Deterministic source used in tests and offline runs.

    ``responses`` maps endpoints to decoded bodies; a mapped exception is
    raised instead of returned, and unmapped endpoints raise
    :class:`TransportError`.
    """

    def __init__(
        self,
        name: str,
        responses: Mapping[str, Any],
        *,
        endpoint: str | None = None,
        alternatives: Sequence[str] = (),
    ) -> None:
        primary = endpoint or next(iter(responses), f"static://{name}")
        super().__init__(
            SourceDefinition(name, primary, "static", tuple(alternatives))
        )
        self._responses = dict(responses)
        self.timeout_seconds = 1.0
        self.calls: list[str] = []

    async def _fetch_impl(self, endpoint: str) -> Any:
        self.calls.append(endpoint)
        if endpoint not in self._responses:
            raise TransportError(endpoint, "no static response registered")
        payload = self._responses[endpoint]
        if isinstance(payload, BaseException):
            raise payload
        await asyncio.sleep(0)
        return deep_copy_payload(payload)


class SourceRegistry:
    """Ordered collection of candidate sources; order is priority."""

    def __init__(self, sources: Iterable[DataSource] = ()) -> None:
        self._sources: list[DataSource] = []
        for source in sources:
            self.register(source)

    @classmethod
    def discover(
        cls,
        definitions: Sequence[SourceDefinition] | None = None,
        *,
        client: AsyncHTTPClient | None = None,
        timeout_seconds: float | None = None,
    ) -> "SourceRegistry":
        """Build HTTP sources for ``definitions`` (default: the built-in list)."""

        shared = client or AsyncHTTPClient(timeout=timeout_seconds or 10.0)
        return cls(
            HTTPDataSource(definition, client=shared, timeout_seconds=timeout_seconds)
            for definition in (definitions or DEFAULT_SOURCES)
        )

    def register(self, source: DataSource) -> None:
        if any(existing.name == source.name for existing in self._sources):
            raise ValueError(f"Source already registered: {source.name}")
        self._sources.append(source)

    def names(self) -> List[str]:
        return [source.name for source in self._sources]

    def alternatives_for(self, name: str) -> List[str]:
        for source in self._sources:
            if source.name == name:
                return source.alternatives
        raise KeyError(name)

    def __iter__(self) -> Iterator[DataSource]:
        return iter(list(self._sources))

    def __len__(self) -> int:
        return len(self._sources)
