"""Shared async HTTP utilities for data sources and lookups."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Mapping

import requests

from ..errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Fantasy-Cricket-Bot/1.0"


def default_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """JSON-accepting header set sent with every outbound request."""

    return {
        "Content-Type": "application/json",
        "User-Agent": user_agent,
        "Accept": "application/json, text/plain, */*",
    }


class AsyncHTTPClient:
    """Very small async wrapper around :mod:`requests`.

    Every call is bounded twice: ``requests`` gets the socket timeout and the
    executor future is wrapped in :func:`asyncio.wait_for` so a stalled
    resolver cannot hang the pipeline.  Failures surface as
    :class:`TransportError` or :class:`DecodeError`.
    """

    def __init__(
        self,
        timeout: float | None = 10.0,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._session = requests.Session()
        self._timeout = timeout
        self._headers = dict(headers or default_headers())

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        loop = asyncio.get_running_loop()
        merged = {**self._headers, **dict(headers or {})}
        future = loop.run_in_executor(
            None, lambda: self._request_json(url, params=params, headers=merged)
        )
        try:
            if self._timeout is None:
                return await future
            return await asyncio.wait_for(future, timeout=self._timeout)
        except asyncio.TimeoutError as err:
            raise TransportError(url, f"timed out after {self._timeout}s") from err

    def _request_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        try:
            response = self._session.get(
                url, params=params, headers=headers, timeout=self._timeout
            )
            response.raise_for_status()
        except requests.RequestException as err:
            raise TransportError(url, str(err)) from err
        try:
            return response.json()
        except ValueError as err:
            raise DecodeError(url, f"body is not JSON ({err})") from err

    async def aclose(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._session.close)


def deep_copy_payload(payload: Any) -> Any:
    """Utility to copy decoded JSON structures for safe reuse."""

    return copy.deepcopy(payload)
