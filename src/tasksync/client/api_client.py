# src/tasksync/client/api_client.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(RuntimeError):
    """The API answered, but not with a 2xx status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class HttpApiResponse:
    """ApiResponse over an httpx.Response."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def ok(self) -> bool:
        return self._response.is_success

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def status_text(self) -> str:
        return self._response.reason_phrase

    def json(self) -> Any:
        return self._response.json()


def ensure_ok(response: Any) -> Any:
    """Raise ApiError unless the response has a 2xx status."""
    if not response.ok:
        raise ApiError(
            f"HTTP Error: {response.status_text} ({response.status})",
            status=response.status,
        )
    return response


class HttpApiClient:
    """
    ApiClient backed by httpx.AsyncClient.

    `transport` lets callers plug an in-process server
    (see tasksync.server.routes.TaskRoutes.transport).
    No retries: a failed request is reported once.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def fetch(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Mapping[str, str] | None = None,
        json: Any = None,
    ) -> HttpApiResponse:
        logger.debug("API %s %s params=%s", method, path, dict(params or {}))
        response = await self._client.request(
            method,
            path,
            params=dict(params) if params else None,
            json=json,
        )
        logger.debug("API %s %s -> %s", method, path, response.status_code)
        return HttpApiResponse(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
