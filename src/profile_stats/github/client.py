"""Async GitHub REST/GraphQL client built on httpx."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..exceptions import GitHubAPIError, GraphQLError
from .rate_limit import RateLimitMonitor, retry_after_seconds

logger = logging.getLogger(__name__)

API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"
# Longest rate-limit pause honoured before giving up on a request
MAX_RATE_LIMIT_WAIT = 300.0


@dataclass
class RestResponse:
    status: int
    data: Any
    headers: dict[str, str] = field(default_factory=dict)


class GitHubClient:
    """Thin async wrapper around the GitHub REST and GraphQL endpoints.

    Use as ``async with GitHubClient(token) as client: ...``.  Rate-limit
    rejections are retried here, up to ``rate_limit_retries`` times per
    request, so callers only ever see success, HTTP 202 or an error.
    """

    def __init__(
        self,
        token: str,
        base_url: str = API_URL,
        timeout: float = 30.0,
        rate_limit_retries: int = 2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._rate_limit_retries = rate_limit_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.rate_limit = RateLimitMonitor()

    async def __aenter__(self) -> GitHubClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": "profile-stats",
            },
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("GitHubClient must be used as an async context manager")

        attempt = 0
        while True:
            await self.rate_limit.wait_if_needed()
            logger.debug("GitHub API: %s %s", method, path)
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                raise GitHubAPIError(f"{method} {path} failed: {e}", url=path) from e
            self.rate_limit.update(response)

            wait = retry_after_seconds(response)
            if wait is None or attempt >= self._rate_limit_retries or wait > MAX_RATE_LIMIT_WAIT:
                break
            attempt += 1
            logger.warning(
                "Rate limited on %s %s (HTTP %d), retrying after %.0fs",
                method,
                path,
                response.status_code,
                wait,
            )
            await asyncio.sleep(wait)

        if response.status_code >= 400:
            raise GitHubAPIError(
                f"{method} {path} returned HTTP {response.status_code}: {response.text[:200]}",
                status=response.status_code,
                url=path,
            )
        return response

    async def rest(self, path: str, params: dict[str, Any] | None = None) -> RestResponse:
        """GET a REST endpoint. HTTP 202 and 204 come back with ``data=None`` when the body is empty."""
        response = await self._request("GET", path, params=params)
        data = response.json() if response.content else None
        return RestResponse(status=response.status_code, data=data, headers=dict(response.headers))

    async def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        response = await self._request("POST", "/graphql", json={"query": query, "variables": variables or {}})
        body = response.json()
        if body.get("errors"):
            raise GraphQLError(body["errors"], url="/graphql")
        return body.get("data") or {}

    async def graphql_paginate(
        self,
        query: str,
        variables: dict[str, Any],
        connection_path: tuple[str, ...],
    ) -> list[dict[str, Any]]:
        """Run a cursor-paginated query and return the concatenated ``nodes``.

        ``query`` must accept a ``$cursor`` variable and select ``nodes`` and
        ``pageInfo { hasNextPage endCursor }`` on the connection found at
        ``connection_path`` within ``data``.
        """
        nodes: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            data = await self.graphql(query, {**variables, "cursor": cursor})
            connection: Any = data
            for key in connection_path:
                connection = (connection or {}).get(key)
            if not connection:
                break
            nodes.extend(n for n in connection.get("nodes") or [] if n)
            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
        return nodes
