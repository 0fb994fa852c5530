"""Prismic REST API v2 content source."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import urlsplit, urlunsplit

import httpx
from loguru import logger

from src.core.config import settings
from src.core.infrastructure.health import ContentSourceHealthResult, HealthStatus
from src.core.infrastructure.logging import BusinessEvents
from src.modules.posts.domain.content_source import ContentSource, at
from src.modules.posts.domain.entities import PageResult, PostContent
from src.modules.posts.domain.exceptions import (
    ContentFetchError,
    InvalidCursorError,
    PostNotFoundError,
)
from src.modules.posts.infrastructure.mappers import PrismicDocumentMapper

T = TypeVar("T")


class PrismicContentSource(ContentSource):
    """Read posts from a Prismic repository.

    只保存配置，每次调用都新建 httpx.AsyncClient，实例可以安全共享。
    """

    def __init__(
        self,
        *,
        api_endpoint: str | None = None,
        access_token: str | None = None,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        mapper: PrismicDocumentMapper | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_endpoint = (api_endpoint or settings.PRISMIC_API_ENDPOINT).rstrip("/")
        self.access_token = access_token or settings.PRISMIC_ACCESS_TOKEN
        self.timeout_sec = timeout_sec or settings.FETCHER_TIMEOUT_SEC
        self.user_agent = user_agent or settings.FETCHER_USER_AGENT
        self.mapper = mapper or PrismicDocumentMapper()
        self._transport = transport

    @property
    def search_url(self) -> str:
        return f"{self.api_endpoint}/documents/search"

    async def query(self, predicates: list[str], page_size: int) -> PageResult:
        async with self._client() as client:
            payload = await self._search(client, predicates, page_size)
        return self._map(self.mapper.to_page, payload, self.search_url)

    async def fetch_by_cursor(self, cursor: str) -> PageResult:
        self._validate_cursor(cursor)
        async with self._client() as client:
            payload = await self._get_json(client, cursor)
        return self._map(self.mapper.to_page, payload, cursor)

    async def get_by_uid(self, document_type: str, uid: str) -> PostContent:
        if not uid.strip():
            raise PostNotFoundError(uid)

        async with self._client() as client:
            payload = await self._search(
                client, [at(f"my.{document_type}.uid", uid)], page_size=1
            )

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise _fetch_failed(
                self.search_url, "Search response missing results list"
            )
        if not results:
            raise PostNotFoundError(uid)
        if not isinstance(results[0], dict):
            raise _fetch_failed(self.search_url, "Search result is not a document")
        return self._map(self.mapper.to_content, results[0], self.search_url)

    async def resolve_master_ref(self) -> str:
        async with self._client() as client:
            return await self._resolve_master_ref(client)

    async def check_health(self) -> ContentSourceHealthResult:
        """检查 Prismic API 是否可达。"""
        start_time = time.time()
        try:
            master_ref = await self.resolve_master_ref()
        except ContentFetchError as exc:
            return ContentSourceHealthResult(
                status=HealthStatus.ERROR,
                endpoint=self.api_endpoint,
                latency_ms=int((time.time() - start_time) * 1000),
                error=exc.reason,
            )
        return ContentSourceHealthResult(
            status=HealthStatus.OK,
            endpoint=self.api_endpoint,
            latency_ms=int((time.time() - start_time) * 1000),
            master_ref=master_ref,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_sec,
            follow_redirects=False,
            transport=self._transport,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            },
        )

    async def _search(
        self, client: httpx.AsyncClient, predicates: list[str], page_size: int
    ) -> Any:
        ref = await self._resolve_master_ref(client)
        params: dict[str, str | int] = {
            "ref": ref,
            "q": f"[{''.join(predicates)}]",
            "pageSize": page_size,
        }
        if self.access_token:
            params["access_token"] = self.access_token
        return await self._get_json(client, self.search_url, params)

    async def _resolve_master_ref(self, client: httpx.AsyncClient) -> str:
        params = {"access_token": self.access_token} if self.access_token else None
        payload = await self._get_json(client, self.api_endpoint, params)

        refs = payload.get("refs") if isinstance(payload, dict) else None
        if isinstance(refs, list):
            for ref in refs:
                if isinstance(ref, dict) and ref.get("isMasterRef") and ref.get("ref"):
                    return str(ref["ref"])
        raise _fetch_failed(self.api_endpoint, "Master ref not found")

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        safe_url = _strip_query(url)
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.TimeoutException as exc:
            raise _fetch_failed(safe_url, f"Timeout: {str(exc)}") from exc
        except httpx.HTTPStatusError as exc:
            raise _fetch_failed(safe_url, f"HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise _fetch_failed(safe_url, f"Error: {str(exc)}") from exc

    def _validate_cursor(self, cursor: str) -> None:
        parsed = urlsplit(cursor)
        expected = urlsplit(self.api_endpoint)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise InvalidCursorError(cursor)
        if parsed.hostname != expected.hostname:
            raise InvalidCursorError(cursor)

    @staticmethod
    def _map(mapper: Callable[[Any], T], payload: Any, url: str) -> T:
        try:
            return mapper(payload)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise _fetch_failed(
                _strip_query(url), f"Unexpected payload: {str(exc)}"
            ) from exc


def _strip_query(url: str) -> str:
    """Drop the query string so access tokens stay out of logs."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def _fetch_failed(url: str, reason: str) -> ContentFetchError:
    logger.warning(f"Prismic request failed for {url}: {reason}")
    BusinessEvents.content_fetch_failed(url=url, error=reason)
    return ContentFetchError(reason, url=url)
