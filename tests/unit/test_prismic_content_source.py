"""Prismic 内容源单元测试（使用 httpx.MockTransport）。"""

from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from src.core.infrastructure.health import HealthStatus
from src.modules.posts.domain.content_source import at
from src.modules.posts.domain.exceptions import (
    ContentFetchError,
    InvalidCursorError,
    PostNotFoundError,
)
from src.modules.posts.infrastructure.mappers import PrismicDocumentMapper
from src.modules.posts.infrastructure.prismic import PrismicContentSource

pytestmark = pytest.mark.anyio

ENDPOINT = "https://blog.cdn.prismic.io/api/v2"
SEARCH_URL = f"{ENDPOINT}/documents/search"
NEXT_PAGE = f"{SEARCH_URL}?ref=master-ref&q=%5B%5D&page=2&pageSize=2"

API_ROOT = {
    "refs": [
        {"id": "preview", "ref": "preview-ref", "isMasterRef": False},
        {"id": "master", "ref": "master-ref", "isMasterRef": True},
    ]
}


def _search_payload(
    results: list[dict[str, Any]], next_page: str | None = None
) -> dict[str, Any]:
    return {
        "page": 1,
        "results_per_page": len(results),
        "results": results,
        "next_page": next_page,
    }


def _summary_doc(uid: str | None) -> dict[str, Any]:
    return {
        "uid": uid,
        "type": "post",
        "first_publication_date": "2021-03-15T19:25:28+0000",
        "data": {"title": f"T {uid}", "subtitle": "S", "author": "A"},
    }


class Recorder:
    """Route requests to canned responses and keep them for assertions."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def _source(handler, **kwargs) -> tuple[PrismicContentSource, Recorder]:
    recorder = Recorder(handler)
    source = PrismicContentSource(
        api_endpoint=ENDPOINT,
        transport=httpx.MockTransport(recorder),
        **kwargs,
    )
    return source, recorder


def _default_handler(search_response: httpx.Response):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v2":
            return httpx.Response(200, json=API_ROOT)
        return search_response

    return handler


# ============================================
# 查询
# ============================================


class TestQuery:
    """首页查询测试。"""

    async def test_query_uses_master_ref_and_predicates(self):
        payload = _search_payload(
            [_summary_doc("a"), _summary_doc("b")], next_page=NEXT_PAGE
        )
        source, recorder = _source(
            _default_handler(httpx.Response(200, json=payload))
        )

        page = await source.query([at("document.type", "post")], page_size=2)

        assert [p.slug for p in page.items] == ["a", "b"]
        assert page.next_cursor == NEXT_PAGE
        assert page.items[0].publication_date == datetime(
            2021, 3, 15, 19, 25, 28, tzinfo=UTC
        )

        assert len(recorder.requests) == 2
        search = recorder.requests[1]
        assert search.url.path == "/api/v2/documents/search"
        assert search.url.params["ref"] == "master-ref"
        assert search.url.params["q"] == '[[at(document.type, "post")]]'
        assert search.url.params["pageSize"] == "2"
        assert "access_token" not in search.url.params
        assert search.headers["User-Agent"]

    async def test_access_token_is_sent(self):
        source, recorder = _source(
            _default_handler(httpx.Response(200, json=_search_payload([]))),
            access_token="secret",
        )

        await source.query([at("document.type", "post")], page_size=2)

        assert all(r.url.params["access_token"] == "secret" for r in recorder.requests)

    async def test_last_page_has_no_cursor(self):
        source, _ = _source(
            _default_handler(
                httpx.Response(200, json=_search_payload([_summary_doc("a")]))
            )
        )

        page = await source.query([at("document.type", "post")], page_size=2)

        assert page.next_cursor is None
        assert page.has_more is False

    async def test_documents_without_uid_are_skipped(self):
        payload = _search_payload([_summary_doc(None), _summary_doc("b")])
        source, _ = _source(_default_handler(httpx.Response(200, json=payload)))

        page = await source.query([at("document.type", "post")], page_size=2)

        assert [p.slug for p in page.items] == ["b"]

    async def test_missing_master_ref_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"refs": []})

        source, _ = _source(handler)

        with pytest.raises(ContentFetchError, match="Master ref"):
            await source.query([at("document.type", "post")], page_size=2)


# ============================================
# 游标
# ============================================


class TestFetchByCursor:
    """游标翻页测试。"""

    async def test_fetches_cursor_verbatim(self):
        payload = _search_payload([_summary_doc("c")])
        source, recorder = _source(lambda r: httpx.Response(200, json=payload))

        page = await source.fetch_by_cursor(NEXT_PAGE)

        assert [p.slug for p in page.items] == ["c"]
        assert len(recorder.requests) == 1
        assert str(recorder.requests[0].url) == NEXT_PAGE

    @pytest.mark.parametrize(
        "cursor",
        [
            "https://evil.example.com/api/v2/documents/search?page=2",
            "file:///etc/passwd",
            "page=2",
        ],
    )
    async def test_foreign_cursor_rejected_without_request(self, cursor):
        source, recorder = _source(lambda r: httpx.Response(200, json={}))

        with pytest.raises(InvalidCursorError):
            await source.fetch_by_cursor(cursor)
        assert recorder.requests == []

    async def test_http_error_becomes_fetch_error(self):
        source, _ = _source(lambda r: httpx.Response(500, text="boom"))

        with pytest.raises(ContentFetchError) as exc_info:
            await source.fetch_by_cursor(NEXT_PAGE)
        assert exc_info.value.reason == "HTTP 500"
        # 日志和异常中不带 query string
        assert exc_info.value.url == SEARCH_URL

    async def test_transport_error_becomes_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("network down", request=request)

        source, _ = _source(handler)

        with pytest.raises(ContentFetchError, match="network down"):
            await source.fetch_by_cursor(NEXT_PAGE)

    async def test_timeout_becomes_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        source, _ = _source(handler)

        with pytest.raises(ContentFetchError, match="Timeout"):
            await source.fetch_by_cursor(NEXT_PAGE)

    async def test_non_json_body_becomes_fetch_error(self):
        source, _ = _source(lambda r: httpx.Response(200, text="<html>"))

        with pytest.raises(ContentFetchError):
            await source.fetch_by_cursor(NEXT_PAGE)

    async def test_unexpected_shape_becomes_fetch_error(self):
        source, _ = _source(lambda r: httpx.Response(200, json={"results": "nope"}))

        with pytest.raises(ContentFetchError, match="Unexpected payload"):
            await source.fetch_by_cursor(NEXT_PAGE)


# ============================================
# 单篇文章
# ============================================


class TestGetByUid:
    """按 uid 读取文章测试。"""

    async def test_returns_mapped_content(self, sample_prismic_document):
        source, recorder = _source(
            _default_handler(
                httpx.Response(200, json=_search_payload([sample_prismic_document]))
            )
        )

        post = await source.get_by_uid("post", "como-utilizar-hooks")

        assert post.slug == "como-utilizar-hooks"
        assert post.title == "Como utilizar Hooks"
        assert post.banner_url.endswith("banner.png")
        assert post.banner_alt == ""
        assert [s.heading for s in post.sections] == [
            "Proin et varius",
            "Cras laoreet mi",
        ]
        assert post.sections[0].body[1].spans == [
            {"start": 0, "end": 6, "type": "strong"}
        ]

        search = recorder.requests[1]
        assert (
            search.url.params["q"] == '[[at(my.post.uid, "como-utilizar-hooks")]]'
        )
        assert search.url.params["pageSize"] == "1"

    async def test_unknown_uid_raises_not_found(self):
        source, _ = _source(
            _default_handler(httpx.Response(200, json=_search_payload([])))
        )

        with pytest.raises(PostNotFoundError) as exc_info:
            await source.get_by_uid("post", "missing")
        assert exc_info.value.slug == "missing"
        assert exc_info.value.http_status_code == 404

    async def test_non_object_result_becomes_fetch_error(self):
        source, _ = _source(
            _default_handler(httpx.Response(200, json=_search_payload(["oops"])))
        )

        with pytest.raises(ContentFetchError, match="not a document") as exc_info:
            await source.get_by_uid("post", "como-utilizar-hooks")
        assert exc_info.value.http_status_code == 502

    async def test_blank_uid_raises_not_found_without_request(self):
        source, recorder = _source(lambda r: httpx.Response(200, json=API_ROOT))

        with pytest.raises(PostNotFoundError):
            await source.get_by_uid("post", "  ")
        assert recorder.requests == []


# ============================================
# 健康检查
# ============================================


class TestHealth:
    """健康检查测试。"""

    async def test_healthy(self):
        source, _ = _source(lambda r: httpx.Response(200, json=API_ROOT))

        result = await source.check_health()

        assert result.status.value == "ok"
        assert result.master_ref == "master-ref"

    async def test_unreachable(self):
        source, _ = _source(lambda r: httpx.Response(503))

        result = await source.check_health()

        assert result.status.value == "error"
        assert result.error == "HTTP 503"

    def test_status_is_ok_or_error(self):
        assert [status.value for status in HealthStatus] == ["ok", "error"]


# ============================================
# Mapper
# ============================================


class TestMapper:
    """Prismic 文档映射测试。"""

    def test_parse_datetime_variants(self):
        parse = PrismicDocumentMapper.parse_datetime
        expected = datetime(2021, 3, 15, 19, 25, 28, tzinfo=UTC)
        assert parse("2021-03-15T19:25:28+0000") == expected
        assert parse("2021-03-15T19:25:28Z") == expected
        assert parse("2021-03-15T19:25:28") == expected
        assert parse(None) is None
        assert parse("") is None
        assert parse("not a date") is None

    def test_rich_text_heading_is_flattened(self):
        mapper = PrismicDocumentMapper()
        post = mapper.to_content(
            {
                "uid": "x",
                "data": {
                    "content": [
                        {
                            "heading": [{"type": "heading2", "text": "Hello"}],
                            "body": [],
                        }
                    ]
                },
            }
        )
        assert post.sections[0].heading == "Hello"

    def test_document_without_data_rejected(self):
        with pytest.raises(ValueError):
            PrismicDocumentMapper().to_summary({"uid": "x"})
