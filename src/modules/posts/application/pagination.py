"""Cursor pagination over the post feed.

``PaginationCursorWalker`` 保存已展示的文章列表和下一页游标，
每次 ``load_more`` 追加一页。同一实例同一时刻只允许一个请求在途，
并发的第二次调用会立即返回 BUSY，不发起请求、不修改状态。
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from src.modules.posts.domain.content_source import ContentSource
from src.modules.posts.domain.entities import PageResult, PostSummary
from src.modules.posts.domain.exceptions import (
    ContentFetchError,
    PaginationExhaustedError,
)


class LoadMoreStatus(StrEnum):
    """加载结果状态。"""

    LOADED = "loaded"
    BUSY = "busy"


@dataclass(frozen=True)
class LoadMoreResult:
    """Outcome of a single ``load_more`` call."""

    status: LoadMoreStatus
    items: list[PostSummary] = field(default_factory=list)
    next_cursor: str | None = None

    @property
    def is_busy(self) -> bool:
        return self.status is LoadMoreStatus.BUSY

    @classmethod
    def loaded(cls, page: PageResult) -> "LoadMoreResult":
        return cls(
            status=LoadMoreStatus.LOADED,
            items=list(page.items),
            next_cursor=page.next_cursor,
        )

    @classmethod
    def busy(cls) -> "LoadMoreResult":
        return cls(status=LoadMoreStatus.BUSY)


class PaginationCursorWalker:
    """Grows a list of posts by following the feed's cursor chain."""

    def __init__(
        self,
        content_source: ContentSource,
        items: Sequence[PostSummary] = (),
        cursor: str | None = None,
    ) -> None:
        self._content_source = content_source
        self._items: list[PostSummary] = list(items)
        self._cursor = cursor
        self._in_flight = False

    @classmethod
    def from_page(
        cls, content_source: ContentSource, page: PageResult
    ) -> "PaginationCursorWalker":
        """Seed a walker with an already fetched first page."""
        return cls(content_source, items=page.items, cursor=page.next_cursor)

    @property
    def items(self) -> list[PostSummary]:
        return list(self._items)

    @property
    def cursor(self) -> str | None:
        return self._cursor

    @property
    def has_more(self) -> bool:
        return self._cursor is not None

    @property
    def is_loading(self) -> bool:
        return self._in_flight

    async def load_more(self) -> LoadMoreResult:
        """Fetch the next page and append it to the visible items.

        Returns:
            LoadMoreResult: LOADED 及新追加的条目；已有请求在途时为 BUSY

        Raises:
            PaginationExhaustedError: 游标已为空
            ContentFetchError: 抓取失败，此时列表和游标保持不变
        """
        if self._in_flight:
            return LoadMoreResult.busy()
        if self._cursor is None:
            raise PaginationExhaustedError()

        self._in_flight = True
        try:
            page = await self._content_source.fetch_by_cursor(self._cursor)
        finally:
            self._in_flight = False

        self._items.extend(page.items)
        self._cursor = page.next_cursor
        return LoadMoreResult.loaded(page)

    async def load_all(self) -> list[PostSummary]:
        """Follow the cursor chain to its end and return every item.

        已有 ``load_more`` 在途时直接返回当前列表（可能不完整），
        调用方可通过 ``has_more`` 判断。

        Raises:
            ContentFetchError: 抓取失败，或上游游标链出现循环
        """
        seen: set[str] = set()
        while self._cursor is not None:
            if self._cursor in seen:
                raise ContentFetchError(
                    "Cursor chain loops back on itself", url=self._cursor
                )
            seen.add(self._cursor)
            result = await self.load_more()
            if result.is_busy:
                break
        return self.items
