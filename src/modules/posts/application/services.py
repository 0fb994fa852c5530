"""Post application services."""

from loguru import logger

from src.core.infrastructure.logging import BusinessEvents
from src.modules.posts.application.models import (
    FallbackMode,
    PostDetailData,
    PostListData,
    StaticPathsData,
)
from src.modules.posts.application.pagination import PaginationCursorWalker
from src.modules.posts.domain.content_source import ContentSource, at
from src.modules.posts.domain.entities import PageResult
from src.modules.posts.domain.exceptions import ContentFetchError
from src.modules.posts.domain.reading_time import (
    WORDS_PER_MINUTE,
    estimate_reading_time,
)


class PostQueryService:
    """Post query service for listing and detail views."""

    def __init__(
        self,
        content_source: ContentSource,
        document_type: str = "post",
        page_size: int = 2,
        static_paths_page_size: int = 20,
        words_per_minute: int = WORDS_PER_MINUTE,
    ) -> None:
        self.content_source = content_source
        self.document_type = document_type
        self.page_size = page_size
        self.static_paths_page_size = static_paths_page_size
        self.words_per_minute = words_per_minute

    @property
    def _type_predicates(self) -> list[str]:
        return [at("document.type", self.document_type)]

    @staticmethod
    def build_list_data(page: PageResult) -> PostListData:
        return PostListData(items=list(page.items), next_cursor=page.next_cursor)

    async def get_home_page(self) -> PostListData:
        """首页：第一页文章及下一页游标。"""
        page = await self.content_source.query(self._type_predicates, self.page_size)
        BusinessEvents.posts_page_loaded(
            item_count=page.items_count, has_more=page.has_more, first_page=True
        )
        return self.build_list_data(page)

    async def get_next_page(self, cursor: str) -> PostListData:
        """Load the page a previous listing's cursor points at."""
        page = await self.content_source.fetch_by_cursor(cursor)
        BusinessEvents.posts_page_loaded(
            item_count=page.items_count, has_more=page.has_more, first_page=False
        )
        return self.build_list_data(page)

    async def get_post(self, slug: str) -> PostDetailData:
        """Fetch a post and estimate its reading time.

        Raises:
            PostNotFoundError: slug 不存在
            ContentFetchError: 内容源不可用
        """
        post = await self.content_source.get_by_uid(self.document_type, slug)
        reading_time = estimate_reading_time(post.sections, self.words_per_minute)
        BusinessEvents.post_viewed(slug=slug, reading_time_minutes=reading_time)
        return PostDetailData(post=post, reading_time_minutes=reading_time)

    async def list_static_slugs(self) -> StaticPathsData:
        """Enumerate every post slug by walking the whole feed.

        内容源失败时返回空列表并切换为 BLOCKING，由渲染方按需生成页面。
        """
        try:
            first_page = await self.content_source.query(
                self._type_predicates, self.static_paths_page_size
            )
            walker = PaginationCursorWalker.from_page(self.content_source, first_page)
            posts = await walker.load_all()
        except ContentFetchError as exc:
            logger.warning(f"Falling back to on-demand post pages: {exc.reason}")
            BusinessEvents.static_paths_fallback(reason=exc.reason)
            return StaticPathsData(slugs=[], fallback=FallbackMode.BLOCKING)

        return StaticPathsData(
            slugs=[post.slug for post in posts],
            fallback=FallbackMode.DISABLED,
        )
