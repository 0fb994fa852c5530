"""Post module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from src.core.config import settings
from src.modules.posts.application.services import PostQueryService
from src.modules.posts.domain.content_source import ContentSource


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_content_source() -> ContentSource:
    _missing_dependency("ContentSource")


async def get_post_query_service(
    content_source: ContentSource = Depends(get_content_source),
) -> PostQueryService:
    return PostQueryService(
        content_source,
        document_type=settings.POSTS_DOCUMENT_TYPE,
        page_size=settings.POSTS_PAGE_SIZE,
        static_paths_page_size=settings.STATIC_PATHS_PAGE_SIZE,
        words_per_minute=settings.READING_WORDS_PER_MINUTE,
    )
