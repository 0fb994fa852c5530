"""Post application data models."""

from enum import StrEnum

from pydantic import BaseModel

from src.modules.posts.domain.entities import PostContent, PostSummary


class FallbackMode(StrEnum):
    """How a renderer should treat slugs missing from the static list."""

    DISABLED = "disabled"
    BLOCKING = "blocking"


class PostListData(BaseModel):
    """One page of the post listing."""

    items: list[PostSummary]
    next_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None


class PostDetailData(BaseModel):
    """Post content plus derived display values."""

    post: PostContent
    reading_time_minutes: int


class StaticPathsData(BaseModel):
    """Slugs to prebuild and the fallback policy for the rest."""

    slugs: list[str]
    fallback: FallbackMode
