"""Post API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class PostSummaryResponse(BaseModel):
    """Post summary shown in the listing."""

    slug: str = Field(..., description="文章 slug")
    publication_date: datetime | None = Field(None, description="首次发布时间")
    title: str = Field(..., description="标题")
    subtitle: str = Field(..., description="副标题")
    author: str = Field(..., description="作者")


class ParagraphResponse(BaseModel):
    """Rich text block."""

    type: str = Field(..., description="块类型")
    text: str = Field(..., description="纯文本")
    spans: list[dict] = Field(default_factory=list, description="富文本标注")


class ContentSectionResponse(BaseModel):
    """Post body section."""

    heading: str = Field(..., description="小标题")
    body: list[ParagraphResponse] = Field(..., description="段落")


class BannerResponse(BaseModel):
    url: str
    alt: str


class PostDetailResponse(BaseModel):
    """Post page payload."""

    slug: str = Field(..., description="文章 slug")
    publication_date: datetime | None = Field(None, description="首次发布时间")
    title: str = Field(..., description="标题")
    author: str = Field(..., description="作者")
    banner: BannerResponse = Field(..., description="横幅图片")
    content: list[ContentSectionResponse] = Field(..., description="正文")
    reading_time_minutes: int = Field(..., ge=0, description="预计阅读时间（分钟）")


class StaticPathsResponse(BaseModel):
    """Slugs to prerender."""

    slugs: list[str] = Field(..., description="可预生成的文章 slug")
    fallback: str = Field(..., description="未列出 slug 的处理方式")
