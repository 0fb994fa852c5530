"""Post domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PostSummary(BaseModel):
    """列表页中的文章摘要，身份由 slug 决定。"""

    model_config = ConfigDict(frozen=True)

    slug: str = Field(..., description="文章 slug（uid）")
    publication_date: datetime | None = Field(default=None, description="首次发布时间")
    title: str = Field(default="", description="标题")
    subtitle: str = Field(default="", description="副标题")
    author: str = Field(default="", description="作者")


class Paragraph(BaseModel):
    """Rich text block; only ``text`` matters for word counting."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    type: str = "paragraph"
    spans: list[dict[str, Any]] = Field(default_factory=list)


class ContentSection(BaseModel):
    """正文分节：一个标题加若干段落。"""

    model_config = ConfigDict(frozen=True)

    heading: str = ""
    body: list[Paragraph] = Field(default_factory=list)


class PostContent(BaseModel):
    """Full post as shown on the post page."""

    model_config = ConfigDict(frozen=True)

    slug: str = Field(..., description="文章 slug（uid）")
    publication_date: datetime | None = Field(default=None, description="首次发布时间")
    title: str = Field(default="", description="标题")
    banner_url: str = Field(default="", description="横幅图片 URL")
    banner_alt: str = Field(default="", description="横幅图片替代文本")
    author: str = Field(default="", description="作者")
    sections: list[ContentSection] = Field(default_factory=list, description="正文分节")


@dataclass(frozen=True)
class PageResult:
    """一页文章列表以及下一页的游标。

    ``next_cursor`` 为 None 表示没有更多页面。
    """

    items: list[PostSummary] = field(default_factory=list)
    next_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None

    @property
    def items_count(self) -> int:
        return len(self.items)
