"""Prismic document to post entity mappers."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Any

from src.modules.posts.domain.entities import (
    ContentSection,
    PageResult,
    Paragraph,
    PostContent,
    PostSummary,
)

_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


class PrismicDocumentMapper:
    """Maps raw Prismic API payloads to post entities.

    结构不符合预期时抛出 ValueError，由调用方转换为 ContentFetchError。
    """

    def to_page(self, payload: Any) -> PageResult:
        if not isinstance(payload, dict):
            raise ValueError("Search response payload must be an object")

        results = payload.get("results")
        if not isinstance(results, list):
            raise ValueError("Search response missing results list")

        items: list[PostSummary] = []
        for document in results:
            if not isinstance(document, dict):
                continue
            # 没有 uid 的文档无法生成链接
            if not document.get("uid"):
                continue
            items.append(self.to_summary(document))

        next_page = payload.get("next_page")
        if next_page is not None and not isinstance(next_page, str):
            raise ValueError("next_page must be a string or null")

        return PageResult(items=items, next_cursor=next_page or None)

    def to_summary(self, document: dict[str, Any]) -> PostSummary:
        data = self._get_data(document)
        return PostSummary(
            slug=str(document["uid"]),
            publication_date=self.parse_datetime(
                document.get("first_publication_date")
            ),
            title=self._text(data.get("title")),
            subtitle=self._text(data.get("subtitle")),
            author=self._text(data.get("author")),
        )

    def to_content(self, document: dict[str, Any]) -> PostContent:
        data = self._get_data(document)
        banner = data.get("banner")
        if not isinstance(banner, dict):
            banner = {}

        content = data.get("content") or []
        if not isinstance(content, list):
            raise ValueError("Post content must be a list of sections")

        return PostContent(
            slug=str(document.get("uid") or ""),
            publication_date=self.parse_datetime(
                document.get("first_publication_date")
            ),
            title=self._text(data.get("title")),
            banner_url=self._text(banner.get("url")),
            banner_alt=self._text(banner.get("alt")),
            author=self._text(data.get("author")),
            sections=[
                self._to_section(section)
                for section in content
                if isinstance(section, dict)
            ],
        )

    def _to_section(self, section: dict[str, Any]) -> ContentSection:
        body = section.get("body") or []
        if not isinstance(body, list):
            raise ValueError("Section body must be a list of blocks")

        return ContentSection(
            heading=self._text(section.get("heading")),
            body=[
                Paragraph(
                    text=self._text(block.get("text")),
                    type=str(block.get("type") or "paragraph"),
                    spans=[s for s in block.get("spans") or [] if isinstance(s, dict)],
                )
                for block in body
                if isinstance(block, dict)
            ],
        )

    @staticmethod
    def _get_data(document: dict[str, Any]) -> dict[str, Any]:
        data = document.get("data")
        if not isinstance(data, dict):
            raise ValueError("Document is missing its data object")
        return data

    @staticmethod
    def _text(value: object) -> str:
        """Plain string from a key-text field or a rich-text block list."""
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, list):
            return " ".join(
                str(block.get("text", ""))
                for block in value
                if isinstance(block, dict)
            )
        return str(value)

    @staticmethod
    def parse_datetime(value: object) -> datetime | None:
        if not isinstance(value, str):
            return None
        text = value.strip()
        if not text:
            return None

        text = _COMPACT_OFFSET.sub(r"\1:\2", text.replace("Z", "+00:00"))
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=UTC)
        return parsed
