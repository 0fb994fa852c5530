"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务，内容源通过 mock 或 httpx.MockTransport 替代）

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=src --cov-report=html
"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.modules.posts.domain.content_source import ContentSource
from src.modules.posts.domain.entities import (
    ContentSection,
    PageResult,
    Paragraph,
    PostContent,
)

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ============================================
# 领域对象 Fixtures
# ============================================


@pytest.fixture
def sample_post() -> PostContent:
    """示例文章（共 3 + 2 = 5 个词）。"""
    return PostContent(
        slug="como-utilizar-hooks",
        publication_date=datetime(2021, 3, 25, 19, 25, 28, tzinfo=UTC),
        title="Como utilizar Hooks",
        banner_url="https://images.prismic.io/banner.png",
        banner_alt="banner",
        author="Joseph Oliveira",
        sections=[
            ContentSection(
                heading="Proin et varius",
                body=[Paragraph(text="Lorem ipsum dolor"), Paragraph(text="sit amet")],
            )
        ],
    )


@pytest.fixture
def sample_prismic_document() -> dict[str, Any]:
    """示例 Prismic 文档。"""
    return {
        "id": "YE3lVBIAACMAkTb7",
        "uid": "como-utilizar-hooks",
        "type": "post",
        "first_publication_date": "2021-03-15T19:25:28+0000",
        "data": {
            "title": "Como utilizar Hooks",
            "subtitle": "Pensando em sincronização em vez de ciclos de vida",
            "author": "Joseph Oliveira",
            "banner": {
                "url": "https://images.prismic.io/spacetraveling/banner.png",
                "alt": None,
            },
            "content": [
                {
                    "heading": "Proin et varius",
                    "body": [
                        {"type": "paragraph", "text": "Lorem ipsum dolor", "spans": []},
                        {
                            "type": "paragraph",
                            "text": "Nullam dolor sapien",
                            "spans": [{"start": 0, "end": 6, "type": "strong"}],
                        },
                    ],
                },
                {
                    "heading": "Cras laoreet mi",
                    "body": [{"type": "paragraph", "text": "Ut varius", "spans": []}],
                },
            ],
        },
    }


# ============================================
# Mock 服务 Fixtures
# ============================================


@pytest.fixture
def mock_content_source() -> AsyncMock:
    """Mock 内容源。"""
    source = AsyncMock(spec=ContentSource)
    source.query = AsyncMock(return_value=PageResult(items=[], next_cursor=None))
    source.fetch_by_cursor = AsyncMock(
        return_value=PageResult(items=[], next_cursor=None)
    )
    return source


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
async def async_client(mock_content_source) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。"""
    from main import app
    from src.modules.posts.application.dependencies import get_content_source

    original = app.dependency_overrides.get(get_content_source)
    app.dependency_overrides[get_content_source] = lambda: mock_content_source

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    # 恢复 main.py 中的基础设施覆盖
    if original is not None:
        app.dependency_overrides[get_content_source] = original
    else:
        app.dependency_overrides.pop(get_content_source, None)
