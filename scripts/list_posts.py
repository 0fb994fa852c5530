#!/usr/bin/env python3
"""文章列表脚本。

直接从内容源读取文章，用于核对内容或预热缓存。

使用方式：
    # 首页第一页
    python scripts/list_posts.py

    # 沿游标读取全部文章
    python scripts/list_posts.py --all

    # 单篇文章及预计阅读时间
    python scripts/list_posts.py --slug como-utilizar-hooks

    # JSON 输出
    python scripts/list_posts.py --all --json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.config import settings  # noqa: E402
from src.modules.posts.application.pagination import (  # noqa: E402
    PaginationCursorWalker,
)
from src.modules.posts.application.services import PostQueryService  # noqa: E402
from src.modules.posts.domain.exceptions import (  # noqa: E402
    ContentFetchError,
    PostNotFoundError,
)
from src.modules.posts.infrastructure.prismic import (  # noqa: E402
    PrismicContentSource,
)


def build_service(content_source: PrismicContentSource) -> PostQueryService:
    return PostQueryService(
        content_source,
        document_type=settings.POSTS_DOCUMENT_TYPE,
        page_size=settings.POSTS_PAGE_SIZE,
        static_paths_page_size=settings.STATIC_PATHS_PAGE_SIZE,
        words_per_minute=settings.READING_WORDS_PER_MINUTE,
    )


async def list_posts(walk_all: bool) -> dict:
    """读取第一页，或沿游标读取全部页面。"""
    content_source = PrismicContentSource()
    service = build_service(content_source)
    home = await service.get_home_page()

    walker = PaginationCursorWalker(
        content_source, items=home.items, cursor=home.next_cursor
    )
    if walk_all:
        await walker.load_all()

    return {
        "posts": [post.model_dump(mode="json") for post in walker.items],
        "next_cursor": walker.cursor,
    }


async def show_post(slug: str) -> dict:
    """读取单篇文章。"""
    service = build_service(PrismicContentSource())
    detail = await service.get_post(slug)
    return {
        "slug": detail.post.slug,
        "title": detail.post.title,
        "author": detail.post.author,
        "publication_date": (
            detail.post.publication_date.isoformat()
            if detail.post.publication_date
            else None
        ),
        "sections": len(detail.post.sections),
        "reading_time_minutes": detail.reading_time_minutes,
    }


def print_result(result: dict, json_output: bool = False):
    """打印结果。"""
    if json_output:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return

    if "posts" in result:
        print(f"\n{'=' * 60}")
        for post in result["posts"]:
            print(f"{post['slug']}")
            print(f"    {post['title']} - {post['author']}")
            print(f"    {post['publication_date'] or 'unpublished'}")
        print(f"{'-' * 60}")
        print(f"Total: {len(result['posts'])}")
        if result["next_cursor"]:
            print("More pages available (use --all)")
        print(f"{'=' * 60}\n")
    else:
        for key, value in result.items():
            print(f"{key}: {value}")


def main():
    """主函数。"""
    parser = argparse.ArgumentParser(description="从内容源读取博客文章")
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--all",
        action="store_true",
        help="沿游标读取全部文章",
    )
    group.add_argument(
        "--slug",
        "-s",
        type=str,
        help="只读取指定 slug 的文章",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="输出 JSON 格式",
    )

    args = parser.parse_args()

    try:
        if args.slug:
            result = asyncio.run(show_post(args.slug))
        else:
            result = asyncio.run(list_posts(walk_all=args.all))
    except PostNotFoundError as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(2)
    except ContentFetchError as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)

    print_result(result, json_output=args.json)


if __name__ == "__main__":
    main()
