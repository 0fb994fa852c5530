"""Post API routes."""

from fastapi import APIRouter, Depends, Query, Response

from src.core.config import settings
from src.core.interfaces.http.response import (
    ApiResponse,
    CursorPaginatedResponse,
    ErrorResponse,
)
from src.modules.posts.application.dependencies import get_post_query_service
from src.modules.posts.application.models import PostDetailData, PostListData
from src.modules.posts.application.services import PostQueryService
from src.modules.posts.interfaces.schemas import (
    BannerResponse,
    ContentSectionResponse,
    ParagraphResponse,
    PostDetailResponse,
    PostSummaryResponse,
    StaticPathsResponse,
)

# 列表类接口放在 "/-/" 下，"/{slug}" 只匹配单段路径，任何 slug 都不会冲突
router = APIRouter(prefix="/posts", tags=["posts"])

_UPSTREAM_ERRORS = {502: {"model": ErrorResponse, "description": "内容源不可用"}}


def _to_listing_response(
    listing: PostListData,
) -> CursorPaginatedResponse[PostSummaryResponse]:
    return CursorPaginatedResponse.create(
        items=[
            PostSummaryResponse(
                slug=post.slug,
                publication_date=post.publication_date,
                title=post.title,
                subtitle=post.subtitle,
                author=post.author,
            )
            for post in listing.items
        ],
        next_cursor=listing.next_cursor,
        has_more=listing.has_more,
    )


def _to_detail_response(detail: PostDetailData) -> PostDetailResponse:
    post = detail.post
    return PostDetailResponse(
        slug=post.slug,
        publication_date=post.publication_date,
        title=post.title,
        author=post.author,
        banner=BannerResponse(url=post.banner_url, alt=post.banner_alt),
        content=[
            ContentSectionResponse(
                heading=section.heading,
                body=[
                    ParagraphResponse(
                        type=paragraph.type,
                        text=paragraph.text,
                        spans=paragraph.spans,
                    )
                    for paragraph in section.body
                ],
            )
            for section in post.sections
        ],
        reading_time_minutes=detail.reading_time_minutes,
    )


@router.get(
    "",
    response_model=CursorPaginatedResponse[PostSummaryResponse],
    summary="获取首页文章列表",
    responses=_UPSTREAM_ERRORS,
)
async def list_posts(
    response: Response,
    service: PostQueryService = Depends(get_post_query_service),
) -> CursorPaginatedResponse[PostSummaryResponse]:
    """First page of posts, newest first."""
    listing = await service.get_home_page()
    response.headers["Cache-Control"] = (
        f"public, s-maxage={settings.HOME_REVALIDATE_SEC}, stale-while-revalidate"
    )
    return _to_listing_response(listing)


@router.get(
    "/-/next",
    response_model=CursorPaginatedResponse[PostSummaryResponse],
    summary="加载更多文章",
    responses={
        400: {"model": ErrorResponse, "description": "游标无效"},
        **_UPSTREAM_ERRORS,
    },
)
async def list_more_posts(
    cursor: str = Query(..., min_length=1, description="上一页返回的 next_cursor"),
    service: PostQueryService = Depends(get_post_query_service),
) -> CursorPaginatedResponse[PostSummaryResponse]:
    """Page pointed at by a previous ``next_cursor``."""
    listing = await service.get_next_page(cursor)
    return _to_listing_response(listing)


@router.get(
    "/-/slugs",
    response_model=ApiResponse[StaticPathsResponse],
    summary="获取可预生成的文章路径",
)
async def list_post_slugs(
    service: PostQueryService = Depends(get_post_query_service),
) -> ApiResponse[StaticPathsResponse]:
    """Every known slug; falls back to on-demand pages if the source is down."""
    paths = await service.list_static_slugs()
    return ApiResponse.success(
        data=StaticPathsResponse(slugs=paths.slugs, fallback=paths.fallback.value)
    )


@router.get(
    "/{slug}",
    response_model=ApiResponse[PostDetailResponse],
    summary="获取文章详情",
    responses={
        404: {"model": ErrorResponse, "description": "文章不存在"},
        **_UPSTREAM_ERRORS,
    },
)
async def get_post(
    slug: str,
    service: PostQueryService = Depends(get_post_query_service),
) -> ApiResponse[PostDetailResponse]:
    """Post content with its estimated reading time."""
    detail = await service.get_post(slug)
    return ApiResponse.success(data=_to_detail_response(detail))
