"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    # 配置 structlog
    _configure_structlog()

    # 配置 loguru
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    # 根据环境选择渲染器
    if settings.ENVIRONMENT == "local":
        # 本地开发使用人类可读格式
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        # 生产环境使用 JSON 格式
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    # Add file handler for production
    if settings.ENVIRONMENT != "local":
        logger.add(
            f"logs/{settings.PROJECT_NAME}_{{time:YYYY-MM-DD}}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        from src.core.infrastructure.logging import BusinessEvents

        BusinessEvents.post_viewed(slug="como-utilizar-hooks", reading_time_minutes=4)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def posts_page_loaded(
        cls,
        item_count: int,
        has_more: bool,
        first_page: bool,
        **extra: Any,
    ) -> None:
        """记录文章列表分页加载事件。"""
        cls._log.info(
            "posts_page_loaded",
            event_type="listing",
            item_count=item_count,
            has_more=has_more,
            first_page=first_page,
            **extra,
        )

    @classmethod
    def post_viewed(
        cls,
        slug: str,
        reading_time_minutes: int,
        **extra: Any,
    ) -> None:
        """记录文章详情读取事件。"""
        cls._log.info(
            "post_viewed",
            event_type="detail",
            slug=slug,
            reading_time_minutes=reading_time_minutes,
            **extra,
        )

    @classmethod
    def content_fetch_failed(
        cls,
        url: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录内容源请求失败事件。"""
        cls._log.warning(
            "content_fetch_failed",
            event_type="fetch_error",
            url=url,
            error=error,
            **extra,
        )

    @classmethod
    def static_paths_fallback(
        cls,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录静态路径降级为按需生成的事件。"""
        cls._log.warning(
            "static_paths_fallback",
            event_type="degradation",
            reason=reason,
            **extra,
        )
