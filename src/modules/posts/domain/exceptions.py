"""Post domain exceptions."""

from fastapi import status

from src.core.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    UpstreamServiceError,
    ValidationError,
)


class PostNotFoundError(EntityNotFoundError):
    """Raised when no post exists for the requested slug."""

    def __init__(self, slug: str | None = None):
        super().__init__("Post", slug)
        self.slug = slug


class ContentFetchError(UpstreamServiceError):
    """Raised when the content source cannot be reached or answers badly."""

    error_code = "CONTENT_FETCH_FAILED"

    def __init__(self, reason: str, url: str | None = None):
        self.reason = reason
        self.url = url
        super().__init__(f"Content fetch failed: {reason}")


class InvalidCursorError(ValidationError):
    """Raised when a cursor does not point at the configured content source."""

    def __init__(self, cursor: str):
        self.cursor = cursor
        super().__init__(f"Invalid pagination cursor: {cursor!r}")


class PaginationExhaustedError(DomainException):
    """Raised when more pages are requested after the last one."""

    http_status_code = status.HTTP_409_CONFLICT
    error_code = "PAGINATION_EXHAUSTED"

    def __init__(self) -> None:
        super().__init__("No more pages to load")
