"""Standard API response models."""

from typing import Self, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ApiResponse[T](BaseModel):
    """Standard API response model."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    code: int = 200
    message: str = "Operation successful"
    data: T | None = None
    meta: dict | None = None

    @classmethod
    def success(
        cls,
        data: T = None,
        message: str = "Operation successful",
        code: int = 200,
        meta: dict | None = None,
    ) -> "ApiResponse[T]":
        return cls(code=code, message=message, data=data, meta=meta)


class CursorPaginatedResponse[T](ApiResponse[list[T]]):
    """Cursor-based paginated response for "load more" listings."""

    data: list[T] | None = None
    next_cursor: str | None = None
    has_more: bool = False

    @classmethod
    def create(
        cls,
        items: list[T],
        next_cursor: str | None = None,
        has_more: bool = False,
    ) -> Self:
        return cls(data=items, next_cursor=next_cursor, has_more=has_more)


class ErrorResponse(BaseModel):
    """Error body returned by the exception handlers."""

    error: dict
