"""Common API response schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Consistent JSON envelope for API responses."""

    data: T


class PagedResponse(BaseModel, Generic[T]):
    """List envelope echoing the window that was requested."""

    data: list[T]
    limit: int
    offset: int


class DeleteResult(BaseModel):
    """Generic delete response payload."""

    id: int
    deleted: bool
