"""Response envelope models.

Consistent JSON bodies for the HTTP surface: ``{"data": ...}`` for single
records, ``{"data": [...], "meta": {...}}`` for pages, and
``{"error": {...}}`` for failures.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from tablecrud.core.pagination import PageResult

T = TypeVar("T")


class PageMeta(BaseModel):
    """Pagination metadata for a page of records.

    Attributes:
        total: Number of matching records across all pages.
        page: 0-based page number.
        limit: Effective limit.
        offset: Effective offset.
    """

    total: int
    page: int
    limit: int
    offset: int


class DataResponse(BaseModel, Generic[T]):
    """Standard response envelope for single records."""

    data: T


class PageResponse(BaseModel, Generic[T]):
    """Standard response envelope for pages of records."""

    data: list[T]
    meta: PageMeta

    @classmethod
    def from_page(cls, page: PageResult) -> "PageResponse[Any]":
        """Build the envelope from an accessor PageResult."""
        return cls(
            data=page.rows,
            meta=PageMeta(
                total=page.total,
                page=page.page,
                limit=page.limit,
                offset=page.offset,
            ),
        )


class ErrorDetail(BaseModel):
    """Error detail for response body.

    Attributes:
        code: Machine-readable error code (e.g., "MISSING_DATA").
        message: Human-readable error message.
        details: Optional list of field-level errors.
    """

    code: str
    message: str
    details: list[dict] | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope."""

    error: ErrorDetail
