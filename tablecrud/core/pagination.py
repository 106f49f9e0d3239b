"""Pagination utilities.

Offset/limit pagination with an independent total count. ``limit`` and
``offset`` use ``None`` as the "unset" sentinel: a limit of 0 asks for
zero rows and an offset of 0 skips nothing.

Page numbers are 0-based and derived from the offset:
``page = ceil(offset / limit)``.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from fastapi import Query

from tablecrud.core.config import settings
from tablecrud.core.errors import InvalidArgumentError


def coerce_int(value: Any, name: str = "value") -> int | None:
    """Coerce a loosely-typed numeric value to an int.

    Args:
        value: Raw value (int, float, numeric string, or None).
        name: Argument name used in error messages.

    Returns:
        The integer, or None when the value is absent or not numeric.

    Raises:
        InvalidArgumentError: If the value is negative.

    Examples:
        >>> coerce_int("12")
        12

        >>> coerce_int("abc") is None
        True

        >>> coerce_int("2.5")
        2

        >>> coerce_int(2.9)
        2
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        number = int(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                parsed = float(text)
            except ValueError:
                return None
            if not math.isfinite(parsed):
                return None
            number = int(parsed)
    else:
        return None

    if number < 0:
        msg = f"{name} must not be negative. Got: {number}"
        raise InvalidArgumentError(msg)

    return number


def compute_page(offset: int, limit: int, total: int) -> int:
    """Page number for an offset.

    Returns:
        ``ceil(offset / limit)``, or 0 when there are no rows or the
        limit is 0.
    """
    if total == 0 or limit == 0:
        return 0
    return math.ceil(offset / limit)


@dataclass(frozen=True)
class PageResult:
    """One page of rows plus pagination metadata.

    Attributes:
        rows: Records on this page, in query order.
        page: 0-based page number derived from offset and limit.
        limit: Effective limit (the total when no limit was requested).
        offset: Effective offset (0 when no offset was requested).
        total: Number of distinct records matching the filters,
            regardless of limit and offset.
    """

    rows: list[Any] = field(default_factory=list)
    page: int = 0
    limit: int = 0
    offset: int = 0
    total: int = 0

    def with_rows(self, rows: list[Any]) -> "PageResult":
        """Copy of this page with different rows (e.g. after formatting)."""
        return PageResult(
            rows=rows,
            page=self.page,
            limit=self.limit,
            offset=self.offset,
            total=self.total,
        )


@dataclass
class ListQueryParams:
    """List query parameters.

    Attributes:
        limit: Maximum number of rows (None = all).
        offset: Number of rows to skip (None = 0).
        order: Order token (None = accessor default).
        q: Search term (None = no search).
    """

    limit: int | None = None
    offset: int | None = None
    order: str | None = None
    q: str | None = None


def list_query_params(
    limit: int | None = Query(default=None, ge=0, description="Maximum rows"),
    offset: int | None = Query(default=None, ge=0, description="Rows to skip"),
    order: str | None = Query(
        default=None,
        description="Order token `field:direction`; direction is `asc` or `desc`",
        examples=["name:desc", "id:asc"],
    ),
    q: str | None = Query(default=None, description="Case-insensitive search"),
) -> ListQueryParams:
    """FastAPI dependency for list query parameters.

    Usage:
        @router.get("")
        async def list_items(
            params: ListQueryParams = Depends(list_query_params),
        ):
            ...

    Raises:
        InvalidArgumentError: If limit exceeds the configured max_limit.

    Returns:
        ListQueryParams with validated values.
    """
    if settings.max_limit is not None and limit is not None and limit > settings.max_limit:
        msg = f"limit must not exceed {settings.max_limit}. Got: {limit}"
        raise InvalidArgumentError(msg)

    return ListQueryParams(limit=limit, offset=offset, order=order, q=q)
