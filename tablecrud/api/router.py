"""CRUD routes for a bound TableAccessor.

Routes (relative to the router prefix):
    - GET    /          Paginated list (`limit`, `offset`, `order`, `q`)
    - GET    /{value}   Single record by primary key
    - POST   /          Insert a record
    - PATCH  /{value}   Update a record by primary key
    - DELETE /{value}   Delete a record by primary key

Example:
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(
        build_table_router(users, search_columns=["name", "email"]),
        prefix="/users",
    )
"""

from collections.abc import Sequence
from typing import Any

from fastapi import APIRouter, Body, Depends, Response

from tablecrud.accessor import TableAccessor
from tablecrud.core.errors import InvalidArgumentError, RecordNotFoundError
from tablecrud.core.pagination import ListQueryParams, list_query_params
from tablecrud.core.responses import DataResponse, PageResponse


def _lookup_value(accessor: TableAccessor, raw: str) -> Any:
    """Convert a path segment to the primary key's Python type."""
    try:
        python_type = accessor.column(accessor.pk).type.python_type
    except NotImplementedError:
        return raw

    try:
        return python_type(raw)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid {accessor.pk} value: {raw!r}"
        raise InvalidArgumentError(msg) from exc


def build_table_router(
    accessor: TableAccessor,
    *,
    search_columns: Sequence[str] | None = None,
) -> APIRouter:
    """Create CRUD routes for an accessor.

    Args:
        accessor: Bound accessor serving the routes.
        search_columns: Columns matched by the `q` parameter. Without
            them, `q` is ignored.

    Returns:
        APIRouter to include in an app.
    """
    router = APIRouter(tags=[accessor.name])

    @router.get("", response_model=PageResponse[dict[str, Any]])
    async def list_records(
        params: ListQueryParams = Depends(list_query_params),  # noqa: B008
    ) -> PageResponse[Any]:
        page = await accessor.paginated_list(
            [
                accessor.search_filter(params.q, search_columns),
                accessor.order_filter(params.order),
            ],
            limit=params.limit,
            offset=params.offset,
        )
        return PageResponse.from_page(page)

    @router.get("/{value}", response_model=DataResponse[dict[str, Any]])
    async def get_record(value: str) -> DataResponse[Any]:
        record = await accessor.get_one_by(_lookup_value(accessor, value))
        if record is None:
            raise RecordNotFoundError(accessor.name, value)
        return DataResponse(data=record)

    @router.post("", response_model=DataResponse[dict[str, Any]], status_code=201)
    async def create_record(
        data: dict[str, Any] = Body(...),  # noqa: B008
    ) -> DataResponse[Any]:
        record = await accessor.insert_one(data)
        return DataResponse(data=record)

    @router.patch("/{value}", response_model=DataResponse[dict[str, Any]])
    async def update_record(
        value: str,
        data: dict[str, Any] = Body(...),  # noqa: B008
    ) -> DataResponse[Any]:
        record = await accessor.update_one_by(data, _lookup_value(accessor, value))
        if record is None:
            raise RecordNotFoundError(accessor.name, value)
        return DataResponse(data=record)

    @router.delete("/{value}", status_code=204)
    async def delete_record(value: str) -> Response:
        deleted = await accessor.delete_one_by(_lookup_value(accessor, value))
        if not deleted:
            raise RecordNotFoundError(accessor.name, value)
        return Response(status_code=204)

    return router
