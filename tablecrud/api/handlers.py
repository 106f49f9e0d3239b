"""Exception handlers for the HTTP surface.

Register on a FastAPI app with ``register_error_handlers(app)``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tablecrud.core.errors import TableCrudError
from tablecrud.core.responses import ErrorDetail, ErrorResponse


def table_crud_error_handler(_request: Request, exc: TableCrudError) -> JSONResponse:
    """Handle accessor errors.

    Args:
        request: The incoming request.
        exc: The TableCrudError that was raised.

    Returns:
        JSONResponse with error envelope and the error's status code.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=ErrorDetail(
                code=exc.code,
                message=exc.message,
                details=exc.details,
            )
        ).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the accessor error handler to an app."""
    app.add_exception_handler(TableCrudError, table_crud_error_handler)  # type: ignore[arg-type]
