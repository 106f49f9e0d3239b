"""FastAPI integration for table accessors."""

from tablecrud.api.handlers import register_error_handlers, table_crud_error_handler
from tablecrud.api.router import build_table_router

__all__ = [
    "build_table_router",
    "register_error_handlers",
    "table_crud_error_handler",
]
