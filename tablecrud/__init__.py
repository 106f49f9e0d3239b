"""tablecrud: generic async accessor for relational tables.

Exports:
    TableAccessor and its result type
    Error classes
    Settings and engine construction
"""

from tablecrud.accessor import TableAccessor
from tablecrud.core.config import Settings
from tablecrud.core.database import create_engine
from tablecrud.core.errors import (
    ConfigurationError,
    InvalidArgumentError,
    MissingDataError,
    MissingQueryError,
    RecordNotFoundError,
    TableCrudError,
)
from tablecrud.core.filtering import FilterFunc
from tablecrud.core.pagination import PageResult
from tablecrud.core.search import ci_like

__version__ = "1.0.0"

__all__ = [
    # Accessor
    "TableAccessor",
    "PageResult",
    "FilterFunc",
    "ci_like",
    # Config
    "Settings",
    "create_engine",
    # Errors
    "TableCrudError",
    "ConfigurationError",
    "InvalidArgumentError",
    "MissingQueryError",
    "MissingDataError",
    "RecordNotFoundError",
]
