"""Case-insensitive substring search predicates.

A search matches a term against several columns at once: each column
contributes ``lower(column) LIKE lower('%term%')`` and the conditions are
OR-ed together into one grouped clause. SQLAlchemy parenthesizes the group
when it is AND-ed with other WHERE conditions, so the OR-chain never leaks
into unrelated filters.
"""

from collections.abc import Callable, Sequence

from sqlalchemy import ColumnElement, func, or_
from sqlalchemy.sql.expression import ColumnClause

SearchPredicate = Callable[[ColumnClause, str], ColumnElement[bool]]


def ci_like(column: ColumnClause, term: str) -> ColumnElement[bool]:
    """Case-insensitive LIKE: ``lower(column) LIKE lower('%term%')``.

    Both sides are lower-cased by the database, not by locale-aware
    collation. The term is passed as a bound parameter.

    Args:
        column: Column to match against.
        term: Substring to look for.

    Returns:
        Boolean SQL expression.
    """
    return func.lower(column).like(func.lower(f"%{term}%"))


def build_search_clause(
    columns: Sequence[ColumnClause],
    term: str,
    predicate: SearchPredicate = ci_like,
) -> ColumnElement[bool]:
    """OR together one search predicate per column.

    Args:
        columns: Non-empty ordered sequence of columns.
        term: Search term.
        predicate: Per-column match builder. Defaults to ci_like.

    Returns:
        A single grouped boolean expression.

    Raises:
        ValueError: If columns is empty.
    """
    if not columns:
        msg = "At least one search column is required"
        raise ValueError(msg)

    return or_(*(predicate(column, term) for column in columns))
