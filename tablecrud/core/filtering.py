"""Filter functions and their composition.

A filter function maps a query to a query, usually by adding a WHERE
condition:

    def active_only(query):
        return query.where(query.selected_columns.is_active.is_(True))

Filters are applied in the order given, each one building on the result
of the previous one. ``None`` entries are skipped.
"""

from collections.abc import Callable, Iterable

from sqlalchemy import Select

FilterFunc = Callable[[Select], Select]


def apply_filters(query: Select, filters: Iterable[FilterFunc | None] | None) -> Select:
    """Fold filter functions over a query.

    SQLAlchemy statements are generative: every builder call returns a new
    statement, so the query passed in is never mutated.

    Args:
        query: Starting statement.
        filters: Ordered filter functions. None entries are no-ops.

    Returns:
        The filtered statement.
    """
    for filter_func in filters or ():
        if filter_func is not None:
            query = filter_func(query)
    return query
