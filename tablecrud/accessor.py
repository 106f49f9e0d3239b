"""Generic async accessor for one relational table.

A TableAccessor is configured once with a table name and a few options,
bound to an async SQLAlchemy engine, and then exposes record operations
(list, get, insert, update, delete) plus the query composition primitives
they are built from:

    - filter_query_by: fold filter functions over a query
    - search_in_query_by: grouped case-insensitive substring search
    - order_query_by: apply a "field:direction" order token
    - paginate_query: bounded page plus an independent total count

Usage:
    accessor = TableAccessor("users", formatter=to_public_user)
    await accessor.bind(engine)

    page = await accessor.paginated_list(
        [
            accessor.search_filter("ary", ["name", "email"]),
            accessor.order_filter("name:desc"),
        ],
        limit=20,
        offset=40,
    )

The accessor holds no per-call state, so concurrent calls against the
same instance are safe. Database errors are never caught here; they
propagate unchanged.
"""

import inspect
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

import structlog
from sqlalchemy import (
    Column,
    MetaData,
    Select,
    Table,
    delete,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from tablecrud.core.config import InsertStrategy, Settings
from tablecrud.core.config import settings as default_settings
from tablecrud.core.errors import (
    ConfigurationError,
    InvalidArgumentError,
    MissingDataError,
    MissingQueryError,
)
from tablecrud.core.filtering import FilterFunc, apply_filters
from tablecrud.core.ordering import default_order_token, parse_order_token
from tablecrud.core.pagination import PageResult, coerce_int, compute_page
from tablecrud.core.search import SearchPredicate, build_search_clause, ci_like

logger = structlog.get_logger()

Record = dict[str, Any]
Records = list[Record]

# Formatters may be plain functions or coroutine functions.
Formatter = Callable[[Record], Any]

INSERT_STRATEGIES: frozenset[str] = frozenset({"max_pk", "returning"})


def _identity(record: Record) -> Record:
    return record


class TableAccessor:
    """Record operations and query composition for a single table.

    Attributes:
        name: Table name.
        pk: Primary key column name.
        default_order: Order token used when none is given.
        formatter: Transform applied to every record read back.
        insert_strategy: How insert_one finds the inserted row:
            "max_pk" reads the highest primary key inside the insert
            transaction (assumes auto-incrementing keys); "returning"
            uses INSERT ... RETURNING where the engine supports it.
    """

    def __init__(
        self,
        table: str | Table,
        *,
        pk: str = "id",
        default_order: str | None = None,
        formatter: Formatter | None = None,
        insert_strategy: InsertStrategy = "max_pk",
    ) -> None:
        """Configure the accessor.

        Args:
            table: Table name, or a Table object to skip reflection on bind.
            pk: Primary key column name.
            default_order: Default order token. Defaults to "<pk>:asc".
            formatter: Per-record transform. Defaults to identity.
            insert_strategy: "max_pk" or "returning".

        Raises:
            ConfigurationError: If the table name or pk is missing, or the
                insert strategy is unknown.
        """
        if isinstance(table, Table):
            self.name = table.name
            self._table: Table | None = table
        else:
            if not table:
                raise ConfigurationError("Missing table name")
            self.name = table
            self._table = None

        if not pk:
            raise ConfigurationError("Missing primary key column name")

        if insert_strategy not in INSERT_STRATEGIES:
            msg = (
                f"Unknown insert strategy '{insert_strategy}'. "
                f"Expected one of: {', '.join(sorted(INSERT_STRATEGIES))}"
            )
            raise ConfigurationError(msg)

        self.pk = pk
        self.default_order = default_order or default_order_token(pk)
        self.formatter = formatter or _identity
        self.insert_strategy = insert_strategy
        self._engine: AsyncEngine | None = None

    @classmethod
    def from_settings(
        cls,
        table: str | Table,
        config: Settings | None = None,
        **options: Any,
    ) -> "TableAccessor":
        """Create an accessor with pk and insert strategy taken from settings.

        Explicit keyword options win over settings.
        """
        config = config or default_settings
        options.setdefault("pk", config.default_pk)
        options.setdefault("insert_strategy", config.insert_strategy)
        return cls(table, **options)

    # ===== Binding =====

    async def bind(self, engine: AsyncEngine | None) -> None:
        """Bind the accessor to an engine.

        Reflects the table from the database when the accessor was
        configured with a name only.

        Args:
            engine: Async engine used for every query.

        Raises:
            ConfigurationError: If engine is missing, the table does not
                exist, or the primary key column is not on the table.
        """
        if engine is None:
            raise ConfigurationError("Missing engine binding")

        table = self._table
        if table is None:
            table = await self._reflect(engine)

        if self.pk not in table.c:
            msg = f"Primary key column '{self.pk}' not found on table '{self.name}'"
            raise ConfigurationError(msg)

        self._table = table
        self._engine = engine

        logger.info(
            "table_bound",
            table=self.name,
            pk=self.pk,
            dialect=engine.dialect.name,
        )

    async def _reflect(self, engine: AsyncEngine) -> Table:
        metadata = MetaData()
        try:
            async with engine.connect() as conn:
                await conn.run_sync(metadata.reflect, only=[self.name])
        except InvalidRequestError as exc:
            msg = f"Table '{self.name}' not found"
            raise ConfigurationError(msg) from exc
        return metadata.tables[self.name]

    def _check_binding(self) -> None:
        if self._engine is None or self._table is None:
            raise ConfigurationError("Missing engine binding")

    @property
    def engine(self) -> AsyncEngine:
        """Bound engine."""
        self._check_binding()
        return self._engine  # type: ignore[return-value]

    @property
    def table(self) -> Table:
        """Bound table."""
        self._check_binding()
        return self._table  # type: ignore[return-value]

    @property
    def columns(self) -> Any:
        """Column collection of the bound table (``table.c``)."""
        return self.table.c

    def column(self, name: str) -> Column:
        """Resolve a column by name.

        Raises:
            InvalidArgumentError: If the table has no such column.
        """
        try:
            return self.table.c[name]
        except KeyError as exc:
            msg = f"Unknown column '{name}' on table '{self.name}'"
            raise InvalidArgumentError(msg) from exc

    def base_query(self) -> Select:
        """``SELECT * FROM <table>``, the start of every read pipeline."""
        return select(self.table)

    # ===== Composition primitives =====

    def filter_query_by(
        self,
        query: Select | None,
        filters: Iterable[FilterFunc | None] | None,
    ) -> Select:
        """Apply filter functions to a query, in order.

        Args:
            query: Statement to build on. Never modified.
            filters: Ordered filter functions; None entries are skipped.

        Returns:
            The filtered statement.

        Raises:
            MissingQueryError: If query is None.
        """
        self._check_binding()
        if query is None:
            raise MissingQueryError()

        return apply_filters(query, filters)

    def search_in_query_by(
        self,
        query: Select | None,
        term: str | None,
        columns: Sequence[str] | None,
        predicate: SearchPredicate = ci_like,
    ) -> Select:
        """Restrict a query to rows where any column contains the term.

        The per-column conditions are OR-ed into one grouped clause that
        is AND-ed with the query's existing conditions. Search is opt-in:
        without a term or without columns the query is returned as is.

        Args:
            query: Statement to build on.
            term: Substring to search for (case-insensitive).
            columns: Names of the columns to search.
            predicate: Per-column match builder. Defaults to ci_like.

        Returns:
            The statement with the search clause attached.

        Raises:
            MissingQueryError: If query is None.
            InvalidArgumentError: If a column name is unknown.
        """
        self._check_binding()
        if query is None:
            raise MissingQueryError()

        if not term or not columns:
            return query

        resolved = [self.column(name) for name in columns]
        return query.where(build_search_clause(resolved, term, predicate))

    def order_query_by(self, query: Select | None, token: str | None = None) -> Select:
        """Order a query by a "field:direction" token.

        Any previous ordering is replaced. Only one ORDER BY column is
        applied; ties are returned in whatever order the database yields.

        Args:
            query: Statement to build on.
            token: Order token. Defaults to the accessor's default_order.

        Returns:
            The ordered statement.

        Raises:
            MissingQueryError: If query is None.
            InvalidArgumentError: If the field is not a column.
        """
        self._check_binding()
        if query is None:
            raise MissingQueryError()

        field_name, direction = parse_order_token(token or self.default_order)
        column = self.column(field_name)
        clause = column.desc() if direction == "desc" else column.asc()
        return query.order_by(None).order_by(clause)

    async def paginate_query(
        self,
        query: Select | None,
        limit: Any = None,
        offset: Any = None,
    ) -> PageResult:
        """Fetch one page of a query plus the total number of matches.

        Runs two statements: the page itself (with limit/offset) and a
        count of the distinct primary keys matching the query's filters,
        with projection, ordering, limit and offset stripped.

        Args:
            query: Filtered (and possibly ordered) statement.
            limit: Maximum rows; numeric or numeric string. None = all.
            offset: Rows to skip; numeric or numeric string. None = 0.

        Returns:
            PageResult with unformatted rows.

        Raises:
            MissingQueryError: If query is None.
            InvalidArgumentError: If limit or offset is negative.
        """
        self._check_binding()
        if query is None:
            raise MissingQueryError()

        limit_value = coerce_int(limit, "limit")
        offset_value = coerce_int(offset, "offset")

        total_query = self._total_query(query)

        page_query = query
        if limit_value is not None:
            page_query = page_query.limit(limit_value)
        if offset_value is not None:
            page_query = page_query.offset(offset_value)

        async with self.engine.connect() as conn:
            rows = await self._fetch_all(conn, page_query)
            total_result = await conn.execute(total_query)
            total: int = total_result.scalar_one()

        effective_offset = offset_value if offset_value is not None else 0
        effective_limit = limit_value if limit_value is not None else total
        page = compute_page(effective_offset, effective_limit, total)

        logger.debug(
            "table_paginate",
            table=self.name,
            limit=effective_limit,
            offset=effective_offset,
            total=total,
            rows=len(rows),
        )

        return PageResult(
            rows=rows,
            page=page,
            limit=effective_limit,
            offset=effective_offset,
            total=total,
        )

    def _total_query(self, query: Select) -> Select:
        pk_column = self.table.c[self.pk]
        distinct_pks = (
            query.with_only_columns(pk_column)
            .order_by(None)
            .limit(None)
            .offset(None)
            .distinct()
        )
        return select(func.count()).select_from(distinct_pks.subquery())

    # ===== Filter factories =====

    def where_filter(self, column: str, value: Any) -> FilterFunc:
        """Filter function adding ``column = value``."""

        def _where(query: Select) -> Select:
            return query.where(self.column(column) == value)

        return _where

    def search_filter(self, term: str | None, columns: Sequence[str] | None) -> FilterFunc:
        """Filter function applying search_in_query_by."""

        def _search(query: Select) -> Select:
            return self.search_in_query_by(query, term, columns)

        return _search

    def order_filter(self, token: str | None = None) -> FilterFunc:
        """Filter function applying order_query_by."""

        def _order(query: Select) -> Select:
            return self.order_query_by(query, token)

        return _order

    # ===== Record operations =====

    async def paginated_list(
        self,
        filters: Iterable[FilterFunc | None] | None = None,
        limit: Any = None,
        offset: Any = None,
    ) -> PageResult:
        """Filter, paginate and format records.

        Args:
            filters: Ordered filter functions.
            limit: Maximum rows per page.
            offset: Rows to skip.

        Returns:
            PageResult with formatted rows.
        """
        query = self.filter_query_by(self.base_query(), filters)
        page = await self.paginate_query(query, limit, offset)
        return page.with_rows(await self._format_all(page.rows))

    async def get_one_by(self, value: Any, column: str | None = None) -> Any:
        """Fetch the first record whose column equals value.

        Args:
            value: Lookup value.
            column: Lookup column. Defaults to the primary key.

        Returns:
            The formatted record, or None if nothing matched.
        """
        lookup = self.column(column or self.pk)
        query = self.base_query().where(lookup == value).limit(1)

        async with self.engine.connect() as conn:
            result = await conn.execute(query)
            row = result.mappings().first()

        if row is None:
            return None
        return await self._format(dict(row))

    async def insert_one(self, data: Mapping[str, Any] | None) -> Any:
        """Insert a record and return it, formatted.

        The insert and the lookup of the new primary key share one
        transaction; the full record is read back after commit.

        Args:
            data: Column values for the new row.

        Returns:
            The formatted inserted record.

        Raises:
            MissingDataError: If data is empty.
        """
        self._check_binding()
        if not data:
            raise MissingDataError()

        async with self.engine.begin() as conn:
            new_pk = await self._insert(conn, data)

        logger.debug(
            "table_insert",
            table=self.name,
            pk=new_pk,
            strategy=self.insert_strategy,
        )
        return await self.get_one_by(new_pk)

    async def _insert(self, conn: AsyncConnection, data: Mapping[str, Any]) -> Any:
        pk_column = self.table.c[self.pk]
        stmt = insert(self.table).values(dict(data))

        if self.insert_strategy == "returning":
            result = await conn.execute(stmt.returning(pk_column))
            return result.scalar_one()

        # max_pk: only valid for auto-incrementing keys with no concurrent
        # writer inside this transaction.
        await conn.execute(stmt)
        latest = await conn.execute(
            select(pk_column).order_by(pk_column.desc()).limit(1)
        )
        return latest.scalar_one()

    async def update_one_by(
        self,
        data: Mapping[str, Any] | None,
        value: Any,
        column: str | None = None,
    ) -> Any:
        """Update the first record whose column equals value.

        At most one row is updated. The record is then re-read with the
        same lookup, so an update that changes the lookup column itself
        returns None.

        Args:
            data: Column values to set.
            value: Lookup value.
            column: Lookup column. Defaults to the primary key.

        Returns:
            The formatted updated record, or None if nothing matched.

        Raises:
            MissingDataError: If data is empty.
        """
        self._check_binding()
        if not data:
            raise MissingDataError()

        pk_column = self.table.c[self.pk]
        lookup = self.column(column or self.pk)

        async with self.engine.begin() as conn:
            target = await conn.execute(
                select(pk_column).where(lookup == value).limit(1)
            )
            target_pk = target.scalar_one_or_none()
            if target_pk is not None:
                await conn.execute(
                    update(self.table).where(pk_column == target_pk).values(dict(data))
                )

        logger.debug("table_update", table=self.name, matched=target_pk is not None)
        return await self.get_one_by(value, column)

    async def delete_one_by(self, value: Any, column: str | None = None) -> bool:
        """Delete records whose column equals value.

        Args:
            value: Lookup value.
            column: Lookup column. Defaults to the primary key.

        Returns:
            True if at least one row was deleted, False otherwise.
        """
        lookup = self.column(column or self.pk)

        async with self.engine.begin() as conn:
            result = await conn.execute(delete(self.table).where(lookup == value))
            row_count: int = result.rowcount

        logger.debug("table_delete", table=self.name, rows=row_count)
        return row_count > 0

    async def list(self, filters: Iterable[FilterFunc | None] | None = None) -> Records:
        """Filter and format all matching records.

        Args:
            filters: Ordered filter functions.

        Returns:
            Formatted records, in query order.
        """
        query = self.filter_query_by(self.base_query(), filters)

        async with self.engine.connect() as conn:
            records = await self._fetch_all(conn, query)

        logger.debug("table_list", table=self.name, rows=len(records))
        return await self._format_all(records)

    # ===== Helpers =====

    @staticmethod
    async def _fetch_all(conn: AsyncConnection, query: Select) -> Records:
        result = await conn.execute(query)
        return [dict(row) for row in result.mappings()]

    async def _format(self, record: Record) -> Any:
        formatted = self.formatter(record)
        if inspect.isawaitable(formatted):
            formatted = await formatted
        return formatted

    async def _format_all(self, records: Records) -> Records:
        return [await self._format(record) for record in records]
