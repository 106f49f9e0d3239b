"""Shared fixtures: a temporary SQLite database with a seeded `test` table.

Each test gets its own database file, so tests never share rows.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from tablecrud.accessor import TableAccessor
from tests.factories import SEED_ROWS, TABLE_NAME, metadata, seed_table


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Engine for an empty `test` table."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def seeded_engine(db_engine: AsyncEngine) -> AsyncEngine:
    """Engine for a `test` table holding SEED_ROWS."""
    async with db_engine.begin() as conn:
        for row in SEED_ROWS:
            await conn.execute(insert(seed_table).values(row))
    return db_engine


@pytest_asyncio.fixture(scope="function")
async def accessor(seeded_engine: AsyncEngine) -> TableAccessor:
    """Accessor bound to the seeded table (reflected by name)."""
    crud = TableAccessor(TABLE_NAME)
    await crud.bind(seeded_engine)
    return crud


@pytest_asyncio.fixture(scope="function")
async def empty_accessor(db_engine: AsyncEngine) -> TableAccessor:
    """Accessor bound to the empty table."""
    crud = TableAccessor(TABLE_NAME)
    await crud.bind(db_engine)
    return crud
