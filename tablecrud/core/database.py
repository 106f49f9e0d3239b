"""Async database engine construction.

Builds the SQLAlchemy async engine a TableAccessor is bound to.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from tablecrud.core.config import Settings
from tablecrud.core.config import settings as default_settings


def create_engine(config: Settings | None = None) -> AsyncEngine:
    """Create an async engine from settings.

    Args:
        config: Settings to read the URL and echo flag from. Defaults to
            the module-level settings loaded from the environment. An
            unset echo flag turns SQL echo on in development.

    Returns:
        A new AsyncEngine. The caller owns it and must dispose it.
    """
    config = config or default_settings
    echo = config.database_echo
    if echo is None:
        echo = config.environment == "development"

    return create_async_engine(
        config.database_url,
        echo=echo,
        pool_pre_ping=True,
    )
