"""Accessor configuration loaded from environment variables.

Settings for the database connection, accessor defaults, and logging.
Uses pydantic-settings for validation and .env file support. Every
variable is prefixed with ``TABLECRUD_`` (e.g. ``TABLECRUD_DATABASE_URL``).
"""

from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

InsertStrategy = Literal["max_pk", "returning"]


class Settings(BaseSettings):
    """Accessor settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TABLECRUD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./tablecrud.db"
    # None echoes SQL only when environment is "development"
    database_echo: bool | None = None

    # Accessor defaults
    default_pk: str = "id"
    insert_strategy: InsertStrategy = "max_pk"

    # Upper bound for the HTTP `limit` parameter (None = unbounded)
    max_limit: int | None = None

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    @model_validator(mode="after")
    def check_values(self) -> "Settings":
        """Validate cross-field invariants.

        Checks:
        - Default primary key name must not be blank
        - max_limit, when set, must be positive
        """
        if not self.default_pk.strip():
            msg = "TABLECRUD_DEFAULT_PK must not be empty."
            raise ValueError(msg)

        if self.max_limit is not None and self.max_limit < 1:
            msg = f"TABLECRUD_MAX_LIMIT must be positive. Got: {self.max_limit}"
            raise ValueError(msg)

        return self


settings = Settings()
