"""
Handles database interactions for the chat application.

`DatabaseManager` owns the connection pools and hands the session factory to the repositories, so the rest of the
code never has to deal with engines or connection URLs.
"""

import logging
from typing import Any

from sqlalchemy import URL, Engine, create_engine, event, make_url
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from chatapp.config import DatabaseConfig
from chatapp.db.inspect_db import is_sane_database
from chatapp.db.repos import MessageRepository, UserRepository
from chatapp.db.schema import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores foreign keys unless asked for them on every new connection."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class DatabaseManager:
    """Connection pools and repositories for one database.

    Nothing here is global: construct one per database and pass it (or its repositories) to whoever needs it.
    """

    def __init__(self, config: DatabaseConfig):
        """Initializes the DatabaseManager.

        Args:
            config: Connection and pool settings, see `chatapp.config.load_database_config`.
        """
        base = make_url(config["database_url"])
        backend = base.get_backend_name()
        echo = config.get("echo", False)

        async_url = base.set(drivername=f"{backend}+{config['driver_async']}")
        if config["driver_async"] == "asyncpg" and "statement_cache_size" in config:
            async_url = async_url.update_query_dict(
                {"prepared_statement_cache_size": str(config["statement_cache_size"])}
            )
        sync_url = base.set(drivername=f"{backend}+{config['driver_sync']}")

        pool_options: dict[str, Any] = {}
        if backend != "sqlite":
            pool_options = {
                "pool_size": config.get("pool_size", 10),
                "max_overflow": config.get("max_overflow", 0),
                "pool_timeout": config.get("pool_timeout", 30.0),
                "pool_recycle": config.get("pool_recycle", 1800),
                "pool_pre_ping": True,
            }

        self.async_engine = create_async_engine(async_url, echo=echo, **pool_options)
        self.async_session = async_sessionmaker(self.async_engine, expire_on_commit=False)
        self.sync_engine = create_engine(sync_url, echo=echo)
        if backend == "sqlite":
            _enable_sqlite_foreign_keys(self.async_engine.sync_engine)
            _enable_sqlite_foreign_keys(self.sync_engine)
        logger.info("Database engines created for %s with pool options %s", _safe_url(base), pool_options)

        self.user_repo = UserRepository(self.async_session)
        self.message_repo = MessageRepository(self.async_session)

    async def create_schema(self, base_cls: type[DeclarativeBase] = Base) -> None:
        """Create the tables declared on `base_cls` that do not exist yet."""
        async with self.async_engine.begin() as conn:
            await conn.run_sync(base_cls.metadata.create_all)

    def validate_database_consistency(self, base_cls: type[DeclarativeBase] = Base) -> None:
        """Validates that the database schema is consistent with the expected schema."""
        if not is_sane_database(base_cls, self.sync_engine):
            raise RuntimeError("The database schema is not consistent with the expected schema.")

    async def dispose(self) -> None:
        """Close every pooled connection of both engines."""
        await self.async_engine.dispose()
        self.sync_engine.dispose()


def _safe_url(url: URL) -> str:
    return url.render_as_string(hide_password=True)
