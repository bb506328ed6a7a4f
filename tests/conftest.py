"""
Global pytest configuration and shared fixtures.
"""

from collections.abc import AsyncGenerator, Generator
from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from testcontainers.postgres import PostgresContainer

from chatapp.config import DatabaseConfig
from chatapp.db import DatabaseManager
from chatapp.db.schema import Base


@pytest.fixture
def sqlite_config(tmp_path: Path) -> DatabaseConfig:
    """A database configuration pointing at a fresh SQLite file."""
    return {
        "database_url": f"sqlite:///{tmp_path / 'chat.db'}",
        "driver_async": "aiosqlite",
        "driver_sync": "pysqlite",
    }


@pytest.fixture
async def db_manager(sqlite_config: DatabaseConfig) -> AsyncGenerator[DatabaseManager, None]:
    """A DatabaseManager backed by an empty SQLite database with the schema created."""
    manager = DatabaseManager(sqlite_config)
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture(scope="session")
def postgres_url() -> Generator[str, None, None]:
    """Start a PostgreSQL container for the whole session, skipping if Docker is not available."""
    container = PostgresContainer("postgres:17")
    try:
        container.start()
    except Exception as e:  # Docker missing or not running
        pytest.skip(f"Could not start PostgreSQL container: {e}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest.fixture
async def pg_db_manager(postgres_url: str) -> AsyncGenerator[DatabaseManager, None]:
    """A DatabaseManager backed by the PostgreSQL container, with a clean schema for every test."""
    manager = DatabaseManager(
        {
            "database_url": postgres_url,
            "driver_async": "asyncpg",
            "driver_sync": "psycopg2",
            "pool_size": 2,
            "pool_timeout": 5.0,
        }
    )
    await manager.create_schema()
    yield manager
    async with manager.async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await manager.dispose()


@pytest.fixture
def mock_session() -> AsyncMock:
    """Create a mock async session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute.return_value = Mock()
    return session


@pytest.fixture
def mock_session_maker(mock_session: AsyncMock) -> MagicMock:
    """Create a mock session maker handing out `mock_session`."""
    session_maker = MagicMock()
    session_maker.return_value.__aenter__.return_value = mock_session
    session_maker.return_value.__aexit__.return_value = None
    return session_maker


@pytest.fixture
def sent_at() -> datetime:
    """A fixed send time, without microseconds so it survives every backend unchanged."""
    return datetime(2025, 3, 14, 15, 9, 26)
