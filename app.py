"""
Entry point of the chat persistence layer.

Connects to the configured database, creates missing tables in dev mode, and checks that the schema matches the
models before anything else uses it.
"""

import asyncio
import logging

from dotenv import load_dotenv

from chatapp.config import ApplicationConfig, load_database_config
from chatapp.db import DatabaseManager
from chatapp.log import setup_logging

logger = logging.getLogger(__name__)


async def main(config: ApplicationConfig) -> None:
    """Bring up the database and validate it."""
    setup_logging(config.get("dev_mode", False))

    db = DatabaseManager(load_database_config(config.get("database")))
    try:
        if config.get("dev_mode", False):
            await db.create_schema()
        # Run the synchronous db validation function in a thread to avoid blocking the event loop
        await asyncio.to_thread(db.validate_database_consistency)
        logger.info("Database is ready.")
    finally:
        await db.dispose()


if __name__ == "__main__":
    # Check .env.example for environment variables configuration
    config: ApplicationConfig = {
        "dev_mode": False,
        "dotenv_path": ".env",
    }

    if config.get("dotenv_path"):
        load_dotenv(config.get("dotenv_path"))
    asyncio.run(main(config), debug=config.get("dev_mode", False))
