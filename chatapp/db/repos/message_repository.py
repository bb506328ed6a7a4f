"""Repository for managing messages in the database."""

import dataclasses
import logging
from datetime import timezone

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatapp.db.domain import Message
from chatapp.db.mapping import map_messages
from chatapp.db.result import Failure, FailureKind, Ok, Result, classify_error
from chatapp.db.schema import OrmMessage

logger = logging.getLogger(__name__)


class MessageRepository:
    """Repository for pure database operations on messages."""

    def __init__(self, session: async_sessionmaker[AsyncSession]):
        self._session = session

    async def save(self, message: Message) -> Result[Message]:
        """Insert a message record into the database.

        The owner must exist. Saving a message for an unknown user id writes nothing and returns a Failure of kind
        CONSTRAINT_VIOLATION.

        Args:
            message: The message to insert.

        Returns:
            Ok with a copy of the message carrying its generated id, or a Failure.

        Raises:
            ValueError: If the message or its timestamp is missing, or its text is empty.
        """
        if message is None:
            raise ValueError("Message cannot be null.")
        if not message.text or message.timestamp is None:
            raise ValueError("Message text cannot be empty and timestamp cannot be null.")
        # The column has no time zone, so aware timestamps are stored as naive UTC
        if message.timestamp.utcoffset() is not None:
            message = dataclasses.replace(
                message, timestamp=message.timestamp.astimezone(timezone.utc).replace(tzinfo=None)
            )

        logger.info("Saving message for user_id=%s, timestamp=%s", message.user_id, message.timestamp)
        try:
            async with self._session() as session:
                stmt = insert(OrmMessage).values(
                    text=message.text,
                    user_id=message.user_id,
                    timestamp=message.timestamp,
                )
                result = await session.execute(stmt)
                if result.rowcount == 0:
                    logger.warning("No messages inserted.")
                    return Failure(FailureKind.NOT_FOUND, "No row inserted")
                message_id = result.inserted_primary_key[0]
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to insert new message for user_id=%s", message.user_id, exc_info=True)
            return Failure(classify_error(e), str(e))

        logger.info("Successfully inserted message %s", message_id)
        return Ok(dataclasses.replace(message, id=message_id))

    async def find_by_user_id(self, user_id: int) -> Result[list[Message]]:
        """Get all messages written by a user, oldest first.

        An unknown user id is not an error, it just has no messages.

        Args:
            user_id: The id of the author.

        Returns:
            Ok with the messages in insertion order, or a Failure of kind STORAGE_UNAVAILABLE.
        """
        stmt = (
            select(OrmMessage.message_id, OrmMessage.text, OrmMessage.timestamp, OrmMessage.user_id)
            .where(OrmMessage.user_id == user_id)
            .order_by(OrmMessage.message_id)
        )
        try:
            async with self._session() as session:
                result = await session.execute(stmt)
                return Ok(map_messages(result.mappings().all()))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to find messages by user_id=%s", user_id, exc_info=True)
            return Failure(classify_error(e), str(e))
