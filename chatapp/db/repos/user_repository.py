"""Repository for authenticating and registering users."""

import asyncio
import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatapp.db.domain import User
from chatapp.db.mapping import has_message, map_message, map_user
from chatapp.db.result import Failure, FailureKind, Ok, Result, classify_error
from chatapp.db.schema import OrmMessage, OrmUser
from chatapp.security import dummy_verify, hash_password, verify_password

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user credentials and their message history."""

    def __init__(self, session: async_sessionmaker[AsyncSession]):
        self._session = session

    async def authenticate(self, username: str, password: str) -> Result[User]:
        """Log a user in and load their messages.

        The password is checked against the stored hash on the first row. If it matches, every row of the
        users LEFT JOIN messages query adds one message to the user, in message id order.

        Args:
            username: The username to log in as.
            password: The plaintext password.

        Returns:
            Ok with the user and their messages. A Failure of kind AUTHENTICATION_FAILED if the username does not
            exist or the password is wrong, or STORAGE_UNAVAILABLE if the database could not be queried.
        """
        stmt = (
            select(
                OrmUser.user_id,
                OrmUser.username,
                OrmUser.password_hash,
                OrmMessage.message_id,
                OrmMessage.text,
                OrmMessage.timestamp,
            )
            .outerjoin(OrmMessage, OrmMessage.user_id == OrmUser.user_id)
            .where(OrmUser.username == username)
            .order_by(OrmMessage.message_id)
        )
        user: User | None = None
        try:
            async with self._session() as session:
                result = await session.execute(stmt)
                for row in result.mappings():
                    if user is None:
                        if not await asyncio.to_thread(verify_password, password, row["password_hash"]):
                            logger.warning("Wrong username or password.")
                            return Failure(FailureKind.AUTHENTICATION_FAILED)
                        user = map_user(row)
                    if has_message(row):
                        user.messages.append(map_message(row, user_id=user.id))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to login as %s.", username, exc_info=True)
            return Failure(classify_error(e), str(e))

        if user is None:
            await asyncio.to_thread(dummy_verify)
            logger.warning("Wrong username or password.")
            return Failure(FailureKind.AUTHENTICATION_FAILED)
        return Ok(user)

    async def register(self, user: User) -> Result[User]:
        """Insert a new user with a hashed password.

        Args:
            user: The user to register, carrying the plaintext password.

        Returns:
            Ok with the stored user, whose `id` is the generated key and whose `password` is the hash. A Failure of
            kind CONSTRAINT_VIOLATION if the username is taken, NOT_FOUND if the row could not be read back after
            the insert, or STORAGE_UNAVAILABLE if the database could not be reached.

        Raises:
            ValueError: If the user, its username or its password is missing.
        """
        if user is None or not user.username or not user.password:
            raise ValueError("Username and password must exist")

        password_hash = await asyncio.to_thread(hash_password, user.password)
        try:
            async with self._session() as session:
                result = await session.execute(
                    insert(OrmUser).values(username=user.username, password_hash=password_hash)
                )
                if result.rowcount == 0:
                    logger.warning("No user inserted with username=%s", user.username)
                    return Failure(FailureKind.NOT_FOUND, "No row inserted")
                logger.info("Successfully inserted user with username=%s", user.username)
                user_id = result.inserted_primary_key[0]

                registered_user = await self._find_by_id(session, user_id)
                if registered_user is None:
                    logger.warning("Failed to find registered user with user_id=%s", user_id)
                    return Failure(FailureKind.NOT_FOUND, f"User {user_id} not found after insert")
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            kind = classify_error(e)
            if kind is FailureKind.CONSTRAINT_VIOLATION:
                logger.warning("Username %s is already taken.", user.username)
            else:
                logger.error("Failed to insert user to database.", exc_info=True)
            return Failure(kind, str(e))
        return Ok(registered_user)

    @staticmethod
    async def _find_by_id(session: AsyncSession, user_id: int) -> User | None:
        """Read a user back on the session that inserted it."""
        stmt = select(OrmUser.user_id, OrmUser.username, OrmUser.password_hash).where(OrmUser.user_id == user_id)
        result = await session.execute(stmt)
        row = result.mappings().one_or_none()
        if row is None:
            return None
        return map_user(row)
