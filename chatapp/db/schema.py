"""SQLAlchemy table definitions."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, MappedAsDataclass, mapped_column

USERNAME_MAX_LENGTH = 50
PASSWORD_HASH_MAX_LENGTH = 255
MESSAGE_TEXT_MAX_LENGTH = 1000


class Base(AsyncAttrs, DeclarativeBase):
    pass


class OrmUser(MappedAsDataclass, Base):
    """A registered user of the chat."""

    __tablename__ = "users"
    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(PASSWORD_HASH_MAX_LENGTH), nullable=False, repr=False)


class OrmMessage(MappedAsDataclass, Base):
    """A chat message written by a user."""

    __tablename__ = "messages"
    message_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    text: Mapped[str] = mapped_column(String(MESSAGE_TEXT_MAX_LENGTH), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
