"""Row to domain object translation.

Each function takes a row as a mapping of column name to value, as given by `Result.mappings()`, so they can be
tested with plain dicts.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from chatapp.db.domain import Message, User

type Row = Mapping[str, Any]


def map_user(row: Row) -> User:
    """Build a user from a row holding `user_id`, `username` and `password_hash`. Messages are left empty."""
    return User(id=row["user_id"], username=row["username"], password=row["password_hash"])


def has_message(row: Row) -> bool:
    """Whether the message side of a users LEFT JOIN messages row is filled in."""
    return row.get("message_id") is not None


def map_message(row: Row, *, user_id: int | None = None) -> Message:
    """Build a message from a row holding `message_id`, `text` and `timestamp`.

    Args:
        row: The row to read.
        user_id: The owner of the message, for rows that do not carry a `user_id` column themselves.
    """
    if user_id is None:
        user_id = row["user_id"]
    return Message(user_id=user_id, text=row["text"], timestamp=row["timestamp"], id=row["message_id"])


def map_messages(rows: Iterable[Row]) -> list[Message]:
    return [map_message(row) for row in rows]
