"""Pure domain models, free of any database session."""

from chatapp.db.domain.message import Message
from chatapp.db.domain.user import User

__all__ = ["Message", "User"]
