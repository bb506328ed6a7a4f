"""Repository layer for database operations."""

from chatapp.db.repos.message_repository import MessageRepository
from chatapp.db.repos.user_repository import UserRepository

__all__ = ["MessageRepository", "UserRepository"]
