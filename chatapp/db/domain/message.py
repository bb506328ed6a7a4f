from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Message:
    """A chat message. The timestamp is chosen by the sender, not by the database."""

    user_id: int
    text: str | None
    timestamp: datetime | None
    id: int | None = None
