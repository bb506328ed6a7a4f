from dataclasses import dataclass, field

from chatapp.db.domain.message import Message


@dataclass(slots=True)
class User:
    """A user of the chat.

    Before registration `password` is the plaintext the user chose. Users read back from the database carry the
    bcrypt hash instead, and `id` is the identifier the database assigned.
    """

    username: str | None = None
    password: str | None = field(default=None, repr=False)
    id: int | None = None
    messages: list[Message] = field(default_factory=list)
