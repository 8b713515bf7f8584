"""ORM models. Importing this package registers every table on Base.metadata."""

from app.models.user import User
from app.models.person import Person
from app.models.message import Message

__all__ = ["User", "Person", "Message"]
