"""
Grievance Portal Backend — Message SQLAlchemy Model
====================================================

What:  ORM model for the `messages` table: one anonymous feedback item.

Lifecycle:
    1. Created by an anonymous submission against a Person's slug (done=false)
    2. Resolved by the owner: done=false → true (re-resolving is a no-op)
    3. Deleted by the owner, or with its Person
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.person import Person


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Opaque emoji key (e.g. "frown"); rendering is the frontend's business
    emoji: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
    )

    # NULL means the sender left the field empty
    expected_response: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    done: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("persons.id", ondelete="CASCADE"),
        nullable=False,
    )

    person: Mapped["Person"] = relationship(back_populates="messages")

    __table_args__ = (
        Index("idx_messages_person_id", "person_id"),
    )

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, done={self.done})>"
