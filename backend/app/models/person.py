"""
Grievance Portal Backend — Person SQLAlchemy Model
===================================================

What:  ORM model for the `persons` table: a feedback target owned by one user.
How:   `slug` is the public share-link key and is unique across the table.
       Deleting a Person deletes its Messages, both through the ORM cascade
       and through ON DELETE CASCADE on messages.person_id.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.message import Message
    from app.models.user import User


class Person(Base):
    __tablename__ = "persons"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    slug: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="URL-safe public share-link key",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="persons")

    messages: Mapped[List["Message"]] = relationship(
        back_populates="person",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    # Dashboard listing: WHERE user_id = :uid ORDER BY created_at
    __table_args__ = (
        Index("idx_persons_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Person(id={self.id}, slug='{self.slug}')>"
