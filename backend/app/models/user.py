"""
Grievance Portal Backend — User SQLAlchemy Model
=================================================

What:  ORM model for the `users` table: the authenticated owners.
Who:   Looked up by username from the session on every authenticated request.
When:  Rows are created by provisioning (`grievance-portal create-user`),
       standing in for the external account flow. Request handlers never
       mutate users.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.person import Person


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="Login name; the session lookup key",
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    persons: Mapped[List["Person"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Person.created_at",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
