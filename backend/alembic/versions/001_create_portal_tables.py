"""Create users, persons and messages tables

Revision ID: 001
Revises: None
Create Date: 2025-02-09 00:00:00.000000+00:00

Ownership chain: users 1:N persons 1:N messages. Both foreign keys cascade
on delete, so removing a person removes its messages in the database itself.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(64), nullable=False,
                  comment="Login name; the session lookup key"),
        sa.Column("name", sa.String(255), nullable=True, comment="Display name"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "persons",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(64), nullable=False,
                  comment="URL-safe public share-link key"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug", name="uq_persons_slug"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_persons_user_id_created_at", "persons", ["user_id", "created_at"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("emoji", sa.String(64), nullable=False),
        sa.Column("expected_response", sa.Text(), nullable=True),
        sa.Column("done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("person_id", sa.Uuid(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["person_id"], ["persons.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_messages_person_id", "messages", ["person_id"])


def downgrade() -> None:
    """Drops all three tables. Destructive: every record is lost."""
    op.drop_index("idx_messages_person_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("idx_persons_user_id_created_at", table_name="persons")
    op.drop_table("persons")
    op.drop_table("users")
