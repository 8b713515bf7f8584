"""
Grievance Portal Backend — User Lookups
========================================

What:  Resolves the session user to a database row, and provisions users
       for the CLI.
Who:   Called first by every authenticated person/message operation.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.session import SessionUser
from app.exceptions import NotFoundError, ValidationError
from app.models.user import User

logger = logging.getLogger(__name__)


async def get_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def resolve_session_user(db: AsyncSession, session: SessionUser) -> User:
    """
    Look up the row behind a verified session.

    Raises:
        NotFoundError: the username no longer exists (→ 404 "User not found")
    """
    user = await get_by_username(db, session.username)
    if user is None:
        raise NotFoundError(resource="user", resource_id=session.username)
    return user


async def create_user(db: AsyncSession, username: str, name: Optional[str] = None) -> User:
    """Insert a new owner account. Usernames are unique."""
    username = (username or "").strip()
    if not username:
        raise ValidationError(message="Username is required", field="username")
    if await get_by_username(db, username) is not None:
        raise ValidationError(message=f"Username '{username}' is already taken", field="username")

    user = User(username=username, name=name)
    db.add(user)
    await db.flush()
    logger.info("User created: %s (%s)", user.username, user.id)
    return user
