"""
Grievance Portal Backend — Message Service
===========================================

What:  Anonymous submission, resolution and deletion of Messages.
Who:   Called by the /api/message route handlers.

Authorization Chain (resolve / delete):
    session ──▶ id present ──▶ user row ──▶ message row ──▶ message.person.user_id
     401            400           404           404                403

    Each link is a separate read; the only write happens after the last
    check passes, so a failure anywhere leaves the data untouched.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth.session import SessionUser
from app.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.message import Message
from app.models.person import Person
from app.schemas.message import MessageResponse, MessageSubmission
from app.services.person_service import person_service
from app.services.user_service import resolve_session_user

logger = logging.getLogger(__name__)

# Width of messages.emoji
EMOJI_MAX_LENGTH = 64


def build_submission(
    content: Optional[str],
    emoji: Optional[str],
    slug: Optional[str],
    expected_response: Optional[str] = None,
) -> MessageSubmission:
    """
    Validate raw form values.

    content, emoji and slug must be present and not blank; they are stored as
    sent. expected_response is optional: absent or "" becomes None, anything
    else is kept as sent.
    """
    missing = [
        field
        for field, value in (("content", content), ("emoji", emoji), ("slug", slug))
        if not (value and value.strip())
    ]
    if missing:
        raise ValidationError(
            message="Missing required fields",
            context={"missing": missing},
        )
    if len(emoji) > EMOJI_MAX_LENGTH:
        raise ValidationError(
            message=f"Emoji must be at most {EMOJI_MAX_LENGTH} characters",
            field="emoji",
            context={"max_length": EMOJI_MAX_LENGTH},
        )
    return MessageSubmission(
        content=content,
        emoji=emoji,
        slug=slug,
        expected_response=expected_response if expected_response else None,
    )


def parse_message_id(message_id: Optional[str]) -> uuid.UUID:
    if not message_id:
        raise ValidationError(message="Message ID is required", field="id")
    try:
        return uuid.UUID(message_id)
    except ValueError:
        raise ValidationError(message="Message ID is invalid", field="id")


class MessageService:
    """Business logic for Message records."""

    async def submit(self, db: AsyncSession, submission: MessageSubmission) -> Person:
        """
        Attach a new Message to the Person behind `submission.slug`.

        Returns:
            The Person, so the caller can build the share-page redirect.

        Raises:
            ValidationError: slug does not resolve to a Person ("Invalid link")
        """
        person = await person_service.get_by_slug(db, submission.slug)
        if person is None:
            raise ValidationError(
                message="Invalid link",
                field="slug",
                context={"slug": submission.slug},
            )

        message = Message(
            content=submission.content,
            emoji=submission.emoji,
            expected_response=submission.expected_response,
            done=False,
            person_id=person.id,
        )
        db.add(message)
        await db.flush()
        logger.info("Message %s submitted for person %s", message.id, person.slug)
        return person

    async def _get_owned_message(
        self, db: AsyncSession, session: SessionUser, message_id: Optional[str]
    ) -> Message:
        parsed_id = parse_message_id(message_id)
        user = await resolve_session_user(db, session)

        result = await db.execute(
            select(Message)
            .where(Message.id == parsed_id)
            .options(selectinload(Message.person))
        )
        message = result.scalar_one_or_none()
        if message is None:
            raise NotFoundError(resource="message", resource_id=str(parsed_id))

        if message.person.user_id != user.id:
            logger.warning(
                "User %s attempted to modify message %s owned by another user",
                user.username,
                parsed_id,
            )
            raise AuthorizationError()
        return message

    async def resolve(
        self, db: AsyncSession, session: SessionUser, message_id: Optional[str]
    ) -> MessageResponse:
        """
        Mark a message as done. Not a toggle: an already-resolved message
        stays resolved and the call still succeeds.
        """
        message = await self._get_owned_message(db, session, message_id)
        message.done = True
        await db.flush()
        logger.info("Message %s resolved", message.id)
        return MessageResponse.model_validate(message)

    async def delete(
        self, db: AsyncSession, session: SessionUser, message_id: Optional[str]
    ) -> None:
        """Permanently delete a message."""
        message = await self._get_owned_message(db, session, message_id)
        await db.delete(message)
        await db.flush()
        logger.info("Message %s deleted", message.id)


message_service = MessageService()
