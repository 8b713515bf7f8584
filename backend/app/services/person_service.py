"""
Grievance Portal Backend — Person Service
==========================================

What:  Creates, lists and deletes the Person records an owner hands links out for.
Who:   Called by the /api/person and /api/share route handlers.

Slug Scheme:
    slugify(name) + "-" + 6 random hex chars, e.g. "jane-doe-3fa9c1".
    Names without any ASCII letters or digits fall back to "person-<hex>".
    The slug is checked against the table and regenerated on collision.
"""

import logging
import re
import secrets
import unicodedata
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.auth.session import SessionUser
from app.config import settings
from app.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.person import Person
from app.schemas.message import MessageResponse
from app.schemas.person import PersonListResponse, PersonResponse, ShareInfo
from app.services.user_service import resolve_session_user

logger = logging.getLogger(__name__)

SLUG_BASE_MAX_LENGTH = 40
SLUG_ATTEMPTS = 5

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lower-case ASCII slug of `value`; empty if nothing survives."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = _NON_SLUG_CHARS.sub("-", normalized.lower()).strip("-")
    return slug[:SLUG_BASE_MAX_LENGTH].rstrip("-")


def generate_slug(name: str) -> str:
    base = slugify(name) or "person"
    return f"{base}-{secrets.token_hex(3)}"


def to_person_response(person: Person, include_messages: bool = True) -> PersonResponse:
    messages = (
        [MessageResponse.model_validate(m) for m in person.messages]
        if include_messages
        else []
    )
    return PersonResponse(
        id=person.id,
        name=person.name,
        slug=person.slug,
        user_id=person.user_id,
        created_at=person.created_at,
        messages=messages,
    )


class PersonService:
    """
    Business logic for Person records.

    Ownership:
        list/create act on the session user's own records; delete walks
        slug → person → user_id and refuses other owners with 403.
    """

    async def get_by_slug(
        self, db: AsyncSession, slug: str, with_messages: bool = False
    ) -> Optional[Person]:
        query = select(Person).where(Person.slug == slug)
        if with_messages:
            query = query.options(selectinload(Person.messages))
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_persons(self, db: AsyncSession, session: SessionUser) -> PersonListResponse:
        """All Persons owned by the session user, oldest first, each with its messages."""
        user = await resolve_session_user(db, session)
        result = await db.execute(
            select(Person)
            .where(Person.user_id == user.id)
            .options(selectinload(Person.messages))
            .order_by(Person.created_at, Person.id)
        )
        persons = result.scalars().all()
        return PersonListResponse(persons=[to_person_response(p) for p in persons])

    def validate_name(self, name: Optional[str]) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError(message="Name is required", field="name")
        limit = settings.person_name_max_length
        if len(cleaned) > limit:
            raise ValidationError(
                message=f"Name must be at most {limit} characters",
                field="name",
                context={"max_length": limit},
            )
        return cleaned

    async def _unused_slug(self, db: AsyncSession, name: str) -> str:
        for _ in range(SLUG_ATTEMPTS):
            slug = generate_slug(name)
            if await self.get_by_slug(db, slug) is None:
                return slug
            logger.debug("Slug collision on %s, regenerating", slug)
        raise ValidationError(
            message="Could not generate a unique link for this name. Please try again.",
            field="name",
        )

    async def create_person(
        self, db: AsyncSession, session: SessionUser, name: Optional[str]
    ) -> PersonListResponse:
        """
        Create a Person for the session user.

        Returns:
            PersonListResponse holding exactly the new Person (no messages yet).

        Raises:
            ValidationError: blank or over-long name
            NotFoundError: session user no longer exists
        """
        cleaned = self.validate_name(name)
        user = await resolve_session_user(db, session)
        slug = await self._unused_slug(db, cleaned)

        person = Person(name=cleaned, slug=slug, user_id=user.id)
        db.add(person)
        await db.flush()
        logger.info("Person created: %s (owner=%s)", person.slug, user.username)

        return PersonListResponse(persons=[to_person_response(person, include_messages=False)])

    async def delete_person(
        self, db: AsyncSession, session: SessionUser, slug: Optional[str]
    ) -> None:
        """
        Delete a Person and, by cascade, all of its Messages.

        Raises:
            ValidationError: slug missing (400)
            NotFoundError: session user or slug unknown (404)
            AuthorizationError: person owned by someone else (403)
        """
        if not slug:
            raise ValidationError(message="Person slug is required", field="slug")

        user = await resolve_session_user(db, session)
        person = await self.get_by_slug(db, slug, with_messages=True)
        if person is None:
            raise NotFoundError(resource="person", resource_id=slug)
        if person.user_id != user.id:
            logger.warning(
                "User %s attempted to delete person %s owned by another user",
                user.username,
                slug,
            )
            raise AuthorizationError()

        message_count = len(person.messages)
        await db.delete(person)
        await db.flush()
        logger.info("Person deleted: %s (%d messages removed)", slug, message_count)

    async def get_share_info(self, db: AsyncSession, slug: str) -> ShareInfo:
        """Public lookup for the share page. Raises NotFoundError for unknown slugs."""
        person = await self.get_by_slug(db, slug)
        if person is None:
            raise NotFoundError(resource="person", resource_id=slug)
        return ShareInfo(name=person.name, slug=person.slug)


person_service = PersonService()
