"""
Grievance Portal Backend — Message Service Unit Tests
======================================================

What we test:
    ✅ build_submission: required fields, explicit-optional expected response
    ✅ parse_message_id: missing vs malformed
    ✅ The resolve/delete check order (id before user before message before owner)
"""

import uuid

import pytest

from app.auth.session import SessionUser
from app.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.services.message_service import (
    EMOJI_MAX_LENGTH,
    MessageService,
    build_submission,
    parse_message_id,
)


class TestBuildSubmission:

    def test_valid(self):
        submission = build_submission("Late", "angry", "jane-abc123", "Be on time")

        assert submission.content == "Late"
        assert submission.expected_response == "Be on time"

    def test_reports_every_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            build_submission(None, "", "jane-abc123")

        assert exc_info.value.message == "Missing required fields"
        assert exc_info.value.context["missing"] == ["content", "emoji"]

    def test_whitespace_counts_as_missing(self):
        with pytest.raises(ValidationError) as exc_info:
            build_submission(" ", "sad", "\t")
        assert exc_info.value.context["missing"] == ["content", "slug"]

    def test_emoji_length_bounded(self):
        with pytest.raises(ValidationError) as exc_info:
            build_submission("a", "e" * (EMOJI_MAX_LENGTH + 1), "c")
        assert exc_info.value.field == "emoji"
        assert build_submission("a", "e" * EMOJI_MAX_LENGTH, "c").emoji == "e" * EMOJI_MAX_LENGTH

    @pytest.mark.parametrize("raw, stored", [(None, None), ("", None), ("0", "0"), (" ", " ")])
    def test_expected_response_is_explicit_optional(self, raw, stored):
        assert build_submission("a", "b", "c", raw).expected_response == stored


class TestParseMessageId:

    def test_missing(self):
        with pytest.raises(ValidationError, match="required"):
            parse_message_id("")

    def test_malformed(self):
        with pytest.raises(ValidationError, match="invalid"):
            parse_message_id("not-a-uuid")

    def test_valid(self):
        value = uuid.uuid4()
        assert parse_message_id(str(value)) == value


class TestOwnershipChain:

    def setup_method(self):
        self.service = MessageService()

    @pytest.mark.asyncio
    async def test_id_checked_before_user(self, db_session):
        ghost = SessionUser(id="x", username="ghost")

        with pytest.raises(ValidationError):
            await self.service.resolve(db_session, ghost, None)

    @pytest.mark.asyncio
    async def test_user_checked_before_message(self, db_session):
        ghost = SessionUser(id="x", username="ghost")

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.delete(db_session, ghost, str(uuid.uuid4()))
        assert exc_info.value.resource == "user"

    @pytest.mark.asyncio
    async def test_foreign_message(self, db_session, owner, intruder, make_person, make_message):
        message = await make_message(await make_person(owner))
        session = SessionUser(id=str(intruder.id), username=intruder.username)

        with pytest.raises(AuthorizationError):
            await self.service.resolve(db_session, session, str(message.id))

    @pytest.mark.asyncio
    async def test_resolve_returns_wire_model(self, db_session, owner, make_person, make_message):
        message = await make_message(await make_person(owner), expected_response="0")
        session = SessionUser(id=str(owner.id), username=owner.username)

        result = await self.service.resolve(db_session, session, str(message.id))

        assert result.done is True
        assert result.expected_response == "0"
        assert result.model_dump(by_alias=True)["expectedResponse"] == "0"


class TestSubmit:

    @pytest.mark.asyncio
    async def test_unknown_slug(self, db_session):
        with pytest.raises(ValidationError, match="Invalid link"):
            await MessageService().submit(db_session, build_submission("a", "b", "nobody"))

    @pytest.mark.asyncio
    async def test_returns_person(self, db_session, owner, make_person):
        person = await make_person(owner)

        result = await MessageService().submit(db_session, build_submission("a", "b", person.slug))

        assert result.id == person.id
