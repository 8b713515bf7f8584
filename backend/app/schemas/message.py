"""
Grievance Portal Backend — Message Schemas
===========================================

What:  Wire representation of Message records.
How:   Field names are snake_case in Python and camelCase on the wire
       (`expectedResponse`, `createdAt`, `personId`), matching what the
       dashboard consumes. FastAPI serializes response models by alias.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire models: camelCase aliases, built from ORM attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    id: uuid.UUID
    content: str
    emoji: str
    expected_response: Optional[str] = Field(
        default=None,
        description="What the sender hopes will happen; null when left empty",
    )
    done: bool = Field(description="True once the owner resolved the message")
    created_at: datetime
    person_id: uuid.UUID


class MessageSubmission(BaseModel):
    """
    A validated anonymous submission.

    `expected_response` is None when the form field was absent or empty;
    any other string is kept verbatim.
    """
    content: str
    emoji: str
    slug: str
    expected_response: Optional[str] = None


class ResolveMessageResponse(BaseModel):
    """Body of a successful PATCH /api/message."""
    success: bool = True
    message: MessageResponse
