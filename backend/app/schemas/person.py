"""
Grievance Portal Backend — Person Schemas
==========================================

What:  Request and response models for the person endpoints.

Every person endpoint that returns records returns them as a list under
`persons`, even when exactly one record was created, so clients never
branch on the response shape.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.message import CamelModel, MessageResponse


class PersonCreate(BaseModel):
    # Optional so a missing name is reported as a 400 by the service
    name: Optional[str] = Field(default=None, description="Display name, 1-24 characters")


class PersonResponse(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    user_id: uuid.UUID
    created_at: datetime
    messages: List[MessageResponse] = Field(default_factory=list)


class PersonListResponse(BaseModel):
    persons: List[PersonResponse] = Field(
        default_factory=list,
        description="Persons in creation order, each with its messages",
    )


class ShareInfo(BaseModel):
    """Public view of a Person: only what the share page shows."""
    name: str
    slug: str
