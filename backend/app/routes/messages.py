"""
Grievance Portal Backend — Message Route Handlers
==================================================

What:  POST/PATCH/DELETE on /api/message.
How:   Extracts form/query values, delegates to MessageService, shapes the
       HTTP response. Errors are raised as PortalError subclasses and turned
       into JSON by the global handlers in main.py.

    POST   /api/message        public   → 303 /share/{slug}?submitted=true
    PATCH  /api/message?id=    session  → 200 {"success": true, "message": {...}}
    DELETE /api/message?id=    session  → 200 {"success": true}
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.session import SessionUser, require_session
from app.database import get_db_session
from app.schemas.common import ErrorResponse, SuccessResponse
from app.schemas.message import ResolveMessageResponse
from app.services.message_service import build_submission, message_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Messages"])

_AUTH_ERRORS = {
    400: {"description": "Message ID missing or malformed", "model": ErrorResponse},
    401: {"description": "No valid session", "model": ErrorResponse},
    403: {"description": "Message belongs to another user", "model": ErrorResponse},
    404: {"description": "User or message not found", "model": ErrorResponse},
}


@router.post(
    "/message",
    status_code=303,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Submitted; redirect to the share page"},
        400: {"description": "Missing fields or invalid link", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
    summary="Submit anonymous feedback",
)
async def submit_message(
    request: Request,
    content: Optional[str] = Form(default=None),
    emoji: Optional[str] = Form(default=None),
    slug: Optional[str] = Form(default=None),
    expected_response: Optional[str] = Form(default=None, alias="expectedResponse"),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """
    Anonymous, unauthenticated. The form on /share/{slug} posts here; on
    success the browser lands back on the share page in its confirmation state.
    """
    submission = build_submission(content, emoji, slug, expected_response)
    person = await message_service.submit(db, submission)

    target = f"{str(request.base_url).rstrip('/')}/share/{quote(person.slug)}?submitted=true"
    return RedirectResponse(url=target, status_code=303)


@router.patch(
    "/message",
    response_model=ResolveMessageResponse,
    responses=_AUTH_ERRORS,
    summary="Mark a message as resolved",
)
async def resolve_message(
    message_id: Optional[str] = Query(default=None, alias="id", description="Message ID"),
    session: SessionUser = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> ResolveMessageResponse:
    message = await message_service.resolve(db, session, message_id)
    return ResolveMessageResponse(success=True, message=message)


@router.delete(
    "/message",
    response_model=SuccessResponse,
    responses=_AUTH_ERRORS,
    summary="Delete a message",
)
async def delete_message(
    message_id: Optional[str] = Query(default=None, alias="id", description="Message ID"),
    session: SessionUser = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await message_service.delete(db, session, message_id)
    return SuccessResponse()
