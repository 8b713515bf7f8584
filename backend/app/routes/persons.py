"""
Grievance Portal Backend — Person Route Handlers
=================================================

    GET    /api/person           session → {"persons": [...]}
    POST   /api/person           session → {"persons": [<new person>]}
    DELETE /api/person?slug=     session → {"success": true}
    GET    /api/share/{slug}     public  → {"name", "slug"}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.session import SessionUser, require_session
from app.database import get_db_session
from app.schemas.common import ErrorResponse, SuccessResponse
from app.schemas.person import PersonCreate, PersonListResponse, ShareInfo
from app.services.person_service import person_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Persons"])


@router.get(
    "/person",
    response_model=PersonListResponse,
    responses={
        401: {"description": "No valid session", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="List the caller's persons with their messages",
)
async def list_persons(
    session: SessionUser = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> PersonListResponse:
    return await person_service.list_persons(db, session)


@router.post(
    "/person",
    response_model=PersonListResponse,
    responses={
        400: {"description": "Blank or over-long name", "model": ErrorResponse},
        401: {"description": "No valid session", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Create a person and its share link",
)
async def create_person(
    payload: Optional[PersonCreate] = Body(default=None),
    session: SessionUser = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> PersonListResponse:
    return await person_service.create_person(db, session, payload.name if payload else None)


@router.delete(
    "/person",
    response_model=SuccessResponse,
    responses={
        400: {"description": "Slug missing", "model": ErrorResponse},
        401: {"description": "No valid session", "model": ErrorResponse},
        403: {"description": "Person belongs to another user", "model": ErrorResponse},
        404: {"description": "User or person not found", "model": ErrorResponse},
    },
    summary="Delete a person and all of its messages",
)
async def delete_person(
    slug: Optional[str] = Query(default=None, description="Person slug"),
    session: SessionUser = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> SuccessResponse:
    await person_service.delete_person(db, session, slug)
    return SuccessResponse()


@router.get(
    "/share/{slug}",
    response_model=ShareInfo,
    responses={404: {"description": "Unknown link", "model": ErrorResponse}},
    summary="Public details behind a share link",
)
async def get_share_info(
    slug: str,
    db: AsyncSession = Depends(get_db_session),
) -> ShareInfo:
    return await person_service.get_share_info(db, slug)
