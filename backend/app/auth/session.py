"""
Grievance Portal Backend — Session Adapter
===========================================

What:  Turns an incoming request into the current session user, or nothing.
How:   Sessions are HS256 JWTs signed with SESSION_SECRET (python-jose).
       The token is read from the session cookie, falling back to an
       `Authorization: Bearer` header. Claims mirror the session shape the
       handlers rely on: `id`, `username`, `name`.
Who:   Route handlers depend on `require_session`; the share page and other
       public routes never touch this module.

Verification only establishes *who* is calling. The username is still
resolved against the users table by the services, so a token for a user
that no longer exists yields "User not found" rather than access.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Request
from jose import JWTError, jwt
from pydantic import BaseModel

from app.config import settings
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class SessionUser(BaseModel):
    id: str
    username: str
    name: Optional[str] = None


def create_session_token(
    user_id: str,
    username: str,
    name: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Mint a signed session token for the given user."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(seconds=settings.session_max_age))
    payload: Dict[str, Any] = {
        "sub": username,
        "id": user_id,
        "username": username,
        "name": name,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


def decode_session_token(token: str) -> Optional[SessionUser]:
    """Verify a token and return its user, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(
            token,
            settings.session_secret,
            algorithms=[settings.session_algorithm],
        )
    except JWTError as exc:
        logger.debug("Rejected session token: %s", exc)
        return None

    username = payload.get("username")
    if not username:
        return None
    return SessionUser(
        id=str(payload.get("id", "")),
        username=username,
        name=payload.get("name"),
    )


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def get_current_session(request: Request) -> Optional[SessionUser]:
    """FastAPI dependency: the session user, or None for anonymous requests."""
    token = _extract_token(request)
    if not token:
        return None
    return decode_session_token(token)


async def require_session(request: Request) -> SessionUser:
    """FastAPI dependency: the session user, or AuthenticationError (401)."""
    session = await get_current_session(request)
    if session is None:
        raise AuthenticationError()
    return session
