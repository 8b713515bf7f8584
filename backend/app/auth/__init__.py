"""Session authentication adapter."""

from app.auth.session import (
    SessionUser,
    create_session_token,
    decode_session_token,
    get_current_session,
    require_session,
)

__all__ = [
    "SessionUser",
    "create_session_token",
    "decode_session_token",
    "get_current_session",
    "require_session",
]
