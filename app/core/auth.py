# app/core/auth.py
import logging

from fastapi import Cookie, Depends, Response
from sqlmodel import Session

from app.core.config import Settings
from app.core.errors import AuthError, StorageError
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session"
# Largest id a BIGINT column can hold.
MAX_SESSION_USER_ID = 2**63 - 1

repo = UserRepository()


# ----- Cookie helpers -----


def set_session_cookie(response: Response, user_id: int, settings: Settings) -> None:
    """
    Issue the session cookie: the decimal user id, HttpOnly, Path=/,
    SameSite=Lax, Secure when COOKIE_SECURE is on.

    NOTE: the value is not signed; anyone holding it can act as that user.
    """
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=str(user_id),
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Overwrite the session cookie with an empty, already-expired one."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value="",
        max_age=-1,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


# ----- Session resolution -----


def resolve_session_user(session: Session, raw: str | None) -> User:
    """
    Resolve the session cookie value to a User.

    Flow:
      1. Missing / empty cookie => "Authentication required".
      2. Not a plain decimal integer, or too large for a 64-bit id
         => "Invalid session".
      3. No such user (or the lookup failed) => "User not found".

    The user is read from the database on every call; nothing is cached,
    so a deleted user is locked out on their next request.

    Raises:
        AuthError(401): on any of the failures above.
    """
    if not raw:
        raise AuthError("Authentication required")

    if not (raw.isascii() and raw.isdigit()):
        raise AuthError("Invalid session")
    digits = raw.lstrip("0") or "0"
    if len(digits) > len(str(MAX_SESSION_USER_ID)) or int(digits) > MAX_SESSION_USER_ID:
        raise AuthError("Invalid session")

    try:
        user = repo.get_by_id(session, int(digits))
    except StorageError as e:
        logger.warning("Session lookup failed: %s", e)
        raise AuthError("User not found") from e

    if user is None:
        raise AuthError("User not found")
    return user


def get_current_user(
    session_cookie: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Optional authentication.

    Returns:
        User if the session cookie resolves, else None (the route still runs).
    """
    try:
        return resolve_session_user(session, session_cookie)
    except AuthError:
        return None


def require_auth(
    session_cookie: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME),
    session: Session = Depends(get_session),
) -> User:
    """
    Enforce authentication.

    If attached to a route, requests without a valid session are rejected
    with 401 before the route body runs.

    Returns:
        The authenticated User.

    Raises:
        AuthError(401): see `resolve_session_user`.
    """
    return resolve_session_user(session, session_cookie)
