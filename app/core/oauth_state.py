# app/core/oauth_state.py
import logging
import secrets
from datetime import datetime, timedelta, timezone

from fastapi import Response
from jose import jwt, JWTError

from app.core.config import Settings
from app.core.errors import AuthError

logger = logging.getLogger(__name__)

STATE_COOKIE_NAME = "oauth_state"
STATE_COOKIE_PATH = "/v1/auth/google"
STATE_TTL = timedelta(minutes=10)
STATE_ALG = "HS256"


def resolve_state_secret(settings: Settings) -> str:
    """
    Signing key for the state cookie.

    Falls back to a per-process random key, which only works while a
    single process serves both the login and the callback.
    """
    if settings.STATE_SECRET:
        return settings.STATE_SECRET
    logger.warning("STATE_SECRET not set; using a random per-process key.")
    return secrets.token_urlsafe(32)


def new_state() -> str:
    """Unpredictable state value for one login attempt."""
    return secrets.token_urlsafe(32)


def encode_state(state: str, secret: str) -> str:
    """Sign `state` into a short-lived JWT for the state cookie."""
    claims = {
        "state": state,
        "exp": datetime.now(timezone.utc) + STATE_TTL,
    }
    return jwt.encode(claims, secret, algorithm=STATE_ALG)


def verify_state(cookie_value: str | None, received_state: str | None, secret: str) -> None:
    """
    Check the `state` returned by Google against the one we issued.

    Verification:
      - cookie present, signature valid, not expired
      - state query param present and equal (constant-time compare)

    Raises:
        AuthError(401): on any failure.
    """
    if not cookie_value or not received_state:
        raise AuthError("Missing OAuth state")

    try:
        claims = jwt.decode(cookie_value, secret, algorithms=[STATE_ALG])
    except JWTError as e:
        logger.warning("Rejected OAuth state cookie: %s", e)
        raise AuthError("Invalid OAuth state") from e

    expected = claims.get("state")
    if not isinstance(expected, str) or not secrets.compare_digest(
        expected.encode(), received_state.encode()
    ):
        logger.warning("OAuth state mismatch on callback")
        raise AuthError("Invalid OAuth state")


def set_state_cookie(response: Response, value: str, settings: Settings) -> None:
    response.set_cookie(
        key=STATE_COOKIE_NAME,
        value=value,
        max_age=int(STATE_TTL.total_seconds()),
        path=STATE_COOKIE_PATH,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


def clear_state_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=STATE_COOKIE_NAME,
        path=STATE_COOKIE_PATH,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
