# app/routers/auth.py
import logging

from fastapi import APIRouter, Cookie, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlmodel import Session

from app.core.auth import (
    clear_session_cookie,
    get_current_user,
    require_auth,
    set_session_cookie,
)
from app.core.config import Settings
from app.core.errors import AuthError, ValidationError
from app.core.oauth import GoogleOAuthClient
from app.core.oauth_state import (
    STATE_COOKIE_NAME,
    clear_state_cookie,
    encode_state,
    new_state,
    set_state_cookie,
    verify_state,
)
from app.core.responses import success
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserRead
from app.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = UserService(repo)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_oauth_client(request: Request) -> GoogleOAuthClient:
    return request.app.state.oauth


# -------- Google OAuth2 --------


@router.get("/google/login")
def google_login(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
):
    """
    Start the Google login.

    Issues a fresh state, stores it (signed) in the `oauth_state` cookie
    and redirects the browser to Google's consent page.
    """
    state = new_state()
    response = RedirectResponse(
        oauth.get_auth_url(state),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
    set_state_cookie(response, encode_state(state, request.app.state.state_secret), settings)
    return response


@router.get("/google/callback")
def google_callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    state_cookie: str | None = Cookie(default=None, alias=STATE_COOKIE_NAME),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    oauth: GoogleOAuthClient = Depends(get_oauth_client),
):
    """
    Google redirects here after consent.

    Flow:
      1. Reject provider errors (e.g. access_denied) and missing codes.
      2. Verify the returned state against the state cookie.
      3. Exchange the code, fetch the profile.
      4. Get-or-create the local user.
      5. Set the session cookie and redirect to the frontend.
    """
    if error:
        logger.warning("Google returned an OAuth error: %s", error)
        raise AuthError(f"Google login failed: {error}")
    if not code:
        raise ValidationError("Authorization code not provided")

    verify_state(state_cookie, state, request.app.state.state_secret)

    token = oauth.exchange_code(code)
    info = oauth.get_user_info(token)
    user = service.get_or_create_from_oauth(session, info.email, info.name)

    response = RedirectResponse(
        settings.FRONTEND_URL,
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
    set_session_cookie(response, user.id, settings)
    clear_state_cookie(response, settings)
    logger.info("User id=%s logged in via Google", user.id)
    return response


# -------- Session --------


@router.get("/me")
def read_me(current_user: User | None = Depends(get_current_user)):
    """
    Return the authenticated user.

    Auth:
      - Optional session; answers 401 when nobody is logged in so the
        frontend can tell the two states apart.
    """
    if current_user is None:
        raise AuthError("Not authenticated")
    return success(UserRead.model_validate(current_user))


@router.post("/logout")
def logout(
    current_user: User = Depends(require_auth),
    settings: Settings = Depends(get_app_settings),
):
    """
    Clear the session cookie.

    Auth:
      - Requires a valid session.
    """
    response = success(message="Logged out successfully")
    clear_session_cookie(response, settings)
    logger.info("User id=%s logged out", current_user.id)
    return response
