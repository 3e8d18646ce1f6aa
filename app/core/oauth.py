# app/core/oauth.py
"""
Google OAuth2 (authorization-code grant) client.

Thin wrapper around Authlib's requests-based OAuth2Session with Google's
fixed endpoints. Every outbound call carries an explicit timeout, and every
failure is reported as AuthError / ParseError so the HTTP layer can map it.
"""

import logging
from typing import Any

import requests
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.requests_client import OAuth2Session
from pydantic import ValidationError as PydanticValidationError

from app.core.config import Settings
from app.core.errors import AuthError, ParseError
from app.schemas.user import GoogleUserInfo

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

SCOPES = ("email", "profile")


class GoogleOAuthClient:
    """
    Google OAuth2 adapter.

    Usage:

        client = GoogleOAuthClient.from_settings(settings)
        url = client.get_auth_url(state)
        token = client.exchange_code(code)
        info = client.get_user_info(token)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        timeout: float = 10.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_url = redirect_url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleOAuthClient":
        return cls(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            redirect_url=settings.GOOGLE_REDIRECT_URL,
            timeout=settings.OAUTH_HTTP_TIMEOUT_SECONDS,
        )

    def _session(self, token: dict[str, Any] | None = None) -> OAuth2Session:
        return OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(SCOPES),
            redirect_uri=self.redirect_url,
            token=token,
            token_endpoint_auth_method="client_secret_post",
        )

    def get_auth_url(self, state: str) -> str:
        """Build Google's authorization URL for this client and `state`."""
        url, _ = self._session().create_authorization_url(
            GOOGLE_AUTHORIZE_URL,
            state=state,
        )
        return url

    def exchange_code(self, code: str) -> dict[str, Any]:
        """
        Exchange an authorization code for a token.

        Raises:
            AuthError: transport failure, OAuth error response or non-2xx.
        """
        try:
            token = self._session().fetch_token(
                GOOGLE_TOKEN_URL,
                code=code,
                timeout=self.timeout,
            )
        except (AuthlibBaseError, requests.RequestException, ValueError) as e:
            logger.warning("Google token exchange failed: %s", e)
            raise AuthError("Failed to exchange authorization code") from e

        if not token or "access_token" not in token:
            raise AuthError("Failed to exchange authorization code")
        return dict(token)

    def get_user_info(self, token: dict[str, Any]) -> GoogleUserInfo:
        """
        Fetch the profile (email + name) for a bearer token.

        Raises:
            AuthError: transport failure or non-2xx response.
            ParseError: body is not JSON or lacks an email.
        """
        try:
            resp = self._session(token=token).get(GOOGLE_USERINFO_URL, timeout=self.timeout)
        except (AuthlibBaseError, requests.RequestException) as e:
            logger.warning("Google userinfo request failed: %s", e)
            raise AuthError("Failed to get user information") from e

        if not 200 <= resp.status_code < 300:
            logger.warning("Google userinfo returned HTTP %s", resp.status_code)
            raise AuthError("Failed to get user information")

        try:
            data = resp.json()
        except ValueError as e:
            raise ParseError("Malformed user information from Google") from e

        if not isinstance(data, dict) or not isinstance(data.get("email"), str):
            raise ParseError("Malformed user information from Google")

        try:
            return GoogleUserInfo(email=data["email"], name=data.get("name") or "")
        except PydanticValidationError as e:
            raise ParseError("Malformed user information from Google") from e
