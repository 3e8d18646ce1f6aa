"""
Shared fixtures.

Every app under test gets its own in-memory SQLite engine (StaticPool, so
the TestClient's worker threads all see the same database) and a fake
Google client: nothing here talks to Postgres or Google.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# app.main builds a module-level app on import; keep it off Postgres.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STATE_SECRET", "tests-state-secret")
os.environ.setdefault("FRONTEND_PATH", str(ROOT / "tests" / "no-frontend-here"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.core.config import Settings
from app.core.errors import AuthError
from app.core.oauth import GoogleOAuthClient
from app.database import create_db_and_tables
from app.main import create_app
from app.models.user import User
from app.schemas.user import GoogleUserInfo

CLIENT_ID = "test-client-id.apps.googleusercontent.com"
REDIRECT_URL = "http://testserver/v1/auth/google/callback"
FRONTEND_URL = "http://localhost:2010"


class FakeGoogleOAuthClient(GoogleOAuthClient):
    """Real URL building, canned token exchange and profile."""

    def __init__(self):
        super().__init__(CLIENT_ID, "test-client-secret", REDIRECT_URL)
        self.profile = GoogleUserInfo(email="ada@example.com", name="Ada Lovelace")
        self.fail_exchange = False
        self.codes: list[str] = []

    def exchange_code(self, code: str) -> dict:
        self.codes.append(code)
        if self.fail_exchange:
            raise AuthError("Failed to exchange authorization code")
        return {"access_token": f"token-for-{code}", "token_type": "Bearer"}

    def get_user_info(self, token: dict) -> GoogleUserInfo:
        return self.profile


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        GOOGLE_CLIENT_ID=CLIENT_ID,
        GOOGLE_CLIENT_SECRET="test-client-secret",
        GOOGLE_REDIRECT_URL=REDIRECT_URL,
        FRONTEND_URL=FRONTEND_URL,
        FRONTEND_PATH=str(tmp_path / "missing-dist"),
        STATE_SECRET="tests-state-secret",
        COOKIE_SECURE=False,
    )


@pytest.fixture
def oauth_client() -> FakeGoogleOAuthClient:
    return FakeGoogleOAuthClient()


@pytest.fixture
def app(settings, engine, oauth_client):
    return create_app(settings=settings, engine=engine, oauth_client=oauth_client)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_user(session):
    def _make(email: str = "grace@example.com", name: str = "Grace Hopper") -> User:
        user = User(email=email, name=name)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def login(client):
    """Attach a session cookie for `user` to the test client."""

    def _login(user: User) -> None:
        client.cookies.set("session", str(user.id))

    return _login
