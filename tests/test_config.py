import logging

from app.core.config import Settings


def _settings(**overrides) -> Settings:
    overrides.setdefault("DATABASE_URL", None)
    return Settings(_env_file=None, **overrides)


def test_database_url_from_parts():
    s = _settings(
        DB_HOST="db.internal",
        DB_PORT=6543,
        DB_USER="chronotes",
        DB_PASSWORD="p@ss",
        DB_NAME="notes",
        DB_SSLMODE="require",
    )

    url = s.database_url
    assert url.startswith("postgresql+psycopg2://chronotes:")
    assert "@db.internal:6543/notes" in url
    assert url.endswith("sslmode=require")


def test_database_url_override_wins():
    assert _settings(DATABASE_URL="sqlite:///dev.sqlite3").database_url == "sqlite:///dev.sqlite3"


def test_allowed_origins_parsing():
    s = _settings(ALLOWED_ORIGINS=" http://a.test , http://b.test,,")
    assert s.allowed_origins == ["http://a.test", "http://b.test"]


def test_allowed_origins_default_to_frontend_url():
    s = _settings(ALLOWED_ORIGINS="", FRONTEND_URL="http://localhost:2010")
    assert s.allowed_origins == ["http://localhost:2010"]


def test_environment_from_env(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("COOKIE_SECURE", "true")
    monkeypatch.setenv("PORT", "9000")

    s = _settings()

    assert s.is_production and not s.is_development
    assert s.COOKIE_SECURE is True
    assert s.PORT == 9000


def test_missing_oauth_credentials_only_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="app.core.config"):
        _settings(GOOGLE_CLIENT_ID="").warn_if_incomplete()

    assert "Google OAuth credentials not set" in caplog.text
