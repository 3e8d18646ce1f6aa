# app/core/config.py
import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Recognized env vars (.env):
      - PORT, ENVIRONMENT
      - FRONTEND_URL (where the OAuth callback redirects to)
      - FRONTEND_PATH (built SPA assets served at "/")
      - DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME, DB_SSLMODE
      - GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, GOOGLE_REDIRECT_URL
      - COOKIE_SECURE
      - ALLOWED_ORIGINS (comma-separated CORS allow-list)

    Optional:
      - DATABASE_URL (overrides the DB_* parts, e.g. sqlite for local dev)
      - STATE_SECRET (signing key for the OAuth state cookie)
    """

    PROJECT_NAME: str = "Chronotes API"
    API_V1_STR: str = "/v1"

    # Server
    PORT: int = 8080
    ENVIRONMENT: str = "development"
    FRONTEND_URL: str = "http://localhost:2010"
    FRONTEND_PATH: str = "frontend/dist"

    # Postgres
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_NAME: str = "chronotes"
    DB_SSLMODE: str = "disable"
    DATABASE_URL: str | None = None

    # Connection pool: 25 open max, 10 kept idle, recycled hourly
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 15
    DB_POOL_RECYCLE_SECONDS: int = 3600
    DB_POOL_TIMEOUT_SECONDS: int = 30
    DB_STATEMENT_TIMEOUT_MS: int = 5000

    # Google OAuth2
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URL: str = ""
    OAUTH_HTTP_TIMEOUT_SECONDS: float = 10.0
    STATE_SECRET: str | None = None

    # Cookies / CORS
    COOKIE_SECURE: bool = False
    ALLOWED_ORIGINS: str = ""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy URL for the configured database.

        DATABASE_URL wins when set; otherwise the DB_* parts are assembled
        into a psycopg2 URL with the configured sslmode.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        url = URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
            query={"sslmode": self.DB_SSLMODE},
        )
        return url.render_as_string(hide_password=False)

    @property
    def allowed_origins(self) -> list[str]:
        """CORS allow-list; falls back to the frontend URL."""
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        return origins or [self.FRONTEND_URL]

    def warn_if_incomplete(self) -> None:
        """Log (but tolerate) configuration that will break parts of the app."""
        if not (
            self.GOOGLE_CLIENT_ID
            and self.GOOGLE_CLIENT_SECRET
            and self.GOOGLE_REDIRECT_URL
        ):
            logger.warning("Google OAuth credentials not set. Login will fail.")
        if not self.DATABASE_URL and not self.DB_NAME:
            logger.warning("Database name not set.")
        if not self.DATABASE_URL and not self.DB_PASSWORD and self.is_development:
            logger.warning("Database password not set.")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
