# app/main.py
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi import FastAPI, status
from sqlalchemy.engine import Engine

from app.core.config import Settings, get_settings
from app.core.oauth import GoogleOAuthClient
from app.core.oauth_state import resolve_state_secret
from app.core.responses import register_exception_handlers
from app.database import build_engine, create_db_and_tables

# Routers
from app.routers.health import router as health_router
from app.routers.auth import router as auth_router
from app.routers.users import router as users_router, profile_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")

FRONTEND_MISSING_HINT = (
    "frontend not built - run `npm run build` in the frontend directory\n"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - Dispose of the connection pool.
    """
    engine: Engine = app.state.engine
    logger.info("🔄 Startup: Connecting to database...")
    try:
        create_db_and_tables(engine)
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise
    yield
    engine.dispose()


def _mount_frontend(app: FastAPI, frontend_path: str) -> None:
    """
    Serve the built SPA at "/" when it exists; otherwise answer every
    unmatched request, whatever the method, with a 404 telling the
    developer to build it.
    """
    path = Path(frontend_path) if frontend_path else None
    if path is not None and path.is_dir():
        app.mount("/", StaticFiles(directory=path, html=True), name="frontend")
        logger.info(f"Serving frontend from {path}")
        return

    logger.warning(f"Frontend directory {frontend_path!r} not found; static assets disabled.")

    @app.api_route(
        "/{full_path:path}",
        methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        include_in_schema=False,
    )
    def frontend_missing(full_path: str):
        return PlainTextResponse(FRONTEND_MISSING_HINT, status_code=status.HTTP_404_NOT_FOUND)


def create_app(
    settings: Settings | None = None,
    engine: Engine | None = None,
    oauth_client: GoogleOAuthClient | None = None,
) -> FastAPI:
    """
    Build the application and its context.

    Everything shared between requests (settings, DB engine, OAuth client,
    state signing key) lives on `app.state`; dependencies read it from
    the request. Tests pass their own engine / OAuth client.
    """
    settings = settings or get_settings()
    settings.warn_if_incomplete()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine or build_engine(settings)
    app.state.oauth = oauth_client or GoogleOAuthClient.from_settings(settings)
    app.state.state_secret = resolve_state_secret(settings)

    # --- CORS configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
    )

    register_exception_handlers(app)

    # Versioned API prefix, e.g. /v1
    app.include_router(health_router, prefix=settings.API_V1_STR)
    app.include_router(auth_router, prefix=settings.API_V1_STR)
    app.include_router(users_router, prefix=settings.API_V1_STR)
    app.include_router(profile_router, prefix=settings.API_V1_STR)

    # Must come last: "/" catches everything the API did not.
    _mount_frontend(app, settings.FRONTEND_PATH)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().PORT)
