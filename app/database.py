# app/database.py
from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import Settings

# ---------------------------------------------------------
# Postgres connection pool
#
# - pool_size=10       : connections kept open while idle
# - max_overflow=15    : burst up to 25 open connections in total
# - pool_recycle=3600  : recycle connections after an hour
# - pool_pre_ping=True : validate connections before using them
# - statement_timeout  : per-statement deadline enforced by Postgres
#
# SQLite (local dev / tests via DATABASE_URL) has no server-side
# pool or statement_timeout, so only the thread check is relaxed.
# ---------------------------------------------------------


def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    Called once per application (see `create_app`); the engine is the
    only shared mutable resource and relies on the pool's own locking.
    """
    url = settings.database_url

    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
        pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
        connect_args={
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    )


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    # Import models so SQLModel metadata is populated before create_all()
    from app.models import user as _user_models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """
    FastAPI dependency that yields a SQLModel Session bound to the
    application's engine.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(request.app.state.engine) as session:
        yield session
