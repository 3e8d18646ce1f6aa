# app/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Persistent user identity.

    Identity:
      - id: assigned by the database on insert, never changed afterwards
      - email: natural key used to match Google profiles (unique index)

    Rows are created on the first successful Google login for a new email
    (or through POST /v1/users), and the name follows the Google profile
    on later logins.
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Numeric id; also the value of the session cookie",
    )

    email: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="Email reported by Google",
    )

    name: str = Field(
        max_length=255,
        description="Display name",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp (UTC)",
    )
