# app/schemas/user.py
from datetime import datetime

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class Unset:
    """Marker for "field not provided" in partial updates (distinct from "")."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset()


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty")
    return v


class UserCreate(SQLModel):
    """
    Payload for POST /v1/users.

    Validation rules:
      - email must be a valid EmailStr
      - name cannot be empty or whitespace
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr = Field(max_length=255)
    name: str = Field(max_length=255)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _strip_required(v)


class UserUpdate(SQLModel):
    """
    Partial profile update.

    Only `name` is editable. Leaving the key out means "keep the current
    value"; sending it (even as "" or null) means "set it", and the
    service rejects empty values. Use `name_update()` rather than reading
    `name` directly so the two cases stay distinct.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)

    def name_update(self) -> "str | None | Unset":
        if "name" not in self.model_fields_set:
            return UNSET
        return self.name


class UserRead(SQLModel):
    """Response schema returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    created_at: datetime
    updated_at: datetime


class GoogleUserInfo(SQLModel):
    """The subset of Google's userinfo payload we rely on."""

    email: str
    name: str = ""
