# app/services/user_service.py
import logging
from dataclasses import dataclass

from sqlmodel import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import UNSET, UserUpdate

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def clamp_pagination(page: int | None, limit: int | None) -> tuple[int, int]:
    """
    Normalize paging input before it reaches the database.

      - page  < 1 (or missing)  -> 1
      - limit < 1 (or missing)  -> 10
      - limit > 100             -> 100
    """
    if page is None or page < 1:
        page = 1
    if limit is None or limit < 1:
        limit = DEFAULT_PAGE_LIMIT
    elif limit > MAX_PAGE_LIMIT:
        limit = MAX_PAGE_LIMIT
    return page, limit


def _default_name_from_email(email: str) -> str:
    """
    Derive a display name from the email when the provider did not
    send one.
    """
    if "@" in email:
        return email.split("@", 1)[0]
    return email


@dataclass
class UserPage:
    items: list[User]
    page: int
    limit: int
    total: int


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - validate required fields (non-empty email / name)
      - uniqueness on create (database unique index is the final arbiter)
      - get-or-create for the Google OAuth callback
      - pagination policy for listings

    Holds no state beyond its repository; every call hits the database.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Lookups -----

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        return self.repo.get_by_id(session, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        return self.repo.get_by_email(session, email)

    def get_user(self, session: Session, user_id: int) -> User:
        """
        Get a user by id.

        Raises:
            NotFoundError: if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    # ----- Create -----

    def create_user(self, session: Session, email: str, name: str) -> User:
        """
        Create a user.

        Rules:
          - email and name are required (whitespace-only counts as empty)
          - email must not already exist

        The lookup gives a friendly early error; the insert itself is still
        guarded by the unique index, so two racing creates yield one row and
        one ConflictError.

        Raises:
            ValidationError: if email or name is empty.
            ConflictError: if the email is already taken.
        """
        email = (email or "").strip()
        name = (name or "").strip()
        if not email:
            raise ValidationError("email is required")
        if not name:
            raise ValidationError("name is required")

        if self.repo.get_by_email(session, email) is not None:
            raise ConflictError(f"User with email {email} already exists")

        user = self.repo.create(session, email, name)
        logger.info("Created user id=%s email=%s", user.id, user.email)
        return user

    def get_or_create_from_oauth(self, session: Session, email: str, name: str) -> User:
        """
        Resolve the local user for a Google profile.

        Flow:
          1. Look up by email.
          2. Missing => create. If another request created it in the
             meantime (ConflictError), re-read it and continue.
          3. Present with a different name => overwrite the name
             (last write wins).
          4. Present with the same name => return as-is, no write.

        Calling this twice with the same arguments is idempotent.
        """
        email = (email or "").strip()
        if not email:
            raise ValidationError("email is required")
        name = (name or "").strip() or _default_name_from_email(email)

        user = self.repo.get_by_email(session, email)
        if user is None:
            try:
                user = self.repo.create(session, email, name)
                logger.info("Created user id=%s email=%s from OAuth profile", user.id, user.email)
                return user
            except ConflictError:
                user = self.repo.get_by_email(session, email)
                if user is None:
                    raise

        if user.name != name:
            logger.info("Updating name for user id=%s from OAuth profile", user.id)
            user = self.repo.update(session, user.id, name=name)
        return user

    # ----- Update / delete -----

    def update_user(self, session: Session, user_id: int, payload: UserUpdate) -> User:
        """
        Partial update. Fields left out of the payload are not touched.

        Raises:
            NotFoundError: if the user does not exist.
            ValidationError: if `name` is provided but empty.
        """
        self.get_user(session, user_id)

        name = payload.name_update()
        if name is not UNSET:
            name = (name or "").strip()
            if not name:
                raise ValidationError("name cannot be empty")

        return self.repo.update(session, user_id, name=name)

    def delete_user(self, session: Session, user_id: int) -> None:
        """Delete a user (administrative)."""
        self.get_user(session, user_id)
        self.repo.delete(session, user_id)
        logger.info("Deleted user id=%s", user_id)

    # ----- Listing -----

    def list_users(
        self,
        session: Session,
        page: int | None = 1,
        limit: int | None = DEFAULT_PAGE_LIMIT,
    ) -> UserPage:
        """List users, one page at a time (see `clamp_pagination`)."""
        page, limit = clamp_pagination(page, limit)
        items = self.repo.list(session, limit=limit, offset=(page - 1) * limit)
        total = self.repo.count(session)
        return UserPage(items=items, page=page, limit=limit, total=total)
