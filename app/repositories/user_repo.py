# app/repositories/user_repo.py
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import ConflictError, NotFoundError, StorageError
from app.models.user import User, utcnow
from app.schemas.user import UNSET, Unset

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries), one round trip each
      - No FastAPI, no HTTP, no business logic
      - Translate driver errors: unique violations -> ConflictError,
        everything else -> StorageError

    Lookups return None for "not found"; mutations on a missing id raise
    NotFoundError.
    """

    # ----- Queries -----

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        """Return a User by primary key, or None if not found."""
        try:
            return session.get(User, user_id)
        except SQLAlchemyError as e:
            raise self._storage_error(session, "get_by_id", e) from e

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        try:
            return session.exec(stmt).first()
        except SQLAlchemyError as e:
            raise self._storage_error(session, "get_by_email", e) from e

    def list(self, session: Session, limit: int = 10, offset: int = 0) -> list[User]:
        """
        Paginated user listing, ordered by id.

        Args:
            limit: max number of rows returned
            offset: rows to skip

        Returns:
            List[User]
        """
        stmt = select(User).order_by(User.id).offset(offset).limit(limit)
        try:
            return list(session.exec(stmt).all())
        except SQLAlchemyError as e:
            raise self._storage_error(session, "list", e) from e

    def count(self, session: Session) -> int:
        stmt = select(func.count()).select_from(User)
        try:
            return session.exec(stmt).one()
        except SQLAlchemyError as e:
            raise self._storage_error(session, "count", e) from e

    # ----- Mutations -----

    def create(self, session: Session, email: str, name: str) -> User:
        """
        Insert a new User and return the persisted row.

        The unique index on email is the source of truth for duplicates:
        the insert is attempted directly and a violation is reported as
        ConflictError, so concurrent creates cannot both succeed.

        Raises:
            ConflictError: if the email is already stored.
            StorageError: on any other database failure.
        """
        user = User(email=email, name=name)
        session.add(user)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise ConflictError(f"User with email {email} already exists") from e
        except SQLAlchemyError as e:
            raise self._storage_error(session, "create", e) from e
        session.refresh(user)
        return user

    def update(
        self,
        session: Session,
        user_id: int,
        name: str | Unset = UNSET,
    ) -> User:
        """
        Apply the provided fields to an existing User.

        Unset fields are left alone; `updated_at` is always refreshed.

        Raises:
            NotFoundError: if no row has this id.
        """
        user = self.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError("User not found")

        if name is not UNSET:
            user.name = name
        user.updated_at = utcnow()

        session.add(user)
        try:
            session.commit()
        except SQLAlchemyError as e:
            raise self._storage_error(session, "update", e) from e
        session.refresh(user)
        return user

    def delete(self, session: Session, user_id: int) -> None:
        """
        Delete a User.

        Raises:
            NotFoundError: if no row has this id.
        """
        user = self.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError("User not found")

        session.delete(user)
        try:
            session.commit()
        except SQLAlchemyError as e:
            raise self._storage_error(session, "delete", e) from e

    # ----- helpers -----

    @staticmethod
    def _storage_error(session: Session, op: str, exc: SQLAlchemyError) -> StorageError:
        session.rollback()
        logger.exception("users.%s failed", op)
        return StorageError(f"users.{op} failed: {exc}")
