# app/routers/users.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.responses import paginated, success
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserCreate, UserRead, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])
profile_router = APIRouter(prefix="/profile", tags=["Profile"])

repo = UserRepository()
service = UserService(repo)


# -------- Self profile --------


@profile_router.get("")
def read_profile(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a valid session cookie.
    """
    return success(UserRead.model_validate(current_user))


@profile_router.patch("")
def update_profile(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Currently, only `name` is editable. Omitted fields are left unchanged.
    """
    user = service.update_user(session, current_user.id, payload)
    return success(UserRead.model_validate(user), message="Profile updated")


# -------- Users --------


@router.get("", dependencies=[Depends(require_auth)])
def list_users(
    session: Session = Depends(get_session),
    page: int = 1,
    limit: int = 10,
):
    """
    List users.

    Pagination via page/limit; page < 1 becomes 1, limit is kept within
    [1, 100] (default 10).
    """
    result = service.list_users(session, page=page, limit=limit)
    return paginated(
        [UserRead.model_validate(u) for u in result.items],
        page=result.page,
        limit=result.limit,
        total=result.total,
    )


@router.post("", dependencies=[Depends(require_auth)])
def create_user(
    payload: UserCreate,
    session: Session = Depends(get_session),
):
    """
    Create a user directly (outside the OAuth flow).

    Errors:
      - 400 if email/name is empty
      - 409 if the email already exists
    """
    user = service.create_user(session, payload.email, payload.name)
    return success(UserRead.model_validate(user), status_code=status.HTTP_201_CREATED)


@router.get("/{user_id}", dependencies=[Depends(require_auth)])
def get_user(
    user_id: int,
    session: Session = Depends(get_session),
):
    """
    Get a specific user by id.
    """
    return success(UserRead.model_validate(service.get_user(session, user_id)))
