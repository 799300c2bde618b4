import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timelogs.core.database import get_db
from timelogs.core.deps import get_current_active_user, require_admin
from timelogs.core.exceptions import InvalidStateError, NotFoundError, PermissionDeniedError
from timelogs.models.user import User as UserModel, UserRole
from timelogs.schemas.user import User, UserCreate, UserUpdate
from timelogs.services.user import UserService

router = APIRouter()


def _get_organisation_user(db: Session, user_id: uuid.UUID, current_user: UserModel) -> UserModel:
    user = UserService.get_user(db, user_id=user_id)
    if user is None:
        raise NotFoundError("User not found")
    if user.organisation_id is None or user.organisation_id != current_user.organisation_id:
        raise PermissionDeniedError()
    return user


@router.get("/", response_model=List[User])
async def read_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    """Users of the admin's organisation, by username"""
    return UserService.get_users(db, organisation_id=admin.organisation_id, skip=skip, limit=limit)


@router.get("/{user_id}", response_model=User)
async def read_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Own profile for everyone; admins also see their organisation"""
    if current_user.id == user_id:
        return current_user
    if current_user.role != UserRole.ADMIN:
        raise PermissionDeniedError()
    return _get_organisation_user(db, user_id, current_user)


@router.post("/", response_model=User)
async def create_user(
    user: UserCreate,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    """Add a user to the admin's organisation; the rate defaults to DEFAULT_HOURLY_RATE"""
    if UserService.get_user_by_email(db, user.email):
        raise InvalidStateError("Email already registered")
    if UserService.get_user_by_username(db, user.username):
        raise InvalidStateError("Username already registered")
    return UserService.create_user(db=db, user=user, organisation_id=admin.organisation_id)


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: uuid.UUID,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    _get_organisation_user(db, user_id, admin)
    return UserService.update_user(db, user_id=user_id, user_update=user_update)


@router.delete("/{user_id}")
async def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    """Remove a user; their time logs and team memberships go with them"""
    if admin.id == user_id:
        raise InvalidStateError("Cannot delete your own account")

    _get_organisation_user(db, user_id, admin)
    UserService.delete_user(db, user_id=user_id)
    return {"message": "User deleted successfully"}
