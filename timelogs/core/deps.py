import uuid
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from timelogs.core.database import get_db
from timelogs.core.security import ACCESS, verify_token
from timelogs.models.user import User, UserRole
from timelogs.services.user import UserService

security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> User:
    """Resolve the bearer access token to a user"""
    subject = verify_token(credentials.credentials, token_type=ACCESS)
    if subject is None:
        raise _unauthorized("Could not validate credentials")
    try:
        user_id = uuid.UUID(subject)
    except ValueError:
        raise _unauthorized("Could not validate credentials")

    user = UserService.get_user(db, user_id=user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )
    return current_user


def require_roles(*roles: UserRole, detail: str) -> Callable[..., User]:
    """Build a dependency that admits only users with one of ``roles``"""
    def dependency(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return current_user
    return dependency


require_admin = require_roles(UserRole.ADMIN, detail="Admin access required")
require_admin_or_sales = require_roles(
    UserRole.ADMIN, UserRole.SALES, detail="Admin or sales access required"
)
