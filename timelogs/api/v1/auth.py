import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timelogs.core.database import get_db
from timelogs.core.deps import get_current_active_user
from timelogs.core.security import REFRESH, create_access_token, create_refresh_token, verify_token
from timelogs.models.user import User as UserModel
from timelogs.schemas.auth import LoginRequest, RefreshTokenRequest, Token
from timelogs.schemas.user import User
from timelogs.services.user import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _issue_tokens(user: UserModel) -> Token:
    subject = str(user.id)
    return Token(
        access_token=create_access_token(subject=subject),
        refresh_token=create_refresh_token(subject=subject),
    )


@router.post("/login", response_model=Token)
async def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db),
):
    """Exchange username (or email) and password for an access and refresh token"""
    user = UserService.authenticate_user(db, login_data.username, login_data.password)
    if not user:
        logger.info("Failed login for %s", login_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )

    logger.info("User %s logged in", user.id)
    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    db: Session = Depends(get_db),
):
    """Trade a refresh token for a fresh token pair"""
    subject = verify_token(refresh_data.refresh_token, token_type=REFRESH)
    user = None
    if subject is not None:
        try:
            user = UserService.get_user(db, user_id=uuid.UUID(subject))
        except ValueError:
            user = None

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return _issue_tokens(user)


@router.get("/me", response_model=User)
async def read_users_me(current_user: UserModel = Depends(get_current_active_user)):
    return current_user


@router.post("/logout")
async def logout():
    """Tokens are stateless; clients drop them and they expire on their own"""
    return {"message": "Successfully logged out"}
