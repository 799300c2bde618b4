import logging
import uuid
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from timelogs.core.config import settings
from timelogs.core.security import get_password_hash, verify_password
from timelogs.models.time_log import TimeLog
from timelogs.models.user import User
from timelogs.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def get_user(db: Session, user_id: uuid.UUID) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def get_users(
        db: Session, organisation_id: uuid.UUID, skip: int = 0, limit: int = 100
    ) -> List[User]:
        """Get users of one organisation with pagination"""
        return (
            db.query(User)
            .filter(User.organisation_id == organisation_id)
            .order_by(User.username)
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def create_user(db: Session, user: UserCreate, organisation_id: Optional[uuid.UUID]) -> User:
        """Create new user inside an organisation"""
        hourly_rate = user.hourly_rate if user.hourly_rate is not None else settings.DEFAULT_HOURLY_RATE
        db_user = User(
            email=user.email,
            username=user.username,
            hashed_password=get_password_hash(user.password),
            full_name=user.full_name,
            role=user.role,
            is_active=user.is_active,
            hourly_rate=hourly_rate,
            organisation_id=organisation_id,
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user

    @staticmethod
    def update_user(db: Session, user_id: uuid.UUID, user_update: UserUpdate) -> Optional[User]:
        """Update user"""
        db_user = db.query(User).filter(User.id == user_id).first()
        if not db_user:
            return None

        update_data = user_update.model_dump(exclude_unset=True)
        if update_data.get("hourly_rate") is None:
            # An explicit null keeps the current rate
            update_data.pop("hourly_rate", None)
        elif update_data["hourly_rate"] != db_user.hourly_rate:
            logger.info(
                "Hourly rate of user %s changed from %s to %s; existing time logs keep their rate",
                user_id,
                db_user.hourly_rate,
                update_data["hourly_rate"],
            )
        for field, value in update_data.items():
            setattr(db_user, field, value)

        db.commit()
        db.refresh(db_user)
        return db_user

    @staticmethod
    def delete_user(db: Session, user_id: uuid.UUID) -> bool:
        """Delete user; their time logs and team memberships go with them"""
        db_user = db.query(User).filter(User.id == user_id).first()
        if not db_user:
            return False

        log_count = db.query(func.count(TimeLog.id)).filter(TimeLog.user_id == user_id).scalar()
        db.delete(db_user)
        db.commit()
        logger.info("Deleted user %s together with %s time logs", user_id, log_count)
        return True

    @staticmethod
    def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
        """Authenticate user by username or email"""
        user = UserService.get_user_by_username(db, username)
        if not user:
            user = UserService.get_user_by_email(db, username)

        if not user or not verify_password(password, user.hashed_password):
            return None

        return user
