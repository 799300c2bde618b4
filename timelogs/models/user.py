import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Numeric, String, Uuid, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timelogs.core.config import settings
from timelogs.core.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    SALES = "sales"
    WORKER = "worker"


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    role = Column(Enum(UserRole), default=UserRole.WORKER, nullable=False)
    hourly_rate = Column(
        Numeric(10, 2),
        default=settings.DEFAULT_HOURLY_RATE,
        server_default=text(str(settings.DEFAULT_HOURLY_RATE)),
        nullable=False,
    )
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    organisation_id = Column(Uuid, ForeignKey("organisations.id"), nullable=True, index=True)
    organisation = relationship("Organisation", back_populates="users")

    # Relationships
    led_teams = relationship("Team", back_populates="team_leader")
    team_memberships = relationship(
        "TeamMember", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    time_logs = relationship(
        "TimeLog", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
