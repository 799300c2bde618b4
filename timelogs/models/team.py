import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timelogs.core.database import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)

    organisation_id = Column(Uuid, ForeignKey("organisations.id"), nullable=False, index=True)
    organisation = relationship("Organisation", back_populates="teams")

    team_leader_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    team_leader = relationship("User", back_populates="led_teams")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship(
        "TeamMember", back_populates="team", cascade="all, delete-orphan", passive_deletes=True
    )


class TeamMember(Base):
    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="unique_team_member"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    is_active = Column(Boolean, default=True, nullable=False)

    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    team = relationship("Team", back_populates="members")

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user = relationship("User", back_populates="team_memberships")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
