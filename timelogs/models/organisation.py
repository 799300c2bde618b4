import uuid

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timelogs.core.database import Base


class Organisation(Base):
    __tablename__ = "organisations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    users = relationship("User", back_populates="organisation")
    orders = relationship("Order", back_populates="organisation")
    teams = relationship("Team", back_populates="organisation")
