import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timelogs.core.database import Base


class OrderStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    customer_name = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    status = Column(Enum(OrderStatus), default=OrderStatus.OPEN, nullable=False)

    organisation_id = Column(Uuid, ForeignKey("organisations.id"), nullable=False, index=True)
    organisation = relationship("Organisation", back_populates="orders")

    # Audit fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    time_logs = relationship(
        "TimeLog", back_populates="order", cascade="all, delete-orphan", passive_deletes=True
    )
