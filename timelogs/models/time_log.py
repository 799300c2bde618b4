import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from timelogs.core.database import Base
from timelogs.models.types import JSONList


class TimeLog(Base):
    """One work session of a worker on an order.

    ``total_amount`` and ``updated_at`` are maintained by the mapper events in
    ``timelogs.models.events``; callers never set them.
    """

    __tablename__ = "time_logs"
    __table_args__ = (
        Index("idx_time_logs_user_id", "user_id"),
        Index("idx_time_logs_order_id", "order_id"),
        Index("idx_time_logs_start_time", "start_time"),
        Index("idx_time_logs_is_approved", "is_approved"),
        Index("idx_time_logs_user_date", "user_id", "start_time"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    order = relationship("Order", back_populates="time_logs")

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user = relationship("User", back_populates="time_logs")

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    break_duration = Column(Integer, default=0, nullable=False)  # in minutes
    notes = Column(Text, nullable=True)
    is_approved = Column(Boolean, default=False, nullable=False)

    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), default=0)

    location_lat = Column(Numeric(10, 6), nullable=True)
    location_lng = Column(Numeric(10, 6), nullable=True)
    photo_urls = Column(JSONList, default=list, nullable=False)
    materials_used = Column(JSONList, default=list, nullable=False)
    travel_time_minutes = Column(Integer, default=0, nullable=False)
    work_type = Column(Text, nullable=True)
    weather_conditions = Column(Text, nullable=True)

    # Audit fields
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_open(self) -> bool:
        return self.end_time is None
