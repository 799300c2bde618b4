import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from timelogs.models.order import OrderStatus


class OrderBase(BaseModel):
    title: str
    customer_name: Optional[str] = None
    address: Optional[str] = None
    status: OrderStatus = OrderStatus.OPEN


class OrderCreate(OrderBase):
    pass


class Order(OrderBase):
    id: uuid.UUID
    organisation_id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
