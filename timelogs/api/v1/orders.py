import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timelogs.core.database import get_db
from timelogs.core.deps import get_current_active_user, require_admin, require_admin_or_sales
from timelogs.core.exceptions import InvalidStateError, NotFoundError, PermissionDeniedError
from timelogs.models.order import OrderStatus
from timelogs.models.user import User as UserModel
from timelogs.schemas.order import Order, OrderCreate
from timelogs.services.order import OrderService

router = APIRouter()


def _get_organisation_order(db: Session, order_id: uuid.UUID, current_user: UserModel):
    order = OrderService.get_order(db, order_id=order_id)
    if order is None:
        raise NotFoundError("Order not found")
    if order.organisation_id != current_user.organisation_id:
        raise PermissionDeniedError()
    return order


@router.get("/", response_model=List[Order])
async def read_orders(
    skip: int = 0,
    limit: int = 100,
    status: Optional[OrderStatus] = None,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Orders of the current user's organisation"""
    return OrderService.get_orders(
        db, organisation_id=current_user.organisation_id, skip=skip, limit=limit, status=status
    )


@router.get("/{order_id}", response_model=Order)
async def read_order(
    order_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    return _get_organisation_order(db, order_id, current_user)


@router.post("/", response_model=Order)
async def create_order(
    order: OrderCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(require_admin_or_sales),
):
    if current_user.organisation_id is None:
        raise InvalidStateError("User does not belong to an organisation")
    return OrderService.create_order(db, order=order, organisation_id=current_user.organisation_id)


@router.delete("/{order_id}")
async def delete_order(
    order_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: UserModel = Depends(require_admin),
):
    """Delete an order together with its time logs"""
    _get_organisation_order(db, order_id, admin)
    OrderService.delete_order(db, order_id=order_id)
    return {"message": "Order deleted successfully"}
