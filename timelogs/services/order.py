import logging
import uuid
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from timelogs.models.order import Order, OrderStatus
from timelogs.models.time_log import TimeLog
from timelogs.schemas.order import OrderCreate

logger = logging.getLogger(__name__)


class OrderService:
    @staticmethod
    def get_order(db: Session, order_id: uuid.UUID) -> Optional[Order]:
        """Get order by ID"""
        return db.query(Order).filter(Order.id == order_id).first()

    @staticmethod
    def get_orders(
        db: Session,
        organisation_id: uuid.UUID,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        """Get orders of one organisation with optional status filter"""
        query = db.query(Order).filter(Order.organisation_id == organisation_id)
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.created_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def create_order(db: Session, order: OrderCreate, organisation_id: uuid.UUID) -> Order:
        """Create new order"""
        db_order = Order(**order.model_dump(), organisation_id=organisation_id)
        db.add(db_order)
        db.commit()
        db.refresh(db_order)
        return db_order

    @staticmethod
    def delete_order(db: Session, order_id: uuid.UUID) -> bool:
        """Delete order; its time logs go with it"""
        db_order = db.query(Order).filter(Order.id == order_id).first()
        if not db_order:
            return False

        log_count = db.query(func.count(TimeLog.id)).filter(TimeLog.order_id == order_id).scalar()
        db.delete(db_order)
        db.commit()
        logger.info("Deleted order %s together with %s time logs", order_id, log_count)
        return True
