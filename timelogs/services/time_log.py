import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session

from timelogs.core.amount import CENTS, SIXTY, session_minutes, to_utc, worked_minutes
from timelogs.core.exceptions import InvalidStateError, NotFoundError, PermissionDeniedError
from timelogs.core.policy import (
    APPROVAL_FIELDS,
    TimeLogAction,
    authorize_time_log,
    can_access_time_log,
    is_owner,
    visible_time_logs_filter,
)
from timelogs.models.order import Order
from timelogs.models.time_log import TimeLog
from timelogs.models.user import User
from timelogs.schemas.time_log import TimeLogCreate, TimeLogStart, TimeLogStop, TimeLogUpdate

logger = logging.getLogger(__name__)


class TimeLogService:
    @staticmethod
    def get_time_log(db: Session, time_log_id: uuid.UUID) -> Optional[TimeLog]:
        """Get time log by ID, without any access check"""
        return db.query(TimeLog).filter(TimeLog.id == time_log_id).first()

    @staticmethod
    def get_visible_time_log(db: Session, actor: User, time_log_id: uuid.UUID) -> TimeLog:
        """Get a time log the actor is allowed to read"""
        time_log = TimeLogService.get_time_log(db, time_log_id)
        if time_log is None:
            raise NotFoundError("Time log not found")
        authorize_time_log(db, actor, time_log, TimeLogAction.READ)
        return time_log

    @staticmethod
    def _visible_query(
        db: Session,
        actor: User,
        user_id: Optional[uuid.UUID] = None,
        order_id: Optional[uuid.UUID] = None,
        is_approved: Optional[bool] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Query:
        query = db.query(TimeLog).filter(visible_time_logs_filter(actor))

        if user_id:
            query = query.filter(TimeLog.user_id == user_id)
        if order_id:
            query = query.filter(TimeLog.order_id == order_id)
        if is_approved is not None:
            query = query.filter(TimeLog.is_approved == is_approved)
        if start_date:
            query = query.filter(TimeLog.start_time >= to_utc(start_date))
        if end_date:
            end_date = to_utc(end_date)
            query = query.filter(
                or_(
                    TimeLog.end_time <= end_date,
                    and_(TimeLog.end_time.is_(None), TimeLog.start_time <= end_date)
                )
            )
        return query

    @staticmethod
    def get_time_logs(
        db: Session,
        actor: User,
        skip: int = 0,
        limit: int = 100,
        user_id: Optional[uuid.UUID] = None,
        order_id: Optional[uuid.UUID] = None,
        is_approved: Optional[bool] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[TimeLog]:
        """Get the time logs visible to the actor, newest first"""
        query = TimeLogService._visible_query(
            db,
            actor,
            user_id=user_id,
            order_id=order_id,
            is_approved=is_approved,
            start_date=start_date,
            end_date=end_date,
        )
        return query.order_by(TimeLog.start_time.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def create_time_log(db: Session, actor: User, time_log: TimeLogCreate) -> TimeLog:
        """Create a time log for the actor"""
        data = time_log.model_dump(exclude={"user_id", "hourly_rate"})
        user_id = time_log.user_id or actor.id
        return TimeLogService._insert(db, actor, user_id, time_log.hourly_rate, data)

    @staticmethod
    def start_time_log(db: Session, actor: User, start_data: TimeLogStart) -> TimeLog:
        """Open a new session starting now"""
        data = start_data.model_dump(exclude={"hourly_rate"})
        data["start_time"] = datetime.now(timezone.utc)
        return TimeLogService._insert(db, actor, actor.id, start_data.hourly_rate, data)

    @staticmethod
    def _insert(
        db: Session,
        actor: User,
        user_id: uuid.UUID,
        hourly_rate: Optional[Decimal],
        data: Dict[str, Any],
    ) -> TimeLog:
        db_time_log = TimeLog(user_id=user_id, **data)
        authorize_time_log(db, actor, db_time_log, TimeLogAction.CREATE)

        if db.query(Order.id).filter(Order.id == db_time_log.order_id).first() is None:
            raise NotFoundError("Order not found")

        if hourly_rate is None:
            # Owner-only creation means the worker is the actor
            hourly_rate = actor.hourly_rate if actor.hourly_rate is not None else Decimal("0")
        db_time_log.hourly_rate = hourly_rate

        db.add(db_time_log)
        db.commit()
        db.refresh(db_time_log)
        logger.info(
            "Created time log %s for user %s on order %s",
            db_time_log.id,
            db_time_log.user_id,
            db_time_log.order_id,
        )
        return db_time_log

    @staticmethod
    def _apply_update(db: Session, actor: User, db_time_log: TimeLog, changes: Dict[str, Any]) -> TimeLog:
        authorize_time_log(db, actor, db_time_log, TimeLogAction.UPDATE)

        if not is_owner(actor, db_time_log):
            restricted = sorted(set(changes) - APPROVAL_FIELDS)
            if restricted:
                logger.warning(
                    "User %s tried to change %s on time log %s of user %s",
                    actor.id,
                    ", ".join(restricted),
                    db_time_log.id,
                    db_time_log.user_id,
                )
                raise PermissionDeniedError("Only the approval state of another worker's time log can be changed")

        new_order_id = changes.get("order_id")
        if new_order_id is not None and new_order_id != db_time_log.order_id:
            if db.query(Order.id).filter(Order.id == new_order_id).first() is None:
                raise NotFoundError("Order not found")

        start_time = changes.get("start_time", db_time_log.start_time)
        end_time = changes.get("end_time", db_time_log.end_time)
        if start_time is not None and end_time is not None and session_minutes(start_time, end_time) < 0:
            raise InvalidStateError("end_time must not be before start_time")

        for field, value in changes.items():
            setattr(db_time_log, field, value)

        # The changed row must still be one the actor may update
        if not can_access_time_log(db, actor, db_time_log, TimeLogAction.UPDATE):
            db.rollback()
            logger.warning("User %s tried to move time log %s outside their access", actor.id, db_time_log.id)
            raise PermissionDeniedError("Not enough permissions for the updated time log")

        db.commit()
        db.refresh(db_time_log)
        return db_time_log

    @staticmethod
    def update_time_log(
        db: Session, actor: User, time_log_id: uuid.UUID, time_log_update: TimeLogUpdate
    ) -> TimeLog:
        """Update time log fields; the total is recomputed on flush"""
        db_time_log = TimeLogService.get_time_log(db, time_log_id)
        if db_time_log is None:
            raise NotFoundError("Time log not found")

        changes = time_log_update.model_dump(exclude_unset=True)
        return TimeLogService._apply_update(db, actor, db_time_log, changes)

    @staticmethod
    def stop_time_log(
        db: Session, actor: User, time_log_id: uuid.UUID, stop_data: Optional[TimeLogStop] = None
    ) -> TimeLog:
        """Close an open session now"""
        db_time_log = TimeLogService.get_time_log(db, time_log_id)
        if db_time_log is None:
            raise NotFoundError("Time log not found")
        authorize_time_log(db, actor, db_time_log, TimeLogAction.UPDATE)
        if db_time_log.end_time is not None:
            raise InvalidStateError("Time log is already stopped")

        changes = stop_data.model_dump(exclude_none=True) if stop_data else {}
        changes["end_time"] = datetime.now(timezone.utc)
        stopped = TimeLogService._apply_update(db, actor, db_time_log, changes)
        logger.info("Stopped time log %s, total amount %s", stopped.id, stopped.total_amount)
        return stopped

    @staticmethod
    def approve_time_log(
        db: Session, actor: User, time_log_id: uuid.UUID, is_approved: bool = True
    ) -> TimeLog:
        """Set the approval state of a time log"""
        db_time_log = TimeLogService.get_time_log(db, time_log_id)
        if db_time_log is None:
            raise NotFoundError("Time log not found")

        approved = TimeLogService._apply_update(db, actor, db_time_log, {"is_approved": is_approved})
        logger.info(
            "User %s set approval of time log %s to %s", actor.id, approved.id, approved.is_approved
        )
        return approved

    @staticmethod
    def get_time_log_summary(
        db: Session,
        actor: User,
        user_id: Optional[uuid.UUID] = None,
        order_id: Optional[uuid.UUID] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> dict:
        """Totals over the time logs visible to the actor"""
        time_logs = TimeLogService._visible_query(
            db,
            actor,
            user_id=user_id,
            order_id=order_id,
            start_date=start_date,
            end_date=end_date,
        ).all()

        minutes = sum(
            (worked_minutes(log.start_time, log.end_time, log.break_duration) for log in time_logs),
            Decimal(0),
        )
        total_amount = sum((log.total_amount or Decimal(0) for log in time_logs), Decimal("0.00"))
        approved_amount = sum(
            (log.total_amount or Decimal(0) for log in time_logs if log.is_approved), Decimal("0.00")
        )

        return {
            "total_logs": len(time_logs),
            "open_sessions": sum(1 for log in time_logs if log.end_time is None),
            "approved_logs": sum(1 for log in time_logs if log.is_approved),
            "worked_minutes": minutes.quantize(CENTS),
            "worked_hours": (minutes / SIXTY).quantize(CENTS),
            "total_amount": total_amount.quantize(CENTS),
            "approved_amount": approved_amount.quantize(CENTS),
            "pending_amount": (total_amount - approved_amount).quantize(CENTS),
        }
