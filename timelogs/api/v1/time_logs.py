import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from timelogs.core.database import get_db
from timelogs.core.deps import get_current_active_user
from timelogs.models.user import User as UserModel
from timelogs.schemas.time_log import (
    TimeLog, TimeLogCreate, TimeLogUpdate, TimeLogStart, TimeLogStop, TimeLogApproval,
    TimeLogSummary
)
from timelogs.services.time_log import TimeLogService

router = APIRouter()


@router.get("/", response_model=List[TimeLog])
async def read_time_logs(
    skip: int = 0,
    limit: int = 100,
    user_id: Optional[uuid.UUID] = None,
    order_id: Optional[uuid.UUID] = None,
    is_approved: Optional[bool] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Get the time logs the current user may see, with optional filtering"""
    return TimeLogService.get_time_logs(
        db,
        current_user,
        skip=skip,
        limit=limit,
        user_id=user_id,
        order_id=order_id,
        is_approved=is_approved,
        start_date=start_date,
        end_date=end_date
    )


@router.get("/summary", response_model=TimeLogSummary)
async def get_time_log_summary(
    user_id: Optional[uuid.UUID] = None,
    order_id: Optional[uuid.UUID] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Worked time and amounts over the visible time logs"""
    return TimeLogService.get_time_log_summary(
        db,
        current_user,
        user_id=user_id,
        order_id=order_id,
        start_date=start_date,
        end_date=end_date
    )


@router.post("/", response_model=TimeLog, status_code=status.HTTP_201_CREATED)
async def create_time_log(
    time_log: TimeLogCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Record a work session"""
    return TimeLogService.create_time_log(db, current_user, time_log)


@router.post("/start", response_model=TimeLog, status_code=status.HTTP_201_CREATED)
async def start_time_log(
    start_data: TimeLogStart,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Start a work session now"""
    return TimeLogService.start_time_log(db, current_user, start_data)


@router.get("/{time_log_id}", response_model=TimeLog)
async def read_time_log(
    time_log_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Get time log by ID"""
    return TimeLogService.get_visible_time_log(db, current_user, time_log_id)


@router.put("/{time_log_id}", response_model=TimeLog)
async def update_time_log(
    time_log_id: uuid.UUID,
    time_log_update: TimeLogUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Update time log"""
    return TimeLogService.update_time_log(db, current_user, time_log_id, time_log_update)


@router.post("/{time_log_id}/stop", response_model=TimeLog)
async def stop_time_log(
    time_log_id: uuid.UUID,
    stop_data: Optional[TimeLogStop] = None,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Stop an open work session now"""
    return TimeLogService.stop_time_log(db, current_user, time_log_id, stop_data)


@router.post("/{time_log_id}/approve", response_model=TimeLog)
async def approve_time_log(
    time_log_id: uuid.UUID,
    approval: Optional[TimeLogApproval] = None,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
):
    """Approve (or withdraw approval of) a time log"""
    is_approved = approval.is_approved if approval else True
    return TimeLogService.approve_time_log(db, current_user, time_log_id, is_approved=is_approved)
