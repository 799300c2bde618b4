import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from timelogs.core.amount import session_minutes, to_utc

Latitude = Optional[Decimal]
Longitude = Optional[Decimal]


class MaterialEntry(BaseModel):
    name: str
    quantity: float = 1
    unit: Optional[str] = None
    unit_price: Optional[float] = None

    model_config = ConfigDict(extra="allow")


def _utc_or_none(value: Optional[datetime]) -> Optional[datetime]:
    return to_utc(value) if value is not None else None


def _check_span(start_time: Optional[datetime], end_time: Optional[datetime]) -> None:
    if start_time is not None and end_time is not None and session_minutes(start_time, end_time) < 0:
        raise ValueError("end_time must not be before start_time")


class TimeLogDetails(BaseModel):
    notes: Optional[str] = None
    location_lat: Latitude = Field(default=None, ge=-90, le=90)
    location_lng: Longitude = Field(default=None, ge=-180, le=180)
    work_type: Optional[str] = None
    weather_conditions: Optional[str] = None


class TimeLogCreate(TimeLogDetails):
    order_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None  # defaults to the caller
    start_time: datetime
    end_time: Optional[datetime] = None
    break_duration: int = Field(default=0, ge=0)
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    photo_urls: List[str] = []
    materials_used: List[MaterialEntry] = []
    travel_time_minutes: int = Field(default=0, ge=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalise_to_utc(cls, v):
        return _utc_or_none(v)

    @model_validator(mode="after")
    def check_span(self):
        _check_span(self.start_time, self.end_time)
        return self


class TimeLogStart(TimeLogDetails):
    order_id: uuid.UUID
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)


class TimeLogStop(BaseModel):
    break_duration: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    photo_urls: Optional[List[str]] = None
    materials_used: Optional[List[MaterialEntry]] = None
    travel_time_minutes: Optional[int] = Field(default=None, ge=0)
    weather_conditions: Optional[str] = None


class TimeLogUpdate(BaseModel):
    user_id: Optional[uuid.UUID] = None
    order_id: Optional[uuid.UUID] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    break_duration: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    is_approved: Optional[bool] = None
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    location_lat: Latitude = Field(default=None, ge=-90, le=90)
    location_lng: Longitude = Field(default=None, ge=-180, le=180)
    photo_urls: Optional[List[str]] = None
    materials_used: Optional[List[MaterialEntry]] = None
    travel_time_minutes: Optional[int] = Field(default=None, ge=0)
    work_type: Optional[str] = None
    weather_conditions: Optional[str] = None

    @field_validator(
        "user_id",
        "order_id",
        "start_time",
        "break_duration",
        "is_approved",
        "hourly_rate",
        "photo_urls",
        "materials_used",
        "travel_time_minutes",
    )
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field may not be null")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def normalise_to_utc(cls, v):
        return _utc_or_none(v)

    @model_validator(mode="after")
    def check_span(self):
        _check_span(self.start_time, self.end_time)
        return self


class TimeLogApproval(BaseModel):
    is_approved: bool = True


class TimeLog(TimeLogDetails):
    id: uuid.UUID
    order_id: uuid.UUID
    user_id: uuid.UUID
    start_time: datetime
    end_time: Optional[datetime] = None
    break_duration: int
    is_approved: bool
    hourly_rate: Decimal
    total_amount: Decimal
    photo_urls: List[str] = []
    materials_used: List[MaterialEntry] = []
    travel_time_minutes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TimeLogSummary(BaseModel):
    total_logs: int
    open_sessions: int
    approved_logs: int
    worked_minutes: Decimal
    worked_hours: Decimal
    total_amount: Decimal
    approved_amount: Decimal
    pending_amount: Decimal
