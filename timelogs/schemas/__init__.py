from .user import User, UserCreate, UserUpdate
from .auth import Token, LoginRequest, RefreshTokenRequest
from .order import Order, OrderCreate
from .time_log import (
    MaterialEntry, TimeLog, TimeLogCreate, TimeLogUpdate, TimeLogStart, TimeLogStop,
    TimeLogApproval, TimeLogSummary
)

__all__ = [
    # User schemas
    "User", "UserCreate", "UserUpdate",
    # Auth schemas
    "Token", "LoginRequest", "RefreshTokenRequest",
    # Order schemas
    "Order", "OrderCreate",
    # Time log schemas
    "MaterialEntry", "TimeLog", "TimeLogCreate", "TimeLogUpdate", "TimeLogStart", "TimeLogStop",
    "TimeLogApproval", "TimeLogSummary",
]
