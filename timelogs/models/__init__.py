from .organisation import Organisation
from .user import User, UserRole
from .order import Order, OrderStatus
from .team import Team, TeamMember
from .time_log import TimeLog
from . import events  # noqa: F401  registers the time log mapper events

__all__ = [
    "Organisation",
    "User",
    "UserRole",
    "Order",
    "OrderStatus",
    "Team",
    "TeamMember",
    "TimeLog",
]
