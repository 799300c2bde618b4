"""Money owed for a time log.

The total is derived from the clock times, the unpaid break and the hourly
rate. It is recomputed on every write of a time log (see
``timelogs.models.events``) and is never accepted from API callers.
"""
import logging
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
SIXTY = Decimal(60)

Number = Union[Decimal, int, float, str]


def to_utc(value: datetime) -> datetime:
    """Aware UTC copy of ``value``; naive values are taken to be UTC already."""
    # Databases without timezone support hand back naive UTC values
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def session_minutes(start_time: datetime, end_time: datetime) -> Decimal:
    """Exact length of the span between two instants, in minutes."""
    delta: timedelta = to_utc(end_time) - to_utc(start_time)
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(10**6)
    return seconds / SIXTY


def worked_minutes(
    start_time: Optional[datetime],
    end_time: Optional[datetime],
    break_duration: Optional[int] = 0,
) -> Decimal:
    """Session minutes minus the break, or 0 while the session is open."""
    if start_time is None or end_time is None:
        return Decimal(0)
    return session_minutes(start_time, end_time) - _to_decimal(break_duration)


def calculate_total_amount(
    start_time: Optional[datetime],
    end_time: Optional[datetime],
    break_duration: Optional[int],
    hourly_rate: Optional[Number],
) -> Decimal:
    """Return ``worked minutes / 60 * hourly_rate`` rounded to cents.

    An open session (no ``end_time``) is worth 0. A break longer than the
    session yields a negative amount; it is returned as is and logged so the
    record can be reviewed.
    """
    if start_time is None or end_time is None:
        return Decimal("0.00")

    minutes = worked_minutes(start_time, end_time, break_duration)
    amount = (minutes * _to_decimal(hourly_rate) / SIXTY).quantize(CENTS, rounding=ROUND_HALF_UP)
    if minutes < 0:
        logger.warning(
            "Break of %s min exceeds session of %s min; total amount is negative (%s)",
            break_duration,
            session_minutes(start_time, end_time),
            amount,
        )
    return amount
