from datetime import datetime, timezone

from sqlalchemy import event

from timelogs.core.amount import calculate_total_amount, to_utc
from timelogs.models.time_log import TimeLog


def _store_clock_times_in_utc(target: TimeLog) -> None:
    # SQLite keeps the wall-clock part and drops the offset
    for field in ("start_time", "end_time"):
        value = getattr(target, field)
        if value is not None and value.tzinfo is not None:
            setattr(target, field, to_utc(value))


def _refresh_derived_fields(target: TimeLog) -> None:
    _store_clock_times_in_utc(target)
    target.total_amount = calculate_total_amount(
        target.start_time,
        target.end_time,
        target.break_duration,
        target.hourly_rate,
    )
    target.updated_at = datetime.now(timezone.utc)


@event.listens_for(TimeLog, "before_insert")
def _before_insert(mapper, connection, target: TimeLog) -> None:
    _refresh_derived_fields(target)


@event.listens_for(TimeLog, "before_update")
def _before_update(mapper, connection, target: TimeLog) -> None:
    _refresh_derived_fields(target)
