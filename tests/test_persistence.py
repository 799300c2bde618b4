import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

from conftest import at
from timelogs.core.database import ensure_user_hourly_rate_column
from timelogs.models import TeamMember, TimeLog
from timelogs.services.order import OrderService
from timelogs.services.user import UserService


def as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class TestDerivedAmount:
    def test_insert_computes_total(self, worker, order, make_time_log):
        """09:00-17:00, 60 min break, 650.00/h is stored as 4550.00"""
        time_log = make_time_log(worker, order, at(9), at(17), break_duration=60)
        assert time_log.total_amount == Decimal("4550.00")

    def test_open_session_total_is_zero(self, worker, order, make_time_log):
        """No end time, no amount"""
        time_log = make_time_log(worker, order, at(9))
        assert time_log.total_amount == Decimal("0")

    def test_defaults(self, worker, order, make_time_log):
        """Unset columns take their documented defaults"""
        time_log = make_time_log(worker, order, at(9))
        assert time_log.break_duration == 0
        assert time_log.is_approved is False
        assert time_log.photo_urls == []
        assert time_log.materials_used == []
        assert time_log.travel_time_minutes == 0
        assert time_log.id is not None
        assert time_log.created_at is not None

    @pytest.mark.parametrize(
        "field, value, expected",
        [
            ("end_time", at(13), Decimal("1950.00")),
            ("start_time", at(11), Decimal("3250.00")),
            ("break_duration", 0, Decimal("5200.00")),
            ("hourly_rate", Decimal("500.00"), Decimal("3500.00")),
        ],
    )
    def test_update_of_any_input_recomputes(self, db, worker, order, make_time_log, field, value, expected):
        """Changing start, end, break or rate refreshes the total"""
        time_log = make_time_log(worker, order, at(9), at(17), break_duration=60)
        setattr(time_log, field, value)
        db.commit()
        db.refresh(time_log)
        assert time_log.total_amount == expected

    def test_closing_session_computes_total(self, db, worker, order, make_time_log):
        """Setting the end time on an open session fills in the amount"""
        time_log = make_time_log(worker, order, at(9))
        time_log.end_time = at(10, 30)
        db.commit()
        db.refresh(time_log)
        assert time_log.total_amount == Decimal("975.00")

    def test_reopening_session_resets_total(self, db, worker, order, make_time_log):
        """Clearing the end time brings the amount back to 0"""
        time_log = make_time_log(worker, order, at(9), at(17))
        time_log.end_time = None
        db.commit()
        db.refresh(time_log)
        assert time_log.total_amount == Decimal("0")

    def test_caller_supplied_total_is_overwritten(self, db, worker, order, make_time_log):
        """total_amount is never taken from the caller"""
        time_log = make_time_log(worker, order, at(9), at(10), total_amount=Decimal("99999.00"))
        assert time_log.total_amount == Decimal("650.00")

        time_log.total_amount = Decimal("1.00")
        time_log.notes = "touch"
        db.commit()
        db.refresh(time_log)
        assert time_log.total_amount == Decimal("650.00")

    def test_negative_total_is_stored(self, db, worker, order, make_time_log):
        """Breaks longer than the session are kept as negative amounts"""
        time_log = make_time_log(worker, order, at(9), at(9, 30), break_duration=90)
        assert time_log.total_amount == Decimal("-650.00")

    def test_offset_times_are_stored_in_utc(self, db, worker, order, make_time_log):
        """A later write recomputes the same total from the stored times"""
        cest = timezone(timedelta(hours=2))
        time_log = make_time_log(
            worker, order, datetime(2025, 8, 25, 11, 0, tzinfo=cest), at(17), break_duration=60
        )
        assert time_log.total_amount == Decimal("4550.00")

        time_log.is_approved = True
        db.commit()
        db.refresh(time_log)
        assert time_log.total_amount == Decimal("4550.00")
        assert as_utc(time_log.start_time) == at(9)

    def test_every_write_refreshes_updated_at(self, db, worker, order, make_time_log):
        """updated_at moves forward on each write"""
        time_log = make_time_log(worker, order, at(9))
        before = datetime.now(timezone.utc)
        time_log.notes = "Replaced valve"
        db.commit()
        db.refresh(time_log)
        assert as_utc(time_log.updated_at) >= before.replace(microsecond=0)


class TestCascades:
    def test_deleting_order_deletes_its_time_logs(
        self, db, worker, order, other_order, make_time_log
    ):
        """Order deletion takes its time logs along and nothing else"""
        make_time_log(worker, order, at(9), at(10))
        make_time_log(worker, order, at(11), at(12))
        kept = make_time_log(worker, other_order, at(13), at(14))

        assert OrderService.delete_order(db, order.id) is True

        db.expire_all()
        remaining = db.query(TimeLog).all()
        assert [log.id for log in remaining] == [kept.id]

    def test_deleting_worker_deletes_their_time_logs(
        self, db, team, worker, coworker, order, make_time_log
    ):
        """User deletion takes their time logs and memberships along"""
        make_time_log(worker, order, at(9), at(10))
        kept = make_time_log(coworker, order, at(9), at(10))
        worker_id = worker.id

        assert UserService.delete_user(db, worker_id) is True

        db.expire_all()
        assert [log.id for log in db.query(TimeLog).all()] == [kept.id]
        assert db.query(TeamMember).filter(TeamMember.user_id == worker_id).count() == 0

    def test_deleting_missing_rows(self, db):
        """Unknown ids report False"""
        assert OrderService.delete_order(db, uuid.uuid4()) is False
        assert UserService.delete_user(db, uuid.uuid4()) is False


@pytest.fixture
def legacy_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


class TestUserHourlyRateColumn:
    def test_adds_column_to_legacy_table(self, legacy_engine):
        """A users table without hourly_rate gains it with default 650"""
        with legacy_engine.begin() as conn:
            conn.execute(text("CREATE TABLE users (id VARCHAR(36) PRIMARY KEY, email VARCHAR)"))

        assert ensure_user_hourly_rate_column(legacy_engine) is True

        columns = {column["name"] for column in inspect(legacy_engine).get_columns("users")}
        assert "hourly_rate" in columns

        with legacy_engine.begin() as conn:
            conn.execute(text("INSERT INTO users (id, email) VALUES ('u1', 'a@example.com')"))
            rate = conn.execute(text("SELECT hourly_rate FROM users WHERE id = 'u1'")).scalar()
        assert Decimal(str(rate)) == Decimal("650")

    def test_is_idempotent(self, legacy_engine):
        """Running twice leaves the table alone the second time"""
        with legacy_engine.begin() as conn:
            conn.execute(text("CREATE TABLE users (id VARCHAR(36) PRIMARY KEY)"))

        assert ensure_user_hourly_rate_column(legacy_engine) is True
        assert ensure_user_hourly_rate_column(legacy_engine) is False

    def test_missing_table_is_skipped(self, legacy_engine):
        """Nothing to migrate before the users table exists"""
        assert ensure_user_hourly_rate_column(legacy_engine) is False

    def test_created_table_has_database_default(self, db):
        """Rows inserted without a rate get 650 from the database itself"""
        db.execute(
            text(
                "INSERT INTO users (id, email, username, hashed_password, role) "
                "VALUES ('raw-user', 'raw@example.com', 'raw', 'x', 'WORKER')"
            )
        )
        db.commit()
        rate = db.execute(text("SELECT hourly_rate FROM users WHERE id = 'raw-user'")).scalar()
        assert Decimal(str(rate)) == Decimal("650")
