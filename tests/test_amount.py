import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from timelogs.core.amount import calculate_total_amount, session_minutes, worked_minutes

START = datetime(2025, 8, 25, 9, 0, tzinfo=timezone.utc)


class TestCalculateTotalAmount:
    def test_full_day_with_lunch_break(self):
        """09:00-17:00 with a 60 minute break at 650.00 is 4550.00"""
        amount = calculate_total_amount(START, START.replace(hour=17), 60, Decimal("650.00"))
        assert amount == Decimal("4550.00")

    def test_open_session_is_zero(self):
        """No end time means nothing is owed yet"""
        assert calculate_total_amount(START, None, 0, Decimal("650")) == Decimal("0")

    def test_missing_start_is_zero(self):
        """Both clock times are required"""
        assert calculate_total_amount(None, START, 0, Decimal("650")) == Decimal("0")

    def test_partial_hour_rounds_to_cents(self):
        """Ten minutes at 100.00/h is 16.67"""
        amount = calculate_total_amount(START, START + timedelta(minutes=10), 0, Decimal("100.00"))
        assert amount == Decimal("16.67")

    def test_seconds_are_counted(self):
        """The session length is exact, not truncated to whole minutes"""
        amount = calculate_total_amount(START, START + timedelta(minutes=30, seconds=30), 0, Decimal("60"))
        assert amount == Decimal("30.50")

    def test_missing_break_and_rate_count_as_zero(self):
        """A null break subtracts nothing and a null rate pays nothing"""
        end = START + timedelta(hours=2)
        assert calculate_total_amount(START, end, None, Decimal("10")) == Decimal("20.00")
        assert calculate_total_amount(START, end, 0, None) == Decimal("0.00")

    def test_break_longer_than_session_is_negative(self, caplog):
        """A break exceeding the session is not clamped, only logged"""
        with caplog.at_level(logging.WARNING, logger="timelogs.core.amount"):
            amount = calculate_total_amount(START, START + timedelta(minutes=30), 90, Decimal("60"))
        assert amount == Decimal("-60.00")
        assert "negative" in caplog.text

    def test_accepts_plain_numbers(self):
        """Rates given as int, float or str behave like Decimals"""
        end = START + timedelta(hours=1)
        assert calculate_total_amount(START, end, 0, 650) == Decimal("650.00")
        assert calculate_total_amount(START, end, 0, "12.5") == Decimal("12.50")
        assert calculate_total_amount(START, end, 0, 0.1) == Decimal("0.10")

    def test_naive_times_are_treated_as_utc(self):
        """Values read back from SQLite lose their timezone"""
        naive_end = datetime(2025, 8, 25, 11, 0)
        assert calculate_total_amount(START, naive_end, 0, Decimal("10")) == Decimal("20.00")

    def test_other_timezones_are_normalised(self):
        """11:00+02:00 is 09:00 UTC"""
        cest = timezone(timedelta(hours=2))
        end = datetime(2025, 8, 25, 12, 0, tzinfo=cest)
        assert calculate_total_amount(START, end, 0, Decimal("10")) == Decimal("10.00")


class TestMinutes:
    def test_session_minutes(self):
        """Span in minutes including fractions"""
        assert session_minutes(START, START + timedelta(hours=8)) == Decimal(480)
        assert session_minutes(START, START + timedelta(seconds=90)) == Decimal("1.5")

    def test_worked_minutes_subtracts_break(self):
        """Worked minutes exclude the break"""
        assert worked_minutes(START, START.replace(hour=17), 60) == Decimal(420)

    def test_worked_minutes_open_session(self):
        """Open sessions have no worked minutes yet"""
        assert worked_minutes(START, None, 30) == Decimal(0)
