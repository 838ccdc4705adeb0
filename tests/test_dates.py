"""
Local-day helper tests
"""
from datetime import datetime, timedelta, timezone

from thingstruct.dates import add_days, is_same_day, start_of_day, to_local
from thingstruct.models import StateItem


class TestLocalDays:
    """Tests for local calendar-day handling"""

    def test_start_of_day_naive(self):
        assert start_of_day(datetime(2024, 1, 8, 23, 59, 59, 999)) == datetime(2024, 1, 8)

    def test_aware_values_become_local(self):
        aware = datetime(2024, 1, 8, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        local = aware.astimezone().replace(tzinfo=None)

        assert to_local(aware) == local
        assert start_of_day(aware) == local.replace(hour=0, minute=0, second=0, microsecond=0)
        assert start_of_day(aware).tzinfo is None

    def test_aware_state_date_is_stored_naive(self):
        aware = datetime(2024, 1, 8, 12, 0, tzinfo=timezone.utc)
        state = StateItem(title="Call", date=aware)

        assert state.date.tzinfo is None
        assert state.date == start_of_day(aware.astimezone().replace(tzinfo=None))

    def test_same_day_across_offsets(self):
        aware = datetime(2024, 1, 8, 12, 0, tzinfo=timezone.utc)
        assert is_same_day(aware, aware.astimezone().replace(tzinfo=None))

    def test_add_days(self):
        assert add_days(datetime(2024, 1, 31), 1) == datetime(2024, 2, 1)
