from datetime import timedelta

from infrastructure.formatting import (
    format_hours_minutes,
    format_time_remaining,
    format_time_until,
    split_hours_minutes,
)


def test_split_truncates_partial_minutes():
    assert split_hours_minutes(3900) == (1, 5)
    assert split_hours_minutes(timedelta(minutes=45, seconds=59)) == (0, 45)


def test_format_hours_minutes_drops_zero_hours():
    assert format_hours_minutes(timedelta(hours=2)) == "2h 0m"
    assert format_hours_minutes(timedelta(minutes=7)) == "7m"


def test_time_remaining_text():
    assert format_time_remaining(timedelta(hours=1, minutes=5)) == "1h 5m remaining"
    assert format_time_remaining(timedelta(minutes=45)) == "45m remaining"
    assert format_time_remaining(0) == "Overtime"
    assert format_time_remaining(timedelta(minutes=-3)) == "Overtime"


def test_time_until_text_uses_prefix():
    assert format_time_until(timedelta(hours=1, minutes=5)) == "Next: 1h 5m"
    assert format_time_until(timedelta(minutes=25), prefix="Starts in") == "Starts in 25m"
    assert format_time_until(timedelta(seconds=-1), prefix="Starts in") == "Starting now"
