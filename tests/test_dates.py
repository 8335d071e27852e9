from datetime import date, datetime

from core.dates import (
    combine_date_time,
    days_since,
    format_display,
    format_time_12h,
    generate_id,
    month_label,
    next_whole_hour,
    parse_date,
    parse_hhmm,
    today,
)


def test_generate_id_is_unique():
    ids = {generate_id() for _ in range(500)}
    assert len(ids) == 500


def test_today_matches_local_date():
    assert today() == date.today().isoformat()


def test_parse_date_accepts_real_dates():
    assert parse_date("2024-02-29") == date(2024, 2, 29)


def test_parse_date_rejects_bad_input():
    for value in ("not-a-date", "2025-13-40", "2023-02-29", "2024-2-1", "", None, 20240214):
        assert parse_date(value) is None


def test_format_display():
    assert format_display("2024-02-14") == "February 14, 2024"
    assert format_display("2024-02-30") == ""


def test_month_label():
    assert month_label("2025-01-10") == "January 2025"


def test_days_since():
    assert days_since("2024-02-14", now=datetime(2024, 2, 16, 9, 30)) == 2
    assert days_since("garbage", now=datetime(2024, 2, 16)) == 0
    assert days_since("2024-03-01", now=datetime(2024, 2, 16)) == 0


def test_hhmm_helpers():
    assert parse_hhmm("14:05") == (14, 5)
    assert parse_hhmm("24:00") is None
    assert parse_hhmm("9:00") is None
    assert format_time_12h("14:05") == "2:05 PM"
    assert format_time_12h("00:30") == "12:30 AM"
    assert format_time_12h(None) == "12:00 PM"
    assert combine_date_time("2025-07-04", "18:30") == datetime(2025, 7, 4, 18, 30)
    assert combine_date_time("2025-07-04", "bad") == datetime(2025, 7, 4, 12, 0)


def test_next_whole_hour():
    assert next_whole_hour(datetime(2025, 1, 1, 10, 42)) == datetime(2025, 1, 1, 11, 0)
    assert next_whole_hour(datetime(2025, 1, 1, 23, 10)) == datetime(2025, 1, 1, 23, 0)


def test_non_ascii_digits_are_rejected():
    assert parse_hhmm("²3:00") is None
    assert parse_hhmm("١٢:٠٠") is None
    assert parse_hhmm("12:00\n") is None
    assert parse_date("２０２４-02-14") is None
    assert parse_date("2024-02-14\n") is None
    assert combine_date_time("2025-07-04", "²3:00") == datetime(2025, 7, 4, 12, 0)
