"""Date and time helpers shared by the store, views and view models.

Everything here is best-effort: parsing helpers return `None` (or an empty
string / zero) for bad input instead of raising, so callers can treat invalid
dates as "nothing to apply".
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
import re
import secrets
import time

ISO_DATE_FMT = "%Y-%m-%d"

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_HHMM_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)", re.ASCII)
_SECONDS_PER_DAY = 60 * 60 * 24

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def generate_id() -> str:
    """Return an id unique within this device's data: millis plus random hex."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"


def today() -> str:
    """Today's local date as `YYYY-MM-DD`."""
    return date.today().strftime(ISO_DATE_FMT)


def now_iso() -> str:
    """Current local timestamp, used for `created_at` fields."""
    return datetime.now().isoformat(timespec="milliseconds")


def parse_date(value: object) -> date | None:
    """Parse a strict `YYYY-MM-DD` string; return None on any failure."""
    if not value or not isinstance(value, str):
        return None
    if not _ISO_DATE_RE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, ISO_DATE_FMT).date()
    except ValueError:
        return None


def format_display(value: object) -> str:
    """Long-form date like "February 14, 2024"; empty string when invalid."""
    d = parse_date(value)
    if d is None:
        return ""
    return f"{_MONTHS[d.month - 1]} {d.day}, {d.year}"


def month_label(value: object) -> str:
    """Month bucket title like "February 2025"; empty string when invalid."""
    d = parse_date(value)
    if d is None:
        return ""
    return f"{_MONTHS[d.month - 1]} {d.year}"


def days_since(from_iso: object, now: datetime | None = None) -> int:
    """Whole days elapsed since local midnight of `from_iso`.

    Uses the absolute time delta rather than a calendar difference, so a day
    containing a DST change can shift the result by one. Invalid input and
    dates in the future yield 0.
    """
    d = parse_date(from_iso)
    if d is None:
        return 0
    start = datetime(d.year, d.month, d.day).timestamp()
    current = (now or datetime.now()).timestamp()
    return max(0, int((current - start) // _SECONDS_PER_DAY))


def parse_hhmm(value: object) -> tuple[int, int] | None:
    """Parse a 24h `HH:MM` string into (hour, minute); None when invalid."""
    if not value or not isinstance(value, str):
        return None
    match = _HHMM_RE.fullmatch(value)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def format_hhmm(dt: datetime) -> str:
    return f"{dt.hour:02d}:{dt.minute:02d}"


def format_time_12h(hhmm: str | None) -> str:
    """Render `HH:MM` as "2:05 PM", clamping out-of-range parts."""
    h_str, _, m_str = (hhmm or "12:00").partition(":")
    try:
        hour = int(h_str)
    except ValueError:
        hour = 0
    try:
        minute = int(m_str)
    except ValueError:
        minute = 0
    hour = max(0, min(23, hour))
    minute = max(0, min(59, minute))
    suffix = "PM" if hour >= 12 else "AM"
    hour12 = (hour + 11) % 12 + 1
    return f"{hour12}:{minute:02d} {suffix}"


def combine_date_time(date_iso: str, hhmm: str | None) -> datetime | None:
    """Local datetime for a date plus `HH:MM` (noon when the time is bad)."""
    d = parse_date(date_iso)
    if d is None:
        return None
    hour, minute = parse_hhmm(hhmm) or (12, 0)
    return datetime(d.year, d.month, d.day, hour, minute)


def next_whole_hour(now: datetime | None = None) -> datetime:
    """The next whole hour from `now`, capped at 23:00 on the same day."""
    current = (now or datetime.now()).replace(minute=0, second=0, microsecond=0)
    if current.hour >= 23:
        return current.replace(hour=23)
    return current + timedelta(hours=1)
