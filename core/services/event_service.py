"""Derived views over planned events: upcoming list, calendar marks, time window."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from core.dates import combine_date_time, today
from core.models import PlannedEvent
from core.services.interfaces import DateMark

DEFAULT_DURATION_MINS = 60
DURATION_PRESETS: tuple[int, ...] = (30, 60, 90, 120, 180)


def upcoming_events(
    events: Iterable[PlannedEvent], today_iso: str | None = None
) -> list[PlannedEvent]:
    """Events dated today or later, soonest first, same-day ordered by time."""
    cutoff = today_iso or today()
    selected = [e for e in events if e.date_iso >= cutoff]
    return sorted(selected, key=lambda e: (e.date_iso, e.time_hhmm or "00:00"))


def marked_dates(events: Iterable[PlannedEvent], selected_date: str | None) -> dict[str, DateMark]:
    """Dates that carry at least one event, plus the selected date."""
    marks: dict[str, DateMark] = {}
    for event in events:
        marks[event.date_iso] = DateMark(marked=True)
    if selected_date:
        mark = marks.setdefault(selected_date, DateMark())
        mark.selected = True
    return marks


def event_window(
    event: PlannedEvent, min_duration_mins: int = 15
) -> tuple[datetime, datetime] | None:
    """Local start/end of `event`; the duration is raised to `min_duration_mins`."""
    start = combine_date_time(event.date_iso, event.time_hhmm)
    if start is None:
        return None
    minutes = max(min_duration_mins, event.duration_mins or DEFAULT_DURATION_MINS)
    return start, start + timedelta(minutes=minutes)
