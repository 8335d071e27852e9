"""ViewModel for planning future dates on the calendar screen."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.dates import format_hhmm, format_time_12h, next_whole_hour, today
from core.models import PlannedEvent
from core.services.event_service import (
    DEFAULT_DURATION_MINS,
    DURATION_PRESETS,
    marked_dates,
    upcoming_events,
)
from core.services.interfaces import DateMark
from core.services.store import DomainStore


@dataclass
class PlanDraft:
    """Initial values for the "add plan" form."""

    date_iso: str
    time_hhmm: str
    duration_mins: int = DEFAULT_DURATION_MINS
    sync_to_device: bool = True


class CalendarVM:
    """Selected date, marks, upcoming plans and plan create/delete."""

    def __init__(
        self, store: DomainStore, duration_presets: tuple[int, ...] = DURATION_PRESETS
    ) -> None:
        self._store = store
        self.duration_presets = duration_presets
        self.selected_date: str = today()

    def select(self, date_iso: str) -> None:
        self.selected_date = date_iso

    @property
    def marks(self) -> dict[str, DateMark]:
        return marked_dates(self._store.events, self.selected_date)

    @property
    def upcoming(self) -> list[PlannedEvent]:
        return upcoming_events(self._store.events)

    def draft_defaults(self, now: datetime | None = None) -> PlanDraft:
        """Form defaults: the selected date at the next whole hour, one hour long."""
        return PlanDraft(date_iso=self.selected_date, time_hhmm=format_hhmm(next_whole_hour(now)))

    @staticmethod
    def time_label(event: PlannedEvent) -> str:
        return format_time_12h(event.time_hhmm)

    async def add_plan(
        self,
        title: str,
        *,
        time_hhmm: str | None = None,
        duration_mins: int | None = None,
        notes: str = "",
        sync_to_device: bool = True,
    ) -> PlannedEvent | None:
        """Plan an event on the selected date; None when the input is rejected."""
        return await self._store.create_event(
            self.selected_date,
            title,
            time_hhmm=time_hhmm,
            duration_mins=duration_mins,
            notes=notes,
            sync_to_device=sync_to_device,
        )

    async def delete_plan(self, event_id: str) -> bool | None:
        """Delete a plan; confirm with the user before calling."""
        return await self._store.delete_event(event_id)
