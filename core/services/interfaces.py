"""Core service interfaces and shared data structures.

This module defines the collaborator protocols the store depends on
(storage backend, device calendar) and the small dataclasses returned by the
derived views.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from core.models import Photo


class StorageBackend(Protocol):
    """Synchronous string-keyed text storage wrapped by `KeyValueStore`."""

    def get_item(self, key: str) -> str | None:
        """Return stored text for `key`, or None when absent."""
        raise NotImplementedError

    def set_item(self, key: str, text: str) -> None:
        """Durably associate `text` with `key`."""
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        """Forget `key`; absent keys are ignored."""
        raise NotImplementedError


class PersistentStore(Protocol):
    """Async JSON key-value persistence the domain store writes through."""

    async def save(self, key: str, value: Any) -> None:
        """Store `value` under `key`; must not raise."""
        raise NotImplementedError

    async def load(self, key: str, fallback: Any) -> Any:
        """Return the value under `key`, or `fallback`; must not raise."""
        raise NotImplementedError


class DeviceCalendar(Protocol):
    """Platform calendar the planned events can be mirrored into.

    Permission denial is an expected outcome, reported as `False` from
    `request_permission`. Other methods may raise on platform failure.
    """

    async def request_permission(self) -> bool:
        """Ask for (or confirm) calendar access."""
        raise NotImplementedError

    async def default_calendar_id(self) -> str | None:
        """Return the calendar to write into, or None if there is none."""
        raise NotImplementedError

    async def create_event(
        self,
        calendar_id: str,
        *,
        title: str,
        notes: str,
        start: datetime,
        end: datetime,
        alarm_offset_mins: int,
    ) -> str:
        """Create an external event and return its identifier."""
        raise NotImplementedError

    async def delete_event(self, event_id: str) -> None:
        """Delete the external event with `event_id`."""
        raise NotImplementedError


@dataclass
class TimelineEntry:
    """A photo placed on the timeline.

    Attributes:
        photo: The stored photo record.
        effective_date: Album date when filed, else the photo's own date.
        display_date: `effective_date` in long form.
        album_name: Owning album's name, or a placeholder.
    """

    photo: Photo
    effective_date: str
    display_date: str
    album_name: str


@dataclass
class TimelineSection:
    """Month bucket of timeline entries, e.g. "February 2025"."""

    title: str
    items: list[TimelineEntry] = field(default_factory=list)


@dataclass
class AlbumRow:
    """One row of the album list, including the All Photos pseudo-album."""

    id: str
    name: str
    date_iso: str | None
    display_date: str
    photo_count: int
    count_label: str
    is_all: bool = False


@dataclass
class DateMark:
    """Calendar widget highlight for a single date."""

    marked: bool = False
    selected: bool = False
