from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from core.services.calendar_sync import CalendarSyncService
from core.services.store import DomainStore
from infrastructure.storage import KeyValueStore, MemoryBackend


class FakeCalendar:
    """In-memory device calendar recording created and deleted events."""

    def __init__(
        self, *, granted: bool = True, fail_create: bool = False, fail_delete: bool = False
    ):
        self.granted = granted
        self.fail_create = fail_create
        self.fail_delete = fail_delete
        self.created: dict[str, dict] = {}
        self.deleted: list[str] = []

    async def request_permission(self) -> bool:
        return self.granted

    async def default_calendar_id(self) -> str | None:
        return "cal-1"

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
        if self.fail_create:
            raise RuntimeError("platform error")
        event_id = f"dev-{len(self.created) + 1}"
        self.created[event_id] = {
            "calendar_id": calendar_id,
            "title": title,
            "notes": notes,
            "start": start,
            "end": end,
            "alarm_offset_mins": alarm_offset_mins,
        }
        return event_id

    async def delete_event(self, event_id: str) -> None:
        if self.fail_delete:
            raise RuntimeError("platform error")
        self.deleted.append(event_id)


@pytest.fixture
def make_calendar():
    return FakeCalendar


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def kv(backend):
    store = KeyValueStore(backend)
    yield store
    store.close()


@pytest.fixture
def calendar(make_calendar) -> FakeCalendar:
    return make_calendar()


@pytest.fixture
def store(kv, calendar) -> DomainStore:
    s = DomainStore(kv, calendar_sync=CalendarSyncService(calendar))
    asyncio.run(s.load())
    return s
