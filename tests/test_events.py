import asyncio
from datetime import date, datetime, timedelta

from core.models import PlannedEvent
from core.services.calendar_sync import CalendarSyncService
from core.services.store import DomainStore


def _day(offset: int) -> str:
    return (date.today() + timedelta(days=offset)).isoformat()


def _run(store, coro):
    """Await `coro`, then wait for the saves it scheduled."""

    async def go():
        result = await coro
        await store.flush()
        return result

    return asyncio.run(go())


def test_create_event_without_sync(store, calendar):
    event = _run(
        store, store.create_event(_day(3), "  Dinner  ", time_hhmm="19:30", duration_mins=90)
    )
    assert event.title == "Dinner"
    assert event.time_hhmm == "19:30"
    assert event.duration_mins == 90
    assert event.device_event_id is None
    assert store.events == [event]
    assert calendar.created == {}


def test_create_event_rejections(store):
    assert _run(store, store.create_event(_day(1), "   ")) is None
    assert _run(store, store.create_event("2025-02-30", "Trip")) is None
    assert _run(store, store.create_event(_day(-1), "Yesterday")) is None
    assert store.events == []


def test_create_event_defaults(store):
    event = _run(store, store.create_event(_day(0), "Movie", time_hhmm="7pm", duration_mins=0))
    assert event.duration_mins == 60
    assert len(event.time_hhmm) == 5 and event.time_hhmm.endswith(":00")
    assert event.notes == ""


def test_create_event_mirrors_to_device(store, calendar):
    event = _run(
        store,
        store.create_event(
            _day(2),
            "Picnic",
            time_hhmm="12:00",
            duration_mins=5,
            notes="bring cake",
            sync_to_device=True,
        ),
    )
    assert event.device_event_id == "dev-1"
    created = calendar.created["dev-1"]
    assert created["calendar_id"] == "cal-1"
    assert created["notes"] == "bring cake"
    assert created["end"] - created["start"] == timedelta(minutes=15)
    assert created["alarm_offset_mins"] == -60


def test_sync_failure_keeps_local_event(kv, make_calendar):
    for cal in (make_calendar(granted=False), make_calendar(fail_create=True)):
        store = DomainStore(kv, calendar_sync=CalendarSyncService(cal))
        event = _run(store, store.create_event(_day(1), "Hike", sync_to_device=True))
        assert event is not None
        assert event.device_event_id is None
        assert store.events == [event]


def test_delete_event_removes_mirror(store, calendar):
    event = _run(store, store.create_event(_day(1), "Zoo", sync_to_device=True))
    assert _run(store, store.delete_event(event.id)) is True
    assert calendar.deleted == ["dev-1"]
    assert store.events == []


def test_delete_event_without_mirror_or_unknown(store):
    event = _run(store, store.create_event(_day(1), "Zoo"))
    assert _run(store, store.delete_event("missing")) is None
    assert _run(store, store.delete_event(event.id)) is None
    assert store.events == []


def test_delete_event_mirror_failure_still_deletes_locally(kv, make_calendar):
    cal = make_calendar(fail_delete=True)
    store = DomainStore(kv, calendar_sync=CalendarSyncService(cal))
    event = _run(store, store.create_event(_day(1), "Zoo", sync_to_device=True))
    assert _run(store, store.delete_event(event.id)) is False
    assert store.events == []


def test_events_persist_under_versioned_key(store, backend):
    _run(store, store.create_event(_day(1), "Zoo", time_hhmm="10:00"))
    assert '"timeHHMM": "10:00"' in backend.items["planned_events_v2"]


def test_sync_service_uses_explicit_calendar_id(calendar):
    cal = calendar
    sync = CalendarSyncService(cal, calendar_id="work", min_duration_mins=30, alarm_offset_mins=-15)
    event = PlannedEvent(
        id="e", date_iso="2030-01-01", time_hhmm="09:00", duration_mins=60, title="T"
    )
    device_id = asyncio.run(sync.mirror(event))
    created = cal.created[device_id]
    assert created["calendar_id"] == "work"
    assert created["start"] == datetime(2030, 1, 1, 9, 0)
    assert created["end"] == datetime(2030, 1, 1, 10, 0)
    assert created["alarm_offset_mins"] == -15


def test_create_event_unicode_time_falls_back(store):
    event = _run(store, store.create_event(_day(3), "Dinner", time_hhmm="²3:00"))
    assert event is not None
    assert len(event.time_hhmm) == 5 and event.time_hhmm.endswith(":00")
