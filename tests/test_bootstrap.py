import asyncio
import json

import pytest

from core.models import PlannedEvent
from core.services.calendar_sync import CalendarSyncService
from infrastructure.calendar_service import NullDeviceCalendar
from infrastructure.settings import JsonSettings, default_settings_from, duration_presets_from
from infrastructure.storage import JsonFileBackend, MemoryBackend, QSettingsBackend
from main import bootstrap, build_backend


def test_json_settings_dotted_access(tmp_path):
    path = tmp_path / "settings.json"
    config = {"calendar": {"min_duration_mins": "20"}, "defaults": {"couple_name": "Lee & Max"}}
    path.write_text(json.dumps(config))
    settings = JsonSettings(path)
    assert settings.get("calendar.min_duration_mins") == "20"
    assert settings.get_int("calendar.min_duration_mins", 15) == 20
    assert settings.get_int("calendar.alarm_offset_mins", -60) == -60
    assert settings.get("missing.key", "x") == "x"
    assert default_settings_from(settings).couple_name == "Lee & Max"


def test_json_settings_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        JsonSettings(tmp_path / "nope.json")


def test_duration_presets_from():
    settings = JsonSettings.from_dict({"calendar": {"duration_presets": [45, "x", -5, True, 90]}})
    assert duration_presets_from(settings, (60,)) == (45, 90)
    assert duration_presets_from(JsonSettings.from_dict({}), (60,)) == (60,)


def test_build_backend(tmp_path):
    def cfg(kind):
        return JsonSettings.from_dict({"storage": {"backend": kind, "path": str(tmp_path)}})

    assert isinstance(build_backend(cfg("memory")), MemoryBackend)
    assert isinstance(build_backend(cfg("json")), JsonFileBackend)
    assert isinstance(build_backend(cfg("qsettings")), QSettingsBackend)
    assert isinstance(build_backend(cfg("floppy")), JsonFileBackend)


def test_bootstrap_loads_existing_data():
    backend = MemoryBackend(
        {
            "albums": json.dumps(
                [{"id": "a", "name": "Zoo", "dateISO": "2025-05-01", "createdAt": "t"}]
            )
        }
    )
    settings = JsonSettings.from_dict(
        {"defaults": {"couple_name": "Lee & Max", "anniversary": "2023-01-01"}}
    )

    async def scenario():
        return await bootstrap(settings, backend=backend)

    ctx = asyncio.run(scenario())
    try:
        assert ctx.store.is_loaded
        assert [r.name for r in ctx.albums.rows] == ["All Photos", "Zoo"]
        assert ctx.settings.settings.couple_name == "Lee & Max"
        assert ctx.settings.settings.anniversary == "2023-01-01"
    finally:
        ctx.kv.close()


def test_null_calendar_never_mirrors():
    sync = CalendarSyncService(NullDeviceCalendar())
    event = PlannedEvent(
        id="e", date_iso="2030-01-01", time_hhmm="09:00", duration_mins=60, title="T"
    )
    assert asyncio.run(sync.mirror(event)) is None
    assert asyncio.run(sync.unmirror("dev-1")) is False



def test_default_settings_reject_bad_anniversary():
    settings = JsonSettings.from_dict({"defaults": {"anniversary": "Feb 14"}})
    assert default_settings_from(settings).anniversary == "2024-02-14"
