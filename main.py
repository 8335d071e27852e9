from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from app.viewmodels.albums_vm import AlbumsVM
from app.viewmodels.calendar_vm import CalendarVM
from app.viewmodels.settings_vm import SettingsVM
from app.viewmodels.timeline_vm import TimelineVM
from core.services.calendar_sync import CalendarSyncService
from core.services.event_service import DURATION_PRESETS
from core.services.interfaces import DeviceCalendar, StorageBackend
from core.services.store import DomainStore
from infrastructure.calendar_service import NullDeviceCalendar
from infrastructure.logging import get_app_directory, init_logging
from infrastructure.settings import JsonSettings, default_settings_from, duration_presets_from
from infrastructure.storage import JsonFileBackend, KeyValueStore, MemoryBackend, QSettingsBackend

BASE_DIR = Path(__file__).parent


@dataclass
class AppContext:
    """Everything a presentation layer needs, built in load order."""

    store: DomainStore
    kv: KeyValueStore
    albums: AlbumsVM
    timeline: TimelineVM
    calendar: CalendarVM
    settings: SettingsVM


def _load_config(path: Path) -> JsonSettings:
    try:
        return JsonSettings(path)
    except FileNotFoundError:
        logger.warning("{} not found, using built-in defaults", path)
        return JsonSettings.from_dict({})


def build_backend(settings: JsonSettings) -> StorageBackend:
    """Pick the storage backend named by `storage.backend`."""
    kind = str(settings.get("storage.backend", "json")).lower()
    root = Path(settings.get("storage.path", "") or get_app_directory() / "data").expanduser()
    if kind == "memory":
        return MemoryBackend()
    if kind == "qsettings":
        return QSettingsBackend(root / "store.ini")
    if kind != "json":
        logger.warning("Unknown storage backend {!r}, using json", kind)
    return JsonFileBackend(root)


async def bootstrap(
    settings: JsonSettings,
    *,
    backend: StorageBackend | None = None,
    calendar: DeviceCalendar | None = None,
) -> AppContext:
    """Build the store, load persisted data, and wire the view models."""
    kv = KeyValueStore(backend or build_backend(settings))
    sync = CalendarSyncService(
        calendar or NullDeviceCalendar(),
        calendar_id=settings.get("calendar.calendar_id"),
        min_duration_mins=settings.get_int("calendar.min_duration_mins", 15),
        alarm_offset_mins=settings.get_int("calendar.alarm_offset_mins", -60),
    )
    store = DomainStore(kv, default_settings=default_settings_from(settings), calendar_sync=sync)
    await store.load()
    return AppContext(
        store=store,
        kv=kv,
        albums=AlbumsVM(store),
        timeline=TimelineVM(store),
        calendar=CalendarVM(store, duration_presets_from(settings, DURATION_PRESETS)),
        settings=SettingsVM(store),
    )


async def _run() -> int:
    settings = _load_config(BASE_DIR / "settings.json")
    init_logging(settings.get("logging.dir"), str(settings.get("logging.level", "INFO")))
    ctx = await bootstrap(settings)
    try:
        logger.info(
            "Ready: {} albums, {} photos, {} upcoming plans, {} days together",
            ctx.settings.album_count,
            ctx.settings.photo_count,
            len(ctx.calendar.upcoming),
            ctx.settings.days_together(),
        )
        await ctx.store.flush()
    finally:
        ctx.kv.close()
    return 0


def main() -> int:
    return asyncio.run(_run())


if __name__ == "__main__":
    raise SystemExit(main())
