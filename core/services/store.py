"""Domain store owning albums, photos, settings and planned events.

The store is constructed explicitly, loaded once with `load()`, and passed by
reference to whatever needs it. Every mutating operation replaces the
affected collection with a new list and then calls the persist hook for that
collection only. Invalid input never raises; the operation returns `None`
and leaves state untouched.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Iterable
from dataclasses import replace
from typing import Any, TypeVar

from loguru import logger

from core.dates import (
    format_hhmm,
    generate_id,
    next_whole_hour,
    now_iso,
    parse_date,
    parse_hhmm,
    today,
)
from core.models import ANNIVERSARY_FALLBACK, Album, Photo, PlannedEvent, Settings
from core.services.calendar_sync import CalendarSyncService
from core.services.event_service import DEFAULT_DURATION_MINS
from core.services.interfaces import PersistentStore

ALBUMS_KEY = "albums"
PHOTOS_KEY = "photos"
SETTINGS_KEY = "settings"
# Bumped when the stored event shape changed; older data is not migrated.
EVENTS_KEY = "planned_events_v2"

R = TypeVar("R")

Scheduler = Callable[[Coroutine[Any, Any, None]], None]


def _parse_records(raw: Any, factory: Callable[[dict[str, Any]], R], key: str) -> list[R]:
    """Build records from a stored JSON array, skipping malformed entries."""
    if not isinstance(raw, list):
        if raw:
            logger.warning("Stored {} is not a list, starting empty", key)
        return []
    records: list[R] = []
    for item in raw:
        try:
            records.append(factory(item))
        except (KeyError, TypeError, ValueError, AttributeError) as ex:
            logger.warning("Skipping malformed {} entry: {} | item={}", key, ex, item)
    return records


def _valid_anniversary(value: Any) -> str:
    return value if parse_date(value) else ANNIVERSARY_FALLBACK


class DomainStore:
    """In-memory owner of the app collections, mirrored to a `KeyValueStore`."""

    def __init__(
        self,
        kv: PersistentStore,
        *,
        default_settings: Settings | None = None,
        calendar_sync: CalendarSyncService | None = None,
        schedule: Scheduler | None = None,
    ) -> None:
        """Create a store.

        Args:
            kv: Async key-value persistence, normally a `KeyValueStore`.
            default_settings: Settings used on first run and by `reset_all`.
                An invalid anniversary in it becomes 2024-02-14.
            calendar_sync: Mirrors planned events into a device calendar.
            schedule: Persist hook receiving each save coroutine. Defaults to
                scheduling a task on the running event loop.
        """
        self._kv = kv
        defaults = default_settings or Settings()
        self._default_settings = replace(
            defaults, anniversary=_valid_anniversary(defaults.anniversary)
        )
        self._sync = calendar_sync
        self._schedule = schedule or self._schedule_task
        self._pending: set[asyncio.Task[None]] = set()
        self._albums: list[Album] = []
        self._photos: list[Photo] = []
        self._events: list[PlannedEvent] = []
        self._settings = self._default_settings
        self._loaded = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def albums(self) -> list[Album]:
        return self._albums

    @property
    def photos(self) -> list[Photo]:
        return self._photos

    @property
    def events(self) -> list[PlannedEvent]:
        return self._events

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get_album(self, album_id: str | None) -> Album | None:
        return next((a for a in self._albums if a.id == album_id), None)

    def get_photo(self, photo_id: str) -> Photo | None:
        return next((p for p in self._photos if p.id == photo_id), None)

    def get_event(self, event_id: str) -> PlannedEvent | None:
        return next((e for e in self._events if e.id == event_id), None)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    async def load(self) -> None:
        """Load every collection from storage, replacing in-memory state."""
        self._albums = _parse_records(
            await self._kv.load(ALBUMS_KEY, []), Album.from_dict, ALBUMS_KEY
        )
        self._photos = _parse_records(
            await self._kv.load(PHOTOS_KEY, []), Photo.from_dict, PHOTOS_KEY
        )
        self._events = _parse_records(
            await self._kv.load(EVENTS_KEY, []), PlannedEvent.from_dict, EVENTS_KEY
        )
        raw_settings = await self._kv.load(SETTINGS_KEY, self._default_settings.to_dict())
        if not isinstance(raw_settings, dict):
            raw_settings = {}
        merged = {**self._default_settings.to_dict(), **raw_settings}
        self._settings = Settings(
            couple_name=str(merged.get("coupleName") or ""),
            anniversary=_valid_anniversary(merged.get("anniversary")),
        )
        self._loaded = True
        logger.info(
            "Store loaded: {} albums, {} photos, {} planned events",
            len(self._albums),
            len(self._photos),
            len(self._events),
        )

    async def flush(self) -> None:
        """Wait for every scheduled save to finish.

        Saves are fire-and-forget; call this before the event loop closes,
        since `asyncio.run` cancels tasks still pending at exit.
        """
        while True:
            pending = [t for t in self._pending if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending)

    def _payload(self, key: str) -> Any:
        if key == ALBUMS_KEY:
            return [a.to_dict() for a in self._albums]
        if key == PHOTOS_KEY:
            return [p.to_dict() for p in self._photos]
        if key == EVENTS_KEY:
            return [e.to_dict() for e in self._events]
        return self._settings.to_dict()

    def _persist(self, key: str) -> None:
        # Snapshot now so later mutations cannot leak into this write.
        self._schedule(self._kv.save(key, self._payload(key)))

    def _schedule_task(self, coro: Coroutine[Any, Any, None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(coro)
            return
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # ------------------------------------------------------------------
    # Albums
    # ------------------------------------------------------------------
    def create_album(self, name: str | None, date_iso: str | None = None) -> Album | None:
        """Add a new album at the head of the list; blank names are ignored."""
        trimmed = (name or "").strip()
        if not trimmed:
            logger.debug("create_album ignored: blank name")
            return None
        album = Album(
            id=generate_id(),
            name=trimmed,
            date_iso=date_iso if parse_date(date_iso) else today(),
            created_at=now_iso(),
        )
        self._albums = [album, *self._albums]
        self._persist(ALBUMS_KEY)
        logger.info("Created album {} ({})", album.id, album.name)
        return album

    def rename_album(self, album_id: str, name: str | None) -> Album | None:
        trimmed = (name or "").strip()
        if not trimmed or self.get_album(album_id) is None:
            return None
        renamed: Album | None = None
        albums: list[Album] = []
        for album in self._albums:
            if album.id == album_id:
                album = renamed = replace(album, name=trimmed)
            albums.append(album)
        self._albums = albums
        self._persist(ALBUMS_KEY)
        return renamed

    def delete_album(self, album_id: str) -> None:
        """Remove the album and every photo filed under it.

        Callers are expected to confirm with the user first.
        """
        photos = [p for p in self._photos if p.album_id != album_id]
        removed = len(self._photos) - len(photos)
        self._albums = [a for a in self._albums if a.id != album_id]
        self._photos = photos
        self._persist(ALBUMS_KEY)
        self._persist(PHOTOS_KEY)
        logger.info("Deleted album {} and {} photos", album_id, removed)

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------
    def _new_photo(
        self, uri: str, album_id: str | None, date_iso: str | None, caption: str | None
    ) -> Photo:
        album = self.get_album(album_id) if album_id else None
        if album_id and album is None:
            logger.warning("Adding photo to unknown album {}", album_id)
        if parse_date(date_iso):
            resolved = date_iso
        elif album is not None and album.date_iso:
            resolved = album.date_iso
        else:
            resolved = today()
        return Photo(
            id=generate_id(),
            uri=uri,
            album_id=album_id or None,
            date_iso=resolved,
            caption=caption or "",
            favorite=False,
            created_at=now_iso(),
        )

    def add_photo(
        self,
        uri: str | None,
        album_id: str | None = None,
        date_iso: str | None = None,
        caption: str | None = None,
    ) -> Photo | None:
        """Add a photo at the head of the list.

        The date is resolved as: explicit valid `date_iso`, then the album's
        date, then today.
        """
        if not uri:
            return None
        photo = self._new_photo(uri, album_id, date_iso, caption)
        self._photos = [photo, *self._photos]
        self._persist(PHOTOS_KEY)
        return photo

    def add_photos(self, uris: Iterable[str | None], album_id: str | None = None) -> list[Photo]:
        """Add several picked items, in picker order, with a single persist."""
        added: list[Photo] = []
        for uri in uris:
            if not uri:
                continue
            photo = self._new_photo(uri, album_id, None, None)
            # Each item goes to the head, as with repeated add_photo calls.
            added.insert(0, photo)
        if not added:
            return []
        self._photos = [*added, *self._photos]
        self._persist(PHOTOS_KEY)
        logger.info("Added {} photos to {}", len(added), album_id or "no album")
        return list(reversed(added))

    def _update_photo(self, photo_id: str, **changes: Any) -> Photo | None:
        updated: Photo | None = None
        photos: list[Photo] = []
        for photo in self._photos:
            if photo.id == photo_id:
                photo = updated = replace(photo, **changes)
            photos.append(photo)
        if updated is None:
            return None
        self._photos = photos
        self._persist(PHOTOS_KEY)
        return updated

    def toggle_favorite(self, photo_id: str) -> Photo | None:
        photo = self.get_photo(photo_id)
        if photo is None:
            return None
        return self._update_photo(photo_id, favorite=not photo.favorite)

    def update_caption(self, photo_id: str, text: str | None) -> Photo | None:
        return self._update_photo(photo_id, caption=text or "")

    def update_photo_date(self, photo_id: str, date_iso: str | None) -> Photo | None:
        """Set the photo's own date; invalid dates are rejected, not corrected."""
        if parse_date(date_iso) is None:
            logger.debug("update_photo_date ignored invalid date {!r}", date_iso)
            return None
        return self._update_photo(photo_id, date_iso=date_iso)

    def move_photo_to_album(self, photo_id: str, album_id: str | None) -> Photo | None:
        """File the photo under `album_id`, or unfile it with None.

        The target is not checked for existence; callers only offer albums
        that exist.
        """
        if album_id and self.get_album(album_id) is None:
            logger.warning("Moving photo {} to unknown album {}", photo_id, album_id)
        return self._update_photo(photo_id, album_id=album_id or None)

    def delete_photo(self, photo_id: str) -> None:
        photos = [p for p in self._photos if p.id != photo_id]
        if len(photos) == len(self._photos):
            return
        self._photos = photos
        self._persist(PHOTOS_KEY)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------
    def update_settings(self, **partial: Any) -> Settings:
        """Merge known fields into the settings record.

        An anniversary that is not a valid date falls back to 2024-02-14.
        """
        known = Settings.field_names()
        unknown = sorted(set(partial) - known)
        if unknown:
            logger.warning("Ignoring unknown settings fields: {}", unknown)
        changes = {k: v for k, v in partial.items() if k in known}
        if "anniversary" in changes:
            changes["anniversary"] = _valid_anniversary(changes["anniversary"])
        if "couple_name" in changes:
            changes["couple_name"] = str(changes["couple_name"] or "")
        self._settings = replace(self._settings, **changes)
        self._persist(SETTINGS_KEY)
        return self._settings

    def reset_all(self) -> None:
        """Clear albums and photos and restore default settings.

        Destructive; callers confirm with the user first. Planned events are
        kept.
        """
        self._albums = []
        self._photos = []
        self._settings = self._default_settings
        self._persist(ALBUMS_KEY)
        self._persist(PHOTOS_KEY)
        self._persist(SETTINGS_KEY)
        logger.info("All albums, photos and settings reset")

    # ------------------------------------------------------------------
    # Planned events
    # ------------------------------------------------------------------
    async def create_event(
        self,
        date_iso: str,
        title: str | None,
        *,
        time_hhmm: str | None = None,
        duration_mins: int | None = None,
        notes: str | None = "",
        sync_to_device: bool = False,
    ) -> PlannedEvent | None:
        """Plan a date for today or later, optionally mirroring it.

        The local event is stored whether or not the mirror succeeds; its
        `device_event_id` is set only when it did.
        """
        trimmed = (title or "").strip()
        if not trimmed:
            return None
        if parse_date(date_iso) is None:
            logger.debug("create_event ignored invalid date {!r}", date_iso)
            return None
        if date_iso < today():
            logger.info("create_event ignored past date {}", date_iso)
            return None
        if not parse_hhmm(time_hhmm):
            time_hhmm = format_hhmm(next_whole_hour())
        valid_duration = isinstance(duration_mins, int) and not isinstance(duration_mins, bool)
        if not valid_duration or duration_mins < 1:
            duration_mins = DEFAULT_DURATION_MINS

        event = PlannedEvent(
            id=generate_id(),
            date_iso=date_iso,
            time_hhmm=time_hhmm,
            duration_mins=duration_mins,
            title=trimmed,
            notes=notes or "",
            created_at=now_iso(),
        )
        if sync_to_device:
            if self._sync is None:
                logger.info("No calendar sync configured; event {} kept local", event.id)
            else:
                device_id = await self._sync.mirror(event)
                if device_id:
                    event = replace(event, device_event_id=device_id)

        self._events = [event, *self._events]
        self._persist(EVENTS_KEY)
        logger.info("Planned event {} on {} {}", event.id, event.date_iso, event.time_hhmm)
        return event

    async def delete_event(self, event_id: str) -> bool | None:
        """Remove a planned event, then best-effort delete its mirror.

        Returns None when there was no mirror (or no such event), otherwise
        whether the external delete succeeded.
        """
        event = self.get_event(event_id)
        if event is None:
            return None
        self._events = [e for e in self._events if e.id != event_id]
        self._persist(EVENTS_KEY)
        if not event.device_event_id:
            return None
        if self._sync is None:
            logger.warning("Event {} has a mirror but no calendar sync is configured", event_id)
            return False
        return await self._sync.unmirror(event.device_event_id)
