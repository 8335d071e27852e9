"""ViewModel for the album list and album detail screens."""

from __future__ import annotations

from collections.abc import Iterable

from core.models import Album, Photo
from core.services.album_service import ALL_PHOTOS_ID, album_rows, photos_in_album
from core.services.interfaces import AlbumRow
from core.services.store import DomainStore


class AlbumsVM:
    """Album list state plus the currently opened album."""

    def __init__(self, store: DomainStore) -> None:
        self._store = store
        self.selected_album_id: str | None = None

    @property
    def rows(self) -> list[AlbumRow]:
        """All Photos first, then albums newest-first."""
        return album_rows(self._store.albums, self._store.photos)

    @property
    def selected_album(self) -> Album | None:
        if self.selected_album_id in (None, ALL_PHOTOS_ID):
            return None
        return self._store.get_album(self.selected_album_id)

    @property
    def scoped_photos(self) -> list[Photo]:
        """Photos shown in the opened album (every photo for All Photos)."""
        if self.selected_album_id is None:
            return []
        return photos_in_album(self._store.photos, self.selected_album_id)

    def open(self, album_id: str | None) -> None:
        self.selected_album_id = album_id

    def close(self) -> None:
        self.selected_album_id = None

    def create(self, name: str, date_iso: str | None = None) -> Album | None:
        return self._store.create_album(name, date_iso)

    def rename_selected(self, name: str) -> Album | None:
        if self.selected_album is None:
            return None
        return self._store.rename_album(self.selected_album.id, name)

    def delete_selected(self) -> None:
        """Delete the opened album and its photos; confirm before calling."""
        album = self.selected_album
        if album is None:
            return
        self._store.delete_album(album.id)
        self.close()

    def add_picked(self, uris: Iterable[str]) -> list[Photo]:
        """Add picker results to the opened album (unfiled under All Photos)."""
        target = None if self.selected_album_id == ALL_PHOTOS_ID else self.selected_album_id
        return self._store.add_photos(uris, target)
