"""Album lookups, photo counts and display fallbacks.

All placeholder names shown for missing or unfiled albums are defined here so
every screen renders them the same way.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping

from core.dates import format_display
from core.models import Album, Photo
from core.services.interfaces import AlbumRow

ALL_PHOTOS_ID = "__ALL__"
ALL_PHOTOS_NAME = "All Photos"
UNFILED_NAME = "No Album"
MISSING_ALBUM_NAME = "Album"


def album_index(albums: Iterable[Album]) -> dict[str, Album]:
    """Map album id to album."""
    return {a.id: a for a in albums}


def album_photo_counts(photos: Iterable[Photo]) -> dict[str, int]:
    """Count photos per album id; unfiled photos are not counted."""
    return dict(Counter(p.album_id for p in photos if p.album_id))


def photos_in_album(photos: Iterable[Photo], album_id: str | None) -> list[Photo]:
    """Photos filed under `album_id`, keeping store order.

    `ALL_PHOTOS_ID` returns every photo; `None` returns unfiled photos.
    """
    if album_id == ALL_PHOTOS_ID:
        return list(photos)
    return [p for p in photos if p.album_id == album_id]


def album_display_name(album_id: str | None, index: Mapping[str, Album]) -> str:
    """Name to show for a photo's album, with fallbacks for unfiled/dangling ids."""
    if not album_id:
        return UNFILED_NAME
    album = index.get(album_id)
    return album.name if album else MISSING_ALBUM_NAME


def photo_count_label(count: int) -> str:
    return f"{count} {'photo' if count == 1 else 'photos'}"


def album_rows(albums: Iterable[Album], photos: list[Photo]) -> list[AlbumRow]:
    """Album list rows: the All Photos entry first, then albums in store order."""
    counts = album_photo_counts(photos)
    rows = [
        AlbumRow(
            id=ALL_PHOTOS_ID,
            name=ALL_PHOTOS_NAME,
            date_iso=None,
            display_date="",
            photo_count=len(photos),
            count_label=photo_count_label(len(photos)),
            is_all=True,
        )
    ]
    for album in albums:
        count = counts.get(album.id, 0)
        rows.append(
            AlbumRow(
                id=album.id,
                name=album.name,
                date_iso=album.date_iso,
                display_date=format_display(album.date_iso),
                photo_count=count,
                count_label=photo_count_label(count),
            )
        )
    return rows
